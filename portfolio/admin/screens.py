"""
Content Management Screens
"""

from portfolio.admin import admin_bp
from portfolio.admin.crud import CrudScreen
from portfolio.services import repository
from portfolio.services.drafts import (ServiceDraft, SkillDraft, ProjectDraft, ExperienceDraft,
                                       TestimonialDraft)

SCREENS = (
    CrudScreen('services', 'Services', repository.services, ServiceDraft),
    CrudScreen('skills', 'Skills', repository.skills, SkillDraft),
    CrudScreen('portfolio', 'Projects', repository.projects, ProjectDraft),
    CrudScreen('experience', 'Experience', repository.experiences, ExperienceDraft),
    CrudScreen('testimonials', 'Testimonials', repository.testimonials, TestimonialDraft),
)

for screen in SCREENS:
    screen.register(admin_bp)
