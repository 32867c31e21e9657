"""
Models Package

Exports all models for easy importing.
"""

from portfolio.models.content import Profile, Service, Skill, Project, Experience, Testimonial
from portfolio.models.site import Message, SiteSetting, SiteVisit

__all__ = [
    'Profile',
    'Service',
    'Skill',
    'Project',
    'Experience',
    'Testimonial',
    'Message',
    'SiteSetting',
    'SiteVisit',
]
