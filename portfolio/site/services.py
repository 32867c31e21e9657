"""
Public Site Services

Assembles the one-page portfolio from the cached content lists.
"""

import logging
from collections import OrderedDict

from portfolio.services import repository
from portfolio.services.repository import DataAccessError

logger = logging.getLogger(__name__)


def _load(repo):
    try:
        return repo.list_cached()
    except DataAccessError as e:
        logger.error('Failed to load %s for the public site: %s', repo.name, e.detail)
        return []


def group_skills(skills):
    """Group skills by category, keeping the first-seen category order."""
    groups = OrderedDict()
    for skill in skills:
        groups.setdefault(skill['category'] or 'Other', []).append(skill)
    return groups


def project_categories(projects):
    categories = []
    for project in projects:
        for category in project.get('categories') or []:
            if category not in categories:
                categories.append(category)
    return categories


def filter_projects(projects, category):
    if not category:
        return list(projects)
    return [p for p in projects if category in (p.get('categories') or [])]


def load_sections(category=None):
    """Every section of the public page. A failed read leaves its section empty."""
    profiles = _load(repository.profiles)
    projects = _load(repository.projects)

    return {
        'profile': profiles[0] if profiles else None,
        'services': _load(repository.services),
        'skill_groups': group_skills(_load(repository.skills)),
        'projects': filter_projects(projects, category),
        'categories': project_categories(projects),
        'active_category': category or '',
        'experiences': _load(repository.experiences),
        'testimonials': _load(repository.testimonials),
    }
