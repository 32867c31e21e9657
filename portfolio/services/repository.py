"""
Data Access Facade

One generic repository, instantiated per entity from an ``EntitySchema``
(model, ordering, file-bearing fields). Reads return plain dicts so they can be
cached across requests; writes commit, invalidate the entity's list cache and
roll back on failure.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from portfolio.extensions import db, list_cache
from portfolio.models import (Profile, Service, Skill, Project, Experience, Testimonial,
                              Message, SiteSetting, SiteVisit)
from portfolio.services.storage import (AVATARS_BUCKET, RESUMES_BUCKET, PROJECT_IMAGES_BUCKET,
                                        COMPANY_LOGOS_BUCKET, TESTIMONIAL_AVATARS_BUCKET)

logger = logging.getLogger(__name__)

_READ_ONLY_COLUMNS = ('id', 'created_at')


class DataAccessError(Exception):
    """A read or write against the relational store failed."""

    def __init__(self, operation, entity, detail):
        super().__init__(f'Could not {operation} {entity}: {detail}')
        self.operation = operation
        self.entity = entity
        self.detail = detail


@dataclass(frozen=True)
class FileField:
    """Form upload ``form_field`` stored in ``bucket``; its public URL lands in ``column``."""
    form_field: str
    column: str
    bucket: str


@dataclass(frozen=True)
class EntitySchema:
    name: str
    label: str
    model: type
    ordering: tuple = ()
    file_fields: tuple = ()


class Repository:
    """CRUD over one table."""

    def __init__(self, schema):
        self.schema = schema
        self.model = schema.model

    @property
    def name(self):
        return self.schema.name

    def __repr__(self):
        return f'<Repository {self.name}>'

    def _run(self, operation, fn, write=False):
        try:
            result = fn()
            if write:
                db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error('Failed to %s %s: %s', operation, self.name, e)
            raise DataAccessError(operation, self.schema.label.lower(), str(getattr(e, 'orig', None) or e))
        if write:
            list_cache.invalidate(self.name)
        return result

    def _order_by(self, query):
        for field in self.schema.ordering:
            descending = field.startswith('-')
            column = getattr(self.model, field.lstrip('-'))
            query = query.order_by(column.desc() if descending else column.asc())
        return query

    def _filtered(self, filters):
        query = self.model.query
        for field, value in filters.items():
            column = getattr(self.model, field)
            query = query.filter(column.is_(None) if value is None else column == value)
        return query

    def _writable(self, values):
        columns = self.model.__table__.columns.keys()
        return {k: v for k, v in values.items() if k in columns and k not in _READ_ONLY_COLUMNS}

    # Reads

    def list(self, limit=None):
        def query():
            q = self._order_by(self.model.query)
            if limit is not None:
                q = q.limit(limit)
            return [row.to_dict() for row in q.all()]
        return self._run('load', query)

    def list_cached(self):
        """``list()`` through the shared list cache (one retry on failure)."""
        return list_cache.fetch(self.name, self.list)

    def get(self, record_id):
        def query():
            row = db.session.get(self.model, record_id)
            return row.to_dict() if row is not None else None
        return self._run('load', query)

    def first(self):
        def query():
            row = self._order_by(self.model.query).first()
            return row.to_dict() if row is not None else None
        return self._run('load', query)

    def find_by(self, **filters):
        def query():
            row = self._filtered(filters).first()
            return row.to_dict() if row is not None else None
        return self._run('load', query)

    def count(self, **filters):
        """Row count; a ``None`` filter value matches NULL."""
        return self._run('count', lambda: self._filtered(filters).count())

    def probe(self):
        """Bounded existence check: ``SELECT ... LIMIT 1``."""
        return self._run('probe', lambda: [row.to_dict() for row in self.model.query.limit(1).all()])

    def is_empty(self):
        return not self.probe()

    # Writes

    def add(self, values):
        def insert():
            row = self.model(**self._writable(values))
            db.session.add(row)
            db.session.flush()
            return row
        row = self._run('create', insert, write=True)
        logger.info('Created %s %s', self.schema.label.lower(), row.id)
        return row.to_dict()

    def add_many(self, rows):
        def insert():
            objs = [self.model(**self._writable(values)) for values in rows]
            db.session.add_all(objs)
            db.session.flush()
            return objs
        objs = self._run('create', insert, write=True)
        return [obj.to_dict() for obj in objs]

    def update(self, record_id, patch):
        """Partial update by id; only keys present in ``patch`` change."""
        def apply():
            row = db.session.get(self.model, record_id)
            if row is None:
                return None
            for field, value in self._writable(patch).items():
                setattr(row, field, value)
            db.session.flush()
            return row
        row = self._run('update', apply, write=True)
        if row is None:
            raise DataAccessError('update', self.schema.label.lower(), f'no record with id {record_id}')
        logger.info('Updated %s %s', self.schema.label.lower(), record_id)
        return row.to_dict()

    def delete(self, record_id):
        def remove():
            return self.model.query.filter_by(id=record_id).delete()
        deleted = self._run('delete', remove, write=True)
        if not deleted:
            raise DataAccessError('delete', self.schema.label.lower(), f'no record with id {record_id}')
        logger.info('Deleted %s %s', self.schema.label.lower(), record_id)
        return True


profiles = Repository(EntitySchema(
    'profiles', 'Profile', Profile,
    file_fields=(FileField('avatar', 'avatar_url', AVATARS_BUCKET),
                 FileField('resume', 'resume_url', RESUMES_BUCKET))))
services = Repository(EntitySchema('services', 'Service', Service, ordering=('order',)))
skills = Repository(EntitySchema('skills', 'Skill', Skill, ordering=('order', 'name')))
projects = Repository(EntitySchema(
    'projects', 'Project', Project, ordering=('-featured', 'order'),
    file_fields=(FileField('image', 'image_url', PROJECT_IMAGES_BUCKET),)))
experiences = Repository(EntitySchema(
    'experiences', 'Experience', Experience, ordering=('order', '-start_date'),
    file_fields=(FileField('logo', 'company_logo', COMPANY_LOGOS_BUCKET),)))
testimonials = Repository(EntitySchema(
    'testimonials', 'Testimonial', Testimonial, ordering=('order',),
    file_fields=(FileField('avatar', 'avatar_url', TESTIMONIAL_AVATARS_BUCKET),)))
messages = Repository(EntitySchema('messages', 'Message', Message, ordering=('-created_at',)))
site_settings = Repository(EntitySchema('site_settings', 'Setting', SiteSetting, ordering=('key',)))
site_visits = Repository(EntitySchema('site_visits', 'Visit', SiteVisit, ordering=('-created_at',)))

REPOSITORIES = {repo.name: repo for repo in (
    profiles, services, skills, projects, experiences, testimonials,
    messages, site_settings, site_visits,
)}


def mark_message_read(message_id):
    return messages.update(message_id, {'read': True})


def recent_messages(limit=4):
    return messages.list(limit=limit)


def log_site_visit(page, referrer=None, user_agent=None):
    return site_visits.add({'page': page, 'referrer': referrer, 'user_agent': user_agent})
