"""
Messages, Site Settings and Visit Log Models
"""

from portfolio.extensions import db
from portfolio.models.base import RecordMixin


class Message(RecordMixin, db.Model):
    """Contact form submission. ``read`` only ever goes from False to True."""
    __tablename__ = 'messages'

    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    subject = db.Column(db.String(255), nullable=False)
    message = db.Column(db.Text, nullable=False)
    read = db.Column(db.Boolean, nullable=False, default=False)

    def __repr__(self):
        return f'<Message from {self.email}>'


class SiteSetting(RecordMixin, db.Model):
    __tablename__ = 'site_settings'

    key = db.Column(db.String(200), nullable=False, unique=True)
    value = db.Column(db.Text, nullable=False, default='')
    description = db.Column(db.Text)

    def __repr__(self):
        return f'<SiteSetting {self.key}>'


class SiteVisit(RecordMixin, db.Model):
    """Append-only page view log"""
    __tablename__ = 'site_visits'

    page = db.Column(db.String(1024), nullable=False)
    referrer = db.Column(db.String(1024))
    user_agent = db.Column(db.String(1024))

    def __repr__(self):
        return f'<SiteVisit {self.page}>'
