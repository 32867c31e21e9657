"""
Shared Model Columns
"""

import uuid
from datetime import datetime, timezone

from portfolio.extensions import db


def generate_id():
    return str(uuid.uuid4())


def utc_now():
    """Microsecond timestamp; SQLite's CURRENT_TIMESTAMP only resolves whole seconds."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class RecordMixin:
    """Generated identifier and creation timestamp carried by every table."""

    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    created_at = db.Column(db.DateTime, default=utc_now, nullable=False)

    def to_dict(self):
        """Plain dict of column values (safe to keep after the session closes)."""
        return {column.name: getattr(self, column.name) for column in self.__table__.columns}
