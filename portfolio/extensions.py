"""
Flask Extensions

Shared instances bound to the application in ``create_app``.
"""

from flask_sqlalchemy import SQLAlchemy

from portfolio.services.auth import AuthClient
from portfolio.services.cache import ListCache
from portfolio.services.storage import StorageClient
from portfolio.services.session import SessionManager

# Database instance
db = SQLAlchemy()

# Hosted backend clients
auth_client = AuthClient()
storage_client = StorageClient()

# Fetched content lists, invalidated after admin writes
list_cache = ListCache()

# Admin session owner (the only writer of the persisted login flag)
session_manager = SessionManager()
