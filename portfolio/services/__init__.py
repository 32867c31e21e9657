"""
Services Package

Hosted backend clients, the data access facade and supporting helpers.
Modules that touch the database (``repository``, ``bootstrap``, ``inbox``)
are imported directly so this package stays importable from ``extensions``.
"""

from portfolio.services.auth import AuthClient, AuthError
from portfolio.services.cache import ListCache
from portfolio.services.session import SessionManager, SessionState, SIGNED_IN, SIGNED_OUT
from portfolio.services.storage import StorageClient, StorageError, build_upload_path

__all__ = [
    'AuthClient',
    'AuthError',
    'ListCache',
    'SessionManager',
    'SessionState',
    'SIGNED_IN',
    'SIGNED_OUT',
    'StorageClient',
    'StorageError',
    'build_upload_path',
]
