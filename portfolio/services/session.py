"""
Admin Session Manager

Owns the admin session state. The persisted flag in the signed session cookie
is only a fast-path hint; ``verify()`` asks the auth provider every time.
Nothing outside this module writes the ``admin_*`` session keys.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from flask import session

from portfolio.services.auth import AuthError

logger = logging.getLogger(__name__)

SIGNED_IN = 'SIGNED_IN'
SIGNED_OUT = 'SIGNED_OUT'

_FLAG_KEY = 'admin_logged_in'
_TOKEN_KEY = 'admin_access_token'
_USER_ID_KEY = 'admin_user_id'
_EMAIL_KEY = 'admin_email'


@dataclass(frozen=True)
class SessionState:
    """Read-only snapshot of the admin session."""
    logged_in: bool = False
    user_id: Optional[str] = None
    email: Optional[str] = None
    access_token: Optional[str] = None


ANONYMOUS = SessionState()


class SessionManager:
    """Single owner of admin session state, with an auth-state change stream."""

    def __init__(self, auth_client=None):
        self.auth_client = auth_client
        self._listeners = []
        self._lock = threading.Lock()

    def init_app(self, app, auth_client):
        self.auth_client = auth_client
        with self._lock:
            self._listeners = []

    @property
    def state(self):
        """The session as the persisted keys describe it (no provider call)."""
        if not session.get(_FLAG_KEY):
            return ANONYMOUS
        return SessionState(logged_in=True,
                            user_id=session.get(_USER_ID_KEY),
                            email=session.get(_EMAIL_KEY),
                            access_token=session.get(_TOKEN_KEY))

    def subscribe(self, listener):
        """Register ``listener(event, state)``; returns a callable that unsubscribes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)
        return unsubscribe

    def _emit(self, event, state):
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event, state)
            except Exception:
                logger.exception('Auth state listener failed for %s', event)

    def _store(self, user, access_token):
        session[_FLAG_KEY] = True
        session[_TOKEN_KEY] = access_token
        session[_USER_ID_KEY] = user.get('id')
        session[_EMAIL_KEY] = user.get('email')

    def _clear(self):
        for key in (_FLAG_KEY, _TOKEN_KEY, _USER_ID_KEY, _EMAIL_KEY):
            session.pop(key, None)

    def sign_in(self, email, password):
        """Password sign-in; raises AuthError on failure."""
        result = self.auth_client.sign_in_with_password(email, password)
        self._store(result['user'], result['access_token'])
        state = self.state
        logger.info('Admin %s signed in', state.email)
        self._emit(SIGNED_IN, state)
        return state

    def verify(self):
        """Re-derive the session from the provider. Any error counts as signed out."""
        token = session.get(_TOKEN_KEY)
        if not token:
            self._clear()
            return ANONYMOUS
        try:
            user = self.auth_client.get_user(token)
        except AuthError as e:
            logger.info('Admin session check failed: %s', e)
            self.expire()
            return ANONYMOUS
        self._store(user, token)
        return self.state

    def expire(self):
        """Drop a session the provider no longer honours."""
        previous = self.state
        self._clear()
        if previous.logged_in:
            self._emit(SIGNED_OUT, previous)

    def sign_out(self):
        previous = self.state
        if previous.access_token:
            try:
                self.auth_client.sign_out(previous.access_token)
            except AuthError as e:
                logger.warning('Provider sign-out failed: %s', e)
        self._clear()
        if previous.logged_in:
            logger.info('Admin %s signed out', previous.email)
            self._emit(SIGNED_OUT, previous)
