"""
Hosted Auth Provider Client

Thin wrapper over the provider's HTTP API (password grant, user lookup,
sign-out and health).
"""

import logging
import requests

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Raised when the auth provider rejects a request or cannot be reached."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(resp):
    """Pull the human readable message out of a provider error response."""
    try:
        payload = resp.json()
    except ValueError:
        return resp.text or f'Auth provider error {resp.status_code}'
    for key in ('error_description', 'msg', 'message', 'error'):
        if payload.get(key):
            return str(payload[key])
    return f'Auth provider error {resp.status_code}'


class AuthClient:
    """Client for the hosted authentication provider."""

    def __init__(self, app=None):
        self.base_url = None
        self.api_key = None
        self.timeout = 10
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.base_url = app.config['BACKEND_URL'].rstrip('/') + '/auth/v1'
        self.api_key = app.config['BACKEND_ANON_KEY']
        self.timeout = app.config['BACKEND_TIMEOUT']

    def _headers(self, access_token=None):
        headers = {'apikey': self.api_key, 'Content-Type': 'application/json'}
        headers['Authorization'] = f'Bearer {access_token or self.api_key}'
        return headers

    def _request(self, method, path, access_token=None, **kwargs):
        url = f'{self.base_url}{path}'
        try:
            resp = requests.request(method, url, headers=self._headers(access_token),
                                    timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout:
            raise AuthError('Request to the auth provider timed out')
        except requests.exceptions.RequestException as e:
            raise AuthError(f'Could not reach the auth provider: {e}')

        if resp.status_code >= 400:
            raise AuthError(_error_message(resp), status_code=resp.status_code)
        return resp

    def sign_in_with_password(self, email, password):
        """Exchange email/password for a session.

        Returns:
            dict with ``access_token``, ``refresh_token`` and ``user``
        """
        resp = self._request('POST', '/token', params={'grant_type': 'password'},
                             json={'email': email, 'password': password})
        session = resp.json()
        if not session.get('access_token') or not session.get('user'):
            raise AuthError('Auth provider returned an incomplete session')
        return session

    def get_user(self, access_token):
        """Return the user owning ``access_token``; raises AuthError if the session is gone."""
        if not access_token:
            raise AuthError('No active session', status_code=401)
        return self._request('GET', '/user', access_token=access_token).json()

    def sign_out(self, access_token):
        self._request('POST', '/logout', access_token=access_token)

    def health(self):
        self._request('GET', '/health')
        return True
