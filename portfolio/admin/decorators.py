"""
Admin Decorator

Admin access is re-derived from the hosted auth provider on every request;
the persisted session flag is only a hint for the login page.
"""

from functools import wraps
from flask import redirect, url_for

from portfolio.extensions import session_manager
from portfolio.services.session import SIGNED_OUT


def admin_required(f):
    """Decorator to ensure the request comes from a live admin session.

    - Verifies the session with the auth provider before the view runs, so an
      anonymous request is redirected to ``/admin`` before any data is fetched
    - Listens for a sign-out of the same user while the view runs and turns
      the response into the same redirect; the listener is removed afterwards
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        state = session_manager.verify()
        if not state.logged_in:
            return redirect(url_for('admin.admin_login'))

        signed_out = []

        def on_auth_change(event, event_state):
            if event == SIGNED_OUT and event_state.user_id == state.user_id:
                signed_out.append(event_state)

        unsubscribe = session_manager.subscribe(on_auth_change)
        try:
            response = f(*args, **kwargs)
        finally:
            unsubscribe()

        if signed_out:
            return redirect(url_for('admin.admin_login'))
        return response
    return wrapper
