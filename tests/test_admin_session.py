from portfolio.extensions import session_manager
from portfolio.services import inbox
from portfolio.services.session import SIGNED_IN, SIGNED_OUT
from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD


def test_dashboard_redirects_before_any_fetch(client, fake_auth, spy):
    summary = spy(inbox, 'dashboard_summary')

    r = client.get('/admin/dashboard')
    assert r.status_code == 302
    assert r.headers['Location'].endswith('/admin')
    assert summary.call_count == 0


def test_every_admin_screen_requires_login(client, fake_auth):
    for path in ('/admin/', '/admin/profile', '/admin/services', '/admin/skills', '/admin/portfolio',
                 '/admin/experience', '/admin/testimonials', '/admin/messages', '/admin/settings'):
        r = client.get(path)
        assert r.status_code == 302, path
        assert r.headers['Location'].endswith('/admin'), path


def test_login_page_renders(client, fake_auth):
    r = client.get('/admin')
    assert r.status_code == 200
    assert 'Admin Login' in r.get_data(as_text=True)


def test_successful_login_reaches_dashboard(client, fake_auth):
    r = client.post('/admin', data={'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD},
                    follow_redirects=True)
    assert r.status_code == 200
    body = r.get_data(as_text=True)
    assert 'Dashboard' in body
    assert 'Recent Messages' in body


def test_invalid_login_shows_friendly_message(client, fake_auth):
    r = client.post('/admin', data={'email': ADMIN_EMAIL, 'password': 'wrong'})
    assert r.status_code == 200
    assert 'Invalid email or password. Please try again.' in r.get_data(as_text=True)

    with client.session_transaction() as sess:
        assert not sess.get('admin_logged_in')


def test_other_provider_errors_are_shown_as_is(client, fake_auth, monkeypatch):
    from portfolio.extensions import auth_client
    from portfolio.services.auth import AuthError

    def unconfirmed(email, password):
        raise AuthError('Email not confirmed', status_code=400)

    monkeypatch.setattr(auth_client, 'sign_in_with_password', unconfirmed)
    r = client.post('/admin', data={'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD})
    assert 'Email not confirmed' in r.get_data(as_text=True)


def test_missing_credentials(client, fake_auth):
    r = client.post('/admin', data={'email': '', 'password': ''})
    assert 'Please enter both email and password.' in r.get_data(as_text=True)


def test_logged_in_flag_skips_login_form(admin_client):
    r = admin_client.get('/admin')
    assert r.status_code == 302
    assert r.headers['Location'].endswith('/admin/dashboard')


def test_revoked_session_clears_flag(admin_client, fake_auth):
    fake_auth.revoke_all()

    r = admin_client.get('/admin/dashboard')
    assert r.status_code == 302
    assert r.headers['Location'].endswith('/admin')
    with admin_client.session_transaction() as sess:
        assert 'admin_logged_in' not in sess


def test_logout_signs_out_with_provider(admin_client, fake_auth):
    r = admin_client.get('/admin/logout')
    assert r.status_code == 302
    assert r.headers['Location'].endswith('/admin')
    assert fake_auth.signed_out == ['token-1']

    r = admin_client.get('/admin/dashboard')
    assert r.status_code == 302


def test_session_manager_events_and_unsubscribe(app, fake_auth):
    events = []

    with app.test_request_context('/admin'):
        unsubscribe = session_manager.subscribe(lambda event, state: events.append((event, state.email)))
        state = session_manager.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD)
        assert state.logged_in
        assert session_manager.state.user_id == 'user-1'

        unsubscribe()
        session_manager.sign_out()
        assert not session_manager.state.logged_in

    assert events == [(SIGNED_IN, ADMIN_EMAIL)]


def test_expire_emits_signed_out(app, fake_auth):
    events = []

    with app.test_request_context('/admin'):
        session_manager.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD)
        session_manager.subscribe(lambda event, state: events.append(event))
        session_manager.expire()
        session_manager.expire()

    assert events == [SIGNED_OUT]


def test_verify_without_token_is_anonymous(app, fake_auth):
    with app.test_request_context('/admin'):
        state = session_manager.verify()
    assert not state.logged_in
    assert fake_auth.get_user_calls == 0
