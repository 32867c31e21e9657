import pytest

from portfolio import create_app
from portfolio.config import TestConfig
from portfolio.extensions import db, auth_client, storage_client
from portfolio.services.auth import AuthError

ADMIN_EMAIL = 'admin@example.com'
ADMIN_PASSWORD = 'correct-horse'


class FakeAuthProvider:
    """In-memory stand-in for the hosted auth API."""

    def __init__(self):
        self.users = {ADMIN_EMAIL: {'id': 'user-1', 'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD}}
        self.tokens = {}
        self.get_user_calls = 0
        self.signed_out = []

    def sign_in_with_password(self, email, password):
        user = self.users.get(email)
        if user is None or user['password'] != password:
            raise AuthError('Invalid login credentials', status_code=400)
        token = f'token-{len(self.tokens) + 1}'
        self.tokens[token] = user
        return {'access_token': token, 'refresh_token': 'refresh',
                'user': {'id': user['id'], 'email': user['email']}}

    def get_user(self, access_token):
        self.get_user_calls += 1
        user = self.tokens.get(access_token)
        if user is None:
            raise AuthError('Invalid JWT', status_code=401)
        return {'id': user['id'], 'email': user['email']}

    def sign_out(self, access_token):
        self.signed_out.append(access_token)
        self.tokens.pop(access_token, None)

    def revoke_all(self):
        self.tokens.clear()

    def health(self):
        return True


class FakeStorage:
    """Records uploads/removals instead of calling the storage API."""

    def __init__(self):
        self.uploads = []
        self.removed = []
        self.buckets = set()
        self.fail_with = None
        self.fail_bucket = None  # only uploads into this bucket fail, when set

    def upload(self, bucket, path, data, content_type=None, access_token=None):
        if self.fail_with is not None and self.fail_bucket in (None, bucket):
            raise self.fail_with
        self.uploads.append((bucket, path, data))
        return storage_client.public_url(bucket, path)

    def remove(self, bucket, path, access_token=None):
        self.removed.append((bucket, path))
        return True

    def get_bucket(self, bucket):
        return {'name': bucket} if bucket in self.buckets else None


@pytest.fixture()
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def fake_auth(monkeypatch):
    fake = FakeAuthProvider()
    monkeypatch.setattr(auth_client, 'sign_in_with_password', fake.sign_in_with_password)
    monkeypatch.setattr(auth_client, 'get_user', fake.get_user)
    monkeypatch.setattr(auth_client, 'sign_out', fake.sign_out)
    monkeypatch.setattr(auth_client, 'health', fake.health)
    return fake


@pytest.fixture()
def fake_storage(monkeypatch):
    fake = FakeStorage()
    monkeypatch.setattr(storage_client, 'upload', fake.upload)
    monkeypatch.setattr(storage_client, 'remove', fake.remove)
    monkeypatch.setattr(storage_client, 'get_bucket', fake.get_bucket)
    return fake


@pytest.fixture()
def admin_client(client, fake_auth, fake_storage):
    r = client.post('/admin', data={'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD})
    assert r.status_code == 302
    return client


class Spy:
    """Wraps a callable and records every call."""

    def __init__(self, fn):
        self.fn = fn
        self.calls = []

    def __call__(self, *args, **kwargs):
        self.calls.append((args, kwargs))
        return self.fn(*args, **kwargs)

    @property
    def call_count(self):
        return len(self.calls)


@pytest.fixture()
def spy(monkeypatch):
    """``spy(obj, 'name')`` replaces ``obj.name`` with a recording pass-through."""
    def install(target, name):
        wrapper = Spy(getattr(target, name))
        monkeypatch.setattr(target, name, wrapper)
        return wrapper
    return install
