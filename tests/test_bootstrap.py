from portfolio import run_bootstrap
from portfolio.extensions import auth_client
from portfolio.services import bootstrap, repository
from portfolio.services.auth import AuthError
from portfolio.services.repository import DataAccessError
from portfolio.services.storage import EXPECTED_BUCKETS


def test_bootstrap_seeds_once(app, fake_auth, fake_storage):
    fake_storage.buckets.update(EXPECTED_BUCKETS)

    result = bootstrap.initialize_backend()
    assert result.success
    assert result.tables_ok and result.buckets_ok
    assert result.title == 'Database Setup Complete'
    assert repository.profiles.count() == 1
    assert repository.profiles.first()['full_name'] == 'John Doe'
    assert [s['title'] for s in repository.services.list()] == [
        'Web Development', 'UI/UX Design', 'Mobile Development']

    assert bootstrap.seed_sample_data() == 0
    bootstrap.initialize_backend()
    assert repository.profiles.count() == 1
    assert repository.services.count() == 3


def test_missing_bucket_is_reported(app, fake_auth, fake_storage):
    fake_storage.buckets.update(['avatars'])

    result = bootstrap.initialize_backend()
    assert result.tables_ok
    assert not result.buckets_ok
    assert not result.success
    assert 'created manually' in result.description


def test_auth_provider_down(app, monkeypatch, fake_storage):
    def down():
        raise AuthError('Could not reach the auth provider: connection refused')

    monkeypatch.setattr(auth_client, 'health', down)
    result = bootstrap.initialize_backend()
    assert not result.success
    assert result.title == 'Database Setup Error'
    assert 'Failed to connect' in result.description
    assert repository.profiles.count() == 0


def test_table_probe_failure_stops_checks(app, fake_auth, fake_storage, monkeypatch):
    probed = []

    def failing_probe():
        probed.append('skills')
        raise DataAccessError('probe', 'skill', 'no such table: skills')

    monkeypatch.setattr(repository.skills, 'probe', failing_probe)
    spy_projects = []
    monkeypatch.setattr(repository.projects, 'probe', lambda: spy_projects.append(1) or [])

    assert bootstrap.check_tables() is False
    assert probed == ['skills']
    assert spy_projects == []

    result = bootstrap.initialize_backend()
    assert not result.tables_ok
    assert repository.profiles.count() == 0


def test_result_is_exposed_to_admin_banner(app, admin_client, fake_storage):
    fake_storage.buckets.update(EXPECTED_BUCKETS)
    run_bootstrap(app)

    body = admin_client.get('/admin/dashboard').get_data(as_text=True)
    assert 'Database Setup Complete' in body


def test_cli_bootstrap_command(app, fake_auth, fake_storage):
    fake_storage.buckets.update(EXPECTED_BUCKETS)
    runner = app.test_cli_runner()

    result = runner.invoke(args=['bootstrap'])
    assert 'Database Setup Complete' in result.output
    assert repository.profiles.count() == 1


def test_cli_init_db_command(app):
    result = app.test_cli_runner().invoke(args=['init-db'])
    assert 'Database tables created.' in result.output
