import pytest

from portfolio.extensions import list_cache
from portfolio.services import repository
from portfolio.services.cache import ListCache
from portfolio.services.repository import DataAccessError


def test_list_orders_by_schema(app):
    repository.skills.add({'name': 'Zig', 'category': 'Lang', 'order': 1})
    repository.skills.add({'name': 'Ada', 'category': 'Lang', 'order': 1})
    repository.skills.add({'name': 'Go', 'category': 'Lang', 'order': 0})

    assert [s['name'] for s in repository.skills.list()] == ['Go', 'Ada', 'Zig']


def test_projects_featured_first(app):
    repository.projects.add({'title': 'A', 'description': 'a', 'order': 0})
    repository.projects.add({'title': 'B', 'description': 'b', 'order': 9, 'featured': True})
    repository.projects.add({'title': 'C', 'description': 'c', 'order': 1})

    assert [p['title'] for p in repository.projects.list()] == ['B', 'A', 'C']


def test_add_ignores_unknown_and_generated_columns(app):
    service = repository.services.add({'id': 'chosen', 'title': 'T', 'description': 'd',
                                       'icon_name': 'x', 'bogus': 1})
    assert service['id'] != 'chosen'
    assert service['created_at'] is not None


def test_update_is_partial(app):
    skill = repository.skills.add({'name': 'Python', 'category': 'Lang', 'proficiency': 50})
    updated = repository.skills.update(skill['id'], {'proficiency': 80})
    assert updated['proficiency'] == 80
    assert updated['name'] == 'Python'


def test_update_and_delete_missing_record(app):
    with pytest.raises(DataAccessError) as excinfo:
        repository.services.update('missing', {'title': 'x'})
    assert 'Could not update service' in str(excinfo.value)

    with pytest.raises(DataAccessError):
        repository.services.delete('missing')


def test_write_failure_rolls_back(app):
    repository.site_settings.add({'key': 'k', 'value': 'v'})
    with pytest.raises(DataAccessError) as excinfo:
        repository.site_settings.add({'key': 'k', 'value': 'again'})
    assert excinfo.value.operation == 'create'
    # session is usable again after the rollback
    assert repository.site_settings.count() == 1


def test_count_with_null_filter(app):
    repository.log_site_visit('/a', user_agent='agent')
    repository.log_site_visit('/b')
    assert repository.site_visits.count() == 2
    assert repository.site_visits.count(user_agent=None) == 1


def test_writes_invalidate_list_cache(app):
    repository.services.list_cached()
    assert list_cache.is_cached('services')

    service = repository.services.add({'title': 'T', 'description': 'd', 'icon_name': 'x'})
    assert not list_cache.is_cached('services')

    assert len(repository.services.list_cached()) == 1
    repository.services.delete(service['id'])
    assert repository.services.list_cached() == []


def test_probe_and_is_empty(app):
    assert repository.profiles.is_empty()
    repository.profiles.add({'full_name': 'A', 'title': 'B', 'bio': 'C'})
    assert len(repository.profiles.probe()) == 1
    assert not repository.profiles.is_empty()


def test_cache_hits_until_invalidated():
    cache = ListCache(ttl=60)
    calls = []

    def loader():
        calls.append(1)
        return ['row']

    assert cache.fetch('services', loader) == ['row']
    assert cache.fetch('services', loader) == ['row']
    assert len(calls) == 1

    cache.invalidate('services')
    cache.fetch('services', loader)
    assert len(calls) == 2


def test_cache_entries_expire():
    cache = ListCache(ttl=60)
    calls = []
    cache.fetch('skills', lambda: calls.append(1) or [])

    stamp, value = cache._entries['skills']
    cache._entries['skills'] = (stamp - 61, value)
    cache.fetch('skills', lambda: calls.append(1) or [])
    assert len(calls) == 2


def test_cache_retries_reads_once():
    cache = ListCache(ttl=60, retries=1)
    attempts = []

    def flaky():
        attempts.append(1)
        if len(attempts) == 1:
            raise DataAccessError('load', 'skill', 'connection reset')
        return ['ok']

    assert cache.fetch('skills', flaky) == ['ok']
    assert len(attempts) == 2

    def broken():
        attempts.append(1)
        raise DataAccessError('load', 'skill', 'down')

    with pytest.raises(DataAccessError):
        cache.fetch('other', broken)
    assert len(attempts) == 4
    assert not cache.is_cached('other')


def test_invalidation_during_load_is_not_lost():
    cache = ListCache(ttl=60)
    results = [['old'], ['new']]

    def loader():
        value = results.pop(0)
        if value == ['old']:
            # a write commits while this read is in flight
            cache.invalidate('services')
        return value

    assert cache.fetch('services', loader) == ['old']
    assert not cache.is_cached('services')
    assert cache.fetch('services', loader) == ['new']
    assert cache.is_cached('services')
