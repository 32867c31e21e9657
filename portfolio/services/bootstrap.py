"""
Backend Bootstrap

Run once at startup: check the auth provider answers, probe every expected
table and storage bucket, and seed a sample profile and services into empty
tables. Table creation is not done here (see ``flask init-db``).
"""

import logging
from dataclasses import dataclass
from typing import Optional

from portfolio.extensions import auth_client, storage_client
from portfolio.services.auth import AuthError
from portfolio.services.repository import DataAccessError, REPOSITORIES
from portfolio.services.storage import EXPECTED_BUCKETS, StorageError

logger = logging.getLogger(__name__)

EXPECTED_TABLES = (
    'profiles',
    'services',
    'skills',
    'projects',
    'experiences',
    'testimonials',
    'messages',
    'site_settings',
    'site_visits',
)

SAMPLE_PROFILE = {
    'full_name': 'John Doe',
    'title': 'Full Stack Developer',
    'bio': 'Experienced developer with a passion for creating beautiful and functional web applications.',
    'email': 'john@example.com',
    'location': 'New York, USA',
}

SAMPLE_SERVICES = [
    {
        'title': 'Web Development',
        'description': 'Creating responsive and modern web applications using the latest technologies.',
        'icon_name': 'code',
        'order': 1,
    },
    {
        'title': 'UI/UX Design',
        'description': 'Designing beautiful and intuitive user interfaces and experiences.',
        'icon_name': 'palette',
        'order': 2,
    },
    {
        'title': 'Mobile Development',
        'description': 'Building cross-platform mobile applications for iOS and Android.',
        'icon_name': 'smartphone',
        'order': 3,
    },
]


@dataclass(frozen=True)
class BootstrapResult:
    success: bool
    tables_ok: bool
    buckets_ok: bool
    error: Optional[str] = None

    @property
    def title(self):
        return 'Database Setup Complete' if self.success else 'Database Setup Error'

    @property
    def description(self):
        if self.success:
            return 'Your portfolio database has been successfully configured.'
        if self.error:
            return self.error
        if not self.tables_ok:
            return 'There was a problem checking the database tables. Check the logs for details.'
        return 'Some storage buckets could not be confirmed and may need to be created manually.'


def check_tables():
    """Probe each expected table; the first failure aborts the remaining checks."""
    for name in EXPECTED_TABLES:
        try:
            rows = REPOSITORIES[name].probe()
        except DataAccessError as e:
            logger.error('Error checking %s table: %s', name, e.detail)
            return False
        logger.info('%s table exists (%d sample row%s)', name, len(rows), '' if len(rows) == 1 else 's')
    return True


def seed_sample_data():
    """Insert the sample profile and services into empty tables. Returns rows inserted."""
    inserted = 0
    profiles = REPOSITORIES['profiles']
    services = REPOSITORIES['services']

    try:
        if profiles.is_empty():
            logger.info('No profile found, inserting sample data...')
            profiles.add(SAMPLE_PROFILE)
            inserted += 1
    except DataAccessError as e:
        logger.error('Error inserting sample profile: %s', e.detail)

    try:
        if services.is_empty():
            logger.info('No services found, inserting sample data...')
            inserted += len(services.add_many(SAMPLE_SERVICES))
    except DataAccessError as e:
        logger.error('Error inserting sample services: %s', e.detail)

    return inserted


def check_buckets():
    """Log whether each bucket exists. Missing buckets must be created by hand."""
    confirmed = True
    for bucket in EXPECTED_BUCKETS:
        try:
            found = storage_client.get_bucket(bucket)
        except StorageError as e:
            logger.error('Error checking %s bucket: %s', bucket, e.message)
            logger.info('Note: bucket %s may need to be created manually in the storage dashboard.', bucket)
            confirmed = False
            continue
        if found:
            logger.info('%s bucket exists', bucket)
        else:
            logger.warning('%s bucket does not exist and may need to be created manually.', bucket)
            confirmed = False
    return confirmed


def initialize_backend():
    """Probe the hosted backend and seed sample rows.

    Must run inside an application context.

    Returns:
        BootstrapResult summarising whether tables and buckets were confirmed
    """
    logger.info('Initializing backend...')
    try:
        auth_client.health()
    except AuthError as e:
        logger.error('Error checking auth provider connection: %s', e)
        return BootstrapResult(success=False, tables_ok=False, buckets_ok=False,
                               error='Failed to connect to the auth provider. Check the URL and API key.')

    tables_ok = check_tables()
    if tables_ok:
        seed_sample_data()
        logger.info('Database tables and sample data checked successfully')
    buckets_ok = check_buckets()

    return BootstrapResult(success=tables_ok and buckets_ok, tables_ok=tables_ok, buckets_ok=buckets_ok)
