"""
Object Storage Client

Upload, public URL, delete and bucket lookup against the hosted storage API.
"""

import logging
import mimetypes
import time
import requests
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

# Buckets the admin console writes into
AVATARS_BUCKET = 'avatars'
PROJECT_IMAGES_BUCKET = 'project-images'
RESUMES_BUCKET = 'resumes'
TESTIMONIAL_AVATARS_BUCKET = 'testimonial-avatars'
COMPANY_LOGOS_BUCKET = 'company-logos'

EXPECTED_BUCKETS = (
    AVATARS_BUCKET,
    PROJECT_IMAGES_BUCKET,
    RESUMES_BUCKET,
    TESTIMONIAL_AVATARS_BUCKET,
    COMPANY_LOGOS_BUCKET,
)


class StorageError(Exception):
    """Raised when an upload, delete or bucket lookup fails."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def build_upload_path(filename, now=None):
    """Timestamp-prefixed object path, e.g. ``1716112345123-avatar.png``."""
    millis = int((now if now is not None else time.time()) * 1000)
    name = secure_filename(filename or '') or 'upload'
    return f'{millis}-{name}'


class StorageClient:
    """Client for the hosted object storage buckets."""

    def __init__(self, app=None):
        self.base_url = None
        self.api_key = None
        self.timeout = 10
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.base_url = app.config['BACKEND_URL'].rstrip('/') + '/storage/v1'
        self.api_key = app.config['BACKEND_ANON_KEY']
        self.timeout = app.config['BACKEND_TIMEOUT']

    def _headers(self, access_token=None, **extra):
        headers = {'apikey': self.api_key,
                   'Authorization': f'Bearer {access_token or self.api_key}'}
        headers.update(extra)
        return headers

    def _check(self, resp, action):
        if resp.status_code < 400:
            return resp
        try:
            payload = resp.json()
            detail = payload.get('message') or payload.get('error') or resp.text
        except ValueError:
            detail = resp.text
        raise StorageError(f'{action} failed: {detail or resp.status_code}',
                           status_code=resp.status_code)

    def public_url(self, bucket, path):
        return f'{self.base_url}/object/public/{bucket}/{path}'

    def path_from_public_url(self, bucket, url):
        """Object path for a public URL we issued, or None for foreign URLs."""
        prefix = f'{self.base_url}/object/public/{bucket}/'
        if url and url.startswith(prefix):
            return url[len(prefix):]
        return None

    def upload(self, bucket, path, data, content_type=None, access_token=None):
        """Upload ``data`` to ``bucket/path`` (overwriting) and return its public URL."""
        content_type = content_type or mimetypes.guess_type(path)[0] or 'application/octet-stream'
        url = f'{self.base_url}/object/{bucket}/{path}'
        try:
            resp = requests.post(url, data=data, timeout=self.timeout,
                                 headers=self._headers(access_token,
                                                       **{'Content-Type': content_type,
                                                          'x-upsert': 'true'}))
        except requests.exceptions.RequestException as e:
            raise StorageError(f'Upload to {bucket} failed: {e}')
        self._check(resp, f'Upload to {bucket}')
        logger.info('Uploaded %s to bucket %s', path, bucket)
        return self.public_url(bucket, path)

    def upload_file(self, bucket, file_storage, access_token=None):
        """Upload a werkzeug ``FileStorage`` under a timestamp-prefixed path."""
        path = build_upload_path(file_storage.filename)
        return self.upload(bucket, path, file_storage.read(),
                           content_type=file_storage.mimetype, access_token=access_token)

    def remove(self, bucket, path, access_token=None):
        try:
            resp = requests.delete(f'{self.base_url}/object/{bucket}',
                                   json={'prefixes': [path]}, timeout=self.timeout,
                                   headers=self._headers(access_token))
        except requests.exceptions.RequestException as e:
            raise StorageError(f'Delete from {bucket} failed: {e}')
        self._check(resp, f'Delete from {bucket}')
        return True

    def get_bucket(self, bucket):
        """Return bucket metadata, or None if the bucket does not exist."""
        try:
            resp = requests.get(f'{self.base_url}/bucket/{bucket}', timeout=self.timeout,
                                headers=self._headers())
        except requests.exceptions.RequestException as e:
            raise StorageError(f'Bucket lookup for {bucket} failed: {e}')
        if resp.status_code == 404:
            return None
        # storage answers 400 "Bucket not found" on some versions
        if resp.status_code == 400 and 'not found' in resp.text.lower():
            return None
        self._check(resp, f'Bucket lookup for {bucket}')
        return resp.json()
