"""
Record File Uploads

Files are uploaded before the record write that references them. A failed
upload raises ``StorageError`` so the caller can skip the write; files already
uploaded for that save are removed again.
"""

import logging

from portfolio.extensions import session_manager, storage_client
from portfolio.services.storage import StorageError

logger = logging.getLogger(__name__)


def upload_record_files(schema, files):
    """Upload every file submitted for ``schema``'s file fields.

    Returns:
        dict mapping URL column -> public URL for each uploaded file
    """
    urls = {}
    for field in schema.file_fields:
        upload = files.get(field.form_field)
        if upload is None or not upload.filename:
            continue
        try:
            urls[field.column] = storage_client.upload_file(
                field.bucket, upload, access_token=session_manager.state.access_token)
        except StorageError as e:
            logger.warning('Upload of %s to %s failed: %s', upload.filename, field.bucket, e.message)
            discard_uploads(schema, urls)
            if e.status_code == 401:
                session_manager.expire()
            raise
    return urls


def discard_uploads(schema, urls):
    """Best-effort removal of files uploaded for a save that did not happen."""
    for field in schema.file_fields:
        _remove(field.bucket, urls.get(field.column))


def remove_record_files(schema, record):
    """Best-effort removal of a deleted record's files from our buckets."""
    for field in schema.file_fields:
        _remove(field.bucket, record.get(field.column))


def _remove(bucket, url):
    path = storage_client.path_from_public_url(bucket, url)
    if not path:
        return
    try:
        storage_client.remove(bucket, path, access_token=session_manager.state.access_token)
    except StorageError as e:
        logger.warning('Could not remove %s/%s: %s', bucket, path, e.message)
