"""
Storage dependency injection for FastAPI.

This module provides FastAPI dependency functions for injecting the blob
store and the upload staging area into endpoints. Tests replace them
through app.dependency_overrides.
"""
from functools import lru_cache

from filebox.config import settings
from filebox.storage.base import BlobStore
from filebox.storage.s3 import S3BlobStore
from filebox.storage.staging import UploadStagingArea


@lru_cache
def get_blob_store() -> BlobStore:
    """
    Return the blob store configured by BLOB_STORE_BACKEND.

    The client is built once per process and shared by all requests.

    Raises:
        ValueError: If BLOB_STORE_BACKEND is not supported
    """
    if settings.BLOB_STORE_BACKEND == "s3":
        return S3BlobStore(
            bucket_name=settings.S3_BUCKET_NAME,
            region=settings.S3_REGION,
            endpoint_url=settings.S3_ENDPOINT_URL,
            public_base_url=settings.S3_PUBLIC_BASE_URL,
            access_key_id=settings.AWS_ACCESS_KEY_ID,
            secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        )

    raise ValueError(f"Unknown blob store backend: {settings.BLOB_STORE_BACKEND}")


def get_staging_area() -> UploadStagingArea:
    """Return the upload staging area configured from settings."""
    return UploadStagingArea(
        base_path=settings.UPLOAD_STAGING_DIR,
        max_size_mb=settings.MAX_UPLOAD_SIZE_MB,
        allowed_content_types=settings.ALLOWED_UPLOAD_CONTENT_TYPES,
    )
