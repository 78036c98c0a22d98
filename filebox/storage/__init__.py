"""
Storage layer for file bytes.

This package provides the remote blob store abstraction (with an S3
implementation) and the local staging area uploads pass through before
they reach the blob store.
"""

from filebox.storage.base import BlobStore, Classification, StoredObject, classify_content_type
from filebox.storage.exceptions import BlobStoreError, StorageError
from filebox.storage.s3 import S3BlobStore
from filebox.storage.staging import StagedFile, UploadStagingArea

__all__ = [
    "BlobStore",
    "BlobStoreError",
    "Classification",
    "S3BlobStore",
    "StagedFile",
    "StorageError",
    "StoredObject",
    "UploadStagingArea",
    "classify_content_type",
]
