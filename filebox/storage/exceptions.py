"""
Storage-specific exceptions.

These exceptions describe failures of the remote blob store and of the
local staging area. They stay internal to the services, which translate
them into ServiceError subclasses where a caller must see them.
"""


class StorageError(Exception):
    """Base exception for storage operations."""

    pass


class BlobStoreError(StorageError):
    """Raised when a remote blob store operation fails."""

    def __init__(self, operation: str, remote_id: str, reason: str):
        self.operation = operation
        self.remote_id = remote_id
        self.reason = reason
        super().__init__(f"Blob store {operation} failed for {remote_id}: {reason}")
