"""
Service-level exceptions.

Every failure the file/folder services report to callers is a ServiceError
subclass. Each carries the HTTP status code and error label it is rendered
with, so the routing layer never needs per-endpoint translation.
"""
from fastapi import status


class ServiceError(Exception):
    """Base exception for failures surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal Server Error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(ServiceError):
    """Raised when input is missing, malformed or violates upload policy."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Bad Request"


class NotFoundError(ServiceError):
    """Raised when an entity is absent or not owned by the caller."""

    status_code = status.HTTP_404_NOT_FOUND
    error = "Not Found"


class ConflictError(ServiceError):
    """Raised when an operation is blocked by the state of the entity."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Bad Request"


class RemoteError(ServiceError):
    """Raised when the blob store rejects or fails an operation."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal Server Error"


class FileSizeExceededError(ValidationError):
    """Raised when an upload exceeds the maximum size limit."""

    def __init__(self, file_size: int, max_size: int):
        self.file_size = file_size
        self.max_size = max_size
        super().__init__(
            f"File size ({file_size} bytes) exceeds maximum allowed size ({max_size} bytes)"
        )


class UnsupportedContentTypeError(ValidationError):
    """Raised when an upload's MIME type is not on the allow-list."""

    def __init__(self, content_type: str | None, allowed: list[str]):
        self.content_type = content_type
        self.allowed = allowed
        super().__init__(
            f"Invalid file type: {content_type}. Allowed types: {', '.join(allowed)}"
        )
