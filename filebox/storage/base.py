"""
Abstract base class for blob store clients.

This module defines the interface that remote object stores must implement.
File bytes never live in Filebox past the staging phase: the blob store keeps
them and hands back a locator that is persisted in the File metadata row.
"""
import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


class Classification(str, enum.Enum):
    """How the blob store should treat a stored object."""

    BINARY = "binary"
    """Opaque object, stored and served byte-for-byte."""

    TRANSFORMABLE = "transformable"
    """Media the store may re-encode or optimize on delivery."""


# PDFs must never be transcoded, everything else may be optimized by the store
BINARY_CONTENT_TYPES = frozenset({"application/pdf"})


def classify_content_type(content_type: str) -> Classification:
    """
    Derive the classification hint from a MIME type.

    The same mapping is used at upload and at delete time, so the delete
    call always targets the location the object was written to.
    """
    if content_type in BINARY_CONTENT_TYPES:
        return Classification.BINARY
    return Classification.TRANSFORMABLE


@dataclass
class StoredObject:
    """Result of a successful blob store upload."""

    locator: str
    """Stable URL the object is served from"""

    remote_id: str
    """Identifier used to delete the object later"""

    format: str
    """File format (extension without dot, e.g. "pdf")"""

    classification: Classification

    width: int | None = None
    height: int | None = None


class BlobStore(ABC):
    """
    Abstract base class for remote blob stores.

    Implementations are constructed explicitly (see
    filebox.dependencies.storage) and passed into the services, so tests
    can substitute an in-memory double.
    """

    @abstractmethod
    async def put(
        self,
        file_path: Path,
        *,
        remote_id: str,
        content_type: str,
        filename: str,
        classification: Classification,
    ) -> StoredObject:
        """
        Upload a local file to the store.

        Args:
            file_path: Path of the staged local file
            remote_id: Identifier to store the object under
            content_type: MIME type of the file
            filename: Original filename (used for download headers)
            classification: Binary or transformable treatment

        Returns:
            StoredObject describing the persisted object

        Raises:
            BlobStoreError: If the upload fails
        """
        pass

    @abstractmethod
    async def delete(self, remote_id: str, classification: Classification) -> None:
        """
        Delete an object from the store.

        Args:
            remote_id: Identifier returned by put()
            classification: Classification the object was stored with

        Raises:
            BlobStoreError: If the delete fails
        """
        pass

    @abstractmethod
    def remote_id_from_locator(self, locator: str) -> str | None:
        """
        Recover the remote identifier from a locator URL.

        Used for rows persisted without a remote identifier.

        Returns:
            The remote identifier, or None if the URL was not issued by this store
        """
        pass
