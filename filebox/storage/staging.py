"""
Local upload staging.

Inbound uploads are streamed to a temporary file before they are pushed to
the blob store. The staging area enforces the upload policy (MIME allow-list
and size ceiling) and owns the lifetime of every staged file: a file exists
only inside the `stage()` scope and is removed when that scope exits, on
success, failure and cancellation alike.
"""
import re
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

import aiofiles

from filebox.config import settings
from filebox.exceptions import FileSizeExceededError, UnsupportedContentTypeError
from filebox.logging_config import log_recovered_error, setup_logging
from filebox.utils.ids import generate_short_id

logger = setup_logging()

# Extensions are carried over to the stored name only when they look sane
SAFE_EXTENSION_PATTERN = re.compile(r"^\.[a-z0-9]{1,10}$")


@dataclass
class StagedFile:
    """A temporary local copy of one upload, owned by a single request."""

    path: Path
    stored_name: str
    original_name: str
    content_type: str
    size: int = 0
    removed: bool = False


class UploadStagingArea:
    """
    Staging directory for inbound uploads.

    Staged files are named <short_id><extension>; the same name becomes the
    stored name of the File record, so a staged file can be traced to the
    upload that produced it.
    """

    def __init__(
        self,
        base_path: str | None = None,
        max_size_mb: int | None = None,
        allowed_content_types: list[str] | None = None,
    ):
        """
        Initialize the staging area.

        Args:
            base_path: Directory staged files are written to (default from config)
            max_size_mb: Maximum upload size in MB (default from config)
            allowed_content_types: MIME allow-list (default from config)
        """
        self.base_path = Path(base_path or settings.UPLOAD_STAGING_DIR)
        self.max_size_bytes = (max_size_mb or settings.MAX_UPLOAD_SIZE_MB) * 1024 * 1024
        self.allowed_content_types = list(
            allowed_content_types or settings.ALLOWED_UPLOAD_CONTENT_TYPES
        )

    def validate_content_type(self, content_type: str | None) -> None:
        """
        Raises:
            UnsupportedContentTypeError: If the MIME type is not allowed
        """
        if content_type not in self.allowed_content_types:
            raise UnsupportedContentTypeError(content_type, self.allowed_content_types)

    def validate_size(self, size: int | None) -> None:
        """
        Raises:
            FileSizeExceededError: If the size exceeds the ceiling
        """
        if size is not None and size > self.max_size_bytes:
            raise FileSizeExceededError(size, self.max_size_bytes)

    @asynccontextmanager
    async def stage(
        self,
        file_stream: AsyncIterator[bytes],
        *,
        filename: str,
        content_type: str | None,
        declared_size: int | None = None,
    ) -> AsyncIterator[StagedFile]:
        """
        Stream an upload to disk and hold it for the duration of the scope.

        Policy is checked before anything is written (declared type and
        size), while streaming (running byte count) and after the file is
        complete (size on disk), so an undercounted stream cannot slip past
        the ceiling.

        Args:
            file_stream: Async iterator yielding upload chunks
            filename: Original filename supplied by the client
            content_type: Declared MIME type
            declared_size: Declared size in bytes, if the client sent one

        Yields:
            The staged file

        Raises:
            UnsupportedContentTypeError: If the MIME type is not allowed
            FileSizeExceededError: If the upload exceeds the size ceiling
        """
        self.validate_content_type(content_type)
        self.validate_size(declared_size)

        stored_name = f"{generate_short_id()}{self._safe_extension(filename)}"
        staged = StagedFile(
            path=self.base_path / stored_name,
            stored_name=stored_name,
            original_name=filename,
            content_type=content_type,
        )

        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
            await self._write_stream(file_stream, staged.path)

            staged.size = staged.path.stat().st_size
            self.validate_size(staged.size)

            yield staged
        finally:
            self.discard(staged)

    def discard(self, staged: StagedFile) -> None:
        """
        Remove a staged file. Never raises.

        Removal is attempted once per staged file. It does not await, so it
        completes even when the surrounding task is being cancelled.
        """
        if staged.removed:
            return
        staged.removed = True

        try:
            staged.path.unlink(missing_ok=True)
        except OSError as e:
            log_recovered_error(
                logger, "staged_file_cleanup", e, path=str(staged.path)
            )

    def list_staged_files(self) -> list[Path]:
        """List the files currently present in the staging directory."""
        if not self.base_path.exists():
            return []
        return [path for path in self.base_path.iterdir() if path.is_file()]

    def remove_stale_files(self, max_age_seconds: float) -> int:
        """
        Remove staged files older than max_age_seconds.

        Staged files normally disappear when their request ends; anything
        older than a request could live belongs to a process that died.

        Returns:
            Number of files removed
        """
        cutoff = time.time() - max_age_seconds
        removed = 0

        for path in self.list_staged_files():
            try:
                if path.stat().st_mtime >= cutoff:
                    continue
                path.unlink()
                removed += 1
            except FileNotFoundError:
                # Finished by its own request in the meantime
                continue
            except OSError as e:
                log_recovered_error(logger, "stale_staged_file_cleanup", e, path=str(path))

        return removed

    async def _write_stream(self, file_stream: AsyncIterator[bytes], file_path: Path) -> None:
        total_size = 0

        async with aiofiles.open(file_path, "wb") as f:
            async for chunk in file_stream:
                total_size += len(chunk)

                # Abort as soon as the running count passes the ceiling
                self.validate_size(total_size)

                await f.write(chunk)

    @staticmethod
    def _safe_extension(filename: str) -> str:
        extension = Path(filename).suffix.lower()
        if SAFE_EXTENSION_PATTERN.match(extension):
            return extension
        return ""
