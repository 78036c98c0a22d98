"""
Upload pipeline.

An upload goes through four stages: the bytes are staged locally and
checked against the upload policy, the target folder is resolved for the
caller, the staged file is pushed to the blob store, and finally the File
metadata row is committed. The staged file is removed when the pipeline
leaves the staging scope, whatever stage it reached.
"""
from collections.abc import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from filebox.exceptions import RemoteError
from filebox.logging_config import log_recovered_error, setup_logging
from filebox.models.file import File
from filebox.services.folders import get_owned_folder
from filebox.storage.base import BlobStore, StoredObject, classify_content_type
from filebox.storage.exceptions import BlobStoreError
from filebox.storage.staging import UploadStagingArea

logger = setup_logging()


async def upload_file(
    db: Session,
    blob_store: BlobStore,
    staging: UploadStagingArea,
    user_id: int,
    file_stream: AsyncIterator[bytes],
    *,
    filename: str,
    content_type: str | None,
    declared_size: int | None = None,
    folder_id: str | None = None,
) -> File:
    """
    Store an uploaded file and record its metadata.

    Args:
        db: Database session
        blob_store: Remote store the bytes are pushed to
        staging: Staging area the upload is streamed through
        user_id: Owner of the new file
        file_stream: Async iterator yielding the upload's bytes
        filename: Original filename supplied by the client
        content_type: Declared MIME type
        declared_size: Declared size in bytes, if known
        folder_id: Folder to place the file in (None for root level)

    Returns:
        The committed File record

    Raises:
        ValidationError: If the upload violates the type or size policy
        NotFoundError: If folder_id is not a folder owned by the user
        RemoteError: If the blob store upload fails (no metadata is written)
    """
    async with staging.stage(
        file_stream,
        filename=filename,
        content_type=content_type,
        declared_size=declared_size,
    ) as staged:
        if folder_id:
            get_owned_folder(db, user_id, folder_id)

        # Remote ids are namespaced per user
        remote_id = f"{user_id}/{staged.stored_name}"
        classification = classify_content_type(staged.content_type)

        try:
            stored = await blob_store.put(
                staged.path,
                remote_id=remote_id,
                content_type=staged.content_type,
                filename=staged.original_name,
                classification=classification,
            )
        except BlobStoreError as e:
            logger.error(f"Blob store upload failed: {str(e)}", exc_info=True)
            raise RemoteError("File upload failed") from e

        file = File(
            name=staged.stored_name,
            original_name=staged.original_name,
            size=staged.size,
            mime_type=staged.content_type,
            url=stored.locator,
            public_id=stored.remote_id,
            user_id=user_id,
            folder_id=folder_id or None,
        )

        try:
            db.add(file)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            await _discard_remote_object(blob_store, stored)
            raise

        db.refresh(file)

    logger.info(
        f"File uploaded: file_id={file.id}, original_name={file.original_name}, "
        f"size={file.size}, classification={classification.value}, user_id={user_id}"
    )

    return file


async def _discard_remote_object(blob_store: BlobStore, stored: StoredObject) -> None:
    """Best-effort removal of a remote object whose metadata was never committed."""
    try:
        logger.warning(f"Rolling back upload, deleting remote object: {stored.remote_id}")
        await blob_store.delete(stored.remote_id, stored.classification)
    except BlobStoreError as e:
        log_recovered_error(logger, "upload_rollback", e, remote_id=stored.remote_id)
