"""
File listing and deletion service.

Every query here is scoped to the caller's user id. Listing supports
folder, free-text and MIME type prefix filters with offset pagination.
Deletion removes the remote object on a best-effort basis and always
removes the metadata row once ownership is confirmed.
"""
import math
from dataclasses import dataclass

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from filebox.exceptions import NotFoundError
from filebox.logging_config import log_recovered_error, setup_logging
from filebox.models.file import File
from filebox.schemas.files import FileListFilters
from filebox.storage.base import BlobStore, classify_content_type
from filebox.storage.exceptions import BlobStoreError

logger = setup_logging()


@dataclass
class FilePage:
    """One page of a file listing."""

    files: list[File]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


def get_file(db: Session, user_id: int, file_id: str) -> File:
    """
    Return a file owned by the user.

    Raises:
        NotFoundError: If the file does not exist or belongs to someone else
    """
    file = db.execute(
        select(File)
        .options(selectinload(File.folder))
        .where(File.id == file_id, File.user_id == user_id)
    ).scalar_one_or_none()

    if file is None:
        logger.warning(f"File lookup failed: file_id={file_id}, user_id={user_id}")
        raise NotFoundError("File not found")

    return file


def list_files(db: Session, user_id: int, filters: FileListFilters) -> FilePage:
    """
    List the user's files, newest first.

    Args:
        db: Database session
        user_id: Owner whose files are listed
        filters: Folder, search and MIME type filters plus pagination

    Returns:
        FilePage with the requested page and the total number of matches
    """
    criteria = [File.user_id == user_id]

    if filters.folder_id:
        criteria.append(File.folder_id == filters.folder_id)

    if filters.search:
        # autoescape: "%" and "_" typed by the user match literally
        criteria.append(
            or_(
                File.name.icontains(filters.search, autoescape=True),
                File.original_name.icontains(filters.search, autoescape=True),
            )
        )

    if filters.mime_type_prefix:
        criteria.append(File.mime_type.startswith(filters.mime_type_prefix, autoescape=True))

    total = db.execute(
        select(func.count()).select_from(File).where(*criteria)
    ).scalar_one()

    files = db.execute(
        select(File)
        .options(selectinload(File.folder))
        .where(*criteria)
        .order_by(File.created_at.desc(), File.id.desc())
        .offset((filters.page - 1) * filters.limit)
        .limit(filters.limit)
    ).scalars().all()

    return FilePage(files=list(files), page=filters.page, limit=filters.limit, total=total)


async def delete_file(db: Session, blob_store: BlobStore, user_id: int, file_id: str) -> None:
    """
    Delete a file owned by the user.

    The remote object is deleted first, on a best-effort basis: a blob store
    failure is logged as a recovered error and the metadata row is deleted
    regardless, so an outage of the store never blocks users from removing
    files from their catalog. The cost is a possibly orphaned remote object.

    Raises:
        NotFoundError: If the file does not exist or belongs to someone else
    """
    file = get_file(db, user_id, file_id)

    remote_id = file.public_id or blob_store.remote_id_from_locator(file.url)
    if remote_id is None:
        logger.warning(
            f"No remote identifier for file_id={file.id}, skipping remote delete: url={file.url}"
        )
    else:
        try:
            await blob_store.delete(remote_id, classify_content_type(file.mime_type))
            logger.info(f"Deleted remote object for file_id={file.id}: remote_id={remote_id}")
        except BlobStoreError as e:
            log_recovered_error(logger, "blob_delete", e, file_id=file.id, remote_id=remote_id)

    db.delete(file)
    db.commit()

    logger.info(f"File deleted: file_id={file_id}, user_id={user_id}")
