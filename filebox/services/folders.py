"""
Folder hierarchy service.

Folders are always looked up together with the caller's user id, so a
folder owned by someone else is indistinguishable from a missing one.
Direct child counts are computed in the same query as the folder itself;
they decide whether a folder may be deleted.
"""
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.orm import Session, aliased

from filebox.exceptions import ConflictError, NotFoundError, ValidationError
from filebox.logging_config import setup_logging
from filebox.models.file import File
from filebox.models.folder import Folder
from filebox.utils.validators import clean_name

logger = setup_logging()

FOLDER_NAME_MAX_LENGTH = 255


@dataclass
class FolderSummary:
    """A folder with the number of its direct children."""

    folder: Folder
    file_count: int
    child_count: int

    @property
    def is_empty(self) -> bool:
        return self.file_count == 0 and self.child_count == 0


@dataclass
class FolderDetail:
    """A folder with its direct files and direct subfolders."""

    summary: FolderSummary
    files: list[File]
    children: list[FolderSummary]


def _validate_name(name: str | None) -> str:
    cleaned = clean_name(name)
    if cleaned is None:
        raise ValidationError("Folder name is required")
    if len(cleaned) > FOLDER_NAME_MAX_LENGTH:
        raise ValidationError(
            f"Folder name must be at most {FOLDER_NAME_MAX_LENGTH} characters"
        )
    return cleaned


def _select_summaries(*criteria):
    child = aliased(Folder)
    file_count = (
        select(func.count(File.id))
        .where(File.folder_id == Folder.id)
        .correlate(Folder)
        .scalar_subquery()
    )
    child_count = (
        select(func.count(child.id))
        .where(child.parent_id == Folder.id)
        .correlate(Folder)
        .scalar_subquery()
    )
    return (
        select(Folder, file_count.label("file_count"), child_count.label("child_count"))
        .where(*criteria)
        .order_by(Folder.created_at.desc(), Folder.id.desc())
    )


def get_owned_folder(db: Session, user_id: int, folder_id: str, message: str = "Folder not found") -> Folder:
    """
    Return a folder owned by the user.

    Raises:
        NotFoundError: If the folder does not exist or belongs to someone else
    """
    folder = db.execute(
        select(Folder).where(Folder.id == folder_id, Folder.user_id == user_id)
    ).scalar_one_or_none()

    if folder is None:
        logger.warning(f"Folder lookup failed: folder_id={folder_id}, user_id={user_id}")
        raise NotFoundError(message)

    return folder


def get_folder_summary(db: Session, user_id: int, folder_id: str) -> FolderSummary:
    """
    Return a folder owned by the user together with its direct child counts.

    Raises:
        NotFoundError: If the folder does not exist or belongs to someone else
    """
    row = db.execute(
        _select_summaries(Folder.id == folder_id, Folder.user_id == user_id)
    ).one_or_none()

    if row is None:
        logger.warning(f"Folder lookup failed: folder_id={folder_id}, user_id={user_id}")
        raise NotFoundError("Folder not found")

    folder, file_count, child_count = row
    return FolderSummary(folder=folder, file_count=file_count, child_count=child_count)


def list_folders(db: Session, user_id: int) -> list[FolderSummary]:
    """Return all folders of the user, newest first, with direct child counts."""
    rows = db.execute(_select_summaries(Folder.user_id == user_id)).all()
    return [
        FolderSummary(folder=folder, file_count=file_count, child_count=child_count)
        for folder, file_count, child_count in rows
    ]


def get_folder_detail(db: Session, user_id: int, folder_id: str) -> FolderDetail:
    """
    Return a folder with its direct files (newest first) and direct subfolders.

    Raises:
        NotFoundError: If the folder does not exist or belongs to someone else
    """
    summary = get_folder_summary(db, user_id, folder_id)

    files = db.execute(
        select(File)
        .where(File.folder_id == folder_id, File.user_id == user_id)
        .order_by(File.created_at.desc(), File.id.desc())
    ).scalars().all()

    children = [
        FolderSummary(folder=folder, file_count=file_count, child_count=child_count)
        for folder, file_count, child_count in db.execute(
            _select_summaries(Folder.parent_id == folder_id, Folder.user_id == user_id)
        ).all()
    ]

    return FolderDetail(summary=summary, files=list(files), children=children)


def create_folder(
    db: Session,
    user_id: int,
    name: str | None,
    description: str | None = None,
    parent_id: str | None = None,
) -> FolderSummary:
    """
    Create a folder for the user, at root level or under one of their folders.

    Raises:
        ValidationError: If the name is missing, blank or too long
        NotFoundError: If parent_id does not reference a folder owned by the user
    """
    cleaned = _validate_name(name)

    if parent_id:
        get_owned_folder(db, user_id, parent_id, message="Parent folder not found")

    folder = Folder(
        name=cleaned,
        description=description or None,
        user_id=user_id,
        parent_id=parent_id or None,
    )
    db.add(folder)
    db.commit()
    db.refresh(folder)

    logger.info(
        f"Folder created: folder_id={folder.id}, parent_id={folder.parent_id}, user_id={user_id}"
    )

    # A folder that was just created cannot have children yet
    return FolderSummary(folder=folder, file_count=0, child_count=0)


def update_folder(
    db: Session,
    user_id: int,
    folder_id: str,
    name: str | None,
    description: str | None = None,
) -> FolderSummary:
    """
    Rename a folder and optionally replace its description.

    A description of None leaves the current one untouched; an empty string
    clears it. The parent of a folder cannot be changed.

    Raises:
        ValidationError: If the name is missing, blank or too long
        NotFoundError: If the folder does not exist or belongs to someone else
    """
    cleaned = _validate_name(name)

    summary = get_folder_summary(db, user_id, folder_id)

    summary.folder.name = cleaned
    if description is not None:
        summary.folder.description = description or None
    db.commit()
    db.refresh(summary.folder)

    logger.info(f"Folder updated: folder_id={folder_id}, user_id={user_id}")

    return summary


def delete_folder(db: Session, user_id: int, folder_id: str) -> None:
    """
    Delete an empty folder.

    Only folders without direct files and direct subfolders can be deleted;
    nothing is ever deleted recursively.

    Raises:
        NotFoundError: If the folder does not exist or belongs to someone else
        ConflictError: If the folder still contains files or subfolders
    """
    summary = get_folder_summary(db, user_id, folder_id)

    if not summary.is_empty:
        logger.warning(
            f"Refused to delete non-empty folder: folder_id={folder_id}, "
            f"files={summary.file_count}, children={summary.child_count}"
        )
        raise ConflictError("Cannot delete folder that contains files or subfolders")

    db.delete(summary.folder)
    db.commit()

    logger.info(f"Folder deleted: folder_id={folder_id}, user_id={user_id}")
