"""
Folder API schemas.

Folder responses always carry the number of direct child files and
folders, which is what decides whether a folder can be deleted.
"""
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from filebox.schemas.files import FileResponse


class FolderCreateRequest(BaseModel):
    # Name rules are checked by the folder service so they are reported as 400
    name: str | None = None
    description: str | None = None
    parent_id: str | None = None


class FolderUpdateRequest(BaseModel):
    name: str | None = None
    description: str | None = None


class FolderCounts(BaseModel):
    files: int
    """Number of files directly inside the folder."""

    children: int
    """Number of folders directly inside the folder."""


class FolderResponse(BaseModel):
    id: str
    name: str
    description: str | None
    parent_id: str | None
    created_at: datetime
    counts: FolderCounts

    model_config = ConfigDict(from_attributes=True)


class FolderDetailResponse(FolderResponse):
    files: list[FileResponse]
    """Direct files, newest first."""

    children: list[FolderResponse]
    """Direct subfolders, newest first."""
