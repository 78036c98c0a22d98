"""
File API schemas.

This module defines Pydantic schemas for file metadata responses and for
the filters accepted by the file listing endpoint.
"""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class FolderRef(BaseModel):
    """Minimal folder reference embedded in file responses."""

    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class FileResponse(BaseModel):
    """File metadata as returned to clients."""

    id: str
    name: str
    """Stored (generated) file name."""

    original_name: str
    """Filename supplied by the uploader."""

    size: int
    """File size in bytes."""

    mime_type: str
    url: str
    """Remote locator the file content is served from."""

    public_id: str | None
    folder_id: str | None
    created_at: datetime
    folder: FolderRef | None = None

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "examples": [
                {
                    "id": "a3b8f2d4e1c9",
                    "name": "Xk3v9QpL2mNa.pdf",
                    "original_name": "report.pdf",
                    "size": 48213,
                    "mime_type": "application/pdf",
                    "url": "https://filebox.s3.us-east-1.amazonaws.com/raw/1/Xk3v9QpL2mNa.pdf",
                    "public_id": "1/Xk3v9QpL2mNa.pdf",
                    "folder_id": "Zq81LmN0pR4s",
                    "created_at": "2026-01-05T10:21:09.532101",
                    "folder": {"id": "Zq81LmN0pR4s", "name": "Docs"},
                }
            ]
        },
    )


class FileListFilters(BaseModel):
    """Filters for listing files. All filters are combined with AND."""

    folder_id: str | None = None
    """Restrict to direct children of this folder."""

    page: int = Field(1, ge=1)
    limit: int = Field(50, ge=1)

    search: str | None = None
    """Case-insensitive match against stored or original name."""

    mime_type_prefix: str | None = None
    """Restrict to MIME types starting with this prefix (e.g. "image/")."""


class PaginationMeta(BaseModel):
    """Offset pagination metadata."""

    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class FileListResponseData(BaseModel):
    """Paginated file listing."""

    files: list[FileResponse]
    pagination: PaginationMeta
