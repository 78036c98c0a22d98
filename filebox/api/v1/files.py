"""
File API endpoints.

This module provides endpoints for uploading, listing, fetching and
deleting files. File content is never served here: responses carry the
blob store locator the client downloads from.
"""
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from filebox.config import settings
from filebox.database import get_db
from filebox.dependencies.auth import get_current_user
from filebox.dependencies.storage import get_blob_store, get_staging_area
from filebox.exceptions import ValidationError
from filebox.models.user import User
from filebox.schemas.common import APIResponse, MessageResponseData
from filebox.schemas.files import FileListFilters, FileListResponseData, FileResponse, PaginationMeta
from filebox.services.files import delete_file, get_file, list_files
from filebox.services.uploads import upload_file
from filebox.storage.base import BlobStore
from filebox.storage.staging import UploadStagingArea

router = APIRouter(prefix="/files", tags=["files"])

UPLOAD_READ_CHUNK_SIZE = 64 * 1024  # 64KB


async def _iter_upload(upload: UploadFile) -> AsyncIterator[bytes]:
    while chunk := await upload.read(UPLOAD_READ_CHUNK_SIZE):
        yield chunk


@router.post(
    "/upload",
    response_model=APIResponse[FileResponse],
    status_code=status.HTTP_201_CREATED,
)
async def upload_file_endpoint(
    file: UploadFile | None = File(None),
    folder_id: str | None = Form(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    staging: UploadStagingArea = Depends(get_staging_area),
):
    """
    Upload a single file, optionally into one of the caller's folders.

    **Request (multipart/form-data):**
    - file: The file to upload (jpeg, png, gif, pdf, txt, doc, docx; max 10MB)
    - folder_id: Optional target folder

    **Returns:** the created file record (201)

    **Errors:**
    - 400: No file, disallowed type or file too large
    - 404: Folder not found
    - 500: Blob store upload failed

    **Example:**
    ```bash
    curl -X POST http://localhost:8000/api/v1/files/upload \\
      -H "Authorization: Bearer eyJhbGciOi..." \\
      -F "file=@report.pdf;type=application/pdf" \\
      -F "folder_id=Zq81LmN0pR4s"
    ```
    """
    if file is None or not file.filename:
        raise ValidationError("No file uploaded")

    try:
        record = await upload_file(
            db,
            blob_store,
            staging,
            current_user.id,
            _iter_upload(file),
            filename=file.filename,
            content_type=file.content_type,
            declared_size=file.size,
            folder_id=folder_id or None,
        )
    finally:
        await file.close()

    return APIResponse(success=True, data=FileResponse.model_validate(record))


@router.get(
    "",
    response_model=APIResponse[FileListResponseData],
    status_code=status.HTTP_200_OK,
)
def list_files_endpoint(
    folder_id: str | None = Query(None, description="Only list files directly inside this folder."),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    search: str | None = Query(
        None,
        max_length=255,
        description="Case-insensitive match against stored or original file name.",
    ),
    mime_type: str | None = Query(
        None,
        max_length=255,
        description='MIME type prefix, e.g. "image/" for all images.',
    ),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    List the caller's files, newest first, with offset pagination.
    """
    filters = FileListFilters(
        folder_id=folder_id or None,
        page=page,
        limit=limit,
        search=search or None,
        mime_type_prefix=mime_type or None,
    )
    result = list_files(db, current_user.id, filters)

    return APIResponse(
        success=True,
        data=FileListResponseData(
            files=[FileResponse.model_validate(f) for f in result.files],
            pagination=PaginationMeta(
                page=result.page,
                limit=result.limit,
                total=result.total,
                total_pages=result.total_pages,
                has_next=result.has_next,
                has_prev=result.has_prev,
            ),
        ),
    )


@router.get(
    "/{file_id}",
    response_model=APIResponse[FileResponse],
    status_code=status.HTTP_200_OK,
)
def get_file_endpoint(
    file_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get one of the caller's files. Files of other users are reported as 404."""
    file = get_file(db, current_user.id, file_id)
    return APIResponse(success=True, data=FileResponse.model_validate(file))


@router.delete(
    "/{file_id}",
    response_model=APIResponse[MessageResponseData],
    status_code=status.HTTP_200_OK,
)
async def delete_file_endpoint(
    file_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
):
    """
    Delete one of the caller's files.

    The metadata is removed even if the blob store cannot delete the object
    at the moment; the failure is logged.
    """
    await delete_file(db, blob_store, current_user.id, file_id)
    return APIResponse(success=True, data=MessageResponseData(message="File deleted successfully"))
