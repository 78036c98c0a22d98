"""
Folder API endpoints.

Folders are created at root level or under another folder of the same
user, can be renamed, and can only be deleted once they are empty.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from filebox.database import get_db
from filebox.dependencies.auth import get_current_user
from filebox.models.user import User
from filebox.schemas.common import APIResponse, MessageResponseData
from filebox.schemas.files import FileResponse
from filebox.schemas.folders import (
    FolderCounts,
    FolderCreateRequest,
    FolderDetailResponse,
    FolderResponse,
    FolderUpdateRequest,
)
from filebox.services.folders import (
    FolderSummary,
    create_folder,
    delete_folder,
    get_folder_detail,
    list_folders,
    update_folder,
)

router = APIRouter(prefix="/folders", tags=["folders"])


def _to_response(summary: FolderSummary) -> FolderResponse:
    folder = summary.folder
    return FolderResponse(
        id=folder.id,
        name=folder.name,
        description=folder.description,
        parent_id=folder.parent_id,
        created_at=folder.created_at,
        counts=FolderCounts(files=summary.file_count, children=summary.child_count),
    )


@router.get(
    "",
    response_model=APIResponse[list[FolderResponse]],
    status_code=status.HTTP_200_OK,
)
def list_folders_endpoint(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List all of the caller's folders, newest first, with direct child counts."""
    summaries = list_folders(db, current_user.id)
    return APIResponse(success=True, data=[_to_response(s) for s in summaries])


@router.post(
    "",
    response_model=APIResponse[FolderResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_folder_endpoint(
    request: FolderCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create a folder.

    **Errors:**
    - 400: Missing or blank name
    - 404: parent_id is not one of the caller's folders
    """
    summary = create_folder(
        db,
        current_user.id,
        name=request.name,
        description=request.description,
        parent_id=request.parent_id,
    )
    return APIResponse(success=True, data=_to_response(summary))


@router.get(
    "/{folder_id}",
    response_model=APIResponse[FolderDetailResponse],
    status_code=status.HTTP_200_OK,
)
def get_folder_endpoint(
    folder_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get a folder with its direct files and direct subfolders."""
    detail = get_folder_detail(db, current_user.id, folder_id)
    summary = _to_response(detail.summary)

    return APIResponse(
        success=True,
        data=FolderDetailResponse(
            **summary.model_dump(),
            files=[FileResponse.model_validate(f) for f in detail.files],
            children=[_to_response(child) for child in detail.children],
        ),
    )


@router.put(
    "/{folder_id}",
    response_model=APIResponse[FolderResponse],
    status_code=status.HTTP_200_OK,
)
def update_folder_endpoint(
    folder_id: str,
    request: FolderUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Rename a folder and optionally change its description.

    Omitting description keeps the current one; an empty string clears it.
    """
    summary = update_folder(
        db,
        current_user.id,
        folder_id,
        name=request.name,
        description=request.description,
    )
    return APIResponse(success=True, data=_to_response(summary))


@router.delete(
    "/{folder_id}",
    response_model=APIResponse[MessageResponseData],
    status_code=status.HTTP_200_OK,
)
def delete_folder_endpoint(
    folder_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Delete an empty folder.

    **Errors:**
    - 400: The folder still contains files or subfolders
    - 404: Folder not found
    """
    delete_folder(db, current_user.id, folder_id)
    return APIResponse(success=True, data=MessageResponseData(message="Folder deleted successfully"))
