from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.models.user import User
from app.schemas.folder import DeleteFolderResponse, FolderResponse, UpdateFolderRequest
from app.services import folder_store

router = APIRouter()


# Change name or description. A new name does not move subfolders or
# documents; /projects/{id}/folders/rename does.
@router.patch("/{folder_id}", response_model=FolderResponse)
async def update_folder(
    folder_id: int,
    body: UpdateFolderRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return folder_store.update_folder(db, folder_id, body, current_user)


@router.delete("/{folder_id}", response_model=DeleteFolderResponse)
async def delete_folder(
    folder_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    path = folder_store.delete_folder_by_id(db, folder_id, current_user)
    return {"message": "Mappen har raderats", "path": path}
