import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.v1.auth import get_project_session
from app.core.config import settings
from app.schemas.document import (
    CreateDocumentRequest,
    DocumentListResponse,
    DocumentResponse,
    DocumentStatsResponse,
)
from app.schemas.folder import (
    CreateFolderRequest,
    CreateMultipleFoldersRequest,
    DeleteFolderResponse,
    FolderPathsResponse,
    FolderResponse,
    FolderTreeResponse,
    ImportFolderSuggestionsRequest,
    RenameFolderRequest,
    SuggestFolderStructureRequest,
    SuggestFolderStructureResponse,
)
from app.services import document_store, folder_store
from app.services.folder_rename import rename_folder
from app.services.project_access import ProjectSession
from app.models.document import Document
from app.utils.call_ai_service import call_ai_service, parse_folder_structure
from app.utils.folder_utils import build_folder_tree, count_documents_by_folder

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{project_id}/folders", response_model=List[FolderResponse])
async def get_project_folders(session: ProjectSession = Depends(get_project_session)):
    return folder_store.list_folders(session)


# Create one folder; path and parent_path are normalized to /a/b/
@router.post("/{project_id}/folders", response_model=FolderResponse)
async def create_folder(
    body: CreateFolderRequest,
    session: ProjectSession = Depends(get_project_session),
):
    return folder_store.create_folder(session, body)


# Create many folders at once, existing paths are skipped
@router.post("/{project_id}/folders/bulk", response_model=List[FolderResponse])
async def create_multiple_folders(
    body: CreateMultipleFoldersRequest,
    session: ProjectSession = Depends(get_project_session),
):
    return folder_store.create_multiple_folders(session, body.folders)


@router.post("/{project_id}/folders/import", response_model=List[FolderResponse])
async def import_folder_suggestions(
    body: ImportFolderSuggestionsRequest,
    session: ProjectSession = Depends(get_project_session),
):
    return folder_store.import_folder_suggestions(session, body.folders)


# Ask the external generator for a folder structure, nothing is saved
@router.post(
    "/{project_id}/folders/suggest", response_model=SuggestFolderStructureResponse
)
async def suggest_folder_structure(
    body: SuggestFolderStructureRequest,
    session: ProjectSession = Depends(get_project_session),
):
    if not settings.ai_service_url_folder_structure:
        logger.error("Missing configuration for ai_service_url_folder_structure")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="AI-tjänsten är inte konfigurerad",
        )

    logger.info(
        f"User {session.user_id} requested folder structure for project {session.project_id}"
    )
    result = await call_ai_service(
        settings.ai_service_url_folder_structure,
        body.model_dump(),
        retries=settings.ai_service_retries,
        read_timeout=settings.ai_service_read_timeout,
    )
    return parse_folder_structure(result)


@router.get("/{project_id}/folders/paths", response_model=FolderPathsResponse)
async def get_all_folder_paths(session: ProjectSession = Depends(get_project_session)):
    return {"paths": folder_store.list_all_folder_paths(session)}


@router.get("/{project_id}/folders/tree", response_model=FolderTreeResponse)
async def get_folder_tree(session: ProjectSession = Depends(get_project_session)):
    paths = folder_store.list_all_folder_paths(session)
    document_paths = (
        session.db.query(Document.folder_path)
        .filter(Document.project_id == session.project_id)
        .all()
    )
    counts = count_documents_by_folder(row[0] for row in document_paths)
    return {
        "project_id": session.project_id,
        "tree": build_folder_tree(paths, counts),
    }


# Rename a folder and move everything below it
@router.post("/{project_id}/folders/rename", response_model=FolderResponse)
async def rename_project_folder(
    body: RenameFolderRequest,
    session: ProjectSession = Depends(get_project_session),
):
    return rename_folder(session, body.path, body.new_name)


@router.delete("/{project_id}/folders", response_model=DeleteFolderResponse)
async def delete_folder(
    path: str = Query(..., description="Path of the folder to delete"),
    session: ProjectSession = Depends(get_project_session),
):
    deleted_path = folder_store.delete_folder(session, path)
    return {"message": "Mappen har raderats", "path": deleted_path}


@router.get("/{project_id}/documents", response_model=DocumentListResponse)
async def get_project_documents(
    folder_path: Optional[str] = Query(None),
    session: ProjectSession = Depends(get_project_session),
):
    return {"documents": document_store.list_documents(session, folder_path)}


@router.post("/{project_id}/documents", response_model=DocumentResponse)
async def create_document(
    body: CreateDocumentRequest,
    session: ProjectSession = Depends(get_project_session),
):
    return document_store.create_document(session, body)


@router.get("/{project_id}/documents/stats", response_model=DocumentStatsResponse)
async def get_document_stats(session: ProjectSession = Depends(get_project_session)):
    return document_store.document_stats(session)
