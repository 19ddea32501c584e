from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.models.user import User
from app.schemas.document import (
    DeleteDocumentResponse,
    DocumentResponse,
    UpdateDocumentRequest,
)
from app.services import document_store

router = APIRouter()


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return document_store.get_document(db, document_id, current_user)


# Rename, describe or move a document to another folder
@router.patch("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: int,
    body: UpdateDocumentRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return document_store.update_document(db, document_id, body, current_user)


@router.delete("/{document_id}", response_model=DeleteDocumentResponse)
async def delete_document(
    document_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    document_store.delete_document(db, document_id, current_user)
    return {"message": "Dokumentet har raderats"}
