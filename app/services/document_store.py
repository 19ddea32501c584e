import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import DOCUMENT_NOT_FOUND, NotFound
from app.models.document import Document
from app.models.user import User
from app.schemas.document import CreateDocumentRequest, UpdateDocumentRequest
from app.services.folder_store import get_folder_by_path
from app.services.project_access import ProjectSession, require_project_access
from app.utils.folder_utils import ROOT_PATH, normalize_path

logger = logging.getLogger(__name__)


def _resolve_folder_path(db: Session, project_id: int, folder_path: str) -> str:
    path = normalize_path(folder_path)
    if path != ROOT_PATH and not get_folder_by_path(db, project_id, path):
        raise NotFound()
    return path


def _commit(db: Session, error_detail: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=error_detail
        )


def list_documents(
    session: ProjectSession, folder_path: Optional[str] = None
) -> List[Document]:
    query = session.db.query(Document).filter(
        Document.project_id == session.project_id
    )
    if folder_path:
        query = query.filter(Document.folder_path == normalize_path(folder_path))
    return query.order_by(Document.created_at.desc(), Document.id.desc()).all()


def create_document(session: ProjectSession, body: CreateDocumentRequest) -> Document:
    db = session.db
    folder_path = _resolve_folder_path(db, session.project_id, body.folder_path)

    document = Document(
        project_id=session.project_id,
        name=body.name,
        description=body.description or None,
        file_path=body.file_path,
        file_size=body.file_size,
        file_type=body.file_type,
        folder_path=folder_path,
        uploaded_by=session.user_id,
    )
    db.add(document)
    _commit(db, "Kunde inte spara dokumentet")
    db.refresh(document)
    logger.info(f"Created document {document.id} in {folder_path}")
    return document


def document_stats(session: ProjectSession) -> dict:
    count, total_size = (
        session.db.query(func.count(Document.id), func.coalesce(func.sum(Document.file_size), 0))
        .filter(Document.project_id == session.project_id)
        .one()
    )
    return {"count": count or 0, "total_size": total_size or 0}


def get_document(db: Session, document_id: int, user: User) -> Document:
    document = db.query(Document).filter(Document.id == document_id).first()
    if not document:
        raise NotFound(DOCUMENT_NOT_FOUND)
    require_project_access(db, document.project_id, user)
    return document


def update_document(
    db: Session, document_id: int, body: UpdateDocumentRequest, user: User
) -> Document:
    document = get_document(db, document_id, user)

    if body.name:
        document.name = body.name
    if body.description is not None:
        document.description = body.description
    if body.folder_path is not None:
        document.folder_path = _resolve_folder_path(
            db, document.project_id, body.folder_path
        )

    document.updated_at = datetime.now(timezone.utc)
    _commit(db, "Kunde inte uppdatera dokumentet")
    db.refresh(document)
    return document


def delete_document(db: Session, document_id: int, user: User) -> None:
    # The stored object is removed by the storage service, not here.
    document = get_document(db, document_id, user)
    db.delete(document)
    _commit(db, "Kunde inte radera dokumentet")
    logger.info(f"Deleted document {document_id}")
