"""Folder records of a project, keyed by (project_id, path).

Documents reference folders by path value, so the guards here look at
``Document.folder_path`` as well as at other folders' ``parent_path``.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional, Set

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    FOLDER_HAS_DOCUMENTS,
    FOLDER_HAS_SUBFOLDERS,
    DuplicatePath,
    InvalidPath,
    NotEmpty,
    NotFound,
)
from app.models.document import Document
from app.models.folder import Folder
from app.models.user import User
from app.schemas.folder import (
    CreateFolderRequest,
    FolderSuggestion,
    UpdateFolderRequest,
)
from app.services.project_access import ProjectSession, require_project_access
from app.utils.folder_utils import ROOT_PATH, normalize_path, split_candidate_path

logger = logging.getLogger(__name__)


def get_folder_by_path(db: Session, project_id: int, path: str) -> Optional[Folder]:
    return (
        db.query(Folder)
        .filter(Folder.project_id == project_id, Folder.path == path)
        .first()
    )


def list_folders(session: ProjectSession) -> List[Folder]:
    return (
        session.db.query(Folder)
        .filter(Folder.project_id == session.project_id)
        .order_by(Folder.path.asc())
        .all()
    )


def list_all_folder_paths(session: ProjectSession) -> List[str]:
    """Folder paths plus every folder_path seen on documents, always with ``/``.

    Documents created before folder records existed only live in
    ``documents.folder_path``, so both sources are merged.
    """
    db = session.db
    folder_paths = (
        db.query(Folder.path).filter(Folder.project_id == session.project_id).all()
    )
    document_paths = (
        db.query(Document.folder_path)
        .filter(Document.project_id == session.project_id)
        .distinct()
        .all()
    )

    paths = {ROOT_PATH}
    paths.update(row[0] for row in folder_paths)
    paths.update(row[0] for row in document_paths if row[0])
    return sorted(paths)


def create_folder(session: ProjectSession, body: CreateFolderRequest) -> Folder:
    db = session.db
    path = normalize_path(body.path)
    parent_path = normalize_path(body.parent_path)
    if path == ROOT_PATH:
        raise InvalidPath()

    if get_folder_by_path(db, session.project_id, path):
        raise DuplicatePath()

    new_folder = Folder(
        project_id=session.project_id,
        name=body.name,
        path=path,
        parent_path=parent_path,
        description=body.description or None,
        created_by=session.user_id,
    )
    try:
        db.add(new_folder)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicatePath()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error creating folder {path}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Kunde inte skapa mappen",
        )

    db.refresh(new_folder)
    logger.info(f"Created folder {path} in project {session.project_id}")
    return new_folder


def _existing_paths(db: Session, project_id: int) -> Set[str]:
    return {
        row[0]
        for row in db.query(Folder.path).filter(Folder.project_id == project_id).all()
    }


def _insert_missing_folders(
    session: ProjectSession, folders: List[CreateFolderRequest]
) -> List[Folder]:
    db = session.db
    existing = _existing_paths(db, session.project_id)

    to_insert = []
    for item in folders:
        path = normalize_path(item.path)
        if path == ROOT_PATH or path in existing:
            continue
        existing.add(path)
        to_insert.append(
            Folder(
                project_id=session.project_id,
                name=item.name,
                path=path,
                parent_path=normalize_path(item.parent_path),
                description=item.description or None,
                created_by=session.user_id,
            )
        )

    if to_insert:
        db.add_all(to_insert)
        db.commit()
    return to_insert


def create_multiple_folders(
    session: ProjectSession, folders: List[CreateFolderRequest]
) -> List[Folder]:
    """Insert folders, silently skipping paths that already exist.

    Running it twice with the same input leaves the same folder set. A path
    inserted by another request between the read and the commit makes the
    batch retry once against the fresh set of existing paths.
    """
    db = session.db
    try:
        try:
            inserted = _insert_missing_folders(session, folders)
        except IntegrityError:
            db.rollback()
            logger.warning(
                f"Folder path collision in project {session.project_id}, retrying bulk insert"
            )
            inserted = _insert_missing_folders(session, folders)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error creating folders: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Kunde inte skapa mapparna",
        )

    for folder in inserted:
        db.refresh(folder)
    logger.info(
        f"Created {len(inserted)} of {len(folders)} folders in project {session.project_id}"
    )
    return inserted


def import_folder_suggestions(
    session: ProjectSession, suggestions: List[FolderSuggestion]
) -> List[Folder]:
    folders = []
    for suggestion in suggestions:
        name, path, parent_path = split_candidate_path(suggestion.path)
        if path == ROOT_PATH:
            continue
        folders.append(
            CreateFolderRequest(
                name=name,
                path=path,
                parent_path=parent_path,
                description=suggestion.description,
            )
        )
    return create_multiple_folders(session, folders)


def _ensure_folder_is_empty(db: Session, folder: Folder) -> None:
    document = (
        db.query(Document.id)
        .filter(
            Document.project_id == folder.project_id,
            Document.folder_path == folder.path,
        )
        .first()
    )
    if document:
        logger.warning(f"Refusing to delete {folder.path}: folder holds documents")
        raise NotEmpty(FOLDER_HAS_DOCUMENTS)

    subfolder = (
        db.query(Folder.id)
        .filter(
            Folder.project_id == folder.project_id,
            Folder.parent_path == folder.path,
            Folder.id != folder.id,
        )
        .first()
    )
    if subfolder:
        logger.warning(f"Refusing to delete {folder.path}: folder has subfolders")
        raise NotEmpty(FOLDER_HAS_SUBFOLDERS)


def _delete(db: Session, folder: Folder) -> None:
    _ensure_folder_is_empty(db, folder)
    try:
        db.delete(folder)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error deleting folder {folder.path}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Kunde inte radera mappen",
        )
    logger.info(f"Deleted folder {folder.path} in project {folder.project_id}")


def delete_folder(session: ProjectSession, path: str) -> str:
    normalized_path = normalize_path(path)
    if normalized_path == ROOT_PATH:
        raise InvalidPath()
    folder = get_folder_by_path(session.db, session.project_id, normalized_path)
    if not folder:
        raise NotFound()
    _delete(session.db, folder)
    return normalized_path


def _load_folder(db: Session, folder_id: int, user: User) -> Folder:
    folder = db.query(Folder).filter(Folder.id == folder_id).first()
    if not folder:
        raise NotFound()
    require_project_access(db, folder.project_id, user)
    return folder


def delete_folder_by_id(db: Session, folder_id: int, user: User) -> str:
    folder = _load_folder(db, folder_id, user)
    path = folder.path
    _delete(db, folder)
    return path


def update_folder(
    db: Session, folder_id: int, body: UpdateFolderRequest, user: User
) -> Folder:
    """Change name and/or description.

    A new name recomputes this folder's path only. Subfolders and documents
    are not rewritten; use ``rename_folder`` for that.
    """
    folder = _load_folder(db, folder_id, user)

    if body.name and body.name != folder.name:
        new_path = folder.parent_path + body.name + "/"
        if get_folder_by_path(db, folder.project_id, new_path):
            raise DuplicatePath()
        folder.name = body.name
        folder.path = new_path

    if body.description is not None:
        folder.description = body.description

    folder.updated_at = datetime.now(timezone.utc)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicatePath()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error updating folder {folder_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Kunde inte uppdatera mappen",
        )
    db.refresh(folder)
    return folder
