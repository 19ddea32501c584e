"""Rename a folder and rewrite every path below it.

Documents and subfolders point at a folder by path string, so a rename has to
chase down every row whose path starts with the old one. All writes happen in
one transaction: either the whole subtree moves or nothing does.
"""
import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.exceptions import InvalidPath, NotFound, PathConflict
from app.models.document import Document
from app.models.folder import Folder
from app.services.folder_store import get_folder_by_path
from app.services.project_access import ProjectSession
from app.utils.folder_utils import ROOT_PATH, normalize_path, replace_path_prefix

logger = logging.getLogger(__name__)


def rename_folder(session: ProjectSession, path: str, new_name: str) -> Folder:
    db = session.db
    old_path = normalize_path(path)
    if old_path == ROOT_PATH:
        raise InvalidPath()

    folder = get_folder_by_path(db, session.project_id, old_path)
    if not folder:
        raise NotFound()

    new_path = folder.parent_path + new_name + "/"
    if new_path == old_path:
        return folder

    if get_folder_by_path(db, session.project_id, new_path):
        raise PathConflict()

    now = datetime.now(timezone.utc)
    try:
        folder.name = new_name
        folder.path = new_path
        folder.updated_at = now

        descendants = (
            db.query(Folder)
            .filter(
                Folder.project_id == session.project_id,
                Folder.id != folder.id,
                Folder.path.startswith(old_path, autoescape=True),
            )
            .all()
        )
        # LIKE is case-insensitive on some backends
        descendants = [f for f in descendants if f.path.startswith(old_path)]
        for subfolder in descendants:
            subfolder.path = replace_path_prefix(subfolder.path, old_path, new_path)
            subfolder.parent_path = replace_path_prefix(
                subfolder.parent_path, old_path, new_path
            )
            subfolder.updated_at = now

        # Covers documents in the folder itself, in descendants, and in
        # legacy paths below old_path that have no folder record.
        documents = (
            db.query(Document)
            .filter(
                Document.project_id == session.project_id,
                Document.folder_path.startswith(old_path, autoescape=True),
            )
            .all()
        )
        documents = [d for d in documents if d.folder_path.startswith(old_path)]
        for document in documents:
            document.folder_path = replace_path_prefix(
                document.folder_path, old_path, new_path
            )

        db.commit()
    except IntegrityError:
        db.rollback()
        raise PathConflict()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error renaming folder {old_path}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Kunde inte byta namn på mappen",
        )

    db.refresh(folder)
    logger.info(
        f"Renamed folder {old_path} to {new_path} in project {session.project_id} "
        f"({len(descendants)} subfolders, {len(documents)} documents moved)"
    )
    return folder
