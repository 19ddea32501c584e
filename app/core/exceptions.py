"""Errors raised by the folder and document services.

Every error carries the HTTP status it maps to and a user-facing message in
Swedish. ``app.main`` registers a handler that renders them as
``{"detail": message}``.
"""
from typing import Dict, Optional


class FolderServiceError(Exception):
    status_code = 400
    default_detail = "Något gick fel"

    def __init__(self, detail: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        self.detail = detail or self.default_detail
        self.headers = headers
        super().__init__(self.detail)


class Unauthenticated(FolderServiceError):
    status_code = 401
    default_detail = "Inte inloggad"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class Unauthorized(FolderServiceError):
    status_code = 403
    default_detail = "Du har inte tillgång till detta projekt"


class NotFound(FolderServiceError):
    status_code = 404
    default_detail = "Mappen hittades inte"


class DuplicatePath(FolderServiceError):
    status_code = 409
    default_detail = "En mapp med detta namn finns redan"


class PathConflict(FolderServiceError):
    status_code = 409
    default_detail = "En mapp med detta namn finns redan"


class InvalidPath(FolderServiceError):
    status_code = 422
    default_detail = "Rotmappen kan inte skapas, byta namn eller raderas"


class NotEmpty(FolderServiceError):
    status_code = 409
    default_detail = "Mappen är inte tom och kan inte raderas"


FOLDER_HAS_DOCUMENTS = "Mappen innehåller dokument och kan inte raderas"
FOLDER_HAS_SUBFOLDERS = "Mappen innehåller undermappar och kan inte raderas"
DOCUMENT_NOT_FOUND = "Dokumentet hittades inte"
