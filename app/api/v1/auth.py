from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.exceptions import Unauthenticated
from app.core.security import verify_token
from app.models.user import User
from app.services.project_access import ProjectSession, require_project_access


def get_current_user(
    authorization: Optional[str] = Header(None), db: Session = Depends(get_db)
):
    if not authorization:
        raise Unauthenticated()

    try:
        scheme, token = authorization.split()
    except ValueError:
        raise Unauthenticated("Ogiltigt format på Authorization-huvudet")
    if scheme.lower() != "bearer":
        raise Unauthenticated("Ogiltigt autentiseringsschema")

    payload, error = verify_token(token)
    if error == "expired":
        raise Unauthenticated("Sessionen har gått ut")
    elif error == "invalid":
        raise Unauthenticated("Ogiltig token")

    email: str = payload.get("sub")
    if email is None:
        raise Unauthenticated("Ogiltig token")

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        raise Unauthenticated("Användaren hittades inte")

    return user


def get_project_session(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ProjectSession:
    return require_project_access(db, project_id, current_user)
