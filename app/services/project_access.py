import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.core.exceptions import Unauthorized
from app.models.project import Project
from app.models.project_member import ProjectMember
from app.models.user import User

logger = logging.getLogger(__name__)


@dataclass
class ProjectSession:
    """A user whose active membership of ``project_id`` has been verified."""

    project_id: int
    user: User
    db: Session

    @property
    def user_id(self) -> int:
        return self.user.id


def verify_project_membership(db: Session, project_id: int, user_id: int) -> bool:
    membership = (
        db.query(ProjectMember)
        .join(Project, Project.id == ProjectMember.project_id)
        .filter(
            ProjectMember.project_id == project_id,
            ProjectMember.user_id == user_id,
            ProjectMember.status == "active",
            Project.status != "deleted",
        )
        .first()
    )
    return membership is not None


def require_project_access(db: Session, project_id: int, user: User) -> ProjectSession:
    if not verify_project_membership(db, project_id, user.id):
        logger.warning(f"User {user.id} denied access to project {project_id}")
        raise Unauthorized()
    return ProjectSession(project_id=project_id, user=user, db=db)
