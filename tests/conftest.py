import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.database import Base, get_db
from app.core.security import create_access_token
from app.models.document import Document
from app.models.folder import Folder
from app.models.project import Project
from app.models.project_member import ProjectMember
from app.models.user import User
from app.utils.folder_utils import folder_name_of, parent_path_of

# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Fresh database for every test"""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Test client bound to the test session"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def create_test_user(db_session):
    """Factory fixture for users"""
    def _create_user(email="anna@example.com", name="Anna Andersson"):
        user = User(name=name, email=email)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create_user


@pytest.fixture
def create_project(db_session):
    """Factory fixture for a project with its owner as active member"""
    def _create_project(owner, name="Kv. Eken", member_status="active"):
        project = Project(user_id=owner.id, name=name)
        db_session.add(project)
        db_session.commit()
        db_session.refresh(project)

        db_session.add(
            ProjectMember(
                project_id=project.id,
                user_id=owner.id,
                role="owner",
                status=member_status,
            )
        )
        db_session.commit()
        return project

    return _create_project


@pytest.fixture
def create_folder(db_session):
    def _create_folder(project, path, created_by=None):
        folder = Folder(
            project_id=project.id,
            name=folder_name_of(path),
            path=path,
            parent_path=parent_path_of(path),
            created_by=created_by,
        )
        db_session.add(folder)
        db_session.commit()
        db_session.refresh(folder)
        return folder

    return _create_folder


@pytest.fixture
def create_document(db_session):
    def _create_document(project, folder_path="/", name="ritning.pdf", file_size=100):
        document = Document(
            project_id=project.id,
            name=name,
            file_path=f"{project.id}/{name}",
            file_size=file_size,
            file_type="application/pdf",
            folder_path=folder_path,
        )
        db_session.add(document)
        db_session.commit()
        db_session.refresh(document)
        return document

    return _create_document


def _auth_headers(user):
    token = create_access_token(data={"sub": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    """Bearer headers for any user"""
    return _auth_headers


@pytest.fixture
def authenticated_client(client, create_test_user, create_project):
    """Client with a bearer token for a user who is a member of one project"""
    user = create_test_user()
    project = create_project(user)

    client.headers = {**client.headers, **_auth_headers(user)}

    return client, user, project
