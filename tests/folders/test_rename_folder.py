from fastapi import status
from sqlalchemy.exc import SQLAlchemyError

from app.models.document import Document
from app.models.folder import Folder


def folder_paths(db_session, project):
    db_session.expire_all()
    return sorted(
        f.path for f in db_session.query(Folder).filter(Folder.project_id == project.id)
    )


class TestRenameFolderEndpoint:
    """POST /api/v1/projects/{project_id}/folders/rename"""

    def test_rename_cascades_to_subfolders_and_documents(
        self, authenticated_client, db_session, create_folder, create_document
    ):
        client, _, project = authenticated_client
        create_folder(project, "/A/")
        create_folder(project, "/A/B/")
        top_doc = create_document(project, folder_path="/A/", name="top.pdf")
        nested_doc = create_document(project, folder_path="/A/B/", name="nested.pdf")

        response = client.post(
            f"/api/v1/projects/{project.id}/folders/rename",
            json={"path": "/A/", "new_name": "Z"},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["name"] == "Z"
        assert data["path"] == "/Z/"
        assert data["parent_path"] == "/"

        assert folder_paths(db_session, project) == ["/Z/", "/Z/B/"]
        child = db_session.query(Folder).filter(Folder.path == "/Z/B/").first()
        assert child.parent_path == "/Z/"
        assert db_session.get(Document, top_doc.id).folder_path == "/Z/"
        assert db_session.get(Document, nested_doc.id).folder_path == "/Z/B/"

    def test_rename_nested_folder_keeps_siblings(
        self, authenticated_client, db_session, create_folder
    ):
        client, _, project = authenticated_client
        for path in ["/Ritningar/", "/Ritningar/El/", "/Ritningar/El/Kraft/", "/Ritningar/VVS/"]:
            create_folder(project, path)

        response = client.post(
            f"/api/v1/projects/{project.id}/folders/rename",
            json={"path": "Ritningar/El", "new_name": "Elritningar"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert folder_paths(db_session, project) == [
            "/Ritningar/",
            "/Ritningar/Elritningar/",
            "/Ritningar/Elritningar/Kraft/",
            "/Ritningar/VVS/",
        ]

    def test_no_stale_prefix_remains(
        self, authenticated_client, db_session, create_folder, create_document
    ):
        client, _, project = authenticated_client
        for path in ["/A/", "/A/B/", "/A/B/C/", "/AB/"]:
            create_folder(project, path)
        create_document(project, folder_path="/A/B/C/", name="deep.pdf")
        # legacy document below /A/ without a folder record
        create_document(project, folder_path="/A/Gammal/", name="legacy.pdf")
        create_document(project, folder_path="/AB/", name="neighbour.pdf")

        client.post(
            f"/api/v1/projects/{project.id}/folders/rename",
            json={"path": "/A/", "new_name": "Z"},
        )

        paths = folder_paths(db_session, project)
        doc_paths = sorted(
            d.folder_path
            for d in db_session.query(Document).filter(Document.project_id == project.id)
        )
        assert not [p for p in paths + doc_paths if p.startswith("/A/")]
        assert paths == ["/AB/", "/Z/", "/Z/B/", "/Z/B/C/"]
        assert doc_paths == ["/AB/", "/Z/B/C/", "/Z/Gammal/"]

    def test_wildcard_characters_match_literally(
        self, authenticated_client, db_session, create_folder
    ):
        client, _, project = authenticated_client
        create_folder(project, "/A_/")
        create_folder(project, "/AB/")
        create_folder(project, "/AB/C/")

        response = client.post(
            f"/api/v1/projects/{project.id}/folders/rename",
            json={"path": "/A_/", "new_name": "Z"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert folder_paths(db_session, project) == ["/AB/", "/AB/C/", "/Z/"]

    def test_other_projects_untouched(
        self, authenticated_client, db_session, create_project, create_folder
    ):
        client, user, project = authenticated_client
        other = create_project(user, name="Kv. Linden")
        create_folder(project, "/A/")
        create_folder(other, "/A/")
        create_folder(other, "/A/B/")

        client.post(
            f"/api/v1/projects/{project.id}/folders/rename",
            json={"path": "/A/", "new_name": "Z"},
        )

        assert folder_paths(db_session, other) == ["/A/", "/A/B/"]

    def test_conflict_with_existing_folder(
        self, authenticated_client, db_session, create_folder
    ):
        client, _, project = authenticated_client
        create_folder(project, "/A/")
        create_folder(project, "/Z/")

        response = client.post(
            f"/api/v1/projects/{project.id}/folders/rename",
            json={"path": "/A/", "new_name": "Z"},
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["detail"] == "En mapp med detta namn finns redan"
        assert folder_paths(db_session, project) == ["/A/", "/Z/"]

    def test_unknown_folder(self, authenticated_client):
        client, _, project = authenticated_client

        response = client.post(
            f"/api/v1/projects/{project.id}/folders/rename",
            json={"path": "/Finns/Inte/", "new_name": "Z"},
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Mappen hittades inte"

    def test_root_cannot_be_renamed(
        self, authenticated_client, db_session, create_folder, create_document
    ):
        client, _, project = authenticated_client
        create_folder(project, "/")
        create_folder(project, "/A/")
        document = create_document(project, folder_path="/A/", name="a.pdf")

        response = client.post(
            f"/api/v1/projects/{project.id}/folders/rename",
            json={"path": "/", "new_name": "X"},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert folder_paths(db_session, project) == ["/", "/A/"]
        assert db_session.get(Document, document.id).folder_path == "/A/"

    def test_name_with_slash_is_rejected(self, authenticated_client, create_folder):
        client, _, project = authenticated_client
        create_folder(project, "/A/")

        response = client.post(
            f"/api/v1/projects/{project.id}/folders/rename",
            json={"path": "/A/", "new_name": "Z/Y"},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_failed_commit_rolls_back_everything(
        self, authenticated_client, db_session, create_folder, create_document, monkeypatch
    ):
        client, _, project = authenticated_client
        create_folder(project, "/A/")
        create_folder(project, "/A/B/")
        document = create_document(project, folder_path="/A/B/", name="nested.pdf")

        def failing_commit():
            raise SQLAlchemyError("connection lost")

        monkeypatch.setattr(db_session, "commit", failing_commit)

        response = client.post(
            f"/api/v1/projects/{project.id}/folders/rename",
            json={"path": "/A/", "new_name": "Z"},
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["detail"] == "Kunde inte byta namn på mappen"
        assert folder_paths(db_session, project) == ["/A/", "/A/B/"]
        assert db_session.get(Document, document.id).folder_path == "/A/B/"
