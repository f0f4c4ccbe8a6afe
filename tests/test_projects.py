import pytest
from sqlalchemy.exc import OperationalError

from app.models.project import Project
from app.models.task import Task, TaskStatus
from app.repositories.project_repository import ProjectRepository


class TestProjectCreation:
    """Tests for creating projects"""

    def test_create_project_success(self, client, admin_a_headers, tenant_a):
        """Project is created in the caller's tenant"""
        response = client.post(
            "/api/projects",
            headers=admin_a_headers,
            json={"name": "Alpha", "description": "Launch plan"},
        )

        assert response.status_code == 201
        project = response.json()
        assert project["name"] == "Alpha"
        assert project["description"] == "Launch plan"
        assert project["tenant_id"] == tenant_a.id
        assert "id" in project
        assert "created_at" in project

    def test_member_can_create_project(self, client, member_a_headers):
        response = client.post("/api/projects", headers=member_a_headers, json={"name": "Side"})
        assert response.status_code == 201

    def test_tenant_id_in_body_is_ignored(self, client, admin_a_headers, tenant_a, tenant_b):
        response = client.post(
            "/api/projects",
            headers=admin_a_headers,
            json={"name": "Sneaky", "tenant_id": tenant_b.id},
        )

        assert response.status_code == 201
        assert response.json()["tenant_id"] == tenant_a.id

    def test_create_project_missing_name(self, client, admin_a_headers, db_session):
        response = client.post(
            "/api/projects", headers=admin_a_headers, json={"description": "No name"}
        )

        assert response.status_code == 400
        assert db_session.query(Project).count() == 0

    def test_create_project_empty_name(self, client, admin_a_headers, db_session):
        response = client.post("/api/projects", headers=admin_a_headers, json={"name": ""})

        assert response.status_code == 400
        assert db_session.query(Project).count() == 0

    def test_create_project_requires_auth(self, client):
        response = client.post("/api/projects", json={"name": "Alpha"})
        assert response.status_code == 401


class TestProjectRetrieval:
    """Tests for listing and fetching projects"""

    def test_list_only_own_tenant_projects(self, client, admin_a_headers, project_a, project_b):
        response = client.get("/api/projects", headers=admin_a_headers)

        assert response.status_code == 200
        projects = response.json()
        assert [p["id"] for p in projects] == [project_a.id]

    def test_list_newest_first(self, client, admin_a_headers):
        for name in ("First", "Second", "Third"):
            client.post("/api/projects", headers=admin_a_headers, json={"name": name})

        response = client.get("/api/projects", headers=admin_a_headers)

        assert [p["name"] for p in response.json()] == ["Third", "Second", "First"]

    def test_list_includes_task_counters(self, client, db_session, admin_a_headers, project_a):
        db_session.add_all(
            [
                Task(project_id=project_a.id, title="a", status=TaskStatus.TODO),
                Task(project_id=project_a.id, title="b", status=TaskStatus.DONE),
                Task(project_id=project_a.id, title="c", status=TaskStatus.DONE),
            ]
        )
        db_session.commit()

        response = client.get("/api/projects", headers=admin_a_headers)

        project = response.json()[0]
        assert project["total_tasks"] == 3
        assert project["completed_tasks"] == 2

    def test_list_counters_zero_without_tasks(self, client, admin_a_headers, project_a):
        project = client.get("/api/projects", headers=admin_a_headers).json()[0]
        assert project["total_tasks"] == 0
        assert project["completed_tasks"] == 0

    def test_get_project(self, client, admin_a_headers, project_a):
        response = client.get(f"/api/projects/{project_a.id}", headers=admin_a_headers)

        assert response.status_code == 200
        assert response.json()["name"] == "Alpha"

    def test_get_other_tenant_project_is_not_found(self, client, admin_b_headers, project_a):
        """Out-of-tenant access looks exactly like a missing project"""
        response = client.get(f"/api/projects/{project_a.id}", headers=admin_b_headers)

        assert response.status_code == 404
        missing = client.get("/api/projects/99999", headers=admin_b_headers)
        assert missing.status_code == 404
        assert response.json() == missing.json()

    def test_create_then_fetch_from_other_tenant(self, client, admin_a_headers, admin_b_headers, tenant_a):
        created = client.post("/api/projects", headers=admin_a_headers, json={"name": "Alpha"})
        assert created.status_code == 201
        assert created.json()["tenant_id"] == tenant_a.id

        response = client.get(f"/api/projects/{created.json()['id']}", headers=admin_b_headers)
        assert response.status_code == 404


class TestProjectUpdate:
    """Tests for PUT /api/projects/{id}"""

    def test_update_project(self, client, admin_a_headers, project_a):
        response = client.put(
            f"/api/projects/{project_a.id}",
            headers=admin_a_headers,
            json={"name": "Alpha v2", "description": "Revised"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Alpha v2"
        assert data["description"] == "Revised"

    def test_update_keeps_omitted_description(self, client, db_session, admin_a_headers, project_a):
        response = client.put(
            f"/api/projects/{project_a.id}", headers=admin_a_headers, json={"name": "Alpha v2"}
        )

        assert response.status_code == 200
        assert response.json()["description"] == "First project"
        db_session.refresh(project_a)
        assert project_a.description == "First project"

    def test_update_null_description_clears(self, client, admin_a_headers, project_a):
        response = client.put(
            f"/api/projects/{project_a.id}",
            headers=admin_a_headers,
            json={"name": "Alpha", "description": None},
        )

        assert response.status_code == 200
        assert response.json()["description"] is None

    def test_update_requires_name(self, client, admin_a_headers, project_a, db_session):
        response = client.put(
            f"/api/projects/{project_a.id}",
            headers=admin_a_headers,
            json={"name": "", "description": "Revised"},
        )

        assert response.status_code == 400
        db_session.refresh(project_a)
        assert project_a.name == "Alpha"

    def test_update_other_tenant_project(self, client, admin_b_headers, project_a, db_session):
        response = client.put(
            f"/api/projects/{project_a.id}",
            headers=admin_b_headers,
            json={"name": "Hijacked"},
        )

        assert response.status_code == 404
        db_session.refresh(project_a)
        assert project_a.name == "Alpha"


class TestProjectDeletion:
    """Tests for DELETE /api/projects/{id}"""

    def test_delete_project_cascades_tasks(self, client, admin_a_headers, project_a, task_a, db_session):
        response = client.delete(f"/api/projects/{project_a.id}", headers=admin_a_headers)

        assert response.status_code == 200
        assert response.json()["deleted_project_id"] == project_a.id
        assert db_session.query(Project).count() == 0
        assert db_session.query(Task).count() == 0

    def test_delete_twice_is_not_found(self, client, admin_a_headers, project_a):
        client.delete(f"/api/projects/{project_a.id}", headers=admin_a_headers)
        response = client.delete(f"/api/projects/{project_a.id}", headers=admin_a_headers)
        assert response.status_code == 404

    def test_delete_other_tenant_project(self, client, admin_b_headers, project_a, db_session):
        response = client.delete(f"/api/projects/{project_a.id}", headers=admin_b_headers)

        assert response.status_code == 404
        assert db_session.query(Project).filter_by(id=project_a.id).count() == 1


class TestStoreFailures:
    def test_database_error_maps_to_500(self, client, admin_a_headers, monkeypatch):
        def broken(self, tenant_id):
            raise OperationalError("SELECT 1", {}, Exception("connection lost"))

        monkeypatch.setattr(ProjectRepository, "get_by_tenant", broken)

        response = client.get("/api/projects", headers=admin_a_headers)

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}
