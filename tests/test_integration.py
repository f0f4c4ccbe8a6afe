"""
Integration tests for the Task Board API.

Tests complete workflows across multiple endpoints and the full stack
(routes → services → repositories → database).
"""

from app.models.role import UserRole
from app.models.user import User


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register_and_login(client, name, email, tenant_name, subdomain, password="s3cret-pass"):
    response = client.post(
        "/api/register",
        json={
            "name": name,
            "email": email,
            "password": password,
            "tenant_name": tenant_name,
            "subdomain": subdomain,
        },
    )
    assert response.status_code == 201
    token = client.post("/api/auth/login", json={"email": email, "password": password}).json()
    return response.json(), bearer(token["access_token"])


class TestCompleteWorkflow:
    """Register a tenant and run a project through its life"""

    def test_team_workflow(self, client, db_session):
        # Step 1: Register the organization and log in as its admin
        registration, owner = register_and_login(
            client, "Olivia", "olivia@umbrella.example.com", "Umbrella", "umbrella"
        )
        tenant_id = registration["tenant"]["id"]

        # Step 2: Create a project
        project = client.post(
            "/api/projects", headers=owner, json={"name": "Launch", "description": "Q3 launch"}
        ).json()

        # Step 3: Invite a teammate and log in with the temporary password
        invite = client.post(
            "/api/users/invite", headers=owner, json={"email": "tom@umbrella.example.com"}
        ).json()
        login = client.post(
            "/api/auth/login",
            json={"email": "tom@umbrella.example.com", "password": invite["temporary_password"]},
        ).json()
        teammate = bearer(login["access_token"])
        teammate_id = invite["user"]["id"]

        # Step 4: Create tasks, one assigned to the teammate
        client.post(
            "/api/tasks",
            headers=owner,
            json={"title": "Write copy", "project_id": project["id"], "priority": "LOW"},
        )
        assigned = client.post(
            "/api/tasks",
            headers=owner,
            json={
                "title": "Build landing page",
                "project_id": project["id"],
                "priority": "HIGH",
                "assignee_id": teammate_id,
            },
        ).json()
        assert assigned["assignee"]["email"] == "tom@umbrella.example.com"

        # Step 5: Teammate moves their task through the board
        for status in ("inprogress", "done"):
            response = client.put(
                f"/api/tasks/{assigned['id']}", headers=teammate, json={"status": status}
            )
            assert response.status_code == 200
        assert response.json()["priority"] == "HIGH"

        # Step 6: Filters and stats reflect the change
        done = client.get("/api/tasks?completed=true", headers=owner).json()
        assert [t["title"] for t in done] == ["Build landing page"]

        by_priority = client.get(
            "/api/tasks?sort_by=priority&sort_order=desc", headers=teammate
        ).json()
        assert [t["priority"] for t in by_priority] == ["HIGH", "LOW"]

        projects = client.get("/api/projects", headers=owner).json()
        assert projects[0]["total_tasks"] == 2
        assert projects[0]["completed_tasks"] == 1

        # Step 7: Teammate cannot administer users
        assert client.get("/api/users", headers=teammate).status_code == 403

        # Step 8: Owner still cannot remove or demote themselves
        owner_id = registration["user"]["id"]
        assert client.delete(f"/api/users/{owner_id}", headers=owner).status_code == 403
        assert (
            client.put(
                f"/api/users/{owner_id}/role", headers=owner, json={"role": "MEMBER"}
            ).status_code
            == 403
        )

        admins = db_session.query(User).filter_by(tenant_id=tenant_id, role=UserRole.ADMIN).count()
        assert admins == 1


class TestTenantIsolationWorkflow:
    """Two organizations side by side never see each other's data"""

    def test_organizations_are_isolated(self, client):
        _, acme = register_and_login(client, "Ann", "ann@acme.example.com", "Acme", "acme")
        _, globex = register_and_login(client, "Gus", "gus@globex.example.com", "Globex", "globex")

        acme_project = client.post("/api/projects", headers=acme, json={"name": "Rockets"}).json()
        acme_task = client.post(
            "/api/tasks", headers=acme, json={"title": "Fuel", "project_id": acme_project["id"]}
        ).json()

        # Globex sees empty lists
        assert client.get("/api/projects", headers=globex).json() == []
        assert client.get("/api/tasks", headers=globex).json() == []
        assert [u["email"] for u in client.get("/api/users", headers=globex).json()] == [
            "gus@globex.example.com"
        ]

        # Direct access by id looks exactly like a missing row
        for method, url in (
            ("get", f"/api/projects/{acme_project['id']}"),
            ("get", f"/api/tasks/{acme_task['id']}"),
            ("delete", f"/api/tasks/{acme_task['id']}"),
            ("delete", f"/api/projects/{acme_project['id']}"),
        ):
            response = getattr(client, method)(url, headers=globex)
            assert response.status_code == 404

        # Globex cannot attach work to Acme's project
        response = client.post(
            "/api/tasks", headers=globex, json={"title": "Sabotage", "project_id": acme_project["id"]}
        )
        assert response.status_code == 404

        # Acme's data is intact
        assert client.get(f"/api/tasks/{acme_task['id']}", headers=acme).status_code == 200
