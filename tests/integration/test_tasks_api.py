"""API tests for task management."""

import datetime as dt

from timebill.calculators import utc_today
from timebill.db import Task, TimeEntry


class TestCreateTask:
    def test_admin_creates_task(self, client, seed, headers):
        response = client.post(
            "/api/tasks",
            json={"projectId": seed.website.id, "name": "Launch", "description": "Go live"},
            headers=headers.admin,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Launch"
        assert body["project_id"] == seed.website.id
        assert body["status"] == "pending"

    def test_client_creates_task_on_own_project(self, client, seed, headers):
        response = client.post(
            "/api/tasks",
            json={"projectId": seed.website.id, "name": "Review", "status": "in_progress"},
            headers=headers.acme,
        )

        assert response.status_code == 201
        assert response.json()["status"] == "in_progress"

    def test_client_cannot_create_on_foreign_project(self, client, seed, headers):
        response = client.post(
            "/api/tasks",
            json={"projectId": seed.website.id, "name": "Sneaky"},
            headers=headers.globex,
        )

        assert response.status_code == 403

    def test_worker_cannot_create_tasks(self, client, seed, headers):
        response = client.post(
            "/api/tasks",
            json={"projectId": seed.website.id, "name": "Mine"},
            headers=headers.worker,
        )

        assert response.status_code == 403

    def test_unknown_project(self, client, seed, headers):
        response = client.post(
            "/api/tasks", json={"projectId": 999, "name": "Orphan"}, headers=headers.admin
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Project not found"

    def test_name_too_short(self, client, seed, headers):
        response = client.post(
            "/api/tasks", json={"projectId": seed.website.id, "name": "ab"}, headers=headers.admin
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["message"] == (
            "Task name must be between 3 and 255 characters"
        )

    def test_due_date_in_past(self, client, seed, headers):
        yesterday = utc_today() - dt.timedelta(days=1)
        response = client.post(
            "/api/tasks",
            json={"projectId": seed.website.id, "name": "Late", "dueDate": yesterday.isoformat()},
            headers=headers.admin,
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "dueDate"

    def test_invalid_status(self, client, seed, headers):
        response = client.post(
            "/api/tasks",
            json={"projectId": seed.website.id, "name": "Odd", "status": "done"},
            headers=headers.admin,
        )

        assert response.status_code == 400


class TestReadTasks:
    def test_get_task_includes_time_entries(self, client, seed, headers, make_entry):
        make_entry(task=seed.design)

        response = client.get(f"/api/tasks/{seed.design.id}", headers=headers.worker)

        assert response.status_code == 200
        assert len(response.json()["time_entries"]) == 1

    def test_client_cannot_read_foreign_task(self, client, seed, headers):
        response = client.get(f"/api/tasks/{seed.design.id}", headers=headers.globex)

        assert response.status_code == 403

    def test_unknown_task(self, client, seed, headers):
        response = client.get("/api/tasks/4242", headers=headers.admin)

        assert response.status_code == 404

    def test_non_integer_id(self, client, seed, headers):
        response = client.get("/api/tasks/abc", headers=headers.admin)

        assert response.status_code == 400

    def test_zero_id(self, client, seed, headers):
        response = client.get("/api/tasks/0", headers=headers.admin)

        assert response.status_code == 400

    def test_project_tasks_newest_first(self, client, seed, headers):
        created = client.post(
            "/api/tasks", json={"projectId": seed.website.id, "name": "Newest"}, headers=headers.admin
        ).json()

        response = client.get(f"/api/tasks/project/{seed.website.id}", headers=headers.acme)

        assert response.status_code == 200
        names = [task["name"] for task in response.json()]
        assert names[0] == created["name"]
        assert set(names) == {"Design", "Build", "Newest"}


class TestUpdateAndDeleteTask:
    def test_partial_update_keeps_other_fields(self, client, seed, headers):
        response = client.put(
            f"/api/tasks/{seed.build.id}", json={"status": "completed"}, headers=headers.acme
        )

        assert response.status_code == 200
        assert response.json()["status"] == "completed"
        assert response.json()["name"] == "Build"

    def test_worker_cannot_update(self, client, seed, headers):
        response = client.put(
            f"/api/tasks/{seed.build.id}", json={"name": "Renamed"}, headers=headers.worker
        )

        assert response.status_code == 403

    def test_delete_task_removes_entries(self, client, seed, headers, make_entry, db_session):
        entry = make_entry(task=seed.build)
        task_id, entry_id = seed.build.id, entry.id

        response = client.delete(f"/api/tasks/{task_id}", headers=headers.admin)

        assert response.status_code == 200
        assert response.json() == {"message": "Task deleted successfully"}
        db_session.expire_all()
        assert db_session.get(Task, task_id) is None
        assert db_session.get(TimeEntry, entry_id) is None
