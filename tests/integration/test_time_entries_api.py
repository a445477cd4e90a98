"""API tests for time entries."""

import datetime as dt

from timebill.calculators import utc_now
from timebill.db import TimeEntry


def _iso(moment: dt.datetime) -> str:
    return moment.replace(microsecond=0).isoformat()


class TestCreateEntry:
    def test_duration_derived_from_span(self, client, seed, headers):
        start = utc_now() - dt.timedelta(hours=3)
        response = client.post(
            "/api/time-entries",
            json={
                "taskId": seed.design.id,
                "startTime": _iso(start),
                "endTime": _iso(start + dt.timedelta(minutes=90)),
                "description": "Wireframes",
            },
            headers=headers.worker,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["duration_minutes"] == 90
        assert body["status"] == "draft"
        assert body["user_id"] == seed.worker.id
        assert body["is_billable"] is True

    def test_explicit_duration_wins(self, client, seed, headers):
        start = utc_now() - dt.timedelta(hours=3)
        response = client.post(
            "/api/time-entries",
            json={
                "taskId": seed.design.id,
                "startTime": _iso(start),
                "endTime": _iso(start + dt.timedelta(minutes=90)),
                "durationMinutes": 45,
            },
            headers=headers.worker,
        )

        assert response.status_code == 201
        assert response.json()["duration_minutes"] == 45

    def test_running_entry_has_no_duration(self, client, seed, headers):
        response = client.post(
            "/api/time-entries",
            json={"taskId": seed.design.id, "startTime": _iso(utc_now() - dt.timedelta(minutes=5))},
            headers=headers.worker,
        )

        assert response.status_code == 201
        assert response.json()["duration_minutes"] is None

    def test_start_in_future(self, client, seed, headers):
        response = client.post(
            "/api/time-entries",
            json={"taskId": seed.design.id, "startTime": _iso(utc_now() + dt.timedelta(days=1))},
            headers=headers.worker,
        )

        assert response.status_code == 400
        messages = [error["message"] for error in response.json()["errors"]]
        assert "Start time cannot be in the future" in messages

    def test_end_before_start(self, client, seed, headers):
        start = utc_now() - dt.timedelta(hours=3)
        response = client.post(
            "/api/time-entries",
            json={
                "taskId": seed.design.id,
                "startTime": _iso(start),
                "endTime": _iso(start - dt.timedelta(hours=1)),
            },
            headers=headers.worker,
        )

        assert response.status_code == 400
        messages = [error["message"] for error in response.json()["errors"]]
        assert "End time must be after start time" in messages

    def test_unknown_task(self, client, seed, headers):
        response = client.post(
            "/api/time-entries",
            json={"taskId": 999, "startTime": _iso(utc_now() - dt.timedelta(hours=1))},
            headers=headers.worker,
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Task not found"

    def test_requires_token(self, client, seed):
        response = client.post(
            "/api/time-entries",
            json={"taskId": seed.design.id, "startTime": _iso(utc_now())},
        )

        assert response.status_code == 401


class TestReadEntries:
    def test_owner_can_read(self, client, headers, make_entry):
        entry = make_entry()

        response = client.get(f"/api/time-entries/{entry.id}", headers=headers.worker)

        assert response.status_code == 200
        assert response.json()["id"] == entry.id

    def test_admin_can_read_any(self, client, headers, make_entry):
        entry = make_entry()

        response = client.get(f"/api/time-entries/{entry.id}", headers=headers.admin)

        assert response.status_code == 200

    def test_other_user_forbidden(self, client, headers, make_entry):
        entry = make_entry()

        response = client.get(f"/api/time-entries/{entry.id}", headers=headers.other_worker)

        assert response.status_code == 403
        assert response.json()["message"] == "Not authorized to view this time entry"

    def test_missing_entry(self, client, headers, seed):
        response = client.get("/api/time-entries/9999", headers=headers.worker)

        assert response.status_code == 404

    def test_list_is_paginated_and_own_only(self, client, seed, headers, make_entry):
        for days_ago in (1, 2, 3):
            make_entry(days_ago=days_ago)
        make_entry(user=seed.other_worker)

        response = client.get("/api/time-entries?page=1&limit=2", headers=headers.worker)

        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 2
        assert body["pagination"] == {"total": 3, "page": 1, "limit": 2, "totalPages": 2}
        starts = [entry["start_time"] for entry in body["data"]]
        assert starts == sorted(starts, reverse=True)

    def test_list_filters_by_date_and_status(self, client, headers, make_entry):
        make_entry(days_ago=1, status="approved")
        make_entry(days_ago=1)
        make_entry(days_ago=10, status="approved")
        since = (utc_now() - dt.timedelta(days=2)).date().isoformat()

        response = client.get(
            f"/api/time-entries?startDate={since}&status=approved", headers=headers.worker
        )

        assert response.json()["pagination"]["total"] == 1

    def test_end_date_is_inclusive(self, client, headers, make_entry):
        entry = make_entry(days_ago=2)
        day = entry.start_time.date().isoformat()

        response = client.get(
            f"/api/time-entries?startDate={day}&endDate={day}", headers=headers.worker
        )

        assert [item["id"] for item in response.json()["data"]] == [entry.id]

    def test_limit_out_of_range(self, client, headers):
        response = client.get("/api/time-entries?limit=500", headers=headers.worker)

        assert response.status_code == 400


class TestUpdateEntry:
    def test_changing_end_recomputes_duration(self, client, headers, make_entry):
        entry = make_entry(minutes=60)
        new_end = entry.start_time + dt.timedelta(minutes=150)

        response = client.put(
            f"/api/time-entries/{entry.id}",
            json={"endTime": _iso(new_end)},
            headers=headers.worker,
        )

        assert response.status_code == 200
        assert response.json()["duration_minutes"] == 150

    def test_moving_start_keeps_duration_without_end(self, client, seed, headers):
        start = utc_now() - dt.timedelta(hours=2)
        created = client.post(
            "/api/time-entries",
            json={"taskId": seed.design.id, "startTime": _iso(start), "durationMinutes": 60},
            headers=headers.worker,
        ).json()

        response = client.put(
            f"/api/time-entries/{created['id']}",
            json={"startTime": _iso(start - dt.timedelta(hours=1))},
            headers=headers.worker,
        )

        assert response.status_code == 200
        assert response.json()["end_time"] is None
        assert response.json()["duration_minutes"] == 60

    def test_end_before_existing_start(self, client, headers, make_entry):
        entry = make_entry()

        response = client.put(
            f"/api/time-entries/{entry.id}",
            json={"endTime": _iso(entry.start_time - dt.timedelta(hours=1))},
            headers=headers.worker,
        )

        assert response.status_code == 400

    def test_billed_entry_is_frozen(self, client, headers, make_entry):
        entry = make_entry(status="billed")

        response = client.put(
            f"/api/time-entries/{entry.id}", json={"description": "Edit"}, headers=headers.worker
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Cannot update a billed time entry"

    def test_worker_cannot_approve_own_entry(self, client, headers, make_entry):
        entry = make_entry()

        response = client.put(
            f"/api/time-entries/{entry.id}", json={"status": "approved"}, headers=headers.worker
        )

        assert response.status_code == 403

    def test_admin_can_set_status(self, client, headers, make_entry):
        entry = make_entry()

        response = client.put(
            f"/api/time-entries/{entry.id}", json={"status": "approved"}, headers=headers.admin
        )

        assert response.status_code == 200
        assert response.json()["status"] == "approved"

    def test_other_user_cannot_update(self, client, headers, make_entry):
        entry = make_entry()

        response = client.put(
            f"/api/time-entries/{entry.id}", json={"description": "x"}, headers=headers.other_worker
        )

        assert response.status_code == 403


class TestDeleteEntry:
    def test_delete(self, client, headers, make_entry, db_session):
        entry = make_entry()
        entry_id = entry.id

        response = client.delete(f"/api/time-entries/{entry_id}", headers=headers.worker)

        assert response.status_code == 200
        assert response.json()["message"] == "Time entry deleted successfully"
        db_session.expire_all()
        assert db_session.get(TimeEntry, entry_id) is None

    def test_billed_entry_cannot_be_deleted(self, client, headers, make_entry):
        entry = make_entry(status="billed")

        response = client.delete(f"/api/time-entries/{entry.id}", headers=headers.worker)

        assert response.status_code == 400


class TestBillableSummary:
    def test_prices_each_entry_at_its_project_rate(self, client, seed, headers, make_entry):
        make_entry(task=seed.design, minutes=90, status="approved")
        make_entry(task=seed.hotline, minutes=30, status="approved")
        make_entry(task=seed.design, minutes=600, status="draft")
        make_entry(task=seed.design, minutes=600, status="approved", is_billable=False)

        response = client.get("/api/time-entries/billable/summary", headers=headers.worker)

        assert response.status_code == 200
        assert response.json() == {"totalHours": 2.0, "billableAmount": 180.0}

    def test_empty_summary(self, client, headers):
        response = client.get("/api/time-entries/billable/summary", headers=headers.worker)

        assert response.json() == {"totalHours": 0.0, "billableAmount": 0.0}

    def test_start_after_end_rejected(self, client, headers):
        response = client.get(
            "/api/time-entries/billable/summary?startDate=2024-02-01&endDate=2024-01-01",
            headers=headers.worker,
        )

        assert response.status_code == 400
