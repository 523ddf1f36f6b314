from datetime import date

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from shiftboard.db.models.week_requests import WeekRequests
from shiftboard.services import week_requests as request_service
from shiftboard.services.rules.messages import MESSAGES
from shiftboard.services.rules.types import RequestStatus


def submit(client, headers, week, payload):
    return client.put(f"/api/v1/week-requests/{week}", json=payload, headers=headers)


class TestSubmit:

    def test_employee_request_is_pending(self, client, auth, employee, week, minimum_payload):
        response = submit(client, auth(employee), week, minimum_payload)
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "PENDING"
        assert data["user_id"] == employee.id
        assert data["user_name"] == "Avi"
        assert len(data["selections"]) == 3

    def test_manager_request_is_approved(self, client, auth, shift_manager, week, minimum_payload):
        response = submit(client, auth(shift_manager), week, minimum_payload)
        assert response.status_code == 200
        assert response.json()["status"] == "APPROVED"

    def test_quota_failure(self, client, auth, employee, week):
        payload = {"selections": [{"day_index": 0, "shift_id": "s1"}, {"day_index": 2, "shift_id": "s4"}]}
        response = submit(client, auth(employee), week, payload)
        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "validation_failed"
        assert body["errors"][0]["code"] == "min_mornings"
        assert body["errors"][0]["params"] == {"required": 2, "actual": 1}
        assert "1" in body["errors"][0]["message"]

    def test_minimum_plus_night_refused(self, client, auth, employee, week, minimum_payload):
        minimum_payload["selections"].append({"day_index": 3, "shift_id": "s6"})
        response = submit(client, auth(employee), week, minimum_payload)
        assert response.status_code == 422
        errors = response.json()["errors"]
        assert [e["code"] for e in errors] == ["minimum_only_night"]
        assert "לילות" in errors[0]["message"]

    def test_english_messages(self, client, auth, employee, week, minimum_payload):
        minimum_payload["selections"].append({"day_index": 3, "shift_id": "s6"})
        headers = {**auth(employee), "Accept-Language": "en-US,en;q=0.9"}
        response = submit(client, headers, week, minimum_payload)
        assert "night" in response.json()["errors"][0]["message"]

    def test_duplicate_only_warns(self, client, auth, employee, week, minimum_payload):
        minimum_payload["selections"].append({"day_index": 0, "shift_id": "s1"})
        response = submit(client, auth(employee), week, minimum_payload)
        assert response.status_code == 200

    def test_manager_only_shift_refused_for_employee(self, client, auth, employee, manager, week, minimum_payload):
        minimum_payload["selections"] += [
            {"day_index": 3, "shift_id": "s3"},
            {"day_index": 6, "shift_id": "s10"},
        ]
        response = submit(client, auth(employee), week, minimum_payload)
        assert response.status_code == 422
        assert response.json()["errors"][0]["code"] == "shift_not_selectable"

        response = submit(client, auth(manager), week, minimum_payload)
        assert response.status_code == 200

    def test_week_must_start_on_sunday(self, client, auth, employee, minimum_payload):
        response = submit(client, auth(employee), "2025-01-20", minimum_payload)
        assert response.status_code == 400
        assert response.json()["code"] == "invalid_week_start"

    def test_day_index_out_of_range(self, client, auth, employee, week):
        payload = {"selections": [{"day_index": 7, "shift_id": "s1"}]}
        assert submit(client, auth(employee), week, payload).status_code == 422

    def test_resubmit_while_pending_updates_same_row(self, client, auth, employee, week, minimum_payload):
        first = submit(client, auth(employee), week, minimum_payload).json()
        minimum_payload["selections"].append({"day_index": 3, "shift_id": "s3"})
        second = submit(client, auth(employee), week, minimum_payload).json()
        assert second["id"] == first["id"]
        assert len(second["selections"]) == 4
        assert second["version"] == first["version"] + 1

    def test_lost_insert_race_becomes_update(self, client, db, auth, employee, week, minimum_payload, monkeypatch):
        # a competing submission committed between our lookup and our insert
        db.add(WeekRequests(
            user_id=employee.id,
            week_start=date(2025, 1, 19),
            selections=[{"day_index": 0, "shift_id": "s1"}],
            status=RequestStatus.PENDING,
        ))
        db.commit()

        real_find = request_service._find_request
        lookups = []

        def find_missing_first(session, user_id, week_start):
            lookups.append(user_id)
            if len(lookups) == 1:
                return None
            return real_find(session, user_id, week_start)

        monkeypatch.setattr(request_service, "_find_request", find_missing_first)

        response = submit(client, auth(employee), week, minimum_payload)
        assert response.status_code == 200
        assert len(lookups) == 2

        db.expire_all()
        rows = db.query(WeekRequests).all()
        assert len(rows) == 1
        assert response.json()["id"] == rows[0].id
        assert len(rows[0].selections) == 3
        assert rows[0].status == RequestStatus.PENDING

    def test_locked_after_review(self, client, auth, employee, manager, week, minimum_payload):
        request_id = submit(client, auth(employee), week, minimum_payload).json()["id"]
        client.patch(f"/api/v1/week-requests/{request_id}/approve", json={}, headers=auth(manager))

        response = submit(client, auth(employee), week, minimum_payload)
        assert response.status_code == 409
        assert response.json()["code"] == "request_locked"

    def test_closed_after_deadline(self, client, auth, employee, manager, week, minimum_payload):
        response = client.put(
            f"/api/v1/deadlines/{week}",
            json={"deadline": "2025-01-14T12:00:00+02:00"},
            headers=auth(manager),
        )
        assert response.status_code == 200
        assert response.json()["is_open"] is False

        response = submit(client, auth(employee), week, minimum_payload)
        assert response.status_code == 409
        assert response.json()["code"] == "submission_closed"

        # managers are not bound by the deadline
        assert submit(client, auth(manager), week, minimum_payload).status_code == 200

    def test_requires_token(self, client, week, minimum_payload):
        response = client.put(f"/api/v1/week-requests/{week}", json=minimum_payload)
        assert response.status_code == 401
        assert response.json()["code"] == "not_authenticated"


class TestReview:

    def test_approve(self, client, auth, employee, shift_manager, week, minimum_payload):
        request_id = submit(client, auth(employee), week, minimum_payload).json()["id"]
        response = client.patch(
            f"/api/v1/week-requests/{request_id}/approve", json={}, headers=auth(shift_manager)
        )
        assert response.status_code == 200
        assert response.json()["status"] == "APPROVED"
        assert response.json()["reviewed_by_user_id"] == shift_manager.id

    def test_reject_requires_note(self, client, auth, employee, manager, week, minimum_payload):
        request_id = submit(client, auth(employee), week, minimum_payload).json()["id"]
        url = f"/api/v1/week-requests/{request_id}/reject"

        response = client.patch(url, json={"manager_note": " "}, headers=auth(manager))
        assert response.status_code == 400
        assert response.json()["code"] == "note_required"

        response = client.patch(url, json={"manager_note": "Need a noon shift"}, headers=auth(manager))
        assert response.status_code == 200
        assert response.json()["status"] == "REJECTED"
        assert response.json()["manager_note"] == "Need a noon shift"

    def test_manager_can_re_review(self, client, auth, employee, manager, week, minimum_payload):
        request_id = submit(client, auth(employee), week, minimum_payload).json()["id"]
        client.patch(f"/api/v1/week-requests/{request_id}/reject", json={"manager_note": "no"}, headers=auth(manager))
        response = client.patch(f"/api/v1/week-requests/{request_id}/approve", json={}, headers=auth(manager))
        assert response.json()["status"] == "APPROVED"

    def test_employee_cannot_review(self, client, auth, employee, other_employee, week, minimum_payload):
        request_id = submit(client, auth(employee), week, minimum_payload).json()["id"]
        response = client.patch(
            f"/api/v1/week-requests/{request_id}/approve", json={}, headers=auth(other_employee)
        )
        assert response.status_code == 403

    def test_stale_version(self, client, auth, employee, manager, week, minimum_payload):
        created = submit(client, auth(employee), week, minimum_payload).json()
        url = f"/api/v1/week-requests/{created['id']}/approve"

        first = client.patch(url, json={"expected_version": created["version"]}, headers=auth(manager))
        assert first.status_code == 200

        second = client.patch(url, json={"expected_version": created["version"]}, headers=auth(manager))
        assert second.status_code == 409
        assert second.json()["code"] == "stale_write"

    def test_invalid_stored_request_needs_force(self, client, db, auth, employee, manager, week):
        request = WeekRequests(
            user_id=employee.id,
            week_start=date(2025, 1, 19),
            selections=[{"day_index": 0, "shift_id": "s1"}],
            status=RequestStatus.PENDING,
        )
        db.add(request)
        db.commit()
        url = f"/api/v1/week-requests/{request.id}/approve"

        response = client.patch(url, json={}, headers=auth(manager))
        assert response.status_code == 422
        assert response.json()["code"] == "approve_invalid_request"
        assert {e["code"] for e in response.json()["errors"]} == {"min_mornings", "min_noons"}

        response = client.patch(url, json={"force": True}, headers=auth(manager))
        assert response.status_code == 200

    def test_unknown_request(self, client, auth, manager):
        response = client.patch("/api/v1/week-requests/999/approve", json={}, headers=auth(manager))
        assert response.status_code == 404
        assert response.json()["code"] == "request_not_found"


class TestRead:

    def test_week_listing_includes_names(self, client, auth, employee, other_employee, shift_manager, week, minimum_payload):
        submit(client, auth(employee), week, minimum_payload)
        submit(client, auth(other_employee), week, minimum_payload)

        response = client.get(f"/api/v1/week-requests/week/{week}", headers=auth(shift_manager))
        assert response.status_code == 200
        assert sorted(r["user_name"] for r in response.json()) == ["Avi", "Maya"]

    def test_week_listing_filters_status(self, client, auth, employee, manager, week, minimum_payload):
        submit(client, auth(employee), week, minimum_payload)
        submit(client, auth(manager), week, minimum_payload)

        response = client.get(
            f"/api/v1/week-requests/week/{week}",
            params={"request_status": "PENDING"},
            headers=auth(manager),
        )
        assert [r["user_id"] for r in response.json()] == [employee.id]

    def test_week_listing_forbidden_for_employee(self, client, auth, employee, week):
        assert client.get(f"/api/v1/week-requests/week/{week}", headers=auth(employee)).status_code == 403

    def test_my_requests(self, client, auth, employee, week, minimum_payload):
        submit(client, auth(employee), week, minimum_payload)
        submit(client, auth(employee), "2025-01-26", minimum_payload)

        response = client.get("/api/v1/week-requests/me", headers=auth(employee))
        assert [r["week_start"] for r in response.json()] == ["2025-01-26", "2025-01-19"]

    def test_cannot_read_someone_elses_request(self, client, auth, employee, other_employee, week, minimum_payload):
        request_id = submit(client, auth(employee), week, minimum_payload).json()["id"]
        response = client.get(f"/api/v1/week-requests/{request_id}", headers=auth(other_employee))
        assert response.status_code == 403

    def test_validation_report(self, client, auth, employee, manager, week, minimum_payload):
        minimum_payload["selections"].append({"day_index": 0, "shift_id": "s1"})
        request_id = submit(client, auth(employee), week, minimum_payload).json()["id"]

        response = client.get(f"/api/v1/week-requests/{request_id}/validation", headers=auth(manager))
        data = response.json()
        assert data["valid"] is True
        assert data["warnings"][0]["code"] == "duplicate_selection"
        assert data["counts"]["morning"] == 3


class TestShiftsEndpoints:

    def test_catalog(self, client):
        response = client.get("/api/v1/shifts")
        assert response.status_code == 200
        assert len(response.json()) == 13

    def test_day_view_depends_on_role(self, client, auth, employee, manager):
        employee_ids = [s["id"] for s in client.get("/api/v1/shifts/day/6", headers=auth(employee)).json()]
        manager_ids = [s["id"] for s in client.get("/api/v1/shifts/day/6", headers=auth(manager)).json()]
        assert employee_ids == ["s13"]
        assert manager_ids == ["s10", "s11", "s12", "s13"]

    def test_validate_dry_run(self, client, auth, employee, minimum_payload):
        minimum_payload["selections"].append({"day_index": 3, "shift_id": "s6"})
        response = client.post("/api/v1/shifts/validate", json=minimum_payload, headers=auth(employee))
        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is False
        assert data["errors"][0]["code"] == "minimum_only_night"
        assert data["counts"]["night"] == 1


class TestStorageFailure:

    def _fail_commits(self, monkeypatch):
        def failing_commit(session):
            raise OperationalError("INSERT INTO week_requests", {}, Exception("database is locked"))
        monkeypatch.setattr(Session, "commit", failing_commit)

    def test_commit_failure_is_503(self, client, auth, employee, week, minimum_payload, monkeypatch):
        self._fail_commits(monkeypatch)
        headers = {**auth(employee), "Accept-Language": "en"}

        response = submit(client, headers, week, minimum_payload)
        assert response.status_code == 503
        body = response.json()
        assert body["code"] == "storage_error"
        assert body["detail"] == MESSAGES["en"]["storage_error"]
        assert body["params"] == {}
        assert "database is locked" not in response.text
        assert "week_requests" not in response.text

    def test_nothing_written(self, client, db, auth, employee, week, minimum_payload, monkeypatch):
        self._fail_commits(monkeypatch)
        submit(client, auth(employee), week, minimum_payload)
        monkeypatch.undo()

        assert db.query(WeekRequests).count() == 0
        assert submit(client, auth(employee), week, minimum_payload).status_code == 200
