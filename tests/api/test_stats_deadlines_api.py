from datetime import date, datetime, timezone

from shiftboard.core.config import settings
from shiftboard.db.models.week_requests import WeekRequests
from shiftboard.services.deadlines import build_submission_window, submission_status
from shiftboard.services.rules.types import RequestStatus


def add_request(db, user, week_start, shift_ids, status=RequestStatus.APPROVED):
    db.add(WeekRequests(
        user_id=user.id,
        week_start=week_start,
        selections=[{"day_index": i, "shift_id": shift_id} for i, shift_id in enumerate(shift_ids)],
        status=status,
    ))
    db.commit()


class TestStats:

    def test_busiest_first(self, client, db, auth, manager, employee, other_employee):
        add_request(db, employee, date(2025, 1, 19), ["s1", "s2", "s4"])
        add_request(db, other_employee, date(2025, 1, 19), ["s1", "s2", "s4", "s6"])
        add_request(db, other_employee, date(2025, 1, 26), ["s1"], status=RequestStatus.PENDING)
        # before the window
        add_request(db, employee, date(2024, 12, 29), ["s1", "s2", "s4", "s6", "s1"])

        response = client.get("/api/v1/stats", params={"today": "2025-02-01"}, headers=auth(manager))
        assert response.status_code == 200
        body = response.json()
        assert body["since"] == "2025-01-01"
        assert [(u["user_name"], u["total"]) for u in body["users"]] == [("Maya", 4), ("Avi", 3)]
        assert body["users"][0]["counts"]["morning"] == 2
        assert body["users"][0]["counts"]["night"] == 1

    def test_longer_window(self, client, db, auth, shift_manager, employee):
        add_request(db, employee, date(2024, 12, 29), ["s1", "s2"])
        response = client.get(
            "/api/v1/stats", params={"today": "2025-02-01", "months": 2}, headers=auth(shift_manager)
        )
        assert [u["total"] for u in response.json()["users"]] == [2]

    def test_employee_forbidden(self, client, auth, employee):
        assert client.get("/api/v1/stats", headers=auth(employee)).status_code == 403

    def test_months_bounds(self, client, auth, manager):
        assert client.get("/api/v1/stats", params={"months": 0}, headers=auth(manager)).status_code == 422


class TestDeadlines:

    def test_open_without_deadline(self, client, auth, employee, week):
        response = client.get(f"/api/v1/deadlines/{week}", headers=auth(employee))
        assert response.status_code == 200
        body = response.json()
        assert body["deadline"] is None
        assert body["is_open"] is True

    def test_manager_sets_deadline(self, client, auth, manager, employee, week):
        response = client.put(
            f"/api/v1/deadlines/{week}", json={"deadline": "2025-01-17T12:00:00+02:00"}, headers=auth(manager)
        )
        assert response.status_code == 200
        assert response.json()["deadline"] is not None
        assert response.json()["is_open"] is False

        assert client.get(f"/api/v1/deadlines/{week}", headers=auth(employee)).json()["is_open"] is False

    def test_utc_deadline_keeps_its_instant(self, client, db, auth, manager, week):
        response = client.put(
            f"/api/v1/deadlines/{week}", json={"deadline": "2025-01-14T10:00:00+00:00"}, headers=auth(manager)
        )
        stored = datetime.fromisoformat(response.json()["deadline"])
        assert stored == datetime(2025, 1, 14, 10, 0, tzinfo=timezone.utc)

        window = build_submission_window(db, settings)
        before = datetime(2025, 1, 14, 9, 59, tzinfo=timezone.utc)
        after = datetime(2025, 1, 14, 10, 1, tzinfo=timezone.utc)
        assert submission_status(window, date(2025, 1, 19), before)[1] is True
        assert submission_status(window, date(2025, 1, 19), after)[1] is False

    def test_closed_week_rejects_employee_submission(self, client, auth, manager, employee, week, minimum_payload):
        client.put(
            f"/api/v1/deadlines/{week}", json={"deadline": "2025-01-17T12:00:00+02:00"}, headers=auth(manager)
        )
        response = client.put(f"/api/v1/week-requests/{week}", json=minimum_payload, headers=auth(employee))
        assert response.status_code == 409
        assert response.json()["code"] == "submission_closed"

    def test_shift_manager_cannot_set(self, client, auth, shift_manager, week):
        response = client.put(
            f"/api/v1/deadlines/{week}", json={"deadline": "2025-01-17T12:00:00"}, headers=auth(shift_manager)
        )
        assert response.status_code == 403

    def test_week_must_start_on_sunday(self, client, auth, employee):
        assert client.get("/api/v1/deadlines/2025-01-20", headers=auth(employee)).status_code == 400


def test_health(client):
    assert client.get("/health").status_code == 200
