from __future__ import annotations

from datetime import datetime

import pytest

from outlet_attendance.attendance.events import AttendanceCreated
from outlet_attendance.common import datetime_utils
from outlet_attendance.container import build_service_container
from outlet_attendance.main import create_app


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock(monkeypatch) -> Clock:
    c = Clock(datetime(2024, 3, 1, 9, 20))
    monkeypatch.setattr(datetime_utils, "now_local", c)
    return c


@pytest.fixture
def container(attendance_repo, employees, schedules):
    return build_service_container(attendance_repo=attendance_repo, employees_repo=employees, schedules_repo=schedules)


@pytest.fixture
def client(monkeypatch, container, clock):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container)
    return app.test_client()


def checkin(client, employee_id=7, outlet_id=3, **extra):
    body = {"employee_id": employee_id, "outlet_id": outlet_id, "image_proof": "uploads/in.jpg", **extra}
    return client.post("/api/attendance/checkin", json=body)


def test_checkin_created(client):
    resp = checkin(client, late_notes="traffic")

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["status"] == "success"
    assert body["message"] == "Check-in successful"
    assert body["data"]["lateness"] == 20
    assert body["data"]["status"] == "LATE"
    assert body["data"]["checkin_time"] == "2024-03-01T09:20:00"
    assert body["data"]["late_approval_status"] == "PENDING"


def test_request_time_drops_microseconds(client, clock, attendance_repo):
    clock.now = datetime(2024, 3, 1, 9, 20, 15, 750000)

    resp = checkin(client)

    assert resp.get_json()["data"]["checkin_time"] == "2024-03-01T09:20:15"
    assert attendance_repo.saved[0].checkin_details.checkin_time.value.microsecond == 0


def test_events_reach_container_bus(client, container):
    seen = []
    container.event_bus.subscribe(AttendanceCreated, seen.append)
    checkin(client)
    assert len(seen) == 1


def test_duplicate_checkin_conflict(client):
    checkin(client)
    resp = checkin(client)

    assert resp.status_code == 409
    body = resp.get_json()
    assert body == {
        "status": "error",
        "code": "ATTENDANCE_ALREADY_EXISTS",
        "message": "Attendance already exists for employee 7 on 2024-03-01",
        "details": {"employee_id": 7, "date": "2024-03-01"},
    }


@pytest.mark.parametrize(
    "kwargs, status, code",
    [
        ({"employee_id": 500}, 404, "EMPLOYEE_NOT_FOUND"),
        ({"outlet_id": 4}, 400, "EMPLOYEE_NOT_ASSIGNED"),
        ({"employee_id": "abc"}, 400, "VALIDATION_ERROR"),
        ({"image_proof": "  "}, 400, "VALIDATION_ERROR"),
    ],
)
def test_checkin_errors(client, kwargs, status, code):
    resp = checkin(client, **kwargs)
    assert resp.status_code == status
    assert resp.get_json()["code"] == code


def test_checkin_without_schedule_is_not_found(client, clock, employees):
    # Saturday
    clock.now = datetime(2024, 3, 2, 9, 0)
    employees.add(7, "Ana", day=clock.now.date())

    resp = checkin(client)
    assert resp.status_code == 404
    assert resp.get_json()["code"] == "NO_SCHEDULE_FOUND"


def test_body_must_be_json_object(client):
    resp = client.post("/api/attendance/checkin", data="nope", content_type="text/plain")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Request body must be a JSON object"


def test_checkout_flow(client, clock):
    checkin(client)
    clock.now = datetime(2024, 3, 1, 17, 50)

    resp = client.post("/api/attendance/checkout", json={"employee_id": 7, "image_proof": "out.jpg"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["working_hours"] == 510

    again = client.post("/api/attendance/checkout", json={"employee_id": 7, "image_proof": "out.jpg"})
    assert again.status_code == 409
    assert again.get_json()["code"] == "ALREADY_CHECKED_OUT"


def test_checkout_without_checkin(client):
    resp = client.post("/api/attendance/checkout", json={"employee_id": 7, "image_proof": "out.jpg"})
    assert resp.status_code == 404
    assert resp.get_json()["code"] == "NO_CHECKIN_RECORD"


def test_today_and_details(client):
    missing = client.get("/api/attendance/today/7")
    assert missing.status_code == 404

    checkin(client)
    today = client.get("/api/attendance/today/7").get_json()
    assert today["data"]["id"] == 1

    details = client.get("/api/attendance/1")
    assert details.status_code == 200
    assert details.get_json()["data"]["employee_id"] == 7

    assert client.get("/api/attendance/2").status_code == 404


def test_late_decisions(client):
    checkin(client)

    approved = client.patch("/api/attendance/1/approve-late", json={"approver_id": 99})
    assert approved.status_code == 200
    assert approved.get_json()["data"]["late_approval_status"] == "APPROVED"
    assert approved.get_json()["data"]["status"] == "PRESENT"

    flip = client.patch("/api/attendance/1/reject-late", json={"approver_id": 99})
    assert flip.status_code == 400
    assert flip.get_json()["code"] == "INVALID_LATE_APPROVAL"


def test_remove_then_details_not_found(client):
    checkin(client)

    resp = client.delete("/api/attendance/1")
    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "ABSENT"
    assert client.get("/api/attendance/1").status_code == 404


def test_outlet_attendances_pagination(client, employees):
    employees.add(9, "Cy")
    for employee_id in (7, 8, 9):
        checkin(client, employee_id=employee_id)

    resp = client.get("/api/outlets/3/attendances?start_date=2024-03-01&end_date=2024-03-01&page=2&limit=2")
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["pagination"] == {"total": 3, "page": 2, "limit": 2, "total_pages": 2}
    assert len(body["data"]) == 1
    assert body["data"][0]["lateness"] == "20 minutes"


def test_outlet_attendances_bad_paging(client):
    assert client.get("/api/outlets/3/attendances?limit=500").status_code == 400
    assert client.get("/api/outlets/3/attendances?page=x").status_code == 400
    assert client.get("/api/outlets/3/attendances?start_date=03/01/2024").status_code == 400


def test_roster_and_history(client):
    checkin(client)

    roster = client.get("/api/outlets/3/roster?date=2024-03-01").get_json()["data"]
    assert [(r["employee_id"], r["status"]) for r in roster] == [(7, "LATE"), (8, "ABSENT")]

    history = client.get("/api/employees/7/attendances").get_json()["data"]
    assert [h["id"] for h in history] == [1]


def test_scheduled_employee_today(client):
    assert client.get("/api/users/42/attendance/today").get_json()["data"] is None
    checkin(client)
    assert client.get("/api/users/42/attendance/today").get_json()["data"]["employee_id"] == 7

    resp = client.get("/api/users/1/attendance/today")
    assert resp.status_code == 404
    assert resp.get_json()["code"] == "EMPLOYEE_NOT_FOUND"


def test_unexpected_errors_are_hidden(client, attendance_repo, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("db password is hunter2")

    monkeypatch.setattr(attendance_repo, "find_by_id", explode)

    resp = client.get("/api/attendance/1")
    assert resp.status_code == 500
    assert resp.get_json() == {
        "status": "error",
        "code": "INTERNAL_ERROR",
        "message": "Internal server error",
        "details": {},
    }
