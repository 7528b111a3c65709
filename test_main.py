# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false

"""
Ministry Scheduler Service: API Tests
=====================================
Run:  pytest test_main.py -v
Runs against an in-memory SQLite database (see conftest.py).
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from main import app
from ministry_scheduler.core.config import settings
from ministry_scheduler.core.database import init_schema
from ministry_scheduler.core.dependencies import engine

client = TestClient(app)

SUNDAY = "2026-10-18"

ADMIN = {"X-User-Id": "admin", "X-User-Name": "Father Paul", "X-User-Role": "admin"}
ALICE = {"X-User-Id": "alice", "X-User-Name": "Alice Martin", "X-User-Role": "minister"}
BOB = {"X-User-Id": "bob", "X-User-Name": "Bob Dupont", "X-User-Role": "minister"}


# ============================================
# Fixtures
# ============================================
@pytest.fixture(autouse=True)
def clean_database():
    """Empty every table before each test."""
    init_schema(engine)
    with engine.begin() as conn:
        conn.execute(text("DELETE FROM minister_slots"))
        conn.execute(text("DELETE FROM service_times"))
        conn.execute(text("DELETE FROM ministers"))
    yield


# ── Helpers ──────────────────────────────────────────────────────────────
def _create_service(time="09:00", name="Morning Mass", day=SUNDAY, recurring=True, **extra):
    response = client.post("/api/v1/service-times", headers=ADMIN, json={
        "date": day, "time": time, "name": name, "is_recurring": recurring, **extra,
    })
    assert response.status_code == 201, response.text
    return response.json()


def _calendar(headers=ALICE, **params):
    query = {"start": SUNDAY, "today": SUNDAY, "days": 7, **params}
    query = {k: v for k, v in query.items() if v is not None}
    response = client.get("/api/v1/calendar", headers=headers, params=query)
    assert response.status_code == 200, response.text
    return response.json()


def _sunday_slots(service_index=0):
    """Slots of one service on the first Sunday, materializing them if needed."""
    return _calendar()["weeks"][0][0]["services"][service_index]["slots"]


# ============================================
# Health & Metrics
# ============================================
class TestHealth:
    def test_health_ok(self):
        r = client.get("/health")
        assert r.status_code == 200
        data = r.json()
        assert data["status"] == "ok"
        assert data["service"] == settings.SERVICE_NAME
        assert data["version"] == settings.SERVICE_VERSION
        assert "timestamp" in data

    def test_readiness_ok(self):
        r = client.get("/health/ready")
        assert r.status_code == 200
        assert r.json()["database"] == "connected"

    def test_readiness_fails_when_db_down(self):
        with patch(
            "ministry_scheduler.controllers.system_controller.verify_connection",
            side_effect=Exception("boom"),
        ):
            r = client.get("/health/ready")
        assert r.status_code == 503

    def test_metrics_endpoint(self):
        _calendar()
        r = client.get("/metrics")
        assert r.status_code == 200
        assert "ministry_requests_total" in r.text

    def test_request_id_propagated(self):
        r = client.get("/health", headers={"X-Request-ID": "test-req-12345"})
        assert r.headers["X-Request-ID"] == "test-req-12345"

    def test_auto_generated_request_id(self):
        r = client.get("/health")
        assert len(r.headers.get("X-Request-ID", "")) > 0


# ============================================
# Caller identity
# ============================================
class TestAuth:
    def test_missing_user_is_401(self):
        assert client.get("/api/v1/service-times").status_code == 401

    def test_unknown_role_is_403(self):
        r = client.get("/api/v1/service-times", headers={"X-User-Id": "x", "X-User-Role": "sexton"})
        assert r.status_code == 403

    def test_minister_cannot_create_service(self):
        r = client.post("/api/v1/service-times", headers=ALICE, json={
            "date": SUNDAY, "time": "09:00", "name": "Mass", "is_recurring": True,
        })
        assert r.status_code == 403

    def test_minister_cannot_reset(self):
        assert client.post("/api/v1/admin/reset", headers=ALICE, json={}).status_code == 403


# ============================================
# Service times
# ============================================
class TestServiceTimes:
    def test_create(self):
        data = _create_service(time="9:30")
        assert data["time"] == "09:30"
        assert data["positions"] == 2
        assert data["is_recurring"] is True
        assert data["description"] == "Morning Mass - 09:30 - Sunday"
        assert "id" in data

    def test_create_with_positions(self):
        assert _create_service(positions=4)["positions"] == 4

    def test_invalid_time_is_400(self):
        r = client.post("/api/v1/service-times", headers=ADMIN, json={
            "date": SUNDAY, "time": "25:00", "name": "Mass",
        })
        assert r.status_code == 400
        body = r.json()
        assert body["error"] == "validation_error"
        assert "request_id" in body

    def test_blank_name_is_400(self):
        r = client.post("/api/v1/service-times", headers=ADMIN, json={
            "date": SUNDAY, "time": "09:00", "name": "   ",
        })
        assert r.status_code == 400

    def test_missing_fields_is_422(self):
        r = client.post("/api/v1/service-times", headers=ADMIN, json={"time": "09:00"})
        assert r.status_code == 422

    def test_list(self):
        _create_service(time="18:00", name="Evening Mass")
        _create_service()
        r = client.get("/api/v1/service-times", headers=ALICE)
        assert r.status_code == 200
        assert [s["name"] for s in r.json()] == ["Morning Mass", "Evening Mass"]

    def test_list_occurring_on(self):
        _create_service()
        _create_service(day="2026-10-20", name="Vigil", recurring=False)
        r = client.get("/api/v1/service-times", headers=ALICE, params={"on": "2026-11-08"})
        assert [s["name"] for s in r.json()] == ["Morning Mass"]
        r = client.get("/api/v1/service-times", headers=ALICE, params={"on": "2026-10-20"})
        assert [s["name"] for s in r.json()] == ["Vigil"]

    def test_delete(self):
        service = _create_service()
        _sunday_slots()
        r = client.delete(f"/api/v1/service-times/{service['id']}", headers=ADMIN)
        assert r.status_code == 200
        assert r.json() == {"status": "deleted", "service_id": service["id"]}
        assert _calendar()["weeks"][0][0]["services"] == []

    def test_delete_unknown_is_404(self):
        r = client.delete("/api/v1/service-times/nope", headers=ADMIN)
        assert r.status_code == 404
        body = r.json()
        assert body["error"] == "not_found"
        assert body["request_id"] == r.headers["X-Request-ID"]


# ============================================
# Calendar view
# ============================================
class TestCalendar:
    def test_three_weeks_of_sundays(self):
        _create_service()
        _create_service(time="18:00", name="Evening Mass")
        data = _calendar(days=21)
        assert data["days"] == 21
        assert len(data["weeks"]) == 3
        first = data["weeks"][0][0]
        assert first["date"] == SUNDAY
        assert first["is_today"] is True
        assert [s["service"]["name"] for s in first["services"]] == ["Morning Mass", "Evening Mass"]
        for week in data["weeks"]:
            sunday, *rest = week
            assert all(len(s["slots"]) == 2 for s in sunday["services"])
            assert all(day["services"] == [] for day in rest)

    def test_materialization_is_stable(self):
        _create_service()
        first = [s["id"] for s in _sunday_slots()]
        second = [s["id"] for s in _sunday_slots()]
        assert first == second

    def test_default_range(self):
        data = _calendar(days=None)
        assert data["days"] == settings.DEFAULT_CALENDAR_DAYS

    def test_too_many_days_is_400(self):
        r = client.get("/api/v1/calendar", headers=ALICE, params={"start": SUNDAY, "days": 1000})
        assert r.status_code == 400

    def test_zero_days_is_422(self):
        r = client.get("/api/v1/calendar", headers=ALICE, params={"start": SUNDAY, "days": 0})
        assert r.status_code == 422

    def test_mine_filter(self):
        _create_service()
        slot = _sunday_slots()[1]
        client.post(f"/api/v1/slots/{slot['id']}/assign", headers=ALICE)
        mine = _calendar(mine=True, hide_empty=True)
        sunday = mine["weeks"][0][0]
        assert [s["minister_id"] for s in sunday["services"][0]["slots"]] == ["alice"]
        theirs = _calendar(headers=BOB, mine=True, hide_empty=True)
        assert theirs["weeks"][0][0]["services"] == []


# ============================================
# Slot sign-up & release
# ============================================
class TestAssign:
    def test_self_signup(self):
        _create_service()
        slot = _sunday_slots()[0]
        r = client.post(f"/api/v1/slots/{slot['id']}/assign", headers=ALICE)
        assert r.status_code == 200
        assert r.json()["minister_id"] == "alice"
        assert r.json()["minister_name"] == "Alice Martin"
        assert _sunday_slots()[0]["minister_name"] == "Alice Martin"

    def test_second_position_same_service_is_409(self):
        _create_service()
        first, second = _sunday_slots()
        client.post(f"/api/v1/slots/{first['id']}/assign", headers=ALICE)
        r = client.post(f"/api/v1/slots/{second['id']}/assign", headers=ALICE)
        assert r.status_code == 409
        assert r.json()["error"] == "conflict"
        assert _sunday_slots()[1]["minister_id"] is None

    def test_other_service_same_day_ok(self):
        _create_service()
        _create_service(time="18:00", name="Evening Mass")
        client.post(f"/api/v1/slots/{_sunday_slots(0)[0]['id']}/assign", headers=ALICE)
        r = client.post(f"/api/v1/slots/{_sunday_slots(1)[0]['id']}/assign", headers=ALICE)
        assert r.status_code == 200

    def test_taken_slot_is_403_for_minister(self):
        _create_service()
        slot = _sunday_slots()[0]
        client.post(f"/api/v1/slots/{slot['id']}/assign", headers=ALICE)
        r = client.post(f"/api/v1/slots/{slot['id']}/assign", headers=BOB)
        assert r.status_code == 403
        assert "Alice Martin" in r.json()["detail"]

    def test_minister_cannot_sign_up_someone_else(self):
        _create_service()
        slot = _sunday_slots()[0]
        r = client.post(f"/api/v1/slots/{slot['id']}/assign", headers=BOB, json={"minister_id": "alice"})
        assert r.status_code == 403

    def test_admin_assigns_roster_member(self):
        client.post("/api/v1/ministers", headers=ADMIN, json={"name": "Carol Chen", "id": "carol"})
        _create_service()
        slot = _sunday_slots()[0]
        r = client.post(f"/api/v1/slots/{slot['id']}/assign", headers=ADMIN, json={"minister_id": "carol"})
        assert r.status_code == 200
        assert r.json()["minister_name"] == "Carol Chen"

    def test_admin_assigns_unknown_minister_is_404(self):
        _create_service()
        slot = _sunday_slots()[0]
        r = client.post(f"/api/v1/slots/{slot['id']}/assign", headers=ADMIN, json={"minister_id": "ghost"})
        assert r.status_code == 404

    def test_unknown_slot_is_404(self):
        for action in ("assign", "release"):
            r = client.post(f"/api/v1/slots/nope/{action}", headers=ALICE)
            assert r.status_code == 404
            assert r.json()["error"] == "not_found"
            assert "request_id" in r.json()


class TestRelease:
    def test_release_own_slot_then_reassign(self):
        _create_service()
        slot = _sunday_slots()[0]
        client.post(f"/api/v1/slots/{slot['id']}/assign", headers=ALICE)
        r = client.post(f"/api/v1/slots/{slot['id']}/release", headers=ALICE)
        assert r.status_code == 200
        assert r.json()["minister_id"] is None
        r = client.post(f"/api/v1/slots/{slot['id']}/assign", headers=BOB)
        assert r.json()["minister_id"] == "bob"

    def test_cannot_release_someone_elses_slot(self):
        _create_service()
        slot = _sunday_slots()[0]
        client.post(f"/api/v1/slots/{slot['id']}/assign", headers=ALICE)
        r = client.post(f"/api/v1/slots/{slot['id']}/release", headers=BOB)
        assert r.status_code == 403
        assert _sunday_slots()[0]["minister_id"] == "alice"

    def test_admin_releases_any_slot(self):
        _create_service()
        slot = _sunday_slots()[0]
        client.post(f"/api/v1/slots/{slot['id']}/assign", headers=ALICE)
        r = client.post(f"/api/v1/slots/{slot['id']}/release", headers=ADMIN)
        assert r.status_code == 200
        assert r.json()["minister_id"] is None

    def test_release_open_slot_is_noop(self):
        _create_service()
        slot = _sunday_slots()[0]
        r = client.post(f"/api/v1/slots/{slot['id']}/release", headers=BOB)
        assert r.status_code == 200
        assert r.json()["minister_id"] is None


# ============================================
# Week copy
# ============================================
class TestCopyWeek:
    def test_copy_forward_from_any_day_of_week(self):
        _create_service()
        _create_service(day="2026-10-20", name="Vigil", recurring=False)
        r = client.post("/api/v1/service-times/copy-week", headers=ADMIN, json={
            "source_week_start": "2026-10-21",
        })
        assert r.status_code == 200
        data = r.json()
        assert data["created_count"] == 1
        assert data["created"][0]["date"] == "2026-10-27"
        assert data["created"][0]["name"] == "Vigil"

    def test_copy_twice_creates_nothing_more(self):
        _create_service(day="2026-10-20", name="Vigil", recurring=False)
        body = {"source_week_start": SUNDAY, "target_week_start": "2026-11-01"}
        first = client.post("/api/v1/service-times/copy-week", headers=ADMIN, json=body).json()
        second = client.post("/api/v1/service-times/copy-week", headers=ADMIN, json=body).json()
        assert first["created"][0]["date"] == "2026-11-03"
        assert second["created_count"] == 0

    def test_explicit_dates(self):
        _create_service(day="2026-10-20", name="Vigil", recurring=False)
        source = [f"2026-10-{d}" for d in range(18, 25)]
        target = [f"2026-12-{d:02d}" for d in range(6, 13)]
        r = client.post("/api/v1/service-times/copy-week", headers=ADMIN, json={
            "source_dates": source, "target_dates": target,
        })
        assert r.json()["created"][0]["date"] == "2026-12-08"

    def test_missing_source_is_422(self):
        r = client.post("/api/v1/service-times/copy-week", headers=ADMIN, json={})
        assert r.status_code == 422

    def test_short_date_list_is_422(self):
        r = client.post("/api/v1/service-times/copy-week", headers=ADMIN, json={
            "source_dates": [SUNDAY], "target_dates": ["2026-10-25"],
        })
        assert r.status_code == 422

    def test_half_explicit_dates_are_422(self):
        week = [f"2026-10-{d}" for d in range(18, 25)]
        r = client.post("/api/v1/service-times/copy-week", headers=ADMIN, json={
            "source_week_start": SUNDAY, "source_dates": week,
        })
        assert r.status_code == 422

    def test_mixed_forms_are_422(self):
        source = [f"2026-10-{d}" for d in range(18, 25)]
        target = [f"2026-10-{d}" for d in range(25, 32)]
        r = client.post("/api/v1/service-times/copy-week", headers=ADMIN, json={
            "source_week_start": SUNDAY, "source_dates": source, "target_dates": target,
        })
        assert r.status_code == 422

    def test_minister_cannot_copy(self):
        r = client.post("/api/v1/service-times/copy-week", headers=ALICE, json={"source_week_start": SUNDAY})
        assert r.status_code == 403


# ============================================
# Roster & admin
# ============================================
class TestMinisters:
    def test_add_and_list(self):
        r = client.post("/api/v1/ministers", headers=ADMIN, json={"name": "Maria Rossi", "email": "maria@parish.org"})
        assert r.status_code == 201
        assert r.json()["name"] == "Maria Rossi"
        listed = client.get("/api/v1/ministers", headers=ALICE).json()
        assert [m["name"] for m in listed] == ["Maria Rossi"]

    def test_duplicate_id_is_409(self):
        client.post("/api/v1/ministers", headers=ADMIN, json={"name": "Maria", "id": "maria"})
        r = client.post("/api/v1/ministers", headers=ADMIN, json={"name": "Maria", "id": "maria"})
        assert r.status_code == 409

    def test_blank_name_is_400(self):
        r = client.post("/api/v1/ministers", headers=ADMIN, json={"name": "  "})
        assert r.status_code == 400

    def test_minister_cannot_add(self):
        r = client.post("/api/v1/ministers", headers=ALICE, json={"name": "Maria"})
        assert r.status_code == 403

    def test_remove_reopens_slots(self):
        _create_service()
        slot = _sunday_slots()[0]
        client.post(f"/api/v1/slots/{slot['id']}/assign", headers=ALICE)
        r = client.delete("/api/v1/ministers/alice", headers=ADMIN)
        assert r.status_code == 200
        assert r.json() == {"status": "deleted", "minister_id": "alice"}
        assert _sunday_slots()[0]["minister_id"] is None

    def test_remove_unknown_is_404(self):
        assert client.delete("/api/v1/ministers/ghost", headers=ADMIN).status_code == 404


class TestReset:
    def test_reset_slots_keeps_services(self):
        _create_service()
        _sunday_slots()
        r = client.post("/api/v1/admin/reset", headers=ADMIN, json={})
        assert r.status_code == 200
        assert r.json() == {"slots_deleted": 2, "service_times_deleted": 0}
        assert len(client.get("/api/v1/service-times", headers=ADMIN).json()) == 1

    def test_reset_everything(self):
        _create_service()
        _sunday_slots()
        r = client.post("/api/v1/admin/reset", headers=ADMIN, json={"service_times": True})
        assert r.json() == {"slots_deleted": 2, "service_times_deleted": 1}
        assert client.get("/api/v1/service-times", headers=ADMIN).json() == []
