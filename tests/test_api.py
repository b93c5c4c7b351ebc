"""Tests for the FastAPI API endpoints."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from flightlog.api.app import create_app
from flightlog.api.deps import get_now, get_settings
from flightlog.config import ReportSettings
from flightlog.db.deps import get_db
from flightlog.db.models import Base
from flightlog.errors import DataUnavailable
from flightlog.storage.roster import add_entity

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)

FLIGHT = {
    "date": "2024-03-15",
    "student": "Alice",
    "instructor": "Bob",
    "aircraft": "G-ABCD",
    "exercise": "Circuits",
    "flight_type": "dual",
    "takeoff_time": "09:00",
    "landing_time": "10:30",
    "landing_type": "day",
    "landing_count": 2,
}


@pytest.fixture
def app_db():
    """In-memory SQLite engine + session factory for the test app."""
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, _connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    TestSession = sessionmaker(bind=engine)
    yield TestSession
    engine.dispose()


@pytest.fixture
def app(app_db, monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")  # skip lifespan init_db
    monkeypatch.delenv("FLIGHTLOG_TIMEZONE", raising=False)

    app = create_app()

    # Override the DB dependency to use our test session
    def _override_get_db():
        session = app_db()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_settings] = lambda: ReportSettings()
    app.dependency_overrides[get_now] = lambda: NOW
    return app


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def aircraft_id(app_db):
    session = app_db()
    entity = add_entity(session, "aircraft", "G-ABCD")
    session.commit()
    session.close()
    return entity.id


# --- Health ---


class TestHealth:
    def test_health_endpoint(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


# --- Flights ---


class TestFlightsAPI:
    def test_list_flights_empty(self, client):
        resp = client.get("/api/flights")
        assert resp.status_code == 200
        assert resp.json() == []

    def test_create_flight(self, client):
        resp = client.post("/api/flights", json=FLIGHT)
        assert resp.status_code == 201
        data = resp.json()
        assert data["id"] is not None
        assert data["duration"] == 90
        assert data["flight_type"] == "dual"
        assert data["landing_count"] == 2

    def test_create_then_get(self, client):
        flight_id = client.post("/api/flights", json=FLIGHT).json()["id"]
        resp = client.get(f"/api/flights/{flight_id}")
        assert resp.status_code == 200
        assert resp.json()["student"] == "Alice"

    def test_get_missing(self, client):
        assert client.get("/api/flights/999").status_code == 404

    def test_create_with_roster_id_uses_roster_name(self, client, aircraft_id):
        resp = client.post(
            "/api/flights", json={**FLIGHT, "aircraft": "", "aircraft_id": aircraft_id}
        )
        assert resp.status_code == 201
        assert resp.json()["aircraft"] == "G-ABCD"
        assert resp.json()["aircraft_id"] == aircraft_id

    def test_create_with_unknown_roster_id(self, client):
        resp = client.post("/api/flights", json={**FLIGHT, "aircraft_id": 999})
        assert resp.status_code == 422

    def test_create_by_name_links_roster_id(self, client, aircraft_id):
        resp = client.post("/api/flights", json=FLIGHT)
        assert resp.status_code == 201
        assert resp.json()["aircraft"] == "G-ABCD"
        assert resp.json()["aircraft_id"] == aircraft_id

    def test_create_by_shared_name_stays_unlinked(self, client):
        client.post("/api/roster/aircraft", json={"name": "C172"})
        client.post("/api/roster/aircraft", json={"name": "C172"})
        resp = client.post("/api/flights", json={**FLIGHT, "aircraft": "C172"})
        assert resp.status_code == 201
        assert resp.json()["aircraft_id"] is None

    def test_create_landing_before_takeoff(self, client):
        resp = client.post(
            "/api/flights", json={**FLIGHT, "takeoff_time": "10:00", "landing_time": "09:00"}
        )
        assert resp.status_code == 422
        assert resp.json()["code"] == "INVALID_DURATION"

    def test_create_bad_time(self, client):
        resp = client.post("/api/flights", json={**FLIGHT, "takeoff_time": "25:00"})
        assert resp.status_code == 422
        assert resp.json()["code"] == "INVALID_TIME_FORMAT"

    def test_create_bad_date(self, client):
        resp = client.post("/api/flights", json={**FLIGHT, "date": "2024-02-30"})
        assert resp.status_code == 422
        assert resp.json()["code"] == "INVALID_DATE"

    def test_create_missing_student(self, client):
        resp = client.post("/api/flights", json={**FLIGHT, "student": " "})
        assert resp.status_code == 422
        assert "student is required" in resp.json()["detail"]

    def test_create_zero_landings(self, client):
        resp = client.post("/api/flights", json={**FLIGHT, "landing_count": 0})
        assert resp.status_code == 422

    def test_filter(self, client):
        client.post("/api/flights", json=FLIGHT)
        client.post("/api/flights", json={**FLIGHT, "student": "Carol"})
        client.post("/api/flights", json={**FLIGHT, "date": "2024-04-01"})

        resp = client.get("/api/flights", params={"month": "2024-03", "student": "Alice"})
        assert resp.status_code == 200
        assert len(resp.json()) == 1

    def test_filter_invalid_month(self, client):
        resp = client.get("/api/flights", params={"month": "March"})
        assert resp.status_code == 422


# --- Export ---


class TestExportAPI:
    def test_export_empty(self, client):
        resp = client.get("/api/flights/export.csv")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "text/csv; charset=utf-8"
        assert resp.headers["content-disposition"] == (
            'attachment; filename="flight-log-2024-03-15.csv"'
        )
        assert resp.content.startswith(b"\xef\xbb\xbfDate,Student,")
        assert b"\r\n" not in resp.content

    def test_export_filtered(self, client):
        client.post("/api/flights", json={**FLIGHT, "student": "Jane Doe, Jr."})
        client.post("/api/flights", json={**FLIGHT, "aircraft": "G-WXYZ"})

        resp = client.get("/api/flights/export.csv", params={"aircraft": "G-ABCD"})
        lines = resp.content.decode("utf-8-sig").split("\r\n")
        assert len(lines) == 2
        assert lines[1].startswith('2024-03-15,"Jane Doe, Jr.",Bob,G-ABCD,Dual,')


# --- Dashboard ---


class TestDashboardAPI:
    def test_empty_dashboard(self, client):
        resp = client.get("/api/dashboard")
        assert resp.status_code == 200
        data = resp.json()
        assert data["daily_flight_count"] == 0
        assert data["daily_display"] == "0m"
        assert data["utilization"] == []
        assert data["max_utilization_minutes"] is None

    def test_dashboard_totals(self, client, aircraft_id):
        client.post(f"/api/aircraft/{aircraft_id}/hours", json={
            "date": "2024-03-01", "day_hours": 2,
        })
        client.post("/api/flights", json={**FLIGHT, "aircraft_id": aircraft_id})
        client.post("/api/flights", json={**FLIGHT, "date": "2024-03-02", "aircraft": "G-WXYZ"})

        data = client.get("/api/dashboard").json()
        assert data["daily_flight_count"] == 1
        assert data["daily_minutes"] == 90
        assert data["monthly_flight_count"] == 2
        assert data["monthly_display"] == "3h"
        assert [f["date"] for f in data["recent_flights"]] == sorted(
            (f["date"] for f in data["recent_flights"]), reverse=True
        )
        assert [(u["aircraft_name"], u["total_minutes"], u["percent"]) for u in data["utilization"]] == [
            ("G-ABCD", 210, 100.0),
            ("G-WXYZ", 90, pytest.approx(90 / 210 * 100)),
        ]
        assert data["utilization"][0]["total_display"] == "3h 30m"
        assert data["max_utilization_minutes"] == 210

    def test_flight_logged_by_name_shares_roster_row(self, client):
        client.post("/api/roster/aircraft", json={"name": "C172"})
        client.post("/api/flights", json={**FLIGHT, "aircraft": "C172"})

        data = client.get("/api/dashboard").json()
        assert [(u["aircraft_name"], u["total_minutes"], u["percent"]) for u in data["utilization"]] == [
            ("C172", 90, 100.0),
        ]

    def test_flight_logged_before_roster_entry_shares_row(self, client):
        client.post("/api/flights", json={**FLIGHT, "aircraft": "C172"})
        aircraft = client.post("/api/roster/aircraft", json={"name": "C172"}).json()
        client.post(f"/api/aircraft/{aircraft['id']}/hours", json={
            "date": "2024-03-01", "day_hours": 1,
        })

        utilization = client.get("/api/dashboard").json()["utilization"]
        assert len(utilization) == 1
        assert utilization[0]["aircraft_id"] == aircraft["id"]
        assert utilization[0]["total_minutes"] == 150

    def test_data_unavailable(self, client, monkeypatch):
        import flightlog.api.dashboard as dashboard_mod

        def _unavailable(*args, **kwargs):
            raise DataUnavailable("flights", reason="OperationalError")

        monkeypatch.setattr(dashboard_mod, "list_flights", _unavailable)
        resp = client.get("/api/dashboard")
        assert resp.status_code == 503
        data = resp.json()
        assert data["code"] == "DATA_UNAVAILABLE"
        assert data["details"]["source"] == "flights"


# --- Roster ---


class TestRosterAPI:
    def test_crud(self, client):
        resp = client.post("/api/roster/students", json={"name": " Alice "})
        assert resp.status_code == 201
        entity = resp.json()
        assert entity["name"] == "Alice"
        assert entity["kind"] == "students"

        resp = client.put(f"/api/roster/students/{entity['id']}", json={"name": "Alicia"})
        assert resp.status_code == 200
        assert resp.json()["name"] == "Alicia"

        assert [e["name"] for e in client.get("/api/roster/students").json()] == ["Alicia"]

        assert client.delete(f"/api/roster/students/{entity['id']}").status_code == 204
        assert client.get("/api/roster/students").json() == []

    def test_unknown_kind(self, client):
        assert client.get("/api/roster/pilots").status_code == 422

    def test_empty_name(self, client):
        assert client.post("/api/roster/aircraft", json={"name": ""}).status_code == 422

    def test_missing_entity(self, client):
        assert client.put("/api/roster/aircraft/99", json={"name": "X"}).status_code == 404
        assert client.delete("/api/roster/aircraft/99").status_code == 404


# --- Aircraft hours ---


class TestAircraftHoursAPI:
    def test_record_and_read(self, client, aircraft_id):
        resp = client.post(f"/api/aircraft/{aircraft_id}/hours", json={
            "date": "2024-03-01", "day_hours": 2, "night_hours": 1,
        })
        assert resp.status_code == 201
        assert resp.json()["total_hours"] == 3

        data = client.get(f"/api/aircraft/{aircraft_id}/hours").json()
        assert data["total_hours"] == 3
        assert [e["hours"] for e in data["entries"]] == [3]

    def test_zero_hours_rejected(self, client, aircraft_id):
        resp = client.post(f"/api/aircraft/{aircraft_id}/hours", json={"date": "2024-03-01"})
        assert resp.status_code == 422

    def test_bad_date(self, client, aircraft_id):
        resp = client.post(f"/api/aircraft/{aircraft_id}/hours", json={
            "date": "01/03/2024", "day_hours": 1,
        })
        assert resp.status_code == 422
        assert resp.json()["code"] == "INVALID_DATE"

    def test_unknown_aircraft(self, client):
        assert client.get("/api/aircraft/99/hours").status_code == 404
        resp = client.post("/api/aircraft/99/hours", json={"date": "2024-03-01", "day_hours": 1})
        assert resp.status_code == 404


# --- Non-UTC reporting timezone ---


class TestBerlinTimezone:
    """Dates, filters, dashboard buckets and export in Europe/Berlin.

    23:30 UTC on 15 March is already 16 March in Berlin.
    """

    @pytest.fixture
    def berlin_client(self, app):
        app.dependency_overrides[get_settings] = lambda: ReportSettings(timezone="Europe/Berlin")
        app.dependency_overrides[get_now] = lambda: datetime(2024, 3, 15, 23, 30, tzinfo=timezone.utc)
        client = TestClient(app, raise_server_exceptions=False)
        for day in ("2024-02-29", "2024-03-01", "2024-03-16"):
            assert client.post("/api/flights", json={**FLIGHT, "date": day}).status_code == 201
        return client

    def test_month_filter(self, berlin_client):
        flights = berlin_client.get("/api/flights", params={"month": "2024-03"}).json()
        assert len(flights) == 2

    def test_dashboard_buckets(self, berlin_client):
        data = berlin_client.get("/api/dashboard").json()
        assert data["daily_flight_count"] == 1
        assert data["monthly_flight_count"] == 2
        assert data["monthly_minutes"] == 180

    def test_export_dates_and_filename(self, berlin_client):
        resp = berlin_client.get("/api/flights/export.csv", params={"month": "2024-03"})
        assert resp.headers["content-disposition"] == (
            'attachment; filename="flight-log-2024-03-16.csv"'
        )
        lines = resp.content.decode("utf-8-sig").split("\r\n")
        assert [line.split(",")[0] for line in lines[1:]] == ["2024-03-01", "2024-03-16"]
