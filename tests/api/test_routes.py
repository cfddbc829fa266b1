"""
Tests for the lookup API.

Tests cover:
- Check for unknown and reported vehicles
- Report success and validation failures
- History and dangerous listings
- Error mapping to HTTP status codes
- Health endpoint
"""

import pytest
from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from api.dependencies import get_violation_service
from api.main import app
from database.engine import DatabaseConnectionError, configure_engine, dispose_engine
from violation_scoring import PersistenceError
from violation_scoring.config import HARD_BRAKING, ILLEGAL_PARKING, RED_LIGHT_RUNNING


@pytest.fixture
def client(service):
    app.dependency_overrides[get_violation_service] = lambda: service
    # Not entered as a context manager, so the lifespan hook stays idle
    yield TestClient(app)
    app.dependency_overrides.clear()


def report(client, plate, violation_type):
    return client.post("/api/report", json={"plate": plate, "violationType": violation_type})


# =============================================================
# TEST: Check
# =============================================================

class TestCheck:

    def test_unknown_vehicle_is_safe(self, client):
        response = client.get("/api/check/SAFE-001")
        assert response.status_code == 200

        data = response.json()
        assert data["plate"] == "SAFE-001"
        assert data["isSafe"] is True
        assert data["riskScore"] == 0
        assert data["level"] == "safe"
        assert data["message"] == "✅ 安全車輛"
        assert "violationCount" not in data

    def test_reported_vehicle(self, client):
        report(client, "XYZ-5678", RED_LIGHT_RUNNING)
        report(client, "XYZ-5678", HARD_BRAKING)
        report(client, "XYZ-5678", ILLEGAL_PARKING)

        data = client.get("/api/check/XYZ-5678").json()
        assert data["isSafe"] is False
        assert data["riskScore"] == 58
        assert data["violationCount"] == 3
        assert data["level"] == "dangerous"
        assert data["message"]


# =============================================================
# TEST: Report
# =============================================================

class TestReport:

    def test_report_success(self, client):
        response = report(client, "ABC-1234", HARD_BRAKING)
        assert response.status_code == 200

        data = response.json()
        assert data["success"] is True
        assert data["violationId"] > 0
        assert data["scoreUpdated"] is True
        assert data["message"] == "Violation recorded"

    @pytest.mark.parametrize("body,field", [
        ({"violationType": HARD_BRAKING}, "plate"),
        ({"plate": "ABC-1234"}, "violationType"),
        ({"plate": "", "violationType": HARD_BRAKING}, "plate"),
        ({}, "plate"),
    ])
    def test_missing_field_is_400(self, client, body, field):
        response = client.post("/api/report", json=body)
        assert response.status_code == 400
        assert response.json() == {
            "error": f"Missing required parameter: {field}",
            "retryable": False,
        }

    def test_rejected_report_not_stored(self, client):
        client.post("/api/report", json={"plate": "ABC-1234"})
        assert client.get("/api/history/ABC-1234").json()["violations"] == []

    def test_storage_failure_is_500(self, client, service):
        failure = PersistenceError("ViolationLog.append", "database is locked")
        with patch.object(service, "report", side_effect=failure):
            response = report(client, "ABC-1234", HARD_BRAKING)

        assert response.status_code == 500
        assert response.json()["retryable"] is True

    def test_commit_failure_is_retryable_500(self, client):
        def locked_commit(session):
            raise OperationalError("COMMIT", {}, Exception("database is locked"))

        with patch.object(Session, "commit", locked_commit):
            response = report(client, "ABC-1234", HARD_BRAKING)

        assert response.status_code == 500
        assert response.json() == {"error": "Storage unavailable", "retryable": True}
        assert client.get("/api/history/ABC-1234").json()["violations"] == []

    def test_pending_score_reported(self, client, service):
        failure = PersistenceError("VehicleScores.upsert", "disk I/O error")
        with patch.object(service.scorer, "on_violation_reported", side_effect=failure):
            response = report(client, "ABC-1234", HARD_BRAKING)

        assert response.status_code == 200
        data = response.json()
        assert data["scoreUpdated"] is False
        assert "pending" in data["message"]


# =============================================================
# TEST: History and dangerous listing
# =============================================================

class TestListings:

    def test_history_newest_first(self, client, clock):
        report(client, "ABC-1234", HARD_BRAKING)
        clock.advance(hours=2)
        report(client, "ABC-1234", RED_LIGHT_RUNNING)

        data = client.get("/api/history/ABC-1234").json()
        assert data["plate"] == "ABC-1234"
        assert [v["violationType"] for v in data["violations"]] == [RED_LIGHT_RUNNING, HARD_BRAKING]
        assert data["violations"][0]["severity"] == 5

    def test_history_limit(self, client, clock):
        for _ in range(12):
            report(client, "ABC-1234", HARD_BRAKING)
            clock.advance(minutes=1)

        assert len(client.get("/api/history/ABC-1234").json()["violations"]) == 10
        assert len(client.get("/api/history/ABC-1234?limit=3").json()["violations"]) == 3

    def test_dangerous_listing(self, client):
        report(client, "CAR-003", ILLEGAL_PARKING)
        for _ in range(2):
            report(client, "DEF-9999", RED_LIGHT_RUNNING)

        data = client.get("/api/dangerous").json()
        assert data["count"] == 1
        assert data["vehicles"][0]["plate"] == "DEF-9999"
        assert data["vehicles"][0]["isDangerous"] is True


# =============================================================
# TEST: System endpoints
# =============================================================

class TestSystem:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_health_ok(self, client, engine):
        configure_engine(engine)
        try:
            data = client.get("/health").json()
        finally:
            dispose_engine()

        assert data["status"] == "ok"
        assert data["databaseConnected"] is True
        assert data["missingTables"] == []

    def test_health_degraded_without_tables(self, client):
        empty = create_engine("sqlite://", poolclass=StaticPool)
        configure_engine(empty)
        try:
            data = client.get("/health").json()
        finally:
            dispose_engine()

        assert data["status"] == "degraded"
        assert set(data["missingTables"]) == {"violations", "vehicle_scores"}

    def test_health_down(self, client):
        failure = DatabaseConnectionError("Cannot connect to database")
        with patch("api.routers.health.verify_database_connection", side_effect=failure):
            response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["databaseConnected"] is False
