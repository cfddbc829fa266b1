"""
Tests for database bootstrap and demo seeding.
"""

import pytest

from database.engine import configure_engine, dispose_engine, missing_tables
from scripts.bootstrap_db import DEMO_VIOLATIONS, main, seed_demo_data
from violation_scoring import VehicleScoreRepository, ViolationLogRepository


# =============================================================
# TEST: Demo data
# =============================================================

class TestSeedDemoData:

    def test_inserts_all_rows(self, session, clock):
        assert seed_demo_data(session, clock=clock) == len(DEMO_VIOLATIONS)
        assert len(ViolationLogRepository(session, clock=clock).history("XYZ-5678")) == 3

    def test_scores_are_derived(self, session, clock):
        seed_demo_data(session, clock=clock)
        scores = VehicleScoreRepository(session, clock=clock)

        assert scores.get("XYZ-5678").risk_score == 58
        assert scores.get("DEF-9999").risk_score == 66
        assert scores.get("CAR-003").risk_score == 30
        assert scores.get("CAR-003").is_dangerous is False

    def test_every_seeded_flag_matches_score(self, session, clock):
        seed_demo_data(session, clock=clock)
        scores = VehicleScoreRepository(session, clock=clock)

        for plate in {p for p, _, _ in DEMO_VIOLATIONS} | {"SAFE-001"}:
            score = scores.get(plate)
            assert score.is_dangerous == (score.risk_score >= 40)

    def test_clean_vehicle_seeded(self, session, clock):
        seed_demo_data(session, clock=clock)
        score = VehicleScoreRepository(session, clock=clock).get("SAFE-001")
        assert score.risk_score == 0
        assert score.violation_count == 0

    def test_skips_non_empty_log(self, session, clock):
        ViolationLogRepository(session, clock=clock).append("ABC-1234", "honking")
        assert seed_demo_data(session, clock=clock) == 0
        assert len(ViolationLogRepository(session, clock=clock).history("XYZ-5678")) == 0


# =============================================================
# TEST: Entry point
# =============================================================

class TestMain:

    @pytest.fixture
    def configured(self, engine):
        configure_engine(engine)
        yield engine
        dispose_engine()

    def test_validate_only_succeeds_with_tables(self, configured):
        assert main(["--validate-only"]) == 0

    def test_seed_data(self, configured, session_factory):
        assert main(["--seed-data"]) == 0
        assert missing_tables(configured) == []

        with session_factory() as session:
            assert VehicleScoreRepository(session).get("XYZ-5678") is not None
