"""
Tests for the Risk Scorer.

Tests cover:
- Score formula, floor rounding and clamping
- Danger flag threshold
- Warning tier mapping and monotonicity
- Severity table lookups
"""

import pytest

from violation_scoring import (
    RiskScorer,
    ScoringConfig,
    SEVERITY_TABLE,
    WarningLevel,
    WindowAggregate,
    classify,
)
from violation_scoring.config import ILLEGAL_PARKING, RED_LIGHT_RUNNING, HARD_BRAKING


@pytest.fixture
def scorer():
    return RiskScorer()


# =============================================================
# TEST: Score computation
# =============================================================

class TestCompute:
    """Test score and flag derivation from a window aggregate."""

    def test_empty_window_scores_severity_floor(self, scorer):
        """No events: 0 * 15 + 1 * 5 = 5."""
        result = scorer.compute(WindowAggregate(count=0, average_severity=1.0))
        assert result.risk_score == 5
        assert result.violation_count == 0
        assert result.is_dangerous is False

    def test_three_mixed_violations(self, scorer):
        """5, 2, 1 in window -> 45 + 13.33 -> 58 after floor."""
        result = scorer.compute(WindowAggregate(count=3, average_severity=(5 + 2 + 1) / 3))
        assert result.risk_score == 58
        assert result.is_dangerous is True

    def test_floor_keeps_score_below_threshold(self, scorer):
        """A raw 39.6 floors to 39 and is not dangerous."""
        result = scorer.compute(WindowAggregate(count=2, average_severity=1.92))
        assert result.risk_score == 39
        assert result.is_dangerous is False

    def test_exact_threshold_is_dangerous(self, scorer):
        result = scorer.compute(WindowAggregate(count=2, average_severity=2.0))
        assert result.risk_score == 40
        assert result.is_dangerous is True

    def test_score_capped_at_max(self, scorer):
        result = scorer.compute(WindowAggregate(count=20, average_severity=5.0))
        assert result.risk_score == 100
        assert result.violation_count == 20

    def test_score_clamped_at_min(self):
        """Negative weights would push the raw value below zero."""
        scorer = RiskScorer(config=ScoringConfig(count_weight=-50))
        result = scorer.compute(WindowAggregate(count=3, average_severity=1.0))
        assert result.risk_score == 0
        assert result.is_dangerous is False

    def test_score_is_int(self, scorer):
        result = scorer.compute(WindowAggregate(count=1, average_severity=2.5))
        assert isinstance(result.risk_score, int)
        assert result.risk_score == 27

    def test_flag_matches_threshold_for_all_counts(self, scorer):
        for count in range(0, 10):
            for severity in range(1, 6):
                result = scorer.compute(WindowAggregate(count=count, average_severity=float(severity)))
                assert result.is_dangerous == (result.risk_score >= 40)


# =============================================================
# TEST: Warning tiers
# =============================================================

class TestClassify:
    """Test the four-tier warning classification."""

    @pytest.mark.parametrize("score,expected", [
        (0, WarningLevel.SAFE),
        (19, WarningLevel.SAFE),
        (20, WarningLevel.CAUTION),
        (39, WarningLevel.CAUTION),
        (40, WarningLevel.DANGEROUS),
        (58, WarningLevel.DANGEROUS),
        (69, WarningLevel.DANGEROUS),
        (70, WarningLevel.CRITICAL),
        (100, WarningLevel.CRITICAL),
    ])
    def test_tier_boundaries(self, scorer, score, expected):
        assert scorer.classify(score) == expected

    def test_classify_is_monotonic(self, scorer):
        """A higher score never maps to a lower tier."""
        previous = scorer.classify(0)
        for score in range(1, 101):
            current = scorer.classify(score)
            assert current.severity_order >= previous.severity_order
            previous = current

    def test_module_level_classify(self):
        assert classify(58) == WarningLevel.DANGEROUS

    def test_messages_are_distinct(self):
        messages = {level.message for level in WarningLevel}
        assert len(messages) == 4


# =============================================================
# TEST: Severity table
# =============================================================

class TestSeverityTable:
    """Test static severity lookups."""

    def test_known_types(self):
        config = ScoringConfig()
        assert config.severity_for(RED_LIGHT_RUNNING) == 5
        assert config.severity_for(HARD_BRAKING) == 2
        assert config.severity_for(ILLEGAL_PARKING) == 1

    def test_unknown_type_defaults_to_one(self):
        assert ScoringConfig().severity_for("honking") == 1

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            SEVERITY_TABLE["honking"] = 4

    def test_all_severities_in_range(self):
        assert all(1 <= s <= 5 for s in SEVERITY_TABLE.values())
        assert len(SEVERITY_TABLE) == 7
