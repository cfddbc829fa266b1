"""
Violation Scoring - Configuration.

============================================================
PURPOSE
============================================================
Static severity table and scoring constants.

The severity table is loaded once at import and exposed as a
read-only mapping. It is not user-editable.

============================================================
SCORING FORMULA
============================================================
    raw   = count * count_weight + average_severity * severity_weight
    score = clamp(floor(min(raw, max_score)), min_score, max_score)

    is_dangerous = score >= danger_threshold

Warning tiers (independent of the danger flag):
    >= critical_threshold   CRITICAL
    >= dangerous_threshold  DANGEROUS
    >= caution_threshold    CAUTION
    otherwise               SAFE

============================================================
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


# ============================================================
# SEVERITY TABLE
# ============================================================

HARD_BRAKING = "急煞車"
LANE_WEAVING = "亂切車道"
DRIVING_TOO_SLOW = "龜速行駛"
RED_LIGHT_RUNNING = "闖紅燈"
ILLEGAL_PARKING = "違規停車"
WRONG_WAY_DRIVING = "逆向行駛"
TAILGATING = "未保持安全距離"

SEVERITY_TABLE: Mapping[str, int] = MappingProxyType({
    HARD_BRAKING: 2,
    LANE_WEAVING: 3,
    DRIVING_TOO_SLOW: 1,
    RED_LIGHT_RUNNING: 5,
    ILLEGAL_PARKING: 1,
    WRONG_WAY_DRIVING: 5,
    TAILGATING: 3,
})

DEFAULT_SEVERITY = 1


# ============================================================
# SCORING CONFIGURATION
# ============================================================


@dataclass(frozen=True)
class ScoringConfig:
    """
    Configuration for the Risk Scorer.

    ============================================================
    THRESHOLD RATIONALE
    ============================================================
    Two violations of any kind inside the window already put a
    vehicle at 30+ (caution). A third, or two severe ones, crosses
    the danger threshold of 40.
    ============================================================
    """

    # Trailing window (days)
    window_days: int = 30

    # Formula weights
    count_weight: int = 15
    severity_weight: int = 5

    # Score bounds
    min_score: int = 0
    max_score: int = 100

    # Danger flag
    danger_threshold: int = 40

    # Warning tiers
    critical_threshold: int = 70
    dangerous_threshold: int = 40
    caution_threshold: int = 20

    # Violation log
    default_severity: int = DEFAULT_SEVERITY
    history_limit: int = 10

    severity_table: Mapping[str, int] = field(default_factory=lambda: SEVERITY_TABLE)

    def severity_for(self, violation_type: str) -> int:
        """Resolve severity for a violation type, default for unknown types."""
        return self.severity_table.get(violation_type, self.default_severity)
