"""
Violation Scoring - Package.

============================================================
PURPOSE
============================================================
Tracks traffic-violation reports per vehicle and keeps a
rolling risk classification for each reported vehicle.

============================================================
COMPONENTS
============================================================
1. VIOLATION LOG: Append-only events with static severity
2. RISK SCORER: Trailing 30-day aggregate -> score 0-100
3. SERVICE: report / check / history unit of work

============================================================
SCORING
============================================================
    score = floor(min(count * 15 + avg_severity * 5, 100))
    dangerous = score >= 40

Warning tiers:
- SAFE (0-19)
- CAUTION (20-39)
- DANGEROUS (40-69)
- CRITICAL (70-100)

============================================================
USAGE
============================================================
    from violation_scoring import ViolationService

    service = ViolationService()
    service.report("XYZ-5678", "闖紅燈")

    result = service.check("XYZ-5678")
    print(result.risk_score, result.message)

============================================================
"""

# Types
from .types import (
    WarningLevel,
    ViolationEvent,
    WindowAggregate,
    VehicleScore,
    LookupResult,
    ReportResult,
    ViolationScoringError,
    ValidationError,
    PersistenceError,
)

# Configuration
from .config import (
    SEVERITY_TABLE,
    DEFAULT_SEVERITY,
    ScoringConfig,
)

# Persistence
from .models import (
    Violation,
    VehicleScoreRecord,
)

from .repository import (
    ViolationLogRepository,
    VehicleScoreRepository,
)

# Engine
from .engine import (
    RiskScorer,
    ScoreComputation,
    classify,
    format_score_summary,
)

# Service
from .service import ViolationService


__all__ = [
    # Types
    "WarningLevel",
    "ViolationEvent",
    "WindowAggregate",
    "VehicleScore",
    "LookupResult",
    "ReportResult",

    # Exceptions
    "ViolationScoringError",
    "ValidationError",
    "PersistenceError",

    # Configuration
    "SEVERITY_TABLE",
    "DEFAULT_SEVERITY",
    "ScoringConfig",

    # Persistence
    "Violation",
    "VehicleScoreRecord",
    "ViolationLogRepository",
    "VehicleScoreRepository",

    # Engine
    "RiskScorer",
    "ScoreComputation",
    "classify",
    "format_score_summary",

    # Service
    "ViolationService",
]


__version__ = "1.0.0"
