"""
Violation Scoring - Type Definitions.

============================================================
PURPOSE
============================================================
Data contracts for the violation log and the risk scorer.

These types are what the service hands to the lookup API.
ORM rows never leave the repository layer.

============================================================
DESIGN PRINCIPLES
============================================================
- All types are immutable
- Enums for discrete tier values
- A stored score can only be built with a consistent flag

============================================================
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


# ============================================================
# ENUMS
# ============================================================


class WarningLevel(str, Enum):
    """
    Human-facing tier of a risk score.

    - SAFE: 0-19
    - CAUTION: 20-39
    - DANGEROUS: 40-69
    - CRITICAL: 70-100

    Independent from the danger flag, which only looks at
    whether the score reaches the danger threshold.
    """

    SAFE = "safe"
    CAUTION = "caution"
    DANGEROUS = "dangerous"
    CRITICAL = "critical"

    @property
    def severity_order(self) -> int:
        """Numeric ordering for tier comparison."""
        return {"safe": 0, "caution": 1, "dangerous": 2, "critical": 3}[self.value]

    @property
    def message(self) -> str:
        """Message shown to the lookup client."""
        return _WARNING_MESSAGES[self]


_WARNING_MESSAGES = {
    WarningLevel.SAFE: "✅ 安全車輛",
    WarningLevel.CAUTION: "ℹ️ 注意該車輛",
    WarningLevel.DANGEROUS: "⚠️ 危險車輛，保持距離",
    WarningLevel.CRITICAL: "🚨 極度危險車輛！",
}


# ============================================================
# VIOLATION LOG CONTRACTS
# ============================================================


@dataclass(frozen=True)
class ViolationEvent:
    """One immutable entry of the violation log."""

    id: int
    vehicle_id: str
    violation_type: str
    severity: int
    occurred_at: datetime


@dataclass(frozen=True)
class WindowAggregate:
    """
    Trailing-window statistics for one vehicle.

    average_severity is 1.0 when count is 0.
    """

    count: int
    average_severity: float


# ============================================================
# SCORE CONTRACTS
# ============================================================


@dataclass(frozen=True)
class VehicleScore:
    """
    Current derived score for one vehicle.

    ============================================================
    OUTPUT GUARANTEES
    ============================================================
    - risk_score: Always 0-100
    - is_dangerous: Always risk_score >= danger threshold
    - violation_count: Window count as of last_updated
    ============================================================
    """

    vehicle_id: str
    violation_count: int
    risk_score: int
    is_dangerous: bool
    last_updated: datetime


@dataclass(frozen=True)
class LookupResult:
    """Answer to "is this vehicle dangerous?"."""

    vehicle_id: str
    is_safe: bool
    risk_score: int
    level: WarningLevel
    violation_count: Optional[int] = None

    @property
    def message(self) -> str:
        return self.level.message


@dataclass(frozen=True)
class ReportResult:
    """
    Outcome of recording a violation.

    score is None when the event was stored but the recompute
    failed; the stored score stays stale until the next report.
    """

    violation_id: int
    score: Optional[VehicleScore] = None

    @property
    def score_updated(self) -> bool:
        return self.score is not None


# ============================================================
# ERROR TYPES
# ============================================================


class ViolationScoringError(Exception):
    """Base exception for violation scoring errors."""

    retryable = False


class ValidationError(ViolationScoringError):
    """
    Raised when a report is missing required input.

    Client fault; retrying the same input will not help.
    """

    def __init__(self, field: str, reason: str = "is required") -> None:
        super().__init__(f"{field} {reason}")
        self.field = field
        self.reason = reason


class PersistenceError(ViolationScoringError):
    """
    Raised when the log or score store cannot be read or written.

    Server fault; callers may retry.
    """

    retryable = True

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation
