"""
Violation Scoring - Risk Scorer.

============================================================
PURPOSE
============================================================
Turns a vehicle's trailing-window violation statistics into a
risk score, a danger flag and a warning tier, and keeps the
per-vehicle score record current.

============================================================
DESIGN PRINCIPLES
============================================================
- Pure scoring functions, no I/O
- Score and flag always derived together from one number
- Full overwrite of the stored score on every recompute
- Floor rounding: 58.33 -> 58, 39.6 -> 39

============================================================
USAGE
============================================================
    scorer = RiskScorer()

    score = scorer.on_violation_reported(session, "XYZ-5678")
    level = scorer.classify(score.risk_score)

============================================================
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from core.clock import ClockProtocol, SystemClock
from .config import ScoringConfig
from .repository import ViolationLogRepository, VehicleScoreRepository
from .types import VehicleScore, WarningLevel, WindowAggregate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreComputation:
    """Score and flag derived from one window aggregate."""

    violation_count: int
    risk_score: int
    is_dangerous: bool


class RiskScorer:
    """
    Main entry point for risk scoring.

    ============================================================
    RESPONSIBILITIES
    ============================================================
    1. Read the trailing-window aggregate for a vehicle
    2. Compute the clamped integer score
    3. Derive the danger flag
    4. Upsert the vehicle's score record
    5. Classify scores into warning tiers
    ============================================================
    """

    def __init__(
        self,
        config: Optional[ScoringConfig] = None,
        clock: Optional[ClockProtocol] = None,
    ):
        """
        Initialize the Risk Scorer.

        Args:
            config: Scoring configuration. Uses defaults if not provided.
            clock: Time source for windows and update stamps.
        """
        self.config = config or ScoringConfig()
        self.clock = clock or SystemClock()

    # --------------------------------------------------------
    # PURE SCORING
    # --------------------------------------------------------

    def compute(self, aggregate: WindowAggregate) -> ScoreComputation:
        """
        Compute score and danger flag from a window aggregate.

        Args:
            aggregate: Count and average severity in the window

        Returns:
            ScoreComputation with score in [min_score, max_score]
        """
        cfg = self.config

        raw = (
            aggregate.count * cfg.count_weight
            + aggregate.average_severity * cfg.severity_weight
        )
        capped = min(raw, cfg.max_score)
        risk_score = max(cfg.min_score, min(cfg.max_score, math.floor(capped)))

        return ScoreComputation(
            violation_count=aggregate.count,
            risk_score=risk_score,
            is_dangerous=risk_score >= cfg.danger_threshold,
        )

    def classify(self, risk_score: int) -> WarningLevel:
        """
        Map a risk score to its warning tier.

        Args:
            risk_score: Score 0-100

        Returns:
            WarningLevel classification
        """
        cfg = self.config

        if risk_score >= cfg.critical_threshold:
            return WarningLevel.CRITICAL
        elif risk_score >= cfg.dangerous_threshold:
            return WarningLevel.DANGEROUS
        elif risk_score >= cfg.caution_threshold:
            return WarningLevel.CAUTION
        else:
            return WarningLevel.SAFE

    # --------------------------------------------------------
    # STORE OPERATIONS
    # --------------------------------------------------------

    def on_violation_reported(self, session: Session, vehicle_id: str) -> VehicleScore:
        """
        Recompute and store the score for a vehicle.

        Read and write share the caller's session, so committing
        that session makes the recompute one atomic unit.

        Args:
            session: Open session, committed by the caller
            vehicle_id: Vehicle that just received a violation

        Returns:
            The VehicleScore that was written

        Raises:
            PersistenceError: If the read or the upsert fails
        """
        log = ViolationLogRepository(session, clock=self.clock, config=self.config)
        scores = VehicleScoreRepository(session, clock=self.clock, config=self.config)

        aggregate = log.aggregate_within_window(vehicle_id, self.config.window_days)
        result = self.compute(aggregate)
        now = self.clock.now()

        scores.upsert(
            vehicle_id=vehicle_id,
            violation_count=result.violation_count,
            risk_score=result.risk_score,
            is_dangerous=result.is_dangerous,
            last_updated=now,
        )

        logger.debug(
            f"Recomputed {vehicle_id}: count={aggregate.count} "
            f"avg_severity={aggregate.average_severity:.2f} score={result.risk_score}"
        )

        return VehicleScore(
            vehicle_id=vehicle_id,
            violation_count=result.violation_count,
            risk_score=result.risk_score,
            is_dangerous=result.is_dangerous,
            last_updated=now,
        )

    def get_score(self, session: Session, vehicle_id: str) -> Optional[VehicleScore]:
        """Current stored score, or None if the vehicle was never reported."""
        return VehicleScoreRepository(session, clock=self.clock, config=self.config).get(vehicle_id)


# ============================================================
# CONVENIENCE FUNCTIONS
# ============================================================


def classify(risk_score: int, config: Optional[ScoringConfig] = None) -> WarningLevel:
    """Classify a score with the default (or given) thresholds."""
    return RiskScorer(config=config).classify(risk_score)


def format_score_summary(score: VehicleScore, level: WarningLevel) -> str:
    """
    Format a one-line summary for logs and console output.
    """
    return (
        f"{score.vehicle_id}: score={score.risk_score}/100 "
        f"level={level.name} dangerous={score.is_dangerous} "
        f"violations_30d={score.violation_count}"
    )
