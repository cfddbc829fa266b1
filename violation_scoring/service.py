"""
Violation Scoring - Service.

============================================================
PURPOSE
============================================================
Unit-of-work layer used by the lookup API.

- report: append the event, then recompute the score
- check: lookup-facing view of the current score
- history: recent events for a vehicle
- list_dangerous: vehicles whose danger flag is set

============================================================
CONSISTENCY
============================================================
The append commits in its own transaction before the
recompute starts. If the recompute fails the event stays
committed and the score remains stale until the next report
for that vehicle. The failure is logged, not raised.

============================================================
"""

import logging
from contextlib import contextmanager
from typing import Generator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from core.clock import ClockProtocol, SystemClock
from database.engine import get_session_factory, transaction_scope
from .config import ScoringConfig
from .engine import RiskScorer, format_score_summary
from .repository import ViolationLogRepository, VehicleScoreRepository
from .types import (
    LookupResult,
    ReportResult,
    VehicleScore,
    ViolationEvent,
    PersistenceError,
    ViolationScoringError,
    WarningLevel,
)

logger = logging.getLogger(__name__)


class ViolationService:
    """
    Coordinates the violation log and the risk scorer.

    Each public method opens its own short-lived session(s).
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        config: Optional[ScoringConfig] = None,
        clock: Optional[ClockProtocol] = None,
    ):
        self._session_factory = session_factory
        self.config = config or ScoringConfig()
        self.clock = clock or SystemClock()
        self.scorer = RiskScorer(config=self.config, clock=self.clock)

    @property
    def session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            self._session_factory = get_session_factory()
        return self._session_factory

    @contextmanager
    def _unit_of_work(self, operation: str) -> Generator[Session, None, None]:
        """
        One committed transaction.

        Commit failures surface as PersistenceError like every
        other storage failure.
        """
        try:
            with transaction_scope(self.session_factory) as session:
                yield session
        except SQLAlchemyError as e:
            raise PersistenceError(operation, str(e)) from e

    # --------------------------------------------------------
    # WRITE
    # --------------------------------------------------------

    def report(self, vehicle_id: str, violation_type: str) -> ReportResult:
        """
        Record a violation and refresh the vehicle's score.

        Raises:
            ValidationError: Missing vehicle_id or violation_type
            PersistenceError: The event could not be stored
        """
        with self._unit_of_work("ViolationLog.append") as session:
            violation_id = ViolationLogRepository(
                session, clock=self.clock, config=self.config
            ).append(vehicle_id, violation_type)

        score = self.recompute(vehicle_id)
        return ReportResult(violation_id=violation_id, score=score)

    def recompute(self, vehicle_id: str) -> Optional[VehicleScore]:
        """
        Recompute one vehicle's score in its own transaction.

        Returns None when the recompute fails.
        """
        try:
            with self._unit_of_work("VehicleScores.recompute") as session:
                score = self.scorer.on_violation_reported(session, vehicle_id)
        except ViolationScoringError:
            logger.error(
                f"Score recompute failed for {vehicle_id}, score left stale",
                exc_info=True,
            )
            return None

        logger.info(format_score_summary(score, self.scorer.classify(score.risk_score)))
        return score

    # --------------------------------------------------------
    # READ
    # --------------------------------------------------------

    def get_score(self, vehicle_id: str) -> Optional[VehicleScore]:
        with self._unit_of_work("VehicleScores.get") as session:
            return self.scorer.get_score(session, vehicle_id)

    def check(self, vehicle_id: str) -> LookupResult:
        """
        Is this vehicle dangerous?

        A vehicle without a score record is safe with score 0.
        """
        score = self.get_score(vehicle_id)

        if score is None:
            return LookupResult(
                vehicle_id=vehicle_id,
                is_safe=True,
                risk_score=0,
                level=WarningLevel.SAFE,
            )

        return LookupResult(
            vehicle_id=vehicle_id,
            is_safe=not score.is_dangerous,
            risk_score=score.risk_score,
            level=self.scorer.classify(score.risk_score),
            violation_count=score.violation_count,
        )

    def history(self, vehicle_id: str, limit: Optional[int] = None) -> List[ViolationEvent]:
        with self._unit_of_work("ViolationLog.history") as session:
            return ViolationLogRepository(
                session, clock=self.clock, config=self.config
            ).history(vehicle_id, limit)

    def list_dangerous(self, limit: int = 100) -> List[VehicleScore]:
        with self._unit_of_work("VehicleScores.list_dangerous") as session:
            return VehicleScoreRepository(
                session, clock=self.clock, config=self.config
            ).list_dangerous(limit)
