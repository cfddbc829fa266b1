"""
Violation Scoring - Repository.

============================================================
PURPOSE
============================================================
Repository pattern implementation for the violation log and
the vehicle score store.

Provides clean interface for:
- Appending violation events
- Reading recent history
- Trailing-window aggregation
- Upserting and reading current scores

All SQLAlchemy errors are wrapped in PersistenceError.
Session lifecycle (commit/rollback) belongs to the caller.

============================================================
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, desc, and_, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.clock import ClockProtocol, SystemClock, to_db_time, from_db_time
from .config import ScoringConfig
from .models import Violation, VehicleScoreRecord
from .types import (
    ViolationEvent,
    VehicleScore,
    WindowAggregate,
    ValidationError,
    PersistenceError,
)


def _require_text(field: str, value: Optional[str]) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field)


class _BaseRepository:
    """Shared session handling and error wrapping."""

    def __init__(
        self,
        session: Session,
        repository_name: str,
        clock: Optional[ClockProtocol] = None,
        config: Optional[ScoringConfig] = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or ScoringConfig()
        self._repository_name = repository_name
        self._logger = logging.getLogger(f"repository.{repository_name}")

    @property
    def session(self) -> Session:
        return self._session

    def _handle_db_error(self, error: Exception, operation: str) -> PersistenceError:
        self._logger.error(
            f"Database error in {operation}: {error}",
            exc_info=True,
        )
        return PersistenceError(f"{self._repository_name}.{operation}", str(error))


# ============================================================
# VIOLATION LOG
# ============================================================


class ViolationLogRepository(_BaseRepository):
    """
    Append-only store of violation events.

    ============================================================
    METHODS
    ============================================================
    - append: Persist one new event
    - history: Most recent events for a vehicle
    - aggregate_within_window: Count and mean severity
    ============================================================
    """

    def __init__(
        self,
        session: Session,
        clock: Optional[ClockProtocol] = None,
        config: Optional[ScoringConfig] = None,
    ):
        super().__init__(session, "ViolationLog", clock, config)

    # --------------------------------------------------------
    # WRITE OPERATIONS
    # --------------------------------------------------------

    def append(self, vehicle_id: str, violation_type: str) -> int:
        """
        Append a violation event.

        Severity is resolved from the static table now and never
        revisited.

        Args:
            vehicle_id: Plate or other vehicle key
            violation_type: Violation type name

        Returns:
            Assigned event id

        Raises:
            ValidationError: If either argument is missing or blank
            PersistenceError: If the insert fails
        """
        _require_text("vehicle_id", vehicle_id)
        _require_text("violation_type", violation_type)

        record = Violation(
            license_plate=vehicle_id,
            violation_type=violation_type,
            severity=self._config.severity_for(violation_type),
            created_at=to_db_time(self._clock.now()),
        )

        try:
            self._session.add(record)
            self._session.flush()
        except SQLAlchemyError as e:
            raise self._handle_db_error(e, "append") from e

        self._logger.info(
            f"Violation appended: id={record.id} plate={vehicle_id} "
            f"type={violation_type} severity={record.severity}"
        )
        return record.id

    # --------------------------------------------------------
    # READ OPERATIONS
    # --------------------------------------------------------

    def history(self, vehicle_id: str, limit: Optional[int] = None) -> List[ViolationEvent]:
        """
        Get the most recent events for a vehicle.

        Ordered newest first, ties broken by insertion order.

        Args:
            vehicle_id: Vehicle key
            limit: Maximum number of events (config default 10)

        Returns:
            List of ViolationEvent, empty if none
        """
        limit = limit if limit is not None else self._config.history_limit

        stmt = (
            select(Violation)
            .where(Violation.license_plate == vehicle_id)
            .order_by(desc(Violation.created_at), desc(Violation.id))
            .limit(limit)
        )

        try:
            rows = self._session.execute(stmt).scalars().all()
        except SQLAlchemyError as e:
            raise self._handle_db_error(e, "history") from e

        return [
            ViolationEvent(
                id=row.id,
                vehicle_id=row.license_plate,
                violation_type=row.violation_type,
                severity=row.severity,
                occurred_at=from_db_time(row.created_at),
            )
            for row in rows
        ]

    def aggregate_within_window(self, vehicle_id: str, window_days: int) -> WindowAggregate:
        """
        Count and average severity of events inside the trailing window.

        Window is (now - window_days, now]: an event exactly
        window_days old is already outside. Count and average come
        from one statement so they describe the same rows.

        Returns:
            WindowAggregate, average_severity is 1.0 when count is 0
        """
        cutoff = to_db_time(self._clock.days_ago(window_days))

        stmt = select(
            func.count(Violation.id),
            func.avg(Violation.severity),
        ).where(
            and_(
                Violation.license_plate == vehicle_id,
                Violation.created_at > cutoff,
            )
        )

        try:
            count, average = self._session.execute(stmt).one()
        except SQLAlchemyError as e:
            raise self._handle_db_error(e, "aggregate_within_window") from e

        count = int(count or 0)
        if count == 0 or average is None:
            return WindowAggregate(count=0, average_severity=1.0)

        return WindowAggregate(count=count, average_severity=float(average))


# ============================================================
# VEHICLE SCORES
# ============================================================


class VehicleScoreRepository(_BaseRepository):
    """
    Keyed store of the current score per vehicle.

    ============================================================
    METHODS
    ============================================================
    - upsert: Insert or fully replace a vehicle's score
    - get: Current score or None
    - list_dangerous: Vehicles whose danger flag is set
    ============================================================
    """

    def __init__(
        self,
        session: Session,
        clock: Optional[ClockProtocol] = None,
        config: Optional[ScoringConfig] = None,
    ):
        super().__init__(session, "VehicleScores", clock, config)

    def upsert(
        self,
        vehicle_id: str,
        violation_count: int,
        risk_score: int,
        is_dangerous: bool,
        last_updated: datetime,
    ) -> None:
        """
        Insert or replace the score row in one conditional write.

        Every column is overwritten; nothing is merged with the
        previous values.

        Raises:
            ValueError: If is_dangerous disagrees with risk_score
            PersistenceError: If the write fails
        """
        if is_dangerous != (risk_score >= self._config.danger_threshold):
            raise ValueError(
                f"is_dangerous={is_dangerous} inconsistent with risk_score={risk_score}"
            )

        values = {
            "license_plate": vehicle_id,
            "violation_count": violation_count,
            "risk_score": risk_score,
            "is_dangerous": is_dangerous,
            "last_updated": to_db_time(last_updated),
        }

        try:
            stmt = self._conflict_upsert(values)
            if stmt is not None:
                self._session.execute(stmt)
            else:
                self._session.merge(VehicleScoreRecord(**values))
            self._session.flush()
        except SQLAlchemyError as e:
            raise self._handle_db_error(e, "upsert") from e

        self._logger.info(
            f"Score upserted: plate={vehicle_id} count={violation_count} "
            f"score={risk_score} dangerous={is_dangerous}"
        )

    def _conflict_upsert(self, values: dict):
        """Build INSERT .. ON CONFLICT DO UPDATE where the dialect has it."""
        dialect = self._session.get_bind().dialect.name

        if dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        elif dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        else:
            return None

        stmt = insert(VehicleScoreRecord).values(**values)
        return stmt.on_conflict_do_update(
            index_elements=[VehicleScoreRecord.license_plate],
            set_={k: v for k, v in values.items() if k != "license_plate"},
        )

    def get(self, vehicle_id: str) -> Optional[VehicleScore]:
        """
        Get the current score for a vehicle.

        Returns:
            VehicleScore or None if the vehicle was never reported
        """
        stmt = select(VehicleScoreRecord).where(
            VehicleScoreRecord.license_plate == vehicle_id
        ).execution_options(populate_existing=True)

        try:
            row = self._session.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._handle_db_error(e, "get") from e

        return _to_vehicle_score(row) if row is not None else None

    def list_dangerous(self, limit: int = 100) -> List[VehicleScore]:
        """Vehicles flagged dangerous, highest score first."""
        stmt = (
            select(VehicleScoreRecord)
            .where(VehicleScoreRecord.is_dangerous == True)  # noqa: E712
            .order_by(desc(VehicleScoreRecord.risk_score), VehicleScoreRecord.license_plate)
            .limit(limit)
            .execution_options(populate_existing=True)
        )

        try:
            rows = self._session.execute(stmt).scalars().all()
        except SQLAlchemyError as e:
            raise self._handle_db_error(e, "list_dangerous") from e

        return [_to_vehicle_score(row) for row in rows]


def _to_vehicle_score(row: VehicleScoreRecord) -> VehicleScore:
    return VehicleScore(
        vehicle_id=row.license_plate,
        violation_count=row.violation_count,
        risk_score=row.risk_score,
        is_dangerous=bool(row.is_dangerous),
        last_updated=from_db_time(row.last_updated),
    )
