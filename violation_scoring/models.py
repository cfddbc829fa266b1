"""
Violation Scoring - Persistence Layer.

============================================================
PURPOSE
============================================================
ORM models for the two relationally independent tables.

============================================================
MODELS
============================================================
1. Violation: Append-only violation log
2. VehicleScoreRecord: One current score per vehicle

============================================================
"""

from datetime import datetime

from sqlalchemy import (
    String,
    Integer,
    Boolean,
    DateTime,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column

from database.engine import Base


# ============================================================
# VIOLATION LOG MODEL
# ============================================================


class Violation(Base):
    """
    One reported violation.

    ============================================================
    WHAT IT STORES
    ============================================================
    - Vehicle identifier (plate)
    - Violation type and its severity at insertion time
    - Insertion timestamp (naive UTC)

    Rows are never updated or deleted.
    ============================================================
    """

    __tablename__ = "violations"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    license_plate: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Vehicle identifier, exact match",
    )

    violation_type: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )

    severity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        comment="Severity 1-5 resolved at insertion",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        comment="When the violation was recorded (UTC)",
    )

    # Indexes
    __table_args__ = (
        Index("idx_violations_plate", "license_plate"),
        Index("idx_violations_time", "created_at"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return (
            f"Violation("
            f"id={self.id}, "
            f"plate={self.license_plate}, "
            f"type={self.violation_type}, "
            f"severity={self.severity})"
        )


# ============================================================
# VEHICLE SCORE MODEL
# ============================================================


class VehicleScoreRecord(Base):
    """
    Latest derived score for a vehicle.

    Overwritten on every report for the vehicle. No history.
    """

    __tablename__ = "vehicle_scores"

    license_plate: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
    )

    violation_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Violations inside the trailing window at last update",
    )

    risk_score: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Risk score 0-100",
    )

    is_dangerous: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    last_updated: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        comment="When the score was last recomputed (UTC)",
    )

    __table_args__ = (
        Index("idx_scores_dangerous", "is_dangerous"),
    )

    def __repr__(self) -> str:
        return (
            f"VehicleScoreRecord("
            f"plate={self.license_plate}, "
            f"score={self.risk_score}, "
            f"dangerous={self.is_dangerous})"
        )
