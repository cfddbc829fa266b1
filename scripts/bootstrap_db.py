"""
Scripts - Bootstrap Database.

============================================================
RESPONSIBILITY
============================================================
Initializes the database for first-time setup.

- Creates the violations and vehicle_scores tables
- Creates their indexes
- Optionally seeds demo data
- Validates setup

============================================================
USAGE
============================================================
python -m scripts.bootstrap_db

Options:
  --seed-data        Include demo data
  --validate-only    Only validate, don't create

============================================================
"""

import argparse
import logging
import sys
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from core.clock import ClockProtocol, SystemClock, to_db_time
from database.engine import (
    get_session_factory,
    initialize_database,
    transaction_scope,
    verify_database_connection,
    verify_required_tables,
)
from violation_scoring import RiskScorer, Violation, VehicleScoreRepository
from violation_scoring.config import (
    HARD_BRAKING,
    ILLEGAL_PARKING,
    LANE_WEAVING,
    RED_LIGHT_RUNNING,
    WRONG_WAY_DRIVING,
)

logger = logging.getLogger(__name__)


# Severity is stored as given, matching how the log keeps
# whatever severity applied when the event was written.
DEMO_VIOLATIONS: List[Tuple[str, str, int]] = [
    ("ABC-1234", HARD_BRAKING, 2),
    ("ABC-1234", LANE_WEAVING, 3),
    ("XYZ-5678", RED_LIGHT_RUNNING, 5),
    ("XYZ-5678", HARD_BRAKING, 2),
    ("XYZ-5678", ILLEGAL_PARKING, 1),
    ("DEF-9999", RED_LIGHT_RUNNING, 5),
    ("DEF-9999", WRONG_WAY_DRIVING, 5),
    ("DEF-9999", LANE_WEAVING, 3),
    ("CAR-001", LANE_WEAVING, 3),
    ("CAR-001", LANE_WEAVING, 3),
    ("CAR-002", LANE_WEAVING, 3),
    ("CAR-002", LANE_WEAVING, 3),
    ("CAR-002", LANE_WEAVING, 3),
    ("CAR-003", LANE_WEAVING, 3),
]

# Known vehicle with a clean record
DEMO_SAFE_VEHICLES = ["SAFE-001"]


def seed_demo_data(session: Session, clock: Optional[ClockProtocol] = None) -> int:
    """
    Insert demo violations and derive their scores.

    Violations are only inserted into an empty log. Scores are
    computed by the scorer, never copied, so every seeded row
    satisfies the danger-flag invariant.

    Returns:
        Number of violations inserted
    """
    clock = clock or SystemClock()
    scorer = RiskScorer(clock=clock)

    existing = session.execute(select(func.count(Violation.id))).scalar() or 0
    if existing:
        logger.info(f"Violation log already has {existing} rows, skipping demo violations")
        return 0

    now = to_db_time(clock.now())
    for plate, violation_type, severity in DEMO_VIOLATIONS:
        session.add(Violation(
            license_plate=plate,
            violation_type=violation_type,
            severity=severity,
            created_at=now,
        ))
    session.flush()

    for plate in sorted({plate for plate, _, _ in DEMO_VIOLATIONS}):
        scorer.on_violation_reported(session, plate)

    scores = VehicleScoreRepository(session, clock=clock)
    for plate in DEMO_SAFE_VEHICLES:
        if scores.get(plate) is None:
            scores.upsert(plate, 0, 0, False, clock.now())

    logger.info(f"Seeded {len(DEMO_VIOLATIONS)} demo violations")
    return len(DEMO_VIOLATIONS)


def main(argv: Optional[List[str]] = None) -> int:
    """Bootstrap database entry point."""
    parser = argparse.ArgumentParser(description="Initialize the violation database")
    parser.add_argument("--seed-data", action="store_true", help="Insert demo data")
    parser.add_argument("--validate-only", action="store_true", help="Only validate, don't create")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s | %(levelname)s | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if args.validate_only:
        verify_database_connection()
        return 0 if verify_required_tables() else 1

    initialize_database()

    if args.seed_data:
        with transaction_scope(get_session_factory()) as session:
            seed_demo_data(session)
        logger.info("Demo plates: ABC-1234, XYZ-5678, DEF-9999, SAFE-001")

    return 0


if __name__ == "__main__":
    sys.exit(main())
