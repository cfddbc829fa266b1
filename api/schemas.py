"""
Pydantic schemas for the lookup API.

Field names are snake_case in Python and camelCase on the wire.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from violation_scoring import LookupResult, VehicleScore, ViolationEvent


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =======================
# REPORT
# =======================

class ReportRequest(CamelModel):
    # Optional so a missing field reaches the service and becomes a 400
    plate: Optional[str] = None
    violation_type: Optional[str] = None


class ReportResponse(CamelModel):
    success: bool
    message: str
    violation_id: int
    score_updated: bool = True


# =======================
# CHECK
# =======================

class CheckResponse(CamelModel):
    plate: str
    is_safe: bool
    risk_score: int
    violation_count: Optional[int] = None
    level: str
    message: str

    @classmethod
    def from_result(cls, result: LookupResult) -> "CheckResponse":
        return cls(
            plate=result.vehicle_id,
            is_safe=result.is_safe,
            risk_score=result.risk_score,
            violation_count=result.violation_count,
            level=result.level.value,
            message=result.message,
        )


# =======================
# HISTORY
# =======================

class ViolationItem(CamelModel):
    id: int
    violation_type: str
    severity: int
    occurred_at: datetime

    @classmethod
    def from_event(cls, event: ViolationEvent) -> "ViolationItem":
        return cls(
            id=event.id,
            violation_type=event.violation_type,
            severity=event.severity,
            occurred_at=event.occurred_at,
        )


class HistoryResponse(CamelModel):
    plate: str
    violations: List[ViolationItem]


# =======================
# DANGEROUS VEHICLES
# =======================

class VehicleScoreItem(CamelModel):
    plate: str
    violation_count: int
    risk_score: int
    is_dangerous: bool
    last_updated: datetime

    @classmethod
    def from_score(cls, score: VehicleScore) -> "VehicleScoreItem":
        return cls(
            plate=score.vehicle_id,
            violation_count=score.violation_count,
            risk_score=score.risk_score,
            is_dangerous=score.is_dangerous,
            last_updated=score.last_updated,
        )


class DangerousVehiclesResponse(CamelModel):
    count: int
    vehicles: List[VehicleScoreItem]


# =======================
# HEALTH
# =======================

class HealthResponse(CamelModel):
    status: str
    database_connected: bool
    missing_tables: List[str] = []
    message: Optional[str] = None
