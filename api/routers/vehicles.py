"""
Vehicle lookup and violation reporting endpoints.
"""
from fastapi import APIRouter, Depends, Query

from api.dependencies import get_violation_service
from api.schemas import (
    CheckResponse,
    DangerousVehiclesResponse,
    HistoryResponse,
    ReportRequest,
    ReportResponse,
    VehicleScoreItem,
    ViolationItem,
)
from violation_scoring import ViolationService

router = APIRouter(prefix="/api", tags=["Vehicles"])


@router.get(
    "/check/{plate}",
    response_model=CheckResponse,
    response_model_exclude_none=True,
)
def check_vehicle(
    plate: str,
    service: ViolationService = Depends(get_violation_service),
):
    """
    Is this vehicle dangerous?

    Vehicles that were never reported are safe with score 0.
    """
    return CheckResponse.from_result(service.check(plate))


@router.post("/report", response_model=ReportResponse)
def report_violation(
    body: ReportRequest,
    service: ViolationService = Depends(get_violation_service),
):
    """Record a violation and refresh the vehicle's risk score."""
    result = service.report(body.plate, body.violation_type)

    message = "Violation recorded"
    if not result.score_updated:
        message = "Violation recorded, risk score update pending"

    return ReportResponse(
        success=True,
        message=message,
        violation_id=result.violation_id,
        score_updated=result.score_updated,
    )


@router.get("/history/{plate}", response_model=HistoryResponse)
def get_history(
    plate: str,
    limit: int = Query(10, ge=1, le=100),
    service: ViolationService = Depends(get_violation_service),
):
    """Most recent violations for a vehicle, newest first."""
    events = service.history(plate, limit)
    return HistoryResponse(
        plate=plate,
        violations=[ViolationItem.from_event(e) for e in events],
    )


@router.get("/dangerous", response_model=DangerousVehiclesResponse)
def list_dangerous(
    limit: int = Query(100, ge=1, le=1000),
    service: ViolationService = Depends(get_violation_service),
):
    """Vehicles currently flagged dangerous, highest score first."""
    scores = service.list_dangerous(limit)
    return DangerousVehiclesResponse(
        count=len(scores),
        vehicles=[VehicleScoreItem.from_score(s) for s in scores],
    )
