from fastapi import APIRouter
from fastapi.responses import JSONResponse

from api.schemas import HealthResponse
from database.engine import DatabaseConnectionError, missing_tables, verify_database_connection

router = APIRouter(tags=["System Health"])


@router.get("/health", response_model=HealthResponse)
def get_health():
    """
    Database connectivity and schema check.

    Returns 503 when the database is unreachable.
    """
    try:
        verify_database_connection()
    except DatabaseConnectionError as e:
        body = HealthResponse(status="down", database_connected=False, message=str(e))
        return JSONResponse(status_code=503, content=body.model_dump(by_alias=True))

    missing = missing_tables()
    if missing:
        return HealthResponse(
            status="degraded",
            database_connected=True,
            missing_tables=missing,
            message="Tables missing, run: python -m scripts.bootstrap_db",
        )

    return HealthResponse(status="ok", database_connected=True)
