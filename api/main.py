"""
Lookup API - Application.

============================================================
RESPONSIBILITY
============================================================
HTTP surface over the violation service.

- GET  /api/check/{plate}    Is this vehicle dangerous?
- POST /api/report           Report a violation
- GET  /api/history/{plate}  Recent violations
- GET  /api/dangerous        Vehicles flagged dangerous
- GET  /health               Database check
============================================================
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routers import health, vehicles
from database.engine import dispose_engine, verify_database_connection, verify_required_tables
from violation_scoring import PersistenceError, ValidationError

logger = logging.getLogger(__name__)

# Service field names as they appear in request bodies
WIRE_FIELD_NAMES = {
    "vehicle_id": "plate",
    "violation_type": "violationType",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    verify_database_connection()
    if not verify_required_tables():
        logger.warning("Database tables missing, run: python -m scripts.bootstrap_db")
    yield
    logger.info("Shutting down API...")
    dispose_engine()


app = FastAPI(
    title="Vehicle Risk Lookup API",
    description="Report traffic violations and check whether a vehicle is dangerous.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    field = WIRE_FIELD_NAMES.get(exc.field, exc.field)
    return JSONResponse(
        status_code=400,
        content={"error": f"Missing required parameter: {field}", "retryable": False},
    )


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error(f"Persistence failure on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "Storage unavailable", "retryable": True},
    )


app.include_router(health.router)
app.include_router(vehicles.router)


@app.get("/")
def root():
    return {"status": "ok", "message": "Vehicle Risk Lookup API is running"}
