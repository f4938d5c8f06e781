"""Health & Readiness Probes — is the process up, and can it serve dossiers.

Invariants:
    - GET /health/ always returns 200 while the process runs (liveness)
    - GET /health/ready returns 503 until the store answers AND the DaoService is wired;
      the body names every failing check
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from dao_manager.api import dependencies
from dao_manager.infrastructure import database

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "healthy", "service": "dao-manager-api"}


@router.get("/ready")
async def readiness_check():
    """Readiness probe — database connectivity and service wiring."""
    manager = database.db_manager
    checks = {
        "database": "healthy" if manager and await manager.health_check() else "unavailable",
        "dao_service": "ready" if dependencies.dao_service else "not_initialized",
    }
    failing = [
        name for name, state in checks.items() if state not in ("healthy", "ready")
    ]
    if failing:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "failing": failing, "checks": checks},
        )
    return {"status": "ready", "checks": checks}
