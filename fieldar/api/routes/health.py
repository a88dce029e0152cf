"""Health & Readiness Probes - liveness and readiness endpoints.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the storage root cannot be prepared
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from fieldar.api.dependencies import get_machine_store
from fieldar.core.errors import StorageIOError
from fieldar.services.machine_store import MachineStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness check. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "fieldar-store",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(store: MachineStore = Depends(get_machine_store)):
    """Readiness check - the machines folder must exist or be creatable."""
    try:
        await store.ensure_base_folders_exist()
    except StorageIOError as e:
        logger.error(f"Storage readiness check failed: {e.cause}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "storage_unavailable",
            },
        )
    return {"status": "ready", "checks": {"storage": "healthy"}}
