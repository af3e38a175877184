"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health always returns 200 if the process is up (liveness)
    - GET /health/ready returns 503 if the storage backend is unreachable (readiness)
    - Neither endpoint is rate limited

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from roster.api.dependencies import get_repository
from roster.core.repository_protocols import StudentRepository
from roster.schemas.student import HealthResponse

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return HealthResponse(status="ok", time=datetime.now(timezone.utc))


@router.get("/ready")
async def readiness_check(
    repository: StudentRepository = Depends(get_repository),
):
    """Readiness probe — includes storage backend connectivity."""
    if not await repository.ping():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "storage_unavailable",
                "backend": repository.backend_name,
            },
        )
    return {"status": "ready", "backend": repository.backend_name}
