"""Health check endpoints."""

from fastapi import APIRouter

from adapters.database import ADAPTER_REGISTRY

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict:
    """Basic health check."""
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check() -> dict:
    """Readiness check listing the dialects this server can talk to."""
    return {
        "status": "ready",
        "dialects": sorted(dialect.value for dialect in ADAPTER_REGISTRY),
    }
