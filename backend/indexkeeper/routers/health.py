"""
Liveness and readiness probes.
"""
from fastapi import APIRouter, Request, status

from indexkeeper.database.connections import get_mongo_client

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
)
async def health_check():
    """Returns 200 while the process is serving requests."""
    return {"status": "healthy"}


@router.get(
    "/health/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness probe: MongoDB and loaded bindings",
)
async def readiness_check(request: Request):
    """
    Ready once MongoDB answers a ping and the reconciler is built.

    The number of registered collection bindings is reported alongside.
    """
    reconciler = getattr(request.app.state, "reconciler", None)
    checks = {
        "mongodb": "unknown",
        "reconciler": "healthy" if reconciler is not None else "not initialized",
    }

    try:
        client = await get_mongo_client()
        await client.admin.command("ping")
        checks["mongodb"] = "healthy"
    except Exception as e:
        checks["mongodb"] = f"unhealthy: {e}"

    ready = all(v == "healthy" for v in checks.values())

    return {
        "status": "healthy" if ready else "degraded",
        "checks": checks,
        "bindings": len(reconciler.registry) if reconciler is not None else 0,
    }
