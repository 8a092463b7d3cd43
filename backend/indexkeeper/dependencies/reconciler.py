"""
Reconciler dependency for FastAPI routes.
"""
from fastapi import HTTPException, Request, status

from indexkeeper.services.reconciler import IndexReconciler


def get_reconciler(request: Request) -> IndexReconciler:
    """Return the reconciler created during application startup."""
    reconciler = getattr(request.app.state, "reconciler", None)
    if reconciler is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Index reconciler is not initialized",
        )
    return reconciler
