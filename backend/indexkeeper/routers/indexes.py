"""
Indexes router for inspecting bindings and triggering reconciliation.
"""
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from indexkeeper.core.errors import (
    BindingNotFoundError,
    IndexConflictError,
    IndexDriftError,
    IndexKeeperError,
    TransientStoreError,
)
from indexkeeper.dependencies.reconciler import get_reconciler
from indexkeeper.schemas.sync import (
    BindingResponse,
    ExistingIndexesResponse,
    SyncAllResponse,
    SyncIndexesResult,
    SyncStatus,
)
from indexkeeper.services.reconciler import IndexReconciler

router = APIRouter(prefix="/indexes", tags=["Indexes"])


def _to_http_error(e: IndexKeeperError) -> HTTPException:
    """Map a reconciliation error onto an HTTP status."""
    if isinstance(e, BindingNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(e, (IndexConflictError, IndexDriftError)):
        code = status.HTTP_409_CONFLICT
    elif isinstance(e, TransientStoreError) or getattr(e, "transient", False):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        code = status.HTTP_502_BAD_GATEWAY
    return HTTPException(status_code=code, detail=str(e))


@router.get(
    "",
    response_model=list[BindingResponse],
    summary="List registered bindings",
)
async def list_bindings(
    reconciler: Annotated[IndexReconciler, Depends(get_reconciler)],
):
    """List registered collections with their desired index names."""
    return [
        BindingResponse(collection=b.collection, indexes=b.index_names)
        for b in reconciler.registry.bindings()
    ]


@router.get(
    "/{collection}/existing",
    response_model=ExistingIndexesResponse,
    summary="List existing indexes",
)
async def list_existing_indexes(
    collection: str,
    reconciler: Annotated[IndexReconciler, Depends(get_reconciler)],
):
    """
    Names of the indexes currently defined on a collection.

    A collection that does not exist yet has no indexes.
    """
    try:
        names = await reconciler.service.list_existing_index_names(collection)
    except IndexKeeperError as e:
        raise _to_http_error(e)
    return ExistingIndexesResponse(collection=collection, indexes=names)


@router.post(
    "/sync",
    response_model=SyncAllResponse,
    summary="Reconcile all bindings",
)
async def sync_all(
    reconciler: Annotated[IndexReconciler, Depends(get_reconciler)],
    fail_fast: Optional[bool] = Query(
        None, description="Stop at the first failing collection (default from settings)"
    ),
):
    """
    Reconcile every registered collection in registration order.

    - **fail_fast**: when false, failures are reported per collection
      instead of aborting the run
    """
    try:
        results = await reconciler.sync_all(fail_fast=fail_fast)
    except IndexKeeperError as e:
        raise _to_http_error(e)
    failed = sum(1 for r in results if r.status is SyncStatus.FAILED)
    return SyncAllResponse(results=results, failed=failed)


@router.post(
    "/{collection}/sync",
    response_model=SyncIndexesResult,
    summary="Reconcile one binding",
)
async def sync_collection(
    collection: str,
    reconciler: Annotated[IndexReconciler, Depends(get_reconciler)],
):
    """Reconcile the indexes of a single registered collection."""
    try:
        return await reconciler.sync_collection(collection)
    except IndexKeeperError as e:
        raise _to_http_error(e)
