"""
indexkeeper - FastAPI Application

Declarative MongoDB index reconciliation service.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from indexkeeper.config import get_settings
from indexkeeper.database.connections import close_connections, get_database
from indexkeeper.database.manifest import load_manifest
from indexkeeper.database.registry import BindingRegistry
from indexkeeper.routers import health, indexes
from indexkeeper.services.index_store import MotorIndexStore
from indexkeeper.services.reconciler import IndexReconciler

logger = logging.getLogger(__name__)


async def build_reconciler() -> IndexReconciler:
    """Create the reconciler for the configured database and manifest."""
    settings = get_settings()
    db = await get_database()

    registry = BindingRegistry()
    if settings.manifest_path:
        load_manifest(settings.manifest_path, registry)

    return IndexReconciler(
        MotorIndexStore(db),
        registry=registry,
        fail_fast=settings.fail_fast,
        drift_check=settings.drift_check,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Load the index manifest into a fresh registry
    - Optionally reconcile all bindings

    Shutdown:
    - Drop the registry and close the MongoDB connection
    """
    settings = get_settings()
    logger.info("Starting up indexkeeper...")

    reconciler = await build_reconciler()
    app.state.reconciler = reconciler

    if settings.sync_on_startup:
        try:
            results = await reconciler.sync_all()
            logger.info(f"Startup index sync done for {len(results)} collections")
        except Exception as e:
            logger.warning(f"Startup index sync failed: {e}")

    yield

    logger.info("Shutting down indexkeeper...")
    reconciler.registry.clear()
    app.state.reconciler = None
    await close_connections()


app = FastAPI(
    title="indexkeeper API",
    description="""
## Declarative MongoDB index reconciliation

Declare the indexes each collection should have; indexkeeper creates the
missing ones and drops the ones no longer declared. The `_id_` index is
never dropped, and a collection declared with no indexes is left alone.
    """,
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(indexes.router)


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "indexkeeper API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
