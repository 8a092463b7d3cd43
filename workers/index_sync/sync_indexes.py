#!/usr/bin/env python3
"""
Index Sync Worker

Loads the index manifest and reconciles every declared collection against
MongoDB: missing indexes are created, undeclared ones dropped (never
``_id_``). Collections declared without indexes are left untouched.

Usage:
    python sync_indexes.py

Environment Variables:
    MONGODB_URI: MongoDB connection string
    DATABASE_NAME: Database holding the collections
    MANIFEST_PATH: JSON manifest of collection indexes
    SYNC_INTERVAL_MINUTES: Minutes between runs, 0 to run once (default: 0)
    FAIL_FAST: Abort a run at the first failing collection (default: true)
    DRIFT_CHECK: off | warn | error (default: off)
    LOG_LEVEL: Logging level (default: INFO)
"""
import asyncio
import logging
import signal
import sys
from typing import Any, Literal, Optional

from motor.motor_asyncio import AsyncIOMotorClient
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from indexkeeper.database.manifest import load_manifest
from indexkeeper.schemas.sync import SyncStatus
from indexkeeper.services.index_store import MotorIndexStore
from indexkeeper.services.reconciler import IndexReconciler


# ==================== Configuration ====================

class SyncConfig(BaseSettings):
    """Worker configuration from environment."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # MongoDB
    mongodb_uri: str = Field(default="mongodb://mongodb:27017")
    database_name: str = Field(default="app_db")

    # Manifest
    manifest_path: str = Field(default="indexes.json")

    # Sync settings
    sync_interval_minutes: int = Field(default=0, ge=0)
    fail_fast: bool = Field(default=True)
    drift_check: Literal["off", "warn", "error"] = Field(default="off")

    # Logging
    log_level: str = Field(default="INFO")


config = SyncConfig()


# ==================== Logging Setup ====================

logging.basicConfig(
    level=getattr(logging, config.log_level.upper()),
    format="%(asctime)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("index_sync")


# ==================== Main Sync Worker ====================

class IndexSyncWorker:
    """Reconciles manifest-declared indexes, once or periodically."""

    def __init__(self, settings: SyncConfig = config):
        self.settings = settings
        self.mongo_client: Optional[AsyncIOMotorClient] = None
        self.reconciler: Optional[IndexReconciler] = None
        self.running = False

    async def connect(self):
        """Connect to MongoDB and load the manifest."""
        self.mongo_client = AsyncIOMotorClient(self.settings.mongodb_uri)

        # Test connection
        await self.mongo_client.admin.command("ping")
        logger.info("Connected to MongoDB")

        registry = load_manifest(self.settings.manifest_path)
        self.reconciler = IndexReconciler(
            MotorIndexStore(self.mongo_client[self.settings.database_name]),
            registry=registry,
            fail_fast=self.settings.fail_fast,
            drift_check=self.settings.drift_check,
        )

    async def disconnect(self):
        """Drop the registry and disconnect from MongoDB."""
        if self.reconciler:
            self.reconciler.registry.clear()
        if self.mongo_client:
            self.mongo_client.close()
        logger.info("Disconnected")

    async def sync_once(self) -> dict[str, Any]:
        """Run one reconciliation pass over all bindings."""
        results = await self.reconciler.sync_all()

        for result in results:
            if result.status is SyncStatus.FAILED:
                logger.error(f"{result.collection}: failed ({result.error})")
            elif result.status is SyncStatus.SKIPPED:
                logger.info(f"{result.collection}: no indexes declared, skipped")
            else:
                logger.info(
                    f"{result.collection}: created {result.created or '-'}, "
                    f"dropped {result.dropped or '-'}"
                )

        return {
            "collections": len(results),
            "created": sum(len(r.created) for r in results),
            "dropped": sum(len(r.dropped) for r in results),
            "failed": sum(1 for r in results if r.status is SyncStatus.FAILED),
        }

    async def run(self):
        """Main worker loop."""
        self.running = True
        stats = await self.sync_once()
        logger.info(f"Sync complete: {stats}")

        interval = self.settings.sync_interval_minutes
        while self.running and interval > 0:
            try:
                logger.info(f"Sleeping {interval} minutes until next sync...")
                await asyncio.sleep(interval * 60)

                if not self.running:
                    break

                stats = await self.sync_once()
                logger.info(f"Sync complete: {stats}")

            except asyncio.CancelledError:
                logger.info("Worker cancelled")
                break
            except Exception as e:
                logger.error(f"Error in sync loop: {e}")

    def stop(self):
        """Stop the worker gracefully."""
        logger.info("Stopping worker...")
        self.running = False


# ==================== Main Entry Point ====================

async def main():
    """Main entry point."""
    worker = IndexSyncWorker()

    # Signal handlers for graceful shutdown
    loop = asyncio.get_running_loop()

    def shutdown_handler(sig):
        logger.info(f"Received signal {sig.name}")
        worker.stop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, lambda s=sig: shutdown_handler(s))

    try:
        await worker.connect()
        await worker.run()
    except Exception as e:
        logger.error(f"Worker error: {e}")
        sys.exit(1)
    finally:
        await worker.disconnect()
        logger.info("Worker shutdown complete")


if __name__ == "__main__":
    logger.info("=" * 60)
    logger.info("Index Sync Worker")
    logger.info(f"Manifest: {config.manifest_path}")
    logger.info(f"Sync interval: {config.sync_interval_minutes} minutes")
    logger.info("=" * 60)

    asyncio.run(main())
