"""
API Routers module.
"""
from indexkeeper.routers import health, indexes

__all__ = ["health", "indexes"]
