"""
Dependencies for dependency injection in routes.
"""
from indexkeeper.dependencies.reconciler import get_reconciler

__all__ = ["get_reconciler"]
