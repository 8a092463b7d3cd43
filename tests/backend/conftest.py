"""
Backend-specific test fixtures and configuration.

These fixtures extend the global fixtures with helpers for testing the
FastAPI routes against the in-memory index store.
"""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "backend"))


# =============================================================================
# App Fixtures
# =============================================================================

@pytest.fixture
def app_with_reconciler(reconciler):
    """
    The FastAPI app with startup wired to the in-memory reconciler.

    build_reconciler is patched so no MongoDB client is created.
    """
    async def _build():
        return reconciler

    with patch("indexkeeper.main.build_reconciler", _build):
        from indexkeeper.main import app
        yield app


@pytest.fixture
def client(app_with_reconciler):
    """TestClient using the patched app."""
    from fastapi.testclient import TestClient

    with TestClient(app_with_reconciler) as c:
        yield c


# =============================================================================
# Response Assertion Helpers
# =============================================================================

@pytest.fixture
def assert_error_response():
    """Helper to assert error response structure."""
    def _assert(response, status_code: int, detail_contains: str = None):
        assert response.status_code == status_code
        data = response.json()
        assert "detail" in data
        if detail_contains:
            assert detail_contains.lower() in data["detail"].lower()
    return _assert
