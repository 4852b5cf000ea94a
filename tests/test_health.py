"""
tests/test_health.py -- Integration tests for GET /api/v1/health.

Covers:
  - 200 response with status and version fields
  - No authentication required (exempt from the login gate)
"""

from __future__ import annotations

from api.main import __version__


def test_health_returns_200_with_version(web_client):
    """Health endpoint returns 200 with status and version."""
    resp = web_client.get("/api/v1/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "version": __version__}


def test_health_no_auth_required_for_xhr(web_client):
    """Programmatic callers reach the health endpoint without a session."""
    resp = web_client.get("/api/v1/health", headers={"X-Requested-With": "XMLHttpRequest"})
    assert resp.status_code == 200
