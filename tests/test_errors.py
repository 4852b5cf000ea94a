"""
tests/test_errors.py -- One error envelope for every error LoginGuard sends.

Covers:
  - error_body() shape
  - the gate's 401, a route's 401, and a 422 validation failure all share it
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from core.errors import error_body


def test_error_body_shape() -> None:
    assert error_body("unauthorized", "Authentication required.") == {
        "error": {"code": "unauthorized", "message": "Authentication required.", "detail": None}
    }


def test_gate_401_uses_envelope(web_client: TestClient) -> None:
    resp = web_client.get("/profile?ajax=true")
    assert resp.status_code == 401
    assert resp.json() == error_body("unauthorized", "Authentication required.")


def test_bad_credentials_use_envelope(web_client: TestClient) -> None:
    resp = web_client.post("/login", data={"username": "webadmin", "password": "nope"})
    assert resp.status_code == 401
    assert resp.json() == error_body("bad_credentials", "Invalid username or password.")


def test_missing_form_field_is_422_envelope(web_client: TestClient) -> None:
    resp = web_client.post("/login", data={"username": "webadmin"})
    assert resp.status_code == 422
    error = resp.json()["error"]
    assert error["code"] == "validation_error"
    assert error["message"] == "Request validation failed."
    assert "password" in error["detail"]
