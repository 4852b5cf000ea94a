"""
tests/conftest.py -- Shared test fixtures for LoginGuard integration tests.

This module provides:
  - web_client: TestClient with follow_redirects=False, fresh cookie jar per test
  - login: helper that posts the configured UI credentials
  - read_session: decodes the signed session cookie from a response

The environment must be set before any api/ or core/ import so get_settings()
picks up a fixed SECRET_KEY and a UI password.
"""

from __future__ import annotations

import json
import os
from base64 import b64decode
from collections.abc import Callable, Generator

# CRITICAL: Set these before importing the app -- get_settings() is cached at
# first call and api/main.py calls it at import time.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-loginguard-0123456789")
os.environ.setdefault("UI_USERNAME", "webadmin")
os.environ.setdefault("UI_PASSWORD", "webpass123")

import pytest
from fastapi.testclient import TestClient
from httpx import Response
from itsdangerous import TimestampSigner

from asgi import app
from core.config import get_settings

UI_USERNAME = os.environ["UI_USERNAME"]
UI_PASSWORD = os.environ["UI_PASSWORD"]


@pytest.fixture()
def web_client() -> Generator[TestClient, None, None]:
    """Yield a TestClient that does not follow redirects.

    follow_redirects=False is essential: we assert on redirect *locations*
    (e.g. 302 to /login), which are invisible once the client follows the
    redirect. Function scope gives every test an empty cookie jar.
    """
    with TestClient(app, follow_redirects=False, raise_server_exceptions=True) as client:
        yield client


@pytest.fixture()
def login(web_client: TestClient) -> Callable[..., Response]:
    def _login(username: str = UI_USERNAME, password: str = UI_PASSWORD) -> Response:
        return web_client.post("/login", data={"username": username, "password": password})

    return _login


@pytest.fixture()
def read_session() -> Callable[[Response], dict]:
    """Decode the session cookie a response set, the same way SessionMiddleware does."""
    settings = get_settings()
    signer = TimestampSigner(str(settings.secret_key))

    def _read(resp: Response) -> dict:
        raw = resp.cookies.get(settings.session_cookie)
        if not raw:
            return {}
        return json.loads(b64decode(signer.unsign(raw.encode("utf-8"))))

    return _read
