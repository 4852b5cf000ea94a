"""
API request and response models for LoginGuard HTTP endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from auth/models.py, which owns the gate's
internal value types. The error envelope lives in core/errors.py because the
gate's 401 uses it too.
"""

from pydantic import BaseModel, ConfigDict


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str


class SessionInfo(BaseModel):
    """Response for GET /api/v1/session -- who the gate let through."""

    model_config = ConfigDict(frozen=True)

    username: str
    authenticated: bool = True
