"""
core/errors.py -- The one error envelope every LoginGuard error response uses.

    {"error": {"code": "...", "message": "...", "detail": "..." | null}}

API exception handlers (api/main.py), the gate's 401 (auth/adapters.py) and
route-raised HTTPExceptions (web/routes.py) all build their bodies here so
clients can parse any error without inspecting the status code first.

Layer rule: core/ is the kernel. No imports from api/, web/, or auth/.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


def error_body(code: str, message: str, detail: Optional[str] = None) -> dict:
    """Return the JSON-ready envelope for one error."""
    return ErrorResponse(error=ErrorDetail(code=code, message=message, detail=detail)).model_dump()
