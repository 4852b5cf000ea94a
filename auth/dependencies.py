"""
auth/dependencies.py -- Per-route login checks for FastAPI handlers.

get_gate() returns the process-wide LoginGate built from settings.
login_required() is the per-route form of LoginRequiredMiddleware, for apps
that gate only some routes:

    @router.get("/profile")
    async def profile(request: Request):
        if redirect := login_required(request):
            return redirect
        ...

It returns the redirect or 401 response to send, or None when the request
may proceed.

Layer rule: may import core.config for gate defaults; no imports from api/
or web/.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import Request
from starlette.responses import Response

from auth.adapters import StarletteRequestContext, outcome_to_response
from auth.gate import LoginGate
from auth.models import GateOptions
from core.config import get_settings


@lru_cache
def get_gate() -> LoginGate:
    """Return the LoginGate configured by LOGIN_REDIRECT_TARGET / LOGIN_PRESERVE_RETURN_PATH."""
    settings = get_settings()
    return LoginGate(
        GateOptions(
            redirect_target=settings.login_redirect_target,
            preserve_return_path=settings.login_preserve_return_path,
        )
    )


def login_required(request: Request, gate: Optional[LoginGate] = None) -> Optional[Response]:
    """Check the request against the gate. Returns a response to send, or None if OK."""
    gate = gate or get_gate()
    return outcome_to_response(gate.evaluate(StarletteRequestContext(request)))
