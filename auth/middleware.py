"""
auth/middleware.py -- App-wide login gate as Starlette middleware.

Pattern: Interceptor. Every request that is not exempt passes through
LoginGate.evaluate() before reaching any route. Must be registered INSIDE
SessionMiddleware and AuthenticationMiddleware (i.e. added before them with
add_middleware) so scope["session"] and scope["user"] are already populated.

Exempt paths:
  - the gate's redirect target, always -- gating the login page would loop
  - exempt_paths     -- exact matches, e.g. /api/v1/health
  - exempt_prefixes  -- prefix matches, e.g. /static/
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from auth.adapters import StarletteRequestContext, outcome_to_response
from auth.gate import LoginGate
from auth.models import RejectUnauthenticated

logger = logging.getLogger("loginguard.middleware")


class LoginRequiredMiddleware(BaseHTTPMiddleware):
    """Redirect or reject unauthenticated requests before routing."""

    def __init__(
        self,
        app: ASGIApp,
        gate: LoginGate | None = None,
        exempt_paths: Iterable[str] = (),
        exempt_prefixes: Iterable[str] = (),
    ) -> None:
        super().__init__(app)
        self.gate = gate or LoginGate()
        self.exempt_paths = frozenset(exempt_paths) | {self.gate.redirect_target}
        self.exempt_prefixes = tuple(exempt_prefixes)

    def is_exempt(self, path: str) -> bool:
        return path in self.exempt_paths or path.startswith(self.exempt_prefixes)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if self.is_exempt(request.url.path):
            return await call_next(request)

        outcome = self.gate.evaluate(StarletteRequestContext(request))
        response = outcome_to_response(outcome)
        if response is None:
            return await call_next(request)

        if isinstance(outcome, RejectUnauthenticated):
            logger.info("401 %s %s (programmatic, unauthenticated)", request.method, request.url.path)
        else:
            logger.info("302 %s %s -> %s", request.method, request.url.path, self.gate.redirect_target)
        return response
