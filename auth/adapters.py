"""
auth/adapters.py -- Expose Starlette requests to the login gate and map outcomes back.

StarletteRequestContext reads only what the middleware stack already put in
the ASGI scope:
  - scope["user"]     -- set by AuthenticationMiddleware. Absent means no
                         authentication layer is installed, so the predicate
                         is None and the gate fails closed.
  - scope["session"]  -- set by SessionMiddleware. Absent means there is no
                         session store and no return path can be recorded.
  - scope["root_path"] -- set by Mount for sub-applications. The current
                         path is the route path below the mount; the
                         original path is the full path the client asked for.

outcome_to_response() turns an Outcome into the Starlette response the
middleware or route should return, or None to let the request through.

Layer rule: no imports from api/ or web/; the 401 body comes from core.errors.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, MutableMapping
from typing import Any, Optional

from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response

from auth.models import Outcome, Proceed, RedirectTo
from core.errors import error_body


class StarletteRequestContext:
    """RequestContext backed by a Starlette Request."""

    def __init__(self, request: Request) -> None:
        self._request = request

    @property
    def is_authenticated(self) -> Optional[Callable[[], bool]]:
        if "user" not in self._request.scope:
            return None
        return lambda: bool(getattr(self._request.user, "is_authenticated", False))

    @property
    def path(self) -> str:
        full_path = self._request.url.path
        root_path = self._request.scope.get("root_path", "")
        if root_path and full_path.startswith(root_path):
            return full_path[len(root_path) :] or "/"
        return full_path

    @property
    def original_path(self) -> Optional[str]:
        query = self._request.url.query
        path = self._request.url.path
        return f"{path}?{query}" if query else path

    @property
    def session(self) -> Optional[MutableMapping[str, Any]]:
        if "session" not in self._request.scope:
            return None
        return self._request.session

    @property
    def query(self) -> Mapping[str, str]:
        return self._request.query_params

    def header(self, name: str) -> Optional[str]:
        # Starlette Headers are already case-insensitive.
        return self._request.headers.get(name)


def outcome_to_response(outcome: Outcome) -> Optional[Response]:
    """Return the response for a blocked request, or None when it may proceed.

    Redirects use 302 so browsers re-issue the original method as GET against
    the login page. The 401 body reuses the API error envelope shape so API
    clients can parse it like any other error.
    """
    if isinstance(outcome, Proceed):
        return None
    if isinstance(outcome, RedirectTo):
        return RedirectResponse(outcome.location, status_code=302)
    return JSONResponse(
        status_code=outcome.status_code,
        content=error_body("unauthorized", "Authentication required."),
    )
