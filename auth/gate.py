"""
auth/gate.py -- The login gate: let a request through, redirect it, or reject it.

Decision order for every request:
  1. Authenticated (predicate present and true)   -> Proceed
  2. Programmatic caller (?ajax=true or a non-empty
     X-Requested-With header)                      -> RejectUnauthenticated (401)
  3. Anything else                                 -> RedirectTo(redirect_target),
     after recording the original path in the session under "returnTo"

A missing predicate is not an error: the gate fails closed and treats the
request as unauthenticated. Programmatic callers never get a redirect because
an XHR cannot act on one, and their path is never recorded because the user
did not navigate there.

The gate holds nothing but its frozen GateOptions, so one instance can serve
any number of concurrent requests. evaluate() is synchronous and performs no
I/O of its own.

Usage:
    gate = ensure_logged_in("/signin")
    outcome = gate.evaluate(ctx)          # explicit Outcome
    gate(ctx, response, next_)            # chain-link form

Layer rule: no imports from api/, web/, or core/.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from auth.context import Continuation, RequestContext, ResponseHandle
from auth.models import (
    ABORT,
    AJAX_HEADER,
    AJAX_QUERY_PARAM,
    COMPLETED,
    RETURN_TO_KEY,
    GateOptions,
    Outcome,
    Proceed,
    RedirectTo,
    RejectUnauthenticated,
)

logger = logging.getLogger("loginguard.gate")


def is_programmatic(ctx: RequestContext) -> bool:
    """Return True when the request says it came from client-side script."""
    query = ctx.query or {}
    if query.get(AJAX_QUERY_PARAM) == "true":
        return True
    return bool(ctx.header(AJAX_HEADER))


def _authenticated(ctx: RequestContext) -> bool:
    predicate = getattr(ctx, "is_authenticated", None)
    if predicate is None:
        return False
    return bool(predicate())


class LoginGate:
    """Gate a request on a pre-computed authentication state."""

    def __init__(self, options: GateOptions | Mapping[str, Any] | str | None = None) -> None:
        self.options = GateOptions.coerce(options)

    @property
    def redirect_target(self) -> str:
        return self.options.redirect_target

    def __repr__(self) -> str:
        return (
            f"LoginGate(redirect_target={self.options.redirect_target!r}, "
            f"preserve_return_path={self.options.preserve_return_path!r})"
        )

    def evaluate(self, ctx: RequestContext) -> Outcome:
        """Decide the outcome for one request.

        The only side effect is the session write on the redirect path; the
        caller is responsible for turning the Outcome into a response.
        """
        if _authenticated(ctx):
            return Proceed()

        if is_programmatic(ctx):
            logger.debug("Rejecting unauthenticated programmatic request to %s", ctx.path)
            return RejectUnauthenticated()

        return_to = None
        session = getattr(ctx, "session", None)
        if self.options.preserve_return_path and session is not None:
            return_to = ctx.original_path or ctx.path
            session[RETURN_TO_KEY] = return_to

        logger.debug("Redirecting unauthenticated request to %s (return_to=%s)", self.redirect_target, return_to)
        return RedirectTo(location=self.redirect_target, return_to=return_to)

    def __call__(self, ctx: RequestContext, response: ResponseHandle, next_: Continuation) -> None:
        """Chain-link form: apply the outcome, then call the continuation exactly once.

        next_(None)      -- proceed to the next handler
        next_(ABORT)     -- 401 already sent, stop the chain (not an error)
        next_(COMPLETED) -- redirect already issued, nothing left to do
        """
        outcome = self.evaluate(ctx)
        if isinstance(outcome, Proceed):
            next_(None)
        elif isinstance(outcome, RejectUnauthenticated):
            response.send_status(outcome.status_code)
            next_(ABORT)
        else:
            response.redirect(outcome.location)
            next_(COMPLETED)


def ensure_logged_in(options: GateOptions | Mapping[str, Any] | str | None = None) -> LoginGate:
    """Build a LoginGate from a path string, a mapping, GateOptions, or nothing.

    Examples:
        ensure_logged_in()                                   # -> /login
        ensure_logged_in("/signin")
        ensure_logged_in({"redirect_target": "/session/new", "preserve_return_path": False})
    """
    return LoginGate(options)
