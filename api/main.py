"""
api/main.py -- FastAPI application entry point for LoginGuard.

Assembles the login gate into a running ASGI app so it can be exercised end
to end. Authentication state itself comes from SessionAuthBackend; the gate
only reads it.

Run with:      uvicorn asgi:app --reload

Middleware stack (outermost to innermost):
  1. SessionMiddleware        -- signed cookie session (holds "user" and "returnTo")
  2. AuthenticationMiddleware -- sets request.user from the session
  3. LoginRequiredMiddleware  -- redirects browsers / rejects XHRs without a login
  4. log_requests             -- one access log line per request

Starlette makes the LAST add_middleware() call the outermost layer, so the
calls below are in innermost-first order.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.authentication import AuthenticationMiddleware
from starlette.middleware.sessions import SessionMiddleware

from api.models import HealthResponse, SessionInfo
from auth.backend import SessionAuthBackend
from auth.dependencies import get_gate
from auth.middleware import LoginRequiredMiddleware
from core.config import get_settings
from core.errors import error_body

__version__ = "0.1.0"

settings = get_settings()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("loginguard.api")

# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the shared gate once at startup and expose it on app.state."""
    app.state.gate = get_gate()
    logger.info("LoginGuard starting up (%r)", app.state.gate)
    yield
    logger.info("LoginGuard shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="LoginGuard",
    description="Login gate for browser and programmatic callers.",
    version=__version__,
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Request logging middleware
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Middleware stack (innermost first, see module docstring)
# ---------------------------------------------------------------------------

app.add_middleware(
    LoginRequiredMiddleware,
    gate=get_gate(),
    exempt_paths=settings.login_exempt_paths,
    exempt_prefixes=settings.login_exempt_prefixes,
)
app.add_middleware(AuthenticationMiddleware, backend=SessionAuthBackend())
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.secret_key,
    session_cookie=settings.session_cookie,
    max_age=settings.session_max_age,
    https_only=settings.secure_cookies,
    same_site="lax",
)

# ---------------------------------------------------------------------------
# Exception handlers
#
# Every error body is core.errors.error_body(), the same envelope the login
# gate sends with its 401, so clients parse one shape everywhere.
# ---------------------------------------------------------------------------


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """422 for malformed form, query or body input (e.g. POST /login without a password)."""
    body = error_body("validation_error", "Request validation failed.", detail=str(exc.errors()))
    return JSONResponse(status_code=422, content=body)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Wrap route-raised HTTPExceptions in the envelope.

    Routes that already pass ErrorDetail(...).model_dump() as detail get it
    used as-is; a plain string detail becomes the message.
    """
    if isinstance(exc.detail, dict):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})
    body = error_body(f"http_{exc.status_code}", str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """500 for anything unexpected. The exception goes to the log, never to the client."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_body("internal_error", "An unexpected error occurred."))


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/api/v1/health", tags=["Health"])
async def health() -> HealthResponse:
    """Return liveness and current version. Exempt from the login gate."""
    return HealthResponse(version=__version__)


@app.get("/api/v1/session", tags=["Session"])
async def session_info(request: Request) -> SessionInfo:
    """Return the logged-in username. Unauthenticated XHRs get 401 from the gate."""
    return SessionInfo(username=request.user.display_name)
