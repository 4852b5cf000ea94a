"""
web/routes.py -- Browser-facing routes around the login gate.

Routes:
  POST /login            -- establish the session, then return the user to "returnTo"
  POST /logout           -- clear the session, redirect to the login target
  GET  /profile          -- protected page (gated app-wide by LoginRequiredMiddleware)
  /reports/...           -- sub-application mounted under /reports and exempt
                            from the app-wide middleware; its routes call
                            login_required() themselves, which sees the path
                            below the mount but records the full /reports/... path

The login form itself and credential storage are out of scope: POST /login
accepts the single account configured by UI_USERNAME / UI_PASSWORD.
"""

import hmac
import logging
from typing import Optional

from fastapi import APIRouter, FastAPI, Form, HTTPException, Request
from fastapi.responses import RedirectResponse

from auth.backend import SESSION_USER_KEY
from auth.dependencies import get_gate, login_required
from auth.models import RETURN_TO_KEY
from core.config import get_settings
from core.errors import ErrorDetail

logger = logging.getLogger("loginguard.web")

router = APIRouter()


def _safe_next(next_url: Optional[str]) -> str:
    """Validate a post-login redirect target. Only accept relative paths.

    Prevents open redirect attacks where a crafted returnTo such as
    https://attacker.com or //attacker.com would send the user off-site
    after login.
    """
    if next_url and next_url.startswith("/") and not next_url.startswith("//"):
        return next_url
    return "/"


def _check_credentials(username: str, password: str) -> bool:
    settings = get_settings()
    if not settings.ui_password:
        return False
    user_ok = hmac.compare_digest(username.encode(), settings.ui_username.encode())
    pass_ok = hmac.compare_digest(password.encode(), settings.ui_password.encode())
    return user_ok and pass_ok


# ---------------------------------------------------------------------------
# POST /login -- establish the session and send the user back
# ---------------------------------------------------------------------------


@router.post("/login")
async def login_submit(
    request: Request,
    username: str = Form(...),
    password: str = Form(...),
) -> RedirectResponse:
    """Log in and redirect to the path the gate recorded, falling back to /."""
    if not _check_credentials(username, password):
        logger.warning("Failed login for %r", username)
        raise HTTPException(
            status_code=401,
            detail=ErrorDetail(code="bad_credentials", message="Invalid username or password.").model_dump(),
        )
    request.session[SESSION_USER_KEY] = username
    target = _safe_next(request.session.pop(RETURN_TO_KEY, None))
    logger.info("Login for %r, returning to %s", username, target)
    # 303 so the browser follows with GET, not a re-POST.
    return RedirectResponse(target, status_code=303)


@router.post("/logout")
async def logout(request: Request) -> RedirectResponse:
    request.session.clear()
    return RedirectResponse(get_gate().redirect_target, status_code=303)


@router.get("/profile")
async def profile(request: Request) -> dict:
    return {"username": request.user.display_name}


# ---------------------------------------------------------------------------
# /reports -- mounted sub-application
# ---------------------------------------------------------------------------

reports_app = FastAPI(title="Reports", docs_url=None, redoc_url=None, openapi_url=None)


@reports_app.get("/summary")
async def report_summary(request: Request):
    if redirect := login_required(request):
        return redirect
    return {"report": "summary", "owner": request.user.display_name}
