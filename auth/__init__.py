"""auth/ -- Login gate package for LoginGuard.

The gate itself (auth/gate.py, auth/models.py, auth/context.py) is framework
free. auth/adapters.py, auth/middleware.py, auth/backend.py and
auth/dependencies.py bind it to Starlette/FastAPI.

Layer rule: auth/ imports only stdlib, third-party libraries, and core/
(config and the error envelope).
It does NOT import from api/ or web/.
"""

from auth.gate import LoginGate, ensure_logged_in, is_programmatic
from auth.models import (
    ABORT,
    COMPLETED,
    RETURN_TO_KEY,
    ChainSignal,
    GateOptions,
    Outcome,
    Proceed,
    RedirectTo,
    RejectUnauthenticated,
)

__all__ = [
    "ABORT",
    "COMPLETED",
    "RETURN_TO_KEY",
    "ChainSignal",
    "GateOptions",
    "LoginGate",
    "Outcome",
    "Proceed",
    "RedirectTo",
    "RejectUnauthenticated",
    "ensure_logged_in",
    "is_programmatic",
]
