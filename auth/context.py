"""
auth/context.py -- Capability contracts the login gate consumes.

The gate never touches a framework object directly. It reads a
RequestContext, writes to a ResponseHandle, and calls a Continuation. Any
member documented as optional may be None; the gate checks for presence
before use instead of catching AttributeError.

SimpleRequestContext is a plain in-memory implementation for callers that
are not running under Starlette (WSGI glue, background checks, tests). The
Starlette adapter lives in auth/adapters.py.

Layer rule: no imports from api/, web/, or core/.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from auth.models import ChainSignal

Continuation = Callable[[Optional[ChainSignal]], None]


class RequestContext(Protocol):
    """Per-request view of everything the gate needs to decide."""

    # Zero-argument predicate. None means no authentication layer ran for
    # this request, which the gate treats as unauthenticated.
    is_authenticated: Optional[Callable[[], bool]]

    # Current path, possibly rewritten by a sub-mount.
    path: str

    # Path as the client requested it, when it differs from `path`.
    original_path: Optional[str]

    session: Optional[MutableMapping[str, Any]]
    query: Mapping[str, str]

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup. Returns None when absent."""
        ...


class ResponseHandle(Protocol):
    def redirect(self, location: str) -> None: ...

    def send_status(self, status_code: int) -> None: ...


@dataclass
class SimpleRequestContext:
    """In-memory RequestContext. Header names are matched case-insensitively."""

    path: str
    is_authenticated: Optional[Callable[[], bool]] = None
    original_path: Optional[str] = None
    session: Optional[MutableMapping[str, Any]] = field(default_factory=dict)
    query: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)

    def header(self, name: str) -> Optional[str]:
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None
