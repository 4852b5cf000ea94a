"""
auth/models.py -- Value types for the login gate.

Pattern: immutable values, zero logic beyond construction. GateOptions is a
frozen pydantic model so one instance can be shared by every request the
gate handles. The Outcome variants are frozen dataclasses; the gate computes
a fresh one per request and nothing keeps it afterwards.

Layer rule: no imports from api/, web/, or core/.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

DEFAULT_REDIRECT_TARGET = "/login"

# Session key holding the path to send the user back to after login.
RETURN_TO_KEY = "returnTo"

# Sent on XHRs by jQuery and most other client libraries.
AJAX_HEADER = "x-requested-with"
AJAX_QUERY_PARAM = "ajax"


class GateOptions(BaseModel):
    """Construction-time configuration for a LoginGate.

    Field names follow Python conventions. Both camelCase spellings are
    accepted too: redirectTarget / preserveReturnPath, and the Express-style
    redirectTo / setReturnTo, so options can be lifted from existing JSON
    config unchanged.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    redirect_target: str = Field(
        default=DEFAULT_REDIRECT_TARGET,
        validation_alias=AliasChoices("redirect_target", "redirectTarget", "redirectTo"),
    )
    preserve_return_path: bool = Field(
        default=True,
        validation_alias=AliasChoices("preserve_return_path", "preserveReturnPath", "setReturnTo"),
    )

    @field_validator("redirect_target", mode="before")
    @classmethod
    def default_empty_target(cls, value: Any) -> Any:
        """An empty or None target means "unset", not "redirect to ''"."""
        if value is None or value == "":
            return DEFAULT_REDIRECT_TARGET
        return value

    @field_validator("preserve_return_path", mode="before")
    @classmethod
    def null_means_false(cls, value: Any) -> Any:
        """An explicit None switches the return path off; only a missing key defaults to True."""
        if value is None:
            return False
        return value

    @classmethod
    def coerce(cls, options: GateOptions | Mapping[str, Any] | str | None = None) -> GateOptions:
        """Build options from any of the accepted construction forms.

        None            -> all defaults
        "/signin"       -> redirect_target="/signin"
        {"redirect_target": ..., "preserve_return_path": ...} (or aliases)
        GateOptions     -> returned as-is
        """
        if options is None:
            return cls()
        if isinstance(options, GateOptions):
            return options
        if isinstance(options, str):
            return cls(redirect_target=options)
        if isinstance(options, Mapping):
            return cls.model_validate(dict(options))
        raise TypeError(f"GateOptions expects a path string, mapping, or GateOptions; got {type(options).__name__}")


class ChainSignal(enum.Enum):
    """Explicit values a gate hands to its continuation instead of None.

    None means "proceed to the next handler". Both members below mean "stop
    the chain"; neither is an error.
    """

    ABORT = "abort"  # request rejected with a status, nothing else should run
    COMPLETED = "completed"  # a response (redirect) was already issued


ABORT = ChainSignal.ABORT
COMPLETED = ChainSignal.COMPLETED


@dataclass(frozen=True)
class Proceed:
    """The caller is authenticated; let the request through."""


@dataclass(frozen=True)
class RedirectTo:
    """Send a browser to the login page."""

    location: str
    return_to: str | None = None  # path recorded in the session, if any


@dataclass(frozen=True)
class RejectUnauthenticated:
    """Programmatic caller without a session: answer with a bare status."""

    status_code: int = 401


Outcome = Union[Proceed, RedirectTo, RejectUnauthenticated]
