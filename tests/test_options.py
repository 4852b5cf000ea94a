"""
tests/test_options.py -- GateOptions construction contract.

Covers every accepted construction form (None, bare string, mapping with
either spelling, GateOptions instance), the defaults, the empty-target
fallback, immutability, and rejection of unsupported types.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from auth.gate import LoginGate
from auth.models import DEFAULT_REDIRECT_TARGET, GateOptions


def test_defaults() -> None:
    opts = GateOptions.coerce(None)
    assert opts.redirect_target == "/login"
    assert opts.preserve_return_path is True


def test_bare_string_is_redirect_target() -> None:
    assert GateOptions.coerce("/signin") == GateOptions(redirect_target="/signin", preserve_return_path=True)


def test_mapping_with_partial_fields() -> None:
    opts = GateOptions.coerce({"preserve_return_path": False})
    assert opts.redirect_target == DEFAULT_REDIRECT_TARGET
    assert opts.preserve_return_path is False


def test_mapping_with_camel_case_aliases() -> None:
    opts = GateOptions.coerce({"redirectTo": "/session/new", "setReturnTo": False})
    assert opts.redirect_target == "/session/new"
    assert opts.preserve_return_path is False


def test_unknown_mapping_keys_are_ignored() -> None:
    assert GateOptions.coerce({"failureFlash": True}) == GateOptions()


def test_instance_is_returned_unchanged() -> None:
    opts = GateOptions(redirect_target="/x")
    assert GateOptions.coerce(opts) is opts


@pytest.mark.parametrize("empty", ["", None])
def test_empty_target_falls_back_to_login(empty) -> None:
    assert GateOptions(redirect_target=empty).redirect_target == "/login"
    assert LoginGate(empty).redirect_target == "/login"


def test_options_are_frozen() -> None:
    opts = GateOptions()
    with pytest.raises(ValidationError):
        opts.redirect_target = "/elsewhere"


def test_unsupported_type_raises_at_construction() -> None:
    with pytest.raises(TypeError):
        LoginGate(42)  # type: ignore[arg-type]


def test_gate_repr_names_its_options() -> None:
    assert repr(LoginGate("/signin")) == "LoginGate(redirect_target='/signin', preserve_return_path=True)"


def test_mapping_with_long_camel_case_names() -> None:
    opts = GateOptions.coerce({"redirectTarget": "/session/new", "preserveReturnPath": False})
    assert opts.redirect_target == "/session/new"
    assert opts.preserve_return_path is False


def test_explicit_none_disables_return_path() -> None:
    assert GateOptions.coerce({"setReturnTo": None}).preserve_return_path is False
    assert GateOptions.coerce({"preserve_return_path": None}).preserve_return_path is False
