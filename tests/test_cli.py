"""
tests/test_cli.py -- The main.py dry-run helpers.

run() is tested directly; main() only parses arguments and prints.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from main import _env_bool, _parse_headers, run


def test_default_request_redirects_and_records_path() -> None:
    assert run("/foo") == {"outcome": "redirect", "location": "/login", "session": {"returnTo": "/foo"}}


def test_authenticated_request_proceeds() -> None:
    assert run("/foo", authenticated=True) == {"outcome": "proceed", "session": {}}


def test_ajax_request_is_rejected() -> None:
    assert run("/foo", ajax=True) == {"outcome": "reject", "status": 401, "session": {}}


def test_header_marks_request_programmatic() -> None:
    result = run("/foo", headers=_parse_headers(["X-Requested-With=XMLHttpRequest"]))
    assert result["outcome"] == "reject"


def test_original_path_and_custom_target() -> None:
    result = run("/foo", target="/signin", original="/sub/foo")
    assert result == {"outcome": "redirect", "location": "/signin", "session": {"returnTo": "/sub/foo"}}


def test_no_return_to() -> None:
    result = run("/foo", target="/session/new", preserve_return_path=False)
    assert result == {"outcome": "redirect", "location": "/session/new", "session": {}}


def test_malformed_header_is_skipped(capsys) -> None:
    assert _parse_headers(["nonsense", "Accept=text/html"]) == {"Accept": "text/html"}
    assert "malformed" in capsys.readouterr().out


@pytest.mark.parametrize("raw", ["off", "n", "no", "false", "0", "FALSE"])
def test_env_flag_false_spellings_match_settings(monkeypatch, raw: str) -> None:
    monkeypatch.setenv("LOGIN_PRESERVE_RETURN_PATH", raw)
    assert _env_bool("LOGIN_PRESERVE_RETURN_PATH", True) is False


@pytest.mark.parametrize("raw", ["on", "y", "yes", "true", "1"])
def test_env_flag_true_spellings(monkeypatch, raw: str) -> None:
    monkeypatch.setenv("LOGIN_PRESERVE_RETURN_PATH", raw)
    assert _env_bool("LOGIN_PRESERVE_RETURN_PATH", False) is True


def test_env_flag_unset_uses_default(monkeypatch) -> None:
    monkeypatch.delenv("LOGIN_PRESERVE_RETURN_PATH", raising=False)
    assert _env_bool("LOGIN_PRESERVE_RETURN_PATH", True) is True


def test_env_flag_garbage_is_rejected(monkeypatch) -> None:
    monkeypatch.setenv("LOGIN_PRESERVE_RETURN_PATH", "maybe")
    with pytest.raises(ValidationError):
        _env_bool("LOGIN_PRESERVE_RETURN_PATH", True)
