#!/usr/bin/env python3
"""
LoginGuard -- dry-run the login gate against a described request.

Prints what the gate would do (proceed, redirect, or 401) and what it would
record in the session, without starting a server. Useful for checking a
gate configuration before deploying it.

Usage:
  python main.py /foo
  python main.py /foo --target /signin
  python main.py /foo --authenticated
  python main.py /foo --ajax
  python main.py /foo --header X-Requested-With=XMLHttpRequest
  python main.py /foo --original /sub/foo
  python main.py /foo --no-return-to --json

Environment variables:
  LOGIN_REDIRECT_TARGET        Default for --target (default: /login)
  LOGIN_PRESERVE_RETURN_PATH   Default for --no-return-to (default: true)
"""

import argparse
import json
import os
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from auth.context import SimpleRequestContext
from auth.gate import LoginGate
from auth.models import GateOptions, Outcome, Proceed, RedirectTo


_BOOL = TypeAdapter(bool)


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean env var with the same rules Settings applies to it (on/off, yes/no, 1/0...)."""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return _BOOL.validate_python(raw.strip())


def _parse_headers(pairs: list[str]) -> dict[str, str]:
    """Turn NAME=VALUE strings into a header dict. Malformed pairs are skipped with a warning."""
    headers: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            print(f"  [!] Ignoring malformed header '{pair}'. Expected NAME=VALUE.")
            continue
        headers[name.strip()] = value
    return headers


def describe(outcome: Outcome, session: dict) -> dict:
    """Return a JSON-serializable summary of a gate decision."""
    if isinstance(outcome, Proceed):
        result = {"outcome": "proceed"}
    elif isinstance(outcome, RedirectTo):
        result = {"outcome": "redirect", "location": outcome.location}
    else:
        result = {"outcome": "reject", "status": outcome.status_code}
    result["session"] = dict(session)
    return result


def run(
    path: str,
    target: Optional[str] = None,
    preserve_return_path: bool = True,
    authenticated: Optional[bool] = None,
    ajax: bool = False,
    headers: Optional[dict[str, str]] = None,
    original: Optional[str] = None,
    with_session: bool = True,
) -> dict:
    """Evaluate one described request and return describe()'s summary."""
    gate = LoginGate(GateOptions(redirect_target=target, preserve_return_path=preserve_return_path))
    session: Optional[dict] = {} if with_session else None
    ctx = SimpleRequestContext(
        path=path,
        is_authenticated=None if authenticated is None else (lambda: authenticated),
        original_path=original,
        session=session,
        query={"ajax": "true"} if ajax else {},
        headers=headers or {},
    )
    return describe(gate.evaluate(ctx), session or {})


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="loginguard",
        description="Dry-run the login gate against a described request.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py /foo
  python main.py /foo --target /signin --json
  python main.py /foo --header X-Requested-With=XMLHttpRequest
        """,
    )
    parser.add_argument("path", help="Request path, e.g. /profile")
    parser.add_argument(
        "--target",
        default=os.environ.get("LOGIN_REDIRECT_TARGET") or None,
        metavar="PATH",
        help="Login page to redirect to (default: /login)",
    )
    parser.add_argument(
        "--no-return-to",
        action="store_true",
        help="Do not record the requested path in the session before redirecting",
    )
    auth_group = parser.add_mutually_exclusive_group()
    auth_group.add_argument("--authenticated", action="store_true", help="Caller is logged in")
    auth_group.add_argument(
        "--anonymous",
        action="store_true",
        help="Caller is explicitly not logged in (default: no authentication layer at all)",
    )
    parser.add_argument("--ajax", action="store_true", help="Add ?ajax=true to the request")
    parser.add_argument(
        "--header",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Request header, may be repeated",
    )
    parser.add_argument("--original", metavar="PATH", help="Original path when the request came through a mount")
    parser.add_argument("--no-session", action="store_true", help="Request has no session store")
    parser.add_argument("--json", action="store_true", help="Output structured JSON")
    args = parser.parse_args()

    try:
        env_preserve = _env_bool("LOGIN_PRESERVE_RETURN_PATH", True)
    except ValidationError:
        parser.error("LOGIN_PRESERVE_RETURN_PATH must be a boolean (true/false, on/off, yes/no, 1/0)")
    authenticated: Optional[bool] = None
    if args.authenticated:
        authenticated = True
    elif args.anonymous:
        authenticated = False

    result = run(
        args.path,
        target=args.target,
        preserve_return_path=env_preserve and not args.no_return_to,
        authenticated=authenticated,
        ajax=args.ajax,
        headers=_parse_headers(args.header),
        original=args.original,
        with_session=not args.no_session,
    )

    if args.json:
        print(json.dumps(result, indent=2))
        return

    if result["outcome"] == "proceed":
        print(f"  {args.path}: proceed")
    elif result["outcome"] == "redirect":
        print(f"  {args.path}: redirect -> {result['location']}")
    else:
        print(f"  {args.path}: reject ({result['status']})")
    for key, value in result["session"].items():
        print(f"    session[{key!r}] = {value!r}")


if __name__ == "__main__":
    main()
