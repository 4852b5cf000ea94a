"""
auth/backend.py -- Session-backed Starlette AuthenticationBackend.

Computes the authentication state the login gate consumes. A request is
authenticated when the signed session cookie carries a "user" entry, which
POST /login sets and POST /logout clears. Credentials are never checked here.

Must run inside SessionMiddleware; without a session in scope every request
is anonymous.
"""

from __future__ import annotations

from starlette.authentication import AuthCredentials, AuthenticationBackend, BaseUser, SimpleUser
from starlette.requests import HTTPConnection

SESSION_USER_KEY = "user"


class SessionAuthBackend(AuthenticationBackend):
    async def authenticate(self, conn: HTTPConnection) -> tuple[AuthCredentials, BaseUser] | None:
        if "session" not in conn.scope:
            return None
        username = conn.session.get(SESSION_USER_KEY)
        if not username:
            return None
        return AuthCredentials(["authenticated"]), SimpleUser(username)
