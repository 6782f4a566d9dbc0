"""
auth/dependencies.py -- Authorization Guard and its FastAPI Depends() helper.

authenticate() is the framework-free guard: token in, User out, AuthError
on any failure. get_current_user() adapts it to FastAPI by reading the
Authorization: Bearer <token> header and the UserStore from app.state.

The user is always re-fetched from storage rather than trusted from the
token payload, so a deleted account cannot keep using old tokens.

Layer rule: no imports from api/ or products/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Request

from auth.models import User
from auth.store import UserStore
from auth.tokens import decode_access_token
from core.errors import AuthError

_NOT_AUTHORIZED = "Not authorized, please log in."


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an Authorization header value, if well formed."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def authenticate(store: UserStore, token: str | None) -> User:
    """Resolve the identity behind a session token.

    Raises AuthError when the token is absent, malformed, signature-invalid,
    expired, or names a user that no longer exists.
    """
    if not token:
        raise AuthError(_NOT_AUTHORIZED)
    payload = decode_access_token(token)
    if payload is None:
        raise AuthError(_NOT_AUTHORIZED)
    user = store.get_by_id(payload["user_id"])
    if user is None:
        raise AuthError(_NOT_AUTHORIZED)
    return user


def get_current_user(request: Request) -> User:
    """Require authentication. AuthError becomes HTTP 401 in api/main.py.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user: User = Depends(get_current_user)): ...
    """
    user_store: UserStore = request.app.state.user_store
    token = bearer_token(request.headers.get("Authorization"))
    return authenticate(user_store, token)
