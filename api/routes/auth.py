"""
api/routes/auth.py -- Signup, login and identity REST endpoints.

Routes:
  POST /api/auth/signup             -- register; returns token + user (201)
  POST /api/auth/login              -- password login; returns token + user
  GET  /api/auth/me                 -- current user info (requires auth)
  POST /api/auth/password-strength  -- advisory password rule check (public)

Security:
  [H2] signup and login are rate-limited per IP (Settings.*_rate_limit).
  [C1] auth.service.login() provides timing equalization -- use it, never inline.
  [M5] Cache-Control: no-store on responses that carry a token.

Errors raised by auth.service (ValidationError, ConflictError, AuthError)
propagate to the AppError handler in api/main.py.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from api.limiter import limiter
from api.models import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    PasswordCheckRequest,
    PasswordCheckResponse,
    SignupRequest,
    UserOut,
)
from auth import service
from auth.dependencies import get_current_user
from auth.models import User
from auth.store import UserStore
from core.config import get_settings
from core.validators import password_error, validate_password

_settings = get_settings()

# Auth policy:
# - POST /api/auth/signup:            public
# - POST /api/auth/login:             public
# - POST /api/auth/password-strength: public -- the check is a pure function
# - GET  /api/auth/me:                requires auth (get_current_user)
router = APIRouter()


@limiter.limit(_settings.signup_rate_limit)
@router.post("/auth/signup", response_model=AuthResponse, status_code=201)
def signup(request: Request, response: Response, body: SignupRequest) -> AuthResponse:
    """Register a new account and return a session token.

    The server is the authoritative validator: the same rules the CLI client
    checks are re-run here on the raw values.
    """
    user_store: UserStore = request.app.state.user_store
    user, token = service.signup(user_store, body.name, body.email, body.password)
    response.headers["Cache-Control"] = "no-store"  # [M5]
    return AuthResponse(message="User registered successfully", token=token, user=UserOut.from_user(user))


@limiter.limit(_settings.login_rate_limit)  # [H2] brute-force mitigation
@router.post("/auth/login", response_model=AuthResponse)
def login(request: Request, response: Response, body: LoginRequest) -> AuthResponse:
    """Authenticate with email and password.

    Returns the same generic 401 for an unknown email and a wrong password
    to avoid leaking which addresses are registered.
    """
    user_store: UserStore = request.app.state.user_store
    user, token = service.login(user_store, body.email, body.password)
    response.headers["Cache-Control"] = "no-store"  # [M5]
    return AuthResponse(message="Login successful", token=token, user=UserOut.from_user(user))


@router.get("/auth/me", response_model=MeResponse)
def me(current_user: User = Depends(get_current_user)) -> MeResponse:
    """Return identity information for the currently authenticated user."""
    return MeResponse(user=UserOut.from_user(current_user))


@router.post("/auth/password-strength", response_model=PasswordCheckResponse)
def password_strength(body: PasswordCheckRequest) -> PasswordCheckResponse:
    """Report which password rules a candidate satisfies. Advisory only."""
    strength = validate_password(body.password)
    return PasswordCheckResponse(
        valid=strength.ok,
        checks=strength.as_dict(),
        message=password_error(body.password),
    )
