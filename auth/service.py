"""
auth/service.py -- Signup and login.

The authoritative credential checks live here. Route handlers pass raw
request values through unchanged; every rule (required fields, trimming,
email shape, password strength, uniqueness) is applied in this module so
no client can skip it.

Login failures are deliberately indistinguishable: an unknown email and a
wrong password produce the same AuthError, and bcrypt runs in both cases so
response time does not reveal which one happened [C1].

Layer rule: no imports from api/ or products/.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from auth.models import User
from auth.store import UserStore
from auth.tokens import DUMMY_HASH, create_access_token, hash_password, verify_password
from core.errors import AuthError, ConflictError, ValidationError
from core.validators import email_error, name_error, normalize_email, password_error

logger = logging.getLogger("productdesk.auth")

BAD_CREDENTIALS = "Invalid email or password."
_EMAIL_TAKEN = "An account with this email already exists. Please login or use a different email."


def _require(fields: dict[str, str | None], prefix: str) -> None:
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise ValidationError(f"{prefix}: {', '.join(missing)}")


def signup(store: UserStore, name: str | None, email: str | None, password: str | None) -> tuple[User, str]:
    """Register a new identity and issue its first session token.

    Raises:
        ValidationError: a field is missing, the name is shorter than two
            characters, the email is malformed or the password is weak.
        ConflictError: the normalized email is already registered.
    """
    _require({"name": name, "email": email, "password": password}, "Please fill in all required fields")

    trimmed_name = name.strip()
    trimmed_email = email.strip()

    problem = name_error(trimmed_name) or email_error(trimmed_email) or password_error(password)
    if problem:
        raise ValidationError(problem)

    normalized = normalize_email(trimmed_email)
    if store.email_exists(normalized):
        logger.info("Signup rejected: email already registered")
        raise ConflictError(_EMAIL_TAKEN)

    user = User(name=trimmed_name, email=normalized, hashed_password=hash_password(password))
    try:
        user_id = store.create_user(user)
    except IntegrityError as exc:
        # A concurrent signup won the race past the pre-check.
        raise ConflictError(_EMAIL_TAKEN) from exc

    created = store.get_by_id(user_id)
    logger.info("User %d registered", user_id)
    return created, create_access_token(user_id)


def login(store: UserStore, email: str | None, password: str | None) -> tuple[User, str]:
    """Verify credentials and issue a new session token.

    Earlier tokens for the same user are left valid.

    Raises:
        ValidationError: email or password missing, or email malformed.
        AuthError: unknown email or wrong password (same message for both).
    """
    missing = [field for field, value in (("email", email), ("password", password)) if not value]
    if missing:
        raise ValidationError(f"Please provide {' and '.join(missing)}")

    if email_error(email.strip()):
        raise ValidationError("Please provide a valid email address")

    user = store.get_by_email(normalize_email(email))
    if user is None:
        # Equalize timing -- do NOT return early before running bcrypt [C1]
        verify_password(password, DUMMY_HASH)
        logger.info("Failed login")
        raise AuthError(BAD_CREDENTIALS, code="bad_credentials")
    if not verify_password(password, user.hashed_password):
        logger.info("Failed login for user %d", user.id)
        raise AuthError(BAD_CREDENTIALS, code="bad_credentials")

    logger.info("User %d logged in", user.id)
    return user, create_access_token(user.id)
