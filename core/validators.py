"""
core/validators.py -- Credential validation rules.

Pure functions, no I/O. The server calls these at the trust boundary
(auth/service.py is authoritative); the CLI client calls the same functions
for advisory feedback before a request is sent.

Password rules, checked in this order:
  length >= 8, one upper-case letter, one lower-case letter, one digit,
  one character from SPECIAL_CHARACTERS.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
SPECIAL_CHARACTERS = "!@#$%^&*()_+-=[]{};':\"\\|,.<>/?"
MIN_PASSWORD_LENGTH = 8
MIN_NAME_LENGTH = 2

_EMAIL_RE = re.compile(EMAIL_PATTERN)
_SPECIAL_RE = re.compile("[" + re.escape(SPECIAL_CHARACTERS) + "]")


@dataclass(frozen=True)
class PasswordStrength:
    length: bool
    uppercase: bool
    lowercase: bool
    digit: bool
    special_char: bool

    @property
    def ok(self) -> bool:
        return all(asdict(self).values())

    def as_dict(self) -> dict[str, bool]:
        """Flags keyed by their wire names (specialChar is camelCase)."""
        return {
            "length": self.length,
            "uppercase": self.uppercase,
            "lowercase": self.lowercase,
            "digit": self.digit,
            "specialChar": self.special_char,
        }


_PASSWORD_MESSAGES: tuple[tuple[str, str], ...] = (
    ("length", f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"),
    ("uppercase", "Password must contain at least one uppercase letter (A-Z)"),
    ("lowercase", "Password must contain at least one lowercase letter (a-z)"),
    ("digit", "Password must contain at least one digit (0-9)"),
    ("special_char", "Password must contain at least one special character (!@#$%^&*...)"),
)


def validate_email(value: str) -> bool:
    """Return True iff value looks like local@domain.tld."""
    return _EMAIL_RE.fullmatch(value) is not None


def validate_password(value: str) -> PasswordStrength:
    return PasswordStrength(
        length=len(value) >= MIN_PASSWORD_LENGTH,
        uppercase=re.search(r"[A-Z]", value) is not None,
        lowercase=re.search(r"[a-z]", value) is not None,
        digit=re.search(r"[0-9]", value) is not None,
        special_char=_SPECIAL_RE.search(value) is not None,
    )


def password_error(value: str) -> str | None:
    """Return the message for the first failing password rule, or None."""
    strength = validate_password(value)
    for flag, message in _PASSWORD_MESSAGES:
        if not getattr(strength, flag):
            return message
    return None


def email_error(value: str) -> str | None:
    """Return a human-readable reason the email is rejected, or None.

    The specific @ and domain messages come first so users see the concrete
    problem before the catch-all shape message.
    """
    if not value:
        return "Email is required"
    if "@" not in value:
        return "Email must contain @ symbol"
    parts = value.split("@")
    if len(parts) != 2 or "." not in parts[1]:
        return "Email must have a valid domain (e.g., .com, .org, .net)"
    if not validate_email(value):
        return "Please provide a valid email address (e.g., user@example.com)"
    return None


def name_error(value: str) -> str | None:
    if not value:
        return "Name cannot be empty"
    if len(value) < MIN_NAME_LENGTH:
        return f"Name must be at least {MIN_NAME_LENGTH} characters long"
    return None


def normalize_email(value: str) -> str:
    return value.strip().lower()
