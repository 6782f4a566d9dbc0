"""
auth/models.py -- Domain dataclass for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in products/models.py -- dataclasses own domain shape; stores and services
do the work.

Layer rule: no imports from api/ or products/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered identity.

    email is always stored normalized (trimmed, lower-cased) and is unique.
    hashed_password is a bcrypt hash; the plaintext is never persisted and the
    hash never leaves the auth package (see public_dict()).
    """

    name: str
    email: str
    hashed_password: str
    id: int | None = None
    created_at: str | None = None

    def public_dict(self) -> dict:
        """The fields safe to return to a client."""
        return {"id": self.id, "name": self.name, "email": self.email}
