"""
client/session.py -- Persist the CLI login between invocations.

The token and public user info are kept in a small JSON file, readable only
by the current user. Any 401 from the server clears it, so an expired token
does not linger.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

DEFAULT_SESSION_PATH = Path.home() / ".productdesk" / "session.json"


class SessionFile:
    def __init__(self, path: Path = DEFAULT_SESSION_PATH) -> None:
        self.path = path

    def load(self) -> Optional[dict[str, Any]]:
        """Return {"token": ..., "user": {...}} or None if not logged in."""
        if not self.path.is_file():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return None
        if not isinstance(data, dict) or not data.get("token"):
            return None
        return data

    def save(self, token: str, user: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Owner-only from creation; the chmod covers a file that already existed.
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump({"token": token, "user": user}, fh)
        os.chmod(self.path, 0o600)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
