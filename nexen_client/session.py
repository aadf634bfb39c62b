"""Persisted session state: the bearer token and the signed-in user.

The token survives process restarts through a small JSON file. Logout and
any 401 from the API remove it.

SECURITY: The token value is never logged.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class SessionStore:
    """File-backed token and user storage.

    Parameters
    ----------
    path:
        JSON file holding ``{"token": ..., "user": {...}}``. ``None`` keeps the
        session in memory only.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path).expanduser() if path is not None else None
        self._token: str | None = None
        self._user: dict[str, Any] | None = None
        self.load()

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def user(self) -> dict[str, Any] | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def load(self) -> None:
        """Read the persisted session, treating an unreadable file as signed out."""
        if self._path is None or not self._path.exists():
            return
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable session file at %s: %s", self._path, exc)
            return
        if not isinstance(raw, dict):
            logger.warning("Ignoring malformed session file at %s", self._path)
            return
        token = raw.get("token")
        user = raw.get("user")
        self._token = token if isinstance(token, str) and token else None
        self._user = user if isinstance(user, dict) else None

    def set(self, token: str, user: dict[str, Any] | None = None) -> None:
        """Store a new session and persist it."""
        self._token = token
        self._user = user
        self._save()
        logger.info("Session stored")

    def clear(self) -> None:
        """Forget the token and user, removing the persisted file."""
        had_session = self._token is not None
        self._token = None
        self._user = None
        if self._path is not None:
            try:
                self._path.unlink()
            except FileNotFoundError:
                pass
        if had_session:
            logger.info("Session cleared")

    def _save(self) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps({"token": self._token, "user": self._user})
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(payload, encoding="utf-8")
        os.replace(tmp, self._path)
