"""Client-side persisted state: the session and the carts.

Everything lives in one JSON document so that clearing a session is a single
atomic write.
"""
import json
import logging
import os
from pathlib import Path
import tempfile
from typing import Any, Optional

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "authToken"
REFRESH_TOKEN_KEY = "refreshToken"
USER_ID_KEY = "userId"
USER_NAME_KEY = "userName"
USER_EMAIL_KEY = "userEmail"

SESSION_KEYS = (ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, USER_ID_KEY, USER_NAME_KEY, USER_EMAIL_KEY)


class SessionStorage:
    """Key/value store backed by a JSON file, or memory when ``path`` is None."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else None
        self._data: dict[str, Any] = self._load()

    def _load(self) -> dict[str, Any]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            # An unreadable file means no usable session.
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _flush(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".session-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._data, f)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._flush()

    def remove(self, *keys: str) -> None:
        for key in keys:
            self._data.pop(key, None)
        self._flush()

    @property
    def access_token(self) -> Optional[str]:
        return self._data.get(ACCESS_TOKEN_KEY)

    @property
    def refresh_token(self) -> Optional[str]:
        return self._data.get(REFRESH_TOKEN_KEY)

    @property
    def user_id(self) -> Optional[str]:
        return self._data.get(USER_ID_KEY)

    def save_session(self, access_token: str, refresh_token: str, user: dict) -> None:
        """Store a token pair and the user it belongs to in one write."""
        self._data.update({
            ACCESS_TOKEN_KEY: access_token,
            REFRESH_TOKEN_KEY: refresh_token,
            USER_ID_KEY: user.get("_id"),
            USER_NAME_KEY: user.get("name"),
            USER_EMAIL_KEY: user.get("email"),
        })
        self._flush()

    def clear_session(self) -> None:
        """Drop tokens and user identity together. Carts are kept."""
        self.remove(*SESSION_KEYS)
