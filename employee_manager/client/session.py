"""Client session: the bearer token and user profile, persisted between runs."""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_SESSION_FILE = Path.home() / ".employee_manager" / "session.json"


def default_session_path() -> Path:
    override = os.getenv("EMPLOYEE_MANAGER_SESSION")
    return Path(override) if override else DEFAULT_SESSION_FILE


class SessionStore:
    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else default_session_path()

    def load(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text())
        except (json.JSONDecodeError, OSError):
            return None
        if not isinstance(data, dict) or not data.get("token"):
            return None
        return data

    @property
    def token(self) -> Optional[str]:
        data = self.load()
        return data["token"] if data else None

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        data = self.load()
        return data.get("user") if data else None

    def save(self, token: str, user: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # The token is a credential: never readable by others, not even briefly
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w") as f:
            json.dump({"token": token, "user": user}, f, indent=2)
        # O_CREAT leaves the mode of an existing file untouched
        os.chmod(self.path, 0o600)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
