# Auth context: the bearer token handed explicitly to the store client.
# Created: 2026-10-04
#
# The backend is responsible for rejecting unauthenticated calls; a missing
# token just means requests go out without an Authorization header.

from __future__ import annotations

import json
import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path

from driveview.config import Settings, get_config_dir

logger = logging.getLogger(__name__)

SESSION_FILE_NAME = "session.json"


@dataclass(frozen=True)
class AuthContext:
    """Credentials for one session."""

    token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def headers(self) -> dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}


ANONYMOUS = AuthContext()


class TokenStore:
    """File-based session token at ~/.driveview/session.json.

    The file is chmod 0600 (owner-only read/write).
    """

    def __init__(self, path: Path | None = None):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path or get_config_dir() / SESSION_FILE_NAME

    def save(self, token: str) -> None:
        path = self.path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps({"access_token": token}, indent=2))
        os.chmod(path, stat.S_IRUSR | stat.S_IWUSR)
        logger.info("Saved session token to %s", path)

    def load(self) -> str | None:
        """Return the stored token, or None if absent or unreadable."""
        path = self.path
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text())
        except (OSError, ValueError) as e:
            logger.warning("Failed to read session token from %s: %s", path, e)
            return None
        token = data.get("access_token") if isinstance(data, dict) else None
        return token or None

    def clear(self) -> bool:
        """Delete the stored token. Returns True if a file was removed."""
        path = self.path
        if path.exists():
            path.unlink()
            logger.info("Cleared session token at %s", path)
            return True
        return False


def resolve_auth(settings: Settings, store: TokenStore | None = None) -> AuthContext:
    """Pick the token from settings first, then from the token file."""
    if settings.access_token:
        return AuthContext(settings.access_token)
    store = store or TokenStore(settings.token_file)
    token = store.load()
    if token:
        return AuthContext(token)
    logger.debug("No session token found; requests will be unauthenticated")
    return ANONYMOUS
