"""
Persisted GitLab access tokens.

Tokens are stored per host in ~/.gitpusher/credentials.json with owner-only
permissions, so the operator is asked for a token once per GitLab instance.
"""

from __future__ import annotations

import json
import logging
import os
import stat
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

CREDENTIALS_FILENAME = "credentials.json"
USER_DATA_DIR = ".gitpusher"


class StoredCredentials(BaseModel):
    """Root model for credentials.json."""

    tokens: dict[str, str] = Field(default_factory=dict, description="Access token per host")


def get_credentials_path() -> Path:
    """Get the path to ~/.gitpusher/credentials.json."""
    return Path.home() / USER_DATA_DIR / CREDENTIALS_FILENAME


class TokenStore:
    """
    Store for GitLab access tokens.

    Example:
        >>> store = TokenStore()
        >>> store.save("gitlab.com", "glpat-...")
        >>> store.get("gitlab.com")
        'glpat-...'
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or get_credentials_path()

    def _read(self) -> StoredCredentials:
        if not self.path.exists():
            return StoredCredentials()
        try:
            return StoredCredentials.model_validate_json(self.path.read_text())
        except (ValidationError, OSError) as e:
            logger.warning(f"Ignoring unreadable credentials at {self.path}: {e}")
            return StoredCredentials()

    def _write(self, credentials: StoredCredentials) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(credentials.model_dump(), indent=2) + "\n")
        try:
            os.chmod(self.path, stat.S_IRUSR | stat.S_IWUSR)  # 0o600
        except OSError as e:
            logger.warning(f"Could not restrict permissions on {self.path}: {e}")

    def get(self, host: str) -> str | None:
        """Get the stored token for a host, if any."""
        return self._read().tokens.get(host) or None

    def save(self, host: str, token: str) -> None:
        """Remember a token for a host."""
        credentials = self._read()
        credentials.tokens[host] = token
        self._write(credentials)

    def forget(self, host: str) -> bool:
        """
        Drop the stored token for a host.

        Returns:
            True if a token was removed
        """
        credentials = self._read()
        if host not in credentials.tokens:
            return False
        del credentials.tokens[host]
        self._write(credentials)
        return True
