"""Local storage for the cached OAuth token.

The token is kept as a single JSON document in the google-auth
authorized-user layout, so other Google tooling can read it too:

    {
        "token": "...",
        "refresh_token": "...",
        "token_uri": "https://oauth2.googleapis.com/token",
        "client_id": "...",
        "client_secret": "...",
        "scopes": ["https://www.googleapis.com/auth/calendar", ...],
        "type": "Bearer",
        "expiry": 1767225600
    }

The file holds a bearer credential and is always written with mode 0600.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from gcal_cli.config import DEFAULT_TOKEN, AppConfig
from gcal_cli.google.exceptions import TokenNotFoundError, TokenStoreError

logger = logging.getLogger(__name__)


@dataclass
class Credential:
    """OAuth access/refresh token pair with expiry metadata."""

    access_token: str
    refresh_token: str | None = None
    token_type: str = "Bearer"
    expires_at: float | None = None
    scopes: list[str] = field(default_factory=list)

    @classmethod
    def from_oauth_token(cls, token: dict[str, Any]) -> Credential:
        """Convert an Authlib token dict to a Credential."""
        return cls(
            access_token=token["access_token"],
            refresh_token=token.get("refresh_token"),
            token_type=token.get("token_type", "Bearer"),
            expires_at=token.get("expires_at"),
            scopes=token.get("scope", "").split(),
        )

    @property
    def is_expired(self) -> bool:
        if not self.expires_at:
            return False
        return self.expires_at < datetime.now().timestamp()


class TokenStore:
    """Reads and writes the cached credential file.

    Example:
        >>> store = TokenStore()
        >>> try:
        ...     credential = store.load()
        ... except TokenNotFoundError:
        ...     credential = run_authorization()
        ...     store.save(credential)
    """

    def __init__(self, path: str | Path | None = None, app: AppConfig | None = None):
        """Initialize the store.

        Args:
            path: Token file location. Defaults to ~/token.json.
            app: Client registration recorded alongside the token so the file
                is usable as a google-auth authorized-user file.
        """
        self.path = Path(path) if path else DEFAULT_TOKEN
        self.app = app

    def load(self) -> Credential:
        """Load the cached credential.

        Raises:
            TokenNotFoundError: If the file is missing or cannot be deserialized.
        """
        if not self.path.exists():
            logger.info("No existing token found")
            raise TokenNotFoundError(str(self.path))

        try:
            with open(self.path) as f:
                token_data = json.load(f)

            expiry = token_data.get("expiry")
            if expiry and isinstance(expiry, str):
                dt = datetime.fromisoformat(expiry.replace("Z", "+00:00"))
                expires_at = dt.timestamp()
            else:
                expires_at = expiry

            credential = Credential(
                access_token=token_data["token"],
                refresh_token=token_data.get("refresh_token"),
                token_type=token_data.get("type", "Bearer"),
                expires_at=expires_at,
                scopes=list(token_data.get("scopes", [])),
            )
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Failed to load token from {self.path}: {e}")
            raise TokenNotFoundError(str(self.path), reason=str(e)) from e

        logger.info(f"Loaded token with scopes: {credential.scopes}")
        return credential

    def save(self, credential: Credential) -> None:
        """Atomically replace the cached credential.

        Raises:
            TokenStoreError: If the file cannot be written.
        """
        token_data = {
            "token": credential.access_token,
            "refresh_token": credential.refresh_token,
            "token_uri": self.app.token_uri if self.app else None,
            "client_id": self.app.client_id if self.app else None,
            "client_secret": self.app.client_secret if self.app else None,
            "scopes": credential.scopes,
            "type": credential.token_type,
            "expiry": credential.expires_at,
        }

        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".token-", suffix=".json")
        except OSError as e:
            raise TokenStoreError(f"unable to cache oauth token: {e}") from e

        try:
            with os.fdopen(fd, "w") as f:
                # mkstemp already creates the file 0600; fchmod covers odd umasks
                os.fchmod(f.fileno(), 0o600)
                json.dump(token_data, f, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as e:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_name)
            raise TokenStoreError(f"unable to cache oauth token: {e}") from e

        logger.info(f"Token saved to {self.path}")
