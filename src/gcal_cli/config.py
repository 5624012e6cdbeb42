"""Centralized configuration.

Files used by gcal-cli:
    credentials.json   - OAuth client credentials (working directory by default)
    ~/token.json       - cached OAuth token
    .env               - optional overrides (GCAL_CLI_CREDENTIALS, GCAL_CLI_TOKEN,
                         GCAL_CLI_TIME_ZONE)

This module auto-loads the .env file on import. Values already present in the
environment take precedence over the file.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from gcal_cli.exceptions import ConfigError, CredentialsNotFoundError

ENV_FILE = Path(".env")

DEFAULT_CREDENTIALS = Path("credentials.json")
DEFAULT_TOKEN = Path.home() / "token.json"

# Civil input format and the zone it is interpreted in
DEFAULT_TIME_FORMAT = "%Y-%m-%d %H:%M"
DEFAULT_TIME_ZONE = "Asia/Kolkata"


def _load_env_file(env_path: Path) -> dict[str, str]:
    """Load environment variables from a file.

    Args:
        env_path: Path to .env file.

    Returns:
        Dictionary of loaded variables.
    """
    loaded = {}
    if not env_path.exists():
        return loaded

    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()

            if (value.startswith('"') and value.endswith('"')) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]

            if key and key not in os.environ:
                os.environ[key] = value
                loaded[key] = value

    return loaded


@dataclass
class Settings:
    """Runtime settings for one session."""

    credentials_path: Path = DEFAULT_CREDENTIALS
    token_path: Path = DEFAULT_TOKEN
    time_format: str = DEFAULT_TIME_FORMAT
    time_zone: str = DEFAULT_TIME_ZONE

    @classmethod
    def from_env(cls, **overrides: str | Path | None) -> Settings:
        """Build settings from the environment, then apply non-empty overrides.

        Raises:
            ConfigError: If the resulting time zone is unknown.
        """
        settings = cls(
            credentials_path=Path(os.environ.get("GCAL_CLI_CREDENTIALS", DEFAULT_CREDENTIALS)),
            token_path=Path(os.environ.get("GCAL_CLI_TOKEN", DEFAULT_TOKEN)),
            time_zone=os.environ.get("GCAL_CLI_TIME_ZONE", DEFAULT_TIME_ZONE),
        )
        for name, value in overrides.items():
            if value is None:
                continue
            if name.endswith("_path"):
                value = Path(value).expanduser()
            setattr(settings, name, value)

        settings.validate()
        return settings

    def validate(self) -> None:
        try:
            ZoneInfo(self.time_zone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigError(f"Unknown time zone: {self.time_zone}") from e


@dataclass
class AppConfig:
    """OAuth client registration read from a client-secret file."""

    client_id: str
    client_secret: str
    auth_uri: str = "https://accounts.google.com/o/oauth2/auth"
    token_uri: str = "https://oauth2.googleapis.com/token"
    redirect_uris: list[str] = field(default_factory=list)

    @property
    def redirect_uri(self) -> str:
        """First registered redirect URI (loopback for installed apps)."""
        return self.redirect_uris[0] if self.redirect_uris else "http://localhost"


def load_app_config(path: str | Path) -> AppConfig:
    """Load the OAuth client configuration.

    Handles both the "installed" and "web" layouts downloaded from
    Google Cloud Console.

    Raises:
        CredentialsNotFoundError: If the file does not exist.
        ConfigError: If the file cannot be read or parsed.
    """
    path = Path(path)
    if not path.exists():
        raise CredentialsNotFoundError(str(path))

    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Unable to parse client secret file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Unable to parse client secret file {path}: expected a JSON object")

    if "installed" in data:
        app = data["installed"]
    elif "web" in data:
        app = data["web"]
    else:
        raise ConfigError("Invalid credentials.json format. Expected 'installed' or 'web' key.")

    try:
        config = AppConfig(client_id=app["client_id"], client_secret=app["client_secret"])
    except (KeyError, TypeError) as e:
        raise ConfigError(f"Client secret file {path} is missing {e}") from e

    if app.get("auth_uri"):
        config.auth_uri = app["auth_uri"]
    if app.get("token_uri"):
        config.token_uri = app["token_uri"]
    config.redirect_uris = list(app.get("redirect_uris", []))
    return config


# Auto-load .env from the working directory on import
_loaded = _load_env_file(ENV_FILE)
