"""Base exceptions shared across gcal-cli."""


class GcalCliError(Exception):
    """Base exception for all gcal-cli errors."""

    pass


class ConfigError(GcalCliError):
    """Raised when local configuration is missing or malformed."""

    pass


class CredentialsNotFoundError(ConfigError):
    """Raised when OAuth credentials file is not found."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Credentials file not found at {path}. "
            "Please download OAuth credentials from Google Cloud Console."
        )
