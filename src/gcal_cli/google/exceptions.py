"""Google authentication exceptions."""

from gcal_cli.exceptions import ConfigError, CredentialsNotFoundError, GcalCliError

__all__ = [
    "GoogleAuthError",
    "ConfigError",
    "CredentialsNotFoundError",
    "AuthError",
    "TokenNotFoundError",
    "TokenStoreError",
    "ScopeMismatchError",
]


class GoogleAuthError(GcalCliError):
    """Base exception for Google authentication errors."""

    pass


class AuthError(GoogleAuthError):
    """Raised when the authorization code exchange or transport setup fails."""

    pass


class TokenNotFoundError(GoogleAuthError):
    """Raised when no usable cached token exists."""

    def __init__(self, path: str, reason: str = "no token file"):
        self.path = path
        self.reason = reason
        super().__init__(f"No cached token at {path}: {reason}")


class TokenStoreError(GoogleAuthError):
    """Raised when the cached token cannot be written."""

    pass


class ScopeMismatchError(GoogleAuthError):
    """Raised when token scopes don't match required scopes."""

    def __init__(self, missing_scopes: set[str]):
        self.missing_scopes = missing_scopes
        super().__init__(f"Token missing required scopes: {missing_scopes}")
