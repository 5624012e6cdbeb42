"""Google OAuth authentication utilities."""

from gcal_cli.google.exceptions import (
    AuthError,
    ConfigError,
    CredentialsNotFoundError,
    GoogleAuthError,
    ScopeMismatchError,
    TokenNotFoundError,
    TokenStoreError,
)
from gcal_cli.google.oauth import AuthenticatedTransport, GoogleOAuth
from gcal_cli.google.token_store import Credential, TokenStore

__all__ = [
    "GoogleOAuth",
    "AuthenticatedTransport",
    "Credential",
    "TokenStore",
    "GoogleAuthError",
    "ConfigError",
    "CredentialsNotFoundError",
    "AuthError",
    "TokenNotFoundError",
    "TokenStoreError",
    "ScopeMismatchError",
]
