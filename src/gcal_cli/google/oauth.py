"""Google OAuth management using Authlib.

This module obtains an authenticated transport for the Calendar API:
- Reuses the cached token from ~/token.json when present
- Otherwise runs the authorization-code flow interactively
- Persists tokens that the transport refreshed during the session

The access token is not validated up front. google-auth refreshes an expired
token on the first request, and `persist_refreshed` writes the new token back.
"""

from __future__ import annotations

import logging
import webbrowser
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import requests
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.requests_client import OAuth2Session
from google.oauth2.credentials import Credentials as GoogleCredentials
from googleapiclient.discovery import build

from gcal_cli.config import AppConfig
from gcal_cli.google.exceptions import AuthError, ScopeMismatchError, TokenNotFoundError
from gcal_cli.google.token_store import Credential, TokenStore
from gcal_cli.prompt import Prompt, console_prompt

logger = logging.getLogger(__name__)


SCOPES = {
    "calendar": "https://www.googleapis.com/auth/calendar",
    "calendar_events": "https://www.googleapis.com/auth/calendar.events",
    "calendar_readonly": "https://www.googleapis.com/auth/calendar.readonly",
}

DEFAULT_SCOPES = ["calendar", "calendar_events", "calendar_readonly"]


class AuthenticatedTransport:
    """A credential wrapped for use by Google API clients."""

    def __init__(self, credential: Credential, credentials: GoogleCredentials):
        self.credential = credential
        self.credentials = credentials

    @property
    def refreshed(self) -> bool:
        """True if google-auth replaced the access token during the session."""
        token = self.credentials.token
        return bool(token) and token != self.credential.access_token

    def build_service(self, service_name: str = "calendar", version: str = "v3") -> Any:
        """Build a Google API service on top of this transport.

        Raises:
            AuthError: If the service cannot be constructed.
        """
        try:
            return build(service_name, version, credentials=self.credentials)
        except Exception as e:
            raise AuthError(f"Unable to create {service_name} service: {e}") from e


class GoogleOAuth:
    """Google OAuth management using Authlib.

    Example:
        >>> app = load_app_config("credentials.json")
        >>> auth = GoogleOAuth(app)
        >>> transport = auth.obtain()
        >>> service = transport.build_service("calendar", "v3")
        >>> ...
        >>> auth.persist_refreshed(transport)
    """

    def __init__(
        self,
        app: AppConfig,
        token_path: str | Path | None = None,
        prompt: Prompt | None = None,
        open_browser: bool = False,
    ):
        """Initialize Google OAuth.

        Args:
            app: OAuth client registration.
            token_path: Path to store/load tokens. Defaults to ~/token.json.
            prompt: Line source used to read the authorization code.
            open_browser: Open the authorization URL in a browser as well as printing it.
        """
        self.app = app
        self.store = TokenStore(token_path, app=app)
        self.required_scopes = [SCOPES[name] for name in DEFAULT_SCOPES]
        self.prompt = prompt or console_prompt
        self.open_browser = open_browser

        self.session = OAuth2Session(
            client_id=app.client_id,
            client_secret=app.client_secret,
            scope=" ".join(self.required_scopes),
            redirect_uri=app.redirect_uri,
            token_endpoint=app.token_uri,
            token_endpoint_auth_method="client_secret_post",
        )
        self._state: str | None = None

    def obtain(self) -> AuthenticatedTransport:
        """Return a transport backed by the cached or a freshly authorized token.

        Raises:
            AuthError: If the authorization code exchange fails.
            TokenStoreError: If a new token cannot be cached.
        """
        credential = self._load_cached()
        if credential is None:
            credential = self.authorize()
            self.store.save(credential)
        return AuthenticatedTransport(credential, self.get_credentials(credential))

    def _load_cached(self) -> Credential | None:
        try:
            credential = self.store.load()
        except TokenNotFoundError as e:
            logger.debug(f"Cached token unusable: {e.reason}")
            return None

        if credential.scopes:
            missing = set(self.required_scopes) - set(credential.scopes)
            if missing:
                logger.warning(f"Token missing required scopes: {missing}")
                return None

        if credential.is_expired:
            logger.info("Cached token expired, it will be refreshed on first use")
        return credential

    def get_authorization_url(self) -> str:
        """Start OAuth authorization flow.

        Returns:
            Authorization URL for user to visit.
        """
        authorization_url, state = self.session.create_authorization_url(
            self.app.auth_uri,
            access_type="offline",
            prompt="consent",
        )
        self._state = state
        return authorization_url

    def authorize(self) -> Credential:
        """Run the interactive authorization-code flow.

        Prints the authorization URL, reads the code the user pastes back and
        exchanges it for a token.
        """
        url = self.get_authorization_url()
        print("Go to the following link in your browser then type the authorization code:")
        print(url)

        if self.open_browser:
            webbrowser.open(url)

        code = self.prompt("Authorization code: ")
        if not code:
            raise AuthError("No authorization code provided")
        return self.fetch_token(code)

    def fetch_token(self, code_or_response: str) -> Credential:
        """Exchange an authorization code for a token.

        Args:
            code_or_response: The bare code, or the full redirect URL from the
                OAuth callback.

        Raises:
            AuthError: If the token endpoint rejects the exchange.
            ScopeMismatchError: If the user did not grant every required scope.
        """
        if code_or_response.startswith(("http://", "https://")):
            kwargs = {"authorization_response": code_or_response, "state": self._state}
        else:
            kwargs = {"code": code_or_response}

        try:
            token = self.session.fetch_token(
                self.app.token_uri,
                client_secret=self.app.client_secret,
                **kwargs,
            )
            credential = Credential.from_oauth_token(token)
        except (AuthlibBaseError, requests.RequestException, KeyError) as e:
            raise AuthError(f"unable to retrieve token from web: {e}") from e

        if not credential.scopes:
            credential.scopes = list(self.required_scopes)

        missing = set(self.required_scopes) - set(credential.scopes)
        if missing:
            raise ScopeMismatchError(missing)

        logger.info(f"Authorized with scopes: {credential.scopes}")
        return credential

    def get_credentials(self, credential: Credential) -> GoogleCredentials:
        """Get Google Credentials object for API client libraries."""
        expiry = None
        if credential.expires_at:
            # google-auth compares against naive UTC datetimes
            expiry = datetime.fromtimestamp(credential.expires_at, tz=timezone.utc).replace(
                tzinfo=None
            )

        return GoogleCredentials(
            token=credential.access_token,
            refresh_token=credential.refresh_token,
            token_uri=self.app.token_uri,
            client_id=self.app.client_id,
            client_secret=self.app.client_secret,
            scopes=self.required_scopes,
            expiry=expiry,
        )

    def persist_refreshed(self, transport: AuthenticatedTransport) -> bool:
        """Write the token back if the transport refreshed it.

        Returns:
            True if a refreshed token was saved.
        """
        if not transport.refreshed:
            return False

        creds = transport.credentials
        expires_at = None
        if creds.expiry:
            expires_at = creds.expiry.replace(tzinfo=timezone.utc).timestamp()

        credential = Credential(
            access_token=creds.token,
            refresh_token=creds.refresh_token or transport.credential.refresh_token,
            token_type=transport.credential.token_type,
            expires_at=expires_at,
            scopes=transport.credential.scopes,
        )
        self.store.save(credential)
        transport.credential = credential
        logger.info("Refreshed token saved")
        return True

    def get_token_info(self) -> dict[str, Any]:
        """Get information about the cached token.

        Returns:
            Dictionary with token status, scopes, expiry, etc.
        """
        try:
            credential = self.store.load()
        except TokenNotFoundError:
            return {"status": "no_token"}

        if credential.expires_at:
            expires_in = credential.expires_at - datetime.now().timestamp()
            expires_str = str(timedelta(seconds=int(max(0, expires_in))))
        else:
            expires_str = "unknown"

        return {
            "status": "expired" if credential.is_expired else "valid",
            "scopes": credential.scopes,
            "expires_in": expires_str,
            "has_refresh_token": bool(credential.refresh_token),
        }
