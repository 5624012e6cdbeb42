"""Tests for Google OAuth authentication."""

import json
import time
from unittest.mock import patch
from urllib.parse import parse_qs, urlparse

import pytest
from authlib.integrations.requests_client import OAuth2Session
from authlib.oauth2.rfc6749.errors import InvalidGrantError

from gcal_cli.config import load_app_config
from gcal_cli.google import (
    AuthError,
    Credential,
    GoogleOAuth,
    ScopeMismatchError,
    TokenStore,
)
from gcal_cli.google.oauth import DEFAULT_SCOPES, SCOPES
from gcal_cli.prompt import ScriptedPrompt

ALL_SCOPES = [SCOPES[name] for name in DEFAULT_SCOPES]


@pytest.fixture
def app(mock_credentials):
    return load_app_config(mock_credentials)


@pytest.fixture
def token_response():
    return {
        "access_token": "ya29.fresh",
        "refresh_token": "1//fresh-refresh",
        "token_type": "Bearer",
        "expires_in": 3599,
        "expires_at": int(time.time()) + 3599,
        "scope": " ".join(ALL_SCOPES),
    }


@pytest.fixture
def cached_token(tmp_path):
    """Create a cached token file with the calendar scopes."""
    token = {
        "token": "ya29.cached",
        "refresh_token": "1//cached-refresh",
        "scopes": ALL_SCOPES,
        "type": "Bearer",
        "expiry": "2099-01-01T00:00:00Z",
    }
    token_path = tmp_path / "token.json"
    with open(token_path, "w") as f:
        json.dump(token, f)
    return token_path


class TestGoogleOAuthBasics:
    """Test basic GoogleOAuth functionality."""

    def test_default_scopes(self, app, tmp_path):
        """Should request all three calendar scopes by default."""
        auth = GoogleOAuth(app, token_path=tmp_path / "token.json")
        assert auth.required_scopes == ALL_SCOPES

    def test_authorization_url_requests_offline_access(self, app, tmp_path):
        """Should build a consent URL with offline access."""
        auth = GoogleOAuth(app, token_path=tmp_path / "token.json")
        url = auth.get_authorization_url()

        query = parse_qs(urlparse(url).query)
        assert url.startswith("https://accounts.google.com/o/oauth2/auth")
        assert query["access_type"] == ["offline"]
        assert query["client_id"] == ["test-client-id.apps.googleusercontent.com"]
        assert query["redirect_uri"] == ["http://localhost"]
        assert "https://www.googleapis.com/auth/calendar" in query["scope"][0].split()


class TestObtain:
    """Test obtaining an authenticated transport."""

    def test_cached_token_used_without_prompt(self, app, cached_token):
        """Should wrap a cached token without asking for a code."""
        prompt = ScriptedPrompt([])
        auth = GoogleOAuth(app, token_path=cached_token, prompt=prompt)

        with patch.object(OAuth2Session, "fetch_token") as fetch:
            transport = auth.obtain()

        fetch.assert_not_called()
        assert prompt.asked == []
        assert transport.credentials.token == "ya29.cached"
        assert transport.credentials.refresh_token == "1//cached-refresh"
        assert transport.refreshed is False

    def test_expired_cached_token_not_refreshed_eagerly(self, app, tmp_path):
        """Should leave refreshing an expired token to the transport."""
        token_path = tmp_path / "token.json"
        TokenStore(token_path).save(
            Credential(
                access_token="ya29.stale",
                refresh_token="1//refresh",
                expires_at=1_000_000,
                scopes=ALL_SCOPES,
            )
        )
        auth = GoogleOAuth(app, token_path=token_path, prompt=ScriptedPrompt([]))

        with patch.object(OAuth2Session, "fetch_token") as fetch:
            transport = auth.obtain()

        fetch.assert_not_called()
        assert transport.credentials.expired is True

    def test_missing_token_runs_code_flow(self, app, tmp_path, token_response, capsys):
        """Should print the URL, read the code, exchange and cache it."""
        token_path = tmp_path / "token.json"
        prompt = ScriptedPrompt(["4/0AbCdEf"])
        auth = GoogleOAuth(app, token_path=token_path, prompt=prompt)

        with patch.object(OAuth2Session, "fetch_token", return_value=token_response) as fetch:
            transport = auth.obtain()

        assert fetch.call_args.kwargs["code"] == "4/0AbCdEf"
        assert prompt.asked == ["Authorization code: "]
        assert "accounts.google.com" in capsys.readouterr().out
        assert transport.credentials.token == "ya29.fresh"
        assert TokenStore(token_path).load().access_token == "ya29.fresh"

    def test_redirect_url_accepted_as_code(self, app, tmp_path, token_response):
        """Should pass a pasted redirect URL through with the flow state."""
        auth = GoogleOAuth(app, token_path=tmp_path / "token.json")
        auth.get_authorization_url()
        redirect = f"http://localhost/?state={auth._state}&code=4/0AbCdEf"

        with patch.object(OAuth2Session, "fetch_token", return_value=token_response) as fetch:
            auth.fetch_token(redirect)

        assert fetch.call_args.kwargs["authorization_response"] == redirect
        assert fetch.call_args.kwargs["state"] == auth._state

    def test_token_missing_scopes_triggers_reauthorization(
        self, app, tmp_path, token_response
    ):
        """Should re-run the flow when the cached token lacks a scope."""
        token_path = tmp_path / "token.json"
        TokenStore(token_path).save(
            Credential(access_token="ya29.narrow", scopes=[ALL_SCOPES[2]])
        )
        prompt = ScriptedPrompt(["code"])
        auth = GoogleOAuth(app, token_path=token_path, prompt=prompt)

        with patch.object(OAuth2Session, "fetch_token", return_value=token_response):
            transport = auth.obtain()

        assert prompt.asked == ["Authorization code: "]
        assert transport.credential.access_token == "ya29.fresh"

    def test_failed_exchange_raises_auth_error(self, app, tmp_path):
        """Should raise AuthError naming the cause and cache nothing."""
        token_path = tmp_path / "token.json"
        auth = GoogleOAuth(app, token_path=token_path, prompt=ScriptedPrompt(["bad"]))

        with (
            patch.object(
                OAuth2Session,
                "fetch_token",
                side_effect=InvalidGrantError(description="Malformed auth code."),
            ),
            pytest.raises(AuthError, match="Malformed auth code"),
        ):
            auth.obtain()

        assert not token_path.exists()

    def test_empty_code_raises_auth_error(self, app, tmp_path):
        """Should refuse to exchange an empty code."""
        auth = GoogleOAuth(app, token_path=tmp_path / "token.json", prompt=ScriptedPrompt([""]))
        with pytest.raises(AuthError, match="No authorization code"):
            auth.obtain()

    def test_partial_consent_raises_scope_mismatch(self, app, tmp_path, token_response):
        """Should reject a grant that leaves out a required scope."""
        token_response["scope"] = ALL_SCOPES[2]
        auth = GoogleOAuth(app, token_path=tmp_path / "token.json", prompt=ScriptedPrompt(["c"]))

        with (
            patch.object(OAuth2Session, "fetch_token", return_value=token_response),
            pytest.raises(ScopeMismatchError),
        ):
            auth.obtain()


class TestPersistRefreshed:
    """Test writing back tokens refreshed by the transport."""

    def test_unchanged_token_not_rewritten(self, app, cached_token):
        """Should not touch the file when no refresh happened."""
        auth = GoogleOAuth(app, token_path=cached_token)
        transport = auth.obtain()
        before = cached_token.read_text()

        assert auth.persist_refreshed(transport) is False
        assert cached_token.read_text() == before

    def test_refreshed_token_saved(self, app, cached_token):
        """Should save the new access token and keep the refresh token."""
        auth = GoogleOAuth(app, token_path=cached_token)
        transport = auth.obtain()
        transport.credentials.token = "ya29.refreshed"

        assert auth.persist_refreshed(transport) is True

        saved = TokenStore(cached_token).load()
        assert saved.access_token == "ya29.refreshed"
        assert saved.refresh_token == "1//cached-refresh"
        assert saved.scopes == ALL_SCOPES


class TestTokenInfo:
    """Test token status reporting."""

    def test_no_token(self, app, tmp_path):
        auth = GoogleOAuth(app, token_path=tmp_path / "token.json")
        assert auth.get_token_info() == {"status": "no_token"}

    def test_valid_token(self, app, cached_token):
        info = GoogleOAuth(app, token_path=cached_token).get_token_info()
        assert info["status"] == "valid"
        assert info["has_refresh_token"] is True
        assert len(info["scopes"]) == 3
