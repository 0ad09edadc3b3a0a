"""
Google OAuth utilities.

These helpers build the consent URL and talk to the token and userinfo
endpoints. Callers decide what to persist.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from cloudassistant.core.config import GoogleSettings, OAuthSettings
from cloudassistant.core.errors import RefreshError, TokenExchangeError

logger = logging.getLogger(__name__)


def _json_body(response: httpx.Response) -> Dict[str, Any]:
    """Decode a provider response, mapping non-JSON bodies to an error payload."""
    try:
        payload = response.json()
    except ValueError:
        return {
            "error": "invalid_response",
            "error_description": response.text[:500],
            "status": response.status_code,
        }
    if not isinstance(payload, dict):
        return {"error": "invalid_response", "status": response.status_code}
    return payload


class GoogleOAuthClient:
    """Build Google authorization URLs and exchange authorization codes."""

    AUTH_BASE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"

    def __init__(
        self,
        google_settings: GoogleSettings,
        oauth_settings: OAuthSettings,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._google = google_settings
        self._oauth = oauth_settings
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    def build_authorization_url(
        self, *, state: str, redirect_uri: str, access_type: str = "offline"
    ) -> str:
        """Construct the Google OAuth consent URL."""
        params = {
            "client_id": self._google.client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": self._oauth.scopes,
            "access_type": access_type,
            "prompt": "consent",
            "state": state,
        }
        query = urlencode(params)
        return f"{self.AUTH_BASE_URL}?{query}"

    async def exchange_authorization_code(self, *, code: str, redirect_uri: str) -> Dict[str, Any]:
        """
        Exchange an authorization code for tokens.

        Returns the provider token payload (``access_token``, ``refresh_token``,
        ``scope``, ``expires_in`` ...). A payload carrying ``error`` raises
        :class:`TokenExchangeError` with the payload attached.
        """
        payload = {
            "code": code,
            "client_id": self._google.client_id,
            "client_secret": self._google.client_secret,
            "redirect_uri": redirect_uri,
            "grant_type": "authorization_code",
        }

        async with self._client() as client:
            response = await client.post(self.TOKEN_URL, data=payload)

        token_payload = _json_body(response)
        if token_payload.get("error"):
            logger.warning(
                "Authorization code exchange rejected: %s", token_payload.get("error")
            )
            raise TokenExchangeError(token_payload)
        if not token_payload.get("access_token"):
            raise TokenExchangeError(
                {"error": "invalid_response", "error_description": "No access_token returned."}
            )
        return token_payload

    async def refresh_token(self, refresh_token: str) -> Dict[str, Any]:
        """Refresh the access token using a stored refresh token."""
        payload = {
            "client_id": self._google.client_id,
            "client_secret": self._google.client_secret,
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
        }

        try:
            async with self._client() as client:
                response = await client.post(self.TOKEN_URL, data=payload)
        except httpx.HTTPError as exc:
            logger.warning("Refresh grant request failed: %s", exc)
            raise RefreshError(str(exc)) from exc

        token_payload = _json_body(response)
        if token_payload.get("error") or not token_payload.get("access_token"):
            logger.warning("Refresh grant rejected: %s", token_payload.get("error"))
            raise RefreshError(token_payload)
        return token_payload

    async def fetch_userinfo(self, access_token: str) -> Dict[str, Any]:
        """Return the OpenID userinfo claims for an access token."""
        async with self._client() as client:
            response = await client.get(
                self.USERINFO_URL,
                headers={"Authorization": f"Bearer {access_token}"},
            )
        return _json_body(response)


__all__ = ["GoogleOAuthClient"]
