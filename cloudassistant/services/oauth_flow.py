"""
Authorization-code sign-in flow.

``start`` issues a state nonce and the consent URL. ``complete`` handles the
provider callback: it exchanges the code, identifies the account, stores the
token record and opens a browser session.
"""

from __future__ import annotations

import logging
import secrets
import uuid
from dataclasses import dataclass
from typing import Callable, Optional

from cloudassistant.clients.google_auth import GoogleOAuthClient
from cloudassistant.core.errors import InvalidStateError, MissingCodeError
from cloudassistant.models import OAuthState, SessionRecord, TokenRecord, now_millis
from cloudassistant.services.token_store import TokenStore

logger = logging.getLogger(__name__)

CALLBACK_PATH = "/auth/google/callback"
UNKNOWN_EMAIL = "unknown"


def _new_nonce() -> str:
    return uuid.uuid4().hex


def _new_session_id() -> str:
    return secrets.token_urlsafe(32)


@dataclass(slots=True)
class SignInResult:
    """Outcome of a completed callback."""

    token: TokenRecord
    session: SessionRecord

    @property
    def email(self) -> str:
        return self.token.email


class OAuthFlowService:
    """Drives the start and callback steps of the Google sign-in flow."""

    def __init__(
        self,
        oauth_client: GoogleOAuthClient,
        store: TokenStore,
        *,
        redirect_uri: Optional[str] = None,
        enforce_state: bool = True,
        nonce_factory: Callable[[], str] = _new_nonce,
        session_id_factory: Callable[[], str] = _new_session_id,
    ) -> None:
        self._oauth = oauth_client
        self._store = store
        self._redirect_uri = redirect_uri
        self._enforce_state = enforce_state
        self._nonce_factory = nonce_factory
        self._session_id_factory = session_id_factory

    def redirect_uri_for(self, origin: str) -> str:
        """Callback URL registered with Google for requests from ``origin``."""
        if self._redirect_uri:
            return self._redirect_uri
        return origin.rstrip("/") + CALLBACK_PATH

    def start(self, origin: str) -> str:
        """Issue a fresh state nonce and return the consent screen URL."""
        nonce = self._nonce_factory()
        self._store.save_state(OAuthState(nonce=nonce))
        return self._oauth.build_authorization_url(
            state=nonce, redirect_uri=self.redirect_uri_for(origin)
        )

    async def complete(
        self, *, code: Optional[str], state: Optional[str], origin: str
    ) -> SignInResult:
        """Finish the flow for a provider callback."""
        if not code:
            raise MissingCodeError()
        if self._enforce_state:
            if not state or self._store.consume_state(state) is None:
                logger.warning("Rejected OAuth callback with unknown or reused state")
                raise InvalidStateError()

        redirect_uri = self.redirect_uri_for(origin)
        token_payload = await self._oauth.exchange_authorization_code(
            code=code, redirect_uri=redirect_uri
        )
        access_token = token_payload["access_token"]

        userinfo = await self._oauth.fetch_userinfo(access_token)
        email = userinfo.get("email") or userinfo.get("sub") or UNKNOWN_EMAIL

        expires_in = token_payload.get("expires_in")
        record = TokenRecord(
            email=email,
            access_token=access_token,
            refresh_token=token_payload.get("refresh_token"),
            scope=token_payload.get("scope"),
            expires_in=int(expires_in) if expires_in is not None else None,
            obtained_at=now_millis(),
        )
        self._store.save_token(record)

        session = SessionRecord(session_id=self._session_id_factory(), email=email)
        self._store.save_session(session)

        logger.info("Google sign-in completed for %s", email)
        return SignInResult(token=record, session=session)


__all__ = ["CALLBACK_PATH", "OAuthFlowService", "SignInResult", "UNKNOWN_EMAIL"]
