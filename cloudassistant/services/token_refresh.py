"""
Helpers for renewing expired Google access tokens.
"""

from __future__ import annotations

import logging
from typing import Protocol

from cloudassistant.models import RefreshedCredential, TokenRecord, now_millis
from cloudassistant.services.token_store import TokenStore

logger = logging.getLogger(__name__)


class RefreshGrantClient(Protocol):
    async def refresh_token(self, refresh_token: str) -> dict: ...


class TokenRefreshManager:
    """Runs the refresh grant and persists the renewed record.

    No retry or backoff happens here; a failed grant raises
    :class:`~cloudassistant.core.errors.RefreshError` to the caller.
    """

    def __init__(self, oauth_client: RefreshGrantClient, store: TokenStore) -> None:
        self._oauth = oauth_client
        self._store = store

    async def refresh(self, refresh_token: str) -> RefreshedCredential:
        payload = await self._oauth.refresh_token(refresh_token)
        expires_in = payload.get("expires_in")
        return RefreshedCredential(
            access_token=payload["access_token"],
            expires_in=int(expires_in) if expires_in is not None else None,
            obtained_at=now_millis(),
            refresh_token=payload.get("refresh_token") or refresh_token,
        )

    async def refresh_record(self, record: TokenRecord) -> TokenRecord:
        """Refresh ``record`` and store the merged result under the same email."""
        if not record.refresh_token:
            raise ValueError(f"Token record for {record.email} has no refresh token.")
        refreshed = await self.refresh(record.refresh_token)
        updated = record.with_refreshed(refreshed)
        self._store.save_token(updated)
        logger.info("Refreshed Google access token for %s", record.email)
        return updated


__all__ = ["RefreshGrantClient", "TokenRefreshManager"]
