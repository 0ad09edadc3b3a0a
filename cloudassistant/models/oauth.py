"""
Domain models for OAuth token and session persistence.
"""

from __future__ import annotations

import time
from typing import Optional

from pydantic import BaseModel, Field


def now_millis() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


class RefreshedCredential(BaseModel):
    """New access credential returned by the refresh grant."""

    access_token: str
    expires_in: Optional[int] = None
    obtained_at: int = Field(default_factory=now_millis)
    refresh_token: Optional[str] = Field(
        None, description="Replacement refresh token, when the provider rotates it."
    )


class TokenRecord(BaseModel):
    """Google credentials stored for one identity, keyed by email."""

    email: str
    access_token: str
    refresh_token: Optional[str] = None
    scope: Optional[str] = Field(None, description="Space-delimited granted scopes.")
    expires_in: Optional[int] = Field(None, description="Lifetime declared at issuance.")
    obtained_at: int = Field(default_factory=now_millis)

    def with_refreshed(self, refreshed: RefreshedCredential) -> "TokenRecord":
        """Return a copy carrying the refreshed access token.

        The access token is replaced wholesale. The refresh token is kept
        unless the provider issued a new one; email and scope never change.
        """
        return self.model_copy(
            update={
                "access_token": refreshed.access_token,
                "expires_in": refreshed.expires_in,
                "obtained_at": refreshed.obtained_at,
                "refresh_token": refreshed.refresh_token or self.refresh_token,
            }
        )


class SessionRecord(BaseModel):
    """Maps an opaque browser session identifier to an identity."""

    session_id: str
    email: str
    created_at: int = Field(default_factory=now_millis)


class OAuthState(BaseModel):
    """Nonce issued when a sign-in attempt starts."""

    nonce: str
    issued_at: int = Field(default_factory=now_millis)


__all__ = [
    "OAuthState",
    "RefreshedCredential",
    "SessionRecord",
    "TokenRecord",
    "now_millis",
]
