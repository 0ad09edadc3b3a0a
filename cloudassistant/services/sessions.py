"""Resolve the identity behind an inbound request."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from cloudassistant.services.token_store import TokenStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Identity:
    """An email plus whether it came from a server-side session.

    ``authenticated`` is False for the ``?email=`` fallback, which anyone can
    forge and must be treated as lower trust.
    """

    email: str
    authenticated: bool


def parse_session_cookie(cookie_header: Optional[str], cookie_name: str = "ca_session") -> Optional[str]:
    """Extract a single cookie value from a raw ``Cookie`` header."""
    if not cookie_header:
        return None
    prefix = f"{cookie_name}="
    for part in cookie_header.split(";"):
        part = part.strip()
        if part.startswith(prefix):
            value = part[len(prefix):].strip()
            return value or None
    return None


class SessionResolver:
    """Map a session cookie to the email it was created for."""

    def __init__(
        self,
        store: TokenStore,
        *,
        cookie_name: str = "ca_session",
        allow_email_fallback: bool = True,
    ) -> None:
        self._store = store
        self._cookie_name = cookie_name
        self._allow_email_fallback = allow_email_fallback

    def resolve(self, cookie_header: Optional[str]) -> Optional[str]:
        session_id = parse_session_cookie(cookie_header, self._cookie_name)
        if not session_id:
            return None
        session = self._store.get_session(session_id)
        if session is None:
            return None
        return session.email

    def identify(self, cookie_header: Optional[str], email_param: Optional[str] = None) -> Optional[Identity]:
        """Prefer the session cookie, then fall back to an explicit email."""
        email = self.resolve(cookie_header)
        if email:
            return Identity(email=email, authenticated=True)
        if email_param and self._allow_email_fallback:
            logger.info("Using unauthenticated email parameter for identity resolution")
            return Identity(email=email_param, authenticated=False)
        return None


__all__ = ["Identity", "SessionResolver", "parse_session_cookie"]
