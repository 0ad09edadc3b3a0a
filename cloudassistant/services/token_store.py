"""
Typed persistence for token records, browser sessions and OAuth state.

Values are JSON documents stored in a string key-value backend under
``google:{email}``, ``session:{id}`` and ``oauth_state:{nonce}``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Protocol

from pydantic import ValidationError

from cloudassistant.models import OAuthState, SessionRecord, TokenRecord
from cloudassistant.services.token_cipher import TokenCipherService

logger = logging.getLogger(__name__)


class KeyValueBackend(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def put(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None: ...

    def delete(self, key: str) -> None: ...

    def pop(self, key: str) -> Optional[str]: ...


class TokenStore:
    """Reads and writes the records owned by the key-value store."""

    TOKEN_PREFIX = "google:"
    SESSION_PREFIX = "session:"
    STATE_PREFIX = "oauth_state:"

    def __init__(
        self,
        backend: KeyValueBackend,
        cipher: TokenCipherService,
        *,
        session_ttl_seconds: Optional[int] = None,
        state_ttl_seconds: int = 600,
    ) -> None:
        self._backend = backend
        self._cipher = cipher
        self._session_ttl = session_ttl_seconds
        self._state_ttl = state_ttl_seconds

    # Token records

    def save_token(self, record: TokenRecord) -> None:
        """Persist a token record, replacing any previous record for the email."""
        document = record.model_dump(exclude={"access_token", "refresh_token"})
        document["access_token_encrypted"] = self._cipher.encrypt(record.access_token)
        document["refresh_token_encrypted"] = self._cipher.encrypt_optional(record.refresh_token)
        self._backend.put(self.TOKEN_PREFIX + record.email, json.dumps(document))

    def get_token(self, email: str) -> Optional[TokenRecord]:
        raw = self._backend.get(self.TOKEN_PREFIX + email)
        if raw is None:
            return None
        try:
            document: Dict[str, Any] = json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable token record for %s", email)
            return None

        # Plaintext records written before encryption was introduced.
        if "access_token" in document and "access_token_encrypted" not in document:
            record = self._parse_token(document, email)
            if record is not None:
                logger.info("Migrating plaintext token record for %s", email)
                self.save_token(record)
            return record

        try:
            document["access_token"] = self._cipher.decrypt(document.pop("access_token_encrypted"))
            document["refresh_token"] = self._cipher.decrypt_optional(
                document.pop("refresh_token_encrypted", None)
            )
        except (KeyError, ValueError):
            logger.warning("Stored token for %s cannot be decrypted; re-authentication required", email)
            return None
        return self._parse_token(document, email)

    @staticmethod
    def _parse_token(document: Dict[str, Any], email: str) -> Optional[TokenRecord]:
        document.setdefault("email", email)
        try:
            return TokenRecord.model_validate(document)
        except ValidationError:
            logger.warning("Stored token for %s is missing required fields", email)
            return None

    # Sessions

    def save_session(self, session: SessionRecord) -> None:
        self._backend.put(
            self.SESSION_PREFIX + session.session_id,
            session.model_dump_json(),
            ttl_seconds=self._session_ttl,
        )

    def get_session(self, session_id: str) -> Optional[SessionRecord]:
        raw = self._backend.get(self.SESSION_PREFIX + session_id)
        if not raw:
            return None
        try:
            return SessionRecord.model_validate_json(raw)
        except ValidationError:
            # Older sessions stored the bare email string.
            return SessionRecord(session_id=session_id, email=raw)

    # OAuth state

    def save_state(self, state: OAuthState) -> None:
        self._backend.put(
            self.STATE_PREFIX + state.nonce,
            state.model_dump_json(),
            ttl_seconds=self._state_ttl,
        )

    def consume_state(self, nonce: str) -> Optional[OAuthState]:
        """Return and delete the stored state so each nonce is accepted once."""
        raw = self._backend.pop(self.STATE_PREFIX + nonce)
        if raw is None:
            return None
        try:
            return OAuthState.model_validate_json(raw)
        except ValidationError:
            return None


__all__ = ["KeyValueBackend", "TokenStore"]
