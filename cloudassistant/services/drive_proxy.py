"""
Drive access on behalf of a resolved identity.

Listing retries exactly once after refreshing an expired access token.
Prompt enrichment is best effort and never raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from http import HTTPStatus

import httpx

from cloudassistant.clients.google_drive import GoogleDriveClient
from cloudassistant.core.errors import UnauthenticatedError
from cloudassistant.models import TokenRecord
from cloudassistant.services.token_refresh import TokenRefreshManager
from cloudassistant.services.token_store import TokenStore

logger = logging.getLogger(__name__)

LIST_PAGE_SIZE = 20
LIST_FIELDS = "files(id,name,mimeType,modifiedTime)"
ENRICH_FILE_LIMIT = 5
ENRICH_FIELDS = "files(id,name,mimeType)"
SNIPPET_FILE_LIMIT = 2
SNIPPET_MAX_CHARS = 800


@dataclass(frozen=True, slots=True)
class ProxiedResponse:
    """Downstream status and body relayed to the browser."""

    status_code: int
    content: bytes
    media_type: str = "application/json"

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "ProxiedResponse":
        return cls(status_code=response.status_code, content=response.content)


def _file_entries(payload: object) -> list[dict]:
    files = payload.get("files") if isinstance(payload, dict) else None
    if files is None:
        return []
    if not isinstance(files, list) or not all(isinstance(f, dict) for f in files):
        raise ValueError("Malformed Drive listing")
    return files


class DriveProxyService:
    """List Drive files and gather prompt context for an identity."""

    def __init__(
        self,
        drive_client: GoogleDriveClient,
        store: TokenStore,
        refresh_manager: TokenRefreshManager,
    ) -> None:
        self._drive = drive_client
        self._store = store
        self._refresh = refresh_manager

    def require_token(self, email: str) -> TokenRecord:
        record = self._store.get_token(email)
        if record is None:
            raise UnauthenticatedError("No tokens for this user. Authenticate first.")
        return record

    async def list_files(self, email: str) -> ProxiedResponse:
        """Return the Drive listing, refreshing and retrying once on a 401."""
        record = self.require_token(email)
        response = await self._drive.list_files(
            record.access_token, page_size=LIST_PAGE_SIZE, fields=LIST_FIELDS
        )
        if response.status_code == HTTPStatus.UNAUTHORIZED and record.refresh_token:
            logger.info("Drive listing returned 401 for %s; refreshing token", email)
            record = await self._refresh.refresh_record(record)
            response = await self._drive.list_files(
                record.access_token, page_size=LIST_PAGE_SIZE, fields=LIST_FIELDS
            )
        return ProxiedResponse.from_httpx(response)

    async def build_enrichment(self, email: str) -> str:
        """Describe the user's recent files and a couple of short snippets.

        Returns an empty string when anything about the lookup fails.
        """
        record = self._store.get_token(email)
        if record is None:
            return ""

        try:
            response = await self._drive.list_files(
                record.access_token, page_size=ENRICH_FILE_LIMIT, fields=ENRICH_FIELDS
            )
            response.raise_for_status()
            files = _file_entries(response.json())[:ENRICH_FILE_LIMIT]
        except Exception:  # pylint: disable=broad-except
            logger.debug("Drive enrichment listing failed for %s", email, exc_info=True)
            return ""

        listing = "\n".join(f"- {f.get('name')} ({f.get('mimeType')})" for f in files)
        enrichment = "\n\n[User Drive files]\n" + listing

        snippets: list[tuple[str, str]] = []
        for drive_file in files[:SNIPPET_FILE_LIMIT]:
            try:
                content = await self._drive.read_text(
                    record.access_token, drive_file["id"], drive_file.get("mimeType")
                )
            except Exception:  # pylint: disable=broad-except
                logger.debug("Skipping snippet for Drive file %s", drive_file.get("id"), exc_info=True)
                continue
            if content:
                snippets.append((drive_file.get("name", ""), content[:SNIPPET_MAX_CHARS]))

        if snippets:
            enrichment += "\n\n[File snippets]\n" + "\n".join(
                f"--- {name} ---\n{text}\n" for name, text in snippets
            )
        return enrichment


__all__ = [
    "DriveProxyService",
    "ENRICH_FILE_LIMIT",
    "ProxiedResponse",
    "SNIPPET_FILE_LIMIT",
    "SNIPPET_MAX_CHARS",
]
