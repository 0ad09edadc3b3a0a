"""Google Drive REST client wrapper.

Calls are made with a caller-supplied bearer token so the resource proxy can
observe a 401 and decide whether to refresh.
"""

from __future__ import annotations

from typing import Optional

import httpx

GOOGLE_DOC_MIME_TYPE = "application/vnd.google-apps.document"


class GoogleDriveClient:
    """List and read files from a user's Drive."""

    FILES_URL = "https://www.googleapis.com/drive/v3/files"

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    @staticmethod
    def _auth(access_token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {access_token}"}

    async def list_files(
        self,
        access_token: str,
        *,
        page_size: int = 20,
        fields: str = "files(id,name,mimeType,modifiedTime)",
    ) -> httpx.Response:
        """Return the raw listing response; status handling is left to the caller."""
        async with self._client() as client:
            return await client.get(
                self.FILES_URL,
                params={"pageSize": page_size, "fields": fields},
                headers=self._auth(access_token),
            )

    async def export_text(self, access_token: str, file_id: str) -> str:
        """Export a native Google document as plain text."""
        async with self._client() as client:
            response = await client.get(
                f"{self.FILES_URL}/{file_id}/export",
                params={"mimeType": "text/plain"},
                headers=self._auth(access_token),
            )
        response.raise_for_status()
        return response.text

    async def download_text(self, access_token: str, file_id: str) -> str:
        """Download raw file content and decode it as text."""
        async with self._client() as client:
            response = await client.get(
                f"{self.FILES_URL}/{file_id}",
                params={"alt": "media"},
                headers=self._auth(access_token),
            )
        response.raise_for_status()
        return response.text

    async def read_text(self, access_token: str, file_id: str, mime_type: str | None) -> str:
        """Read file content, exporting Google Docs and downloading everything else."""
        if mime_type == GOOGLE_DOC_MIME_TYPE:
            return await self.export_text(access_token, file_id)
        return await self.download_text(access_token, file_id)


__all__ = ["GOOGLE_DOC_MIME_TYPE", "GoogleDriveClient"]
