"""Forward chat prompts to the completion endpoint, with optional Drive context."""

from __future__ import annotations

from typing import Optional

from cloudassistant.clients.gemini import GeminiClient
from cloudassistant.core.errors import NotConfiguredError
from cloudassistant.services.drive_proxy import DriveProxyService, ProxiedResponse


class ChatProxyService:
    def __init__(self, gemini_client: GeminiClient, drive_proxy: DriveProxyService) -> None:
        self._gemini = gemini_client
        self._drive = drive_proxy

    async def build_prompt(self, prompt: str, email: Optional[str]) -> str:
        if not email:
            return prompt
        return prompt + await self._drive.build_enrichment(email)

    async def forward(self, prompt: str, email: Optional[str] = None) -> ProxiedResponse:
        """Send the (possibly enriched) prompt and relay the response body as-is."""
        if not self._gemini.configured:
            raise NotConfiguredError(
                "Gemini API not configured on this server "
                "(set GEMINI_API_URL and GEMINI_API_KEY)."
            )
        final_prompt = await self.build_prompt(prompt, email)
        response = await self._gemini.complete(final_prompt)
        return ProxiedResponse.from_httpx(response)


__all__ = ["ChatProxyService"]
