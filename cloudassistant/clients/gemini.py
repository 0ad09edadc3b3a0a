"""Client wrapper for the proxied Gemini completion endpoint."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from cloudassistant.core.config import GeminiSettings
from cloudassistant.core.errors import NotConfiguredError

logger = logging.getLogger(__name__)


class GeminiClient:
    """Forward prompts to the configured completion endpoint with bearer auth."""

    def __init__(
        self,
        settings: GeminiSettings,
        *,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return self._settings.configured

    async def complete(self, prompt: str) -> httpx.Response:
        """POST ``{"prompt": ...}`` and return the downstream response untouched."""
        if not self.configured:
            raise NotConfiguredError(
                "Gemini API not configured on this server "
                "(set GEMINI_API_URL and GEMINI_API_KEY)."
            )

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.post(
                str(self._settings.api_url),
                json={"prompt": prompt},
                headers={"Authorization": f"Bearer {self._settings.api_key}"},
            )
        if response.is_error:
            logger.warning("Completion endpoint returned HTTP %s", response.status_code)
        return response


__all__ = ["GeminiClient"]
