"""Typed errors raised by the OAuth, session and proxy layers.

Every error carries the HTTP status it maps to and a human-readable detail.
The FastAPI exception handlers in :mod:`cloudassistant.main` render them.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Optional


class CloudAssistantError(Exception):
    """Base exception for all backend errors.

    Attributes:
        detail: Human-readable error description returned to the client.
        status_code: HTTP status used when the error reaches a response.
    """

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class MissingCodeError(CloudAssistantError):
    """Raised when the provider callback arrives without an authorization code."""

    status_code = HTTPStatus.BAD_REQUEST

    def __init__(self, detail: str = "Missing code") -> None:
        super().__init__(detail)


class InvalidStateError(CloudAssistantError):
    """Raised when the callback state nonce is missing, unknown or reused."""

    status_code = HTTPStatus.BAD_REQUEST

    def __init__(self, detail: str = "Invalid or expired OAuth state") -> None:
        super().__init__(detail)


class TokenExchangeError(CloudAssistantError):
    """Raised when the token endpoint rejects an authorization code.

    Attributes:
        body: Provider error payload, surfaced to the client verbatim.
    """

    def __init__(self, body: dict[str, Any]) -> None:
        self.body = body
        super().__init__(f"Token exchange failed: {body.get('error', 'unknown_error')}")


class RefreshError(CloudAssistantError):
    """Raised when the refresh grant fails or returns an error."""

    def __init__(self, body: dict[str, Any] | str) -> None:
        self.body = body
        super().__init__(f"Failed to refresh Google token: {body}")


class UnauthenticatedError(CloudAssistantError):
    """Raised when no identity or stored token can be resolved for a request."""

    status_code = HTTPStatus.UNAUTHORIZED


class NotConfiguredError(CloudAssistantError):
    """Raised when a downstream endpoint has not been configured."""


class UnhandledError(CloudAssistantError):
    """Wraps any unexpected exception that escaped a request handler."""

    def __init__(self, cause: Optional[BaseException] = None) -> None:
        self.cause = cause
        super().__init__(f"Unhandled error: {cause}")


__all__ = [
    "CloudAssistantError",
    "InvalidStateError",
    "MissingCodeError",
    "NotConfiguredError",
    "RefreshError",
    "TokenExchangeError",
    "UnauthenticatedError",
    "UnhandledError",
]
