"""
Factory functions to provide shared clients and services as FastAPI dependencies.

Everything cached here is stateless between requests; cross-request state
lives in the key-value backend.
"""

import logging
from functools import lru_cache

from cloudassistant.clients import (
    DynamoDBStore,
    GeminiClient,
    GoogleDriveClient,
    GoogleOAuthClient,
    InMemoryStore,
    SQLiteStore,
)
from cloudassistant.core.config import get_settings
from cloudassistant.services import (
    ChatProxyService,
    DriveProxyService,
    KeyValueBackend,
    OAuthFlowService,
    SessionResolver,
    TokenCipherService,
    TokenRefreshManager,
    TokenStore,
)

logger = logging.getLogger(__name__)


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_kv_backend() -> KeyValueBackend:
    """Provide the configured key-value backend."""
    store_settings = _settings().store
    if store_settings.backend == "dynamodb":
        return DynamoDBStore(store_settings)
    if store_settings.backend == "memory":
        return InMemoryStore()
    store = SQLiteStore(store_settings.db_path)
    purged = store.purge_expired()
    if purged:
        logger.info("Purged %d expired entries from %s", purged, store_settings.db_path)
    return store


@lru_cache()
def get_token_cipher_service() -> TokenCipherService:
    """Provide symmetric encryption helper for token storage."""
    settings = _settings()
    secret = settings.security.token_encryption_secret or settings.google.client_secret
    return TokenCipherService(secret=secret)


@lru_cache()
def get_token_store() -> TokenStore:
    """Provide typed access to tokens, sessions and OAuth state."""
    settings = _settings()
    return TokenStore(
        get_kv_backend(),
        get_token_cipher_service(),
        session_ttl_seconds=settings.session.max_age_seconds,
        state_ttl_seconds=settings.oauth.state_ttl_seconds,
    )


@lru_cache()
def get_google_oauth_client() -> GoogleOAuthClient:
    """Create a singleton Google OAuth client."""
    settings = _settings()
    return GoogleOAuthClient(
        settings.google, settings.oauth, timeout=settings.http_timeout_seconds
    )


@lru_cache()
def get_drive_client() -> GoogleDriveClient:
    """Provide Google Drive client instance."""
    return GoogleDriveClient(timeout=_settings().http_timeout_seconds)


@lru_cache()
def get_gemini_client() -> GeminiClient:
    """Provide the completion endpoint client."""
    settings = _settings()
    return GeminiClient(settings.gemini, timeout=max(settings.http_timeout_seconds, 30.0))


@lru_cache()
def get_token_refresh_manager() -> TokenRefreshManager:
    return TokenRefreshManager(get_google_oauth_client(), get_token_store())


@lru_cache()
def get_oauth_flow_service() -> OAuthFlowService:
    """Provide the sign-in flow controller."""
    settings = _settings()
    redirect_uri = settings.google.redirect_uri
    return OAuthFlowService(
        get_google_oauth_client(),
        get_token_store(),
        redirect_uri=str(redirect_uri) if redirect_uri else None,
        enforce_state=settings.oauth.enforce_state,
    )


@lru_cache()
def get_session_resolver() -> SessionResolver:
    settings = _settings()
    return SessionResolver(
        get_token_store(),
        cookie_name=settings.session.cookie_name,
        allow_email_fallback=settings.session.allow_email_fallback,
    )


@lru_cache()
def get_drive_proxy_service() -> DriveProxyService:
    return DriveProxyService(
        get_drive_client(), get_token_store(), get_token_refresh_manager()
    )


@lru_cache()
def get_chat_proxy_service() -> ChatProxyService:
    return ChatProxyService(get_gemini_client(), get_drive_proxy_service())


__all__ = [
    "get_chat_proxy_service",
    "get_drive_client",
    "get_drive_proxy_service",
    "get_gemini_client",
    "get_google_oauth_client",
    "get_kv_backend",
    "get_oauth_flow_service",
    "get_session_resolver",
    "get_token_cipher_service",
    "get_token_refresh_manager",
    "get_token_store",
]
