"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_chat_proxy_service,
    get_drive_client,
    get_drive_proxy_service,
    get_gemini_client,
    get_google_oauth_client,
    get_kv_backend,
    get_oauth_flow_service,
    get_session_resolver,
    get_token_cipher_service,
    get_token_refresh_manager,
    get_token_store,
)
from .config import get_app_settings

__all__ = [
    "get_app_settings",
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
