"""Service layer exports."""

from .chat_proxy import ChatProxyService
from .drive_proxy import DriveProxyService, ProxiedResponse
from .oauth_flow import OAuthFlowService, SignInResult
from .sessions import Identity, SessionResolver, parse_session_cookie
from .token_cipher import TokenCipherService
from .token_refresh import TokenRefreshManager
from .token_store import KeyValueBackend, TokenStore

__all__ = [
    "ChatProxyService",
    "DriveProxyService",
    "Identity",
    "KeyValueBackend",
    "OAuthFlowService",
    "ProxiedResponse",
    "SessionResolver",
    "SignInResult",
    "TokenCipherService",
    "TokenRefreshManager",
    "TokenStore",
    "parse_session_cookie",
]
