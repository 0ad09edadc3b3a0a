"""Public model exports."""

from .oauth import OAuthState, RefreshedCredential, SessionRecord, TokenRecord, now_millis

__all__ = [
    "OAuthState",
    "RefreshedCredential",
    "SessionRecord",
    "TokenRecord",
    "now_millis",
]
