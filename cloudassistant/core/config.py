"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app, the service layer and the
operational scripts share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

import os

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


DEFAULT_SCOPES = "openid email profile https://www.googleapis.com/auth/drive.readonly"


class GoogleSettings(BaseSettings):
    """Configuration required for interacting with Google APIs."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    client_id: str = Field(..., validation_alias="GOOGLE_CLIENT_ID")
    client_secret: str = Field(..., validation_alias="GOOGLE_CLIENT_SECRET")
    redirect_uri: Optional[AnyHttpUrl] = Field(
        None,
        validation_alias="GOOGLE_REDIRECT_URI",
        description=(
            "Fixed callback URL. When omitted the callback is derived from the "
            "origin of the incoming request."
        ),
    )


class OAuthSettings(BaseSettings):
    """OAuth flow configuration."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    state_ttl_seconds: int = Field(600, validation_alias="OAUTH_STATE_TTL")
    enforce_state: bool = Field(
        True,
        validation_alias="OAUTH_ENFORCE_STATE",
        description="Reject callbacks whose state nonce was not issued by /start.",
    )
    scopes: str = Field(DEFAULT_SCOPES, validation_alias="OAUTH_SCOPES")

    @field_validator("scopes", mode="before")
    @classmethod
    def _normalize_scopes(cls, value: str | tuple[str, ...] | list[str]) -> str:
        """Support providing scopes as a comma- or space-separated string."""
        if isinstance(value, (list, tuple)):
            items = value
        else:
            items = value.replace(",", " ").split()
        return " ".join(scope.strip() for scope in items if scope.strip())

    @property
    def scope_list(self) -> tuple[str, ...]:
        return tuple(self.scopes.split())


class SessionSettings(BaseSettings):
    """Browser session cookie configuration."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    cookie_name: str = Field("ca_session", validation_alias="SESSION_COOKIE_NAME")
    max_age_seconds: int = Field(60 * 60 * 24 * 30, validation_alias="SESSION_MAX_AGE")
    cookie_secure: bool = Field(True, validation_alias="SESSION_COOKIE_SECURE")
    allow_email_fallback: bool = Field(
        True,
        validation_alias="ALLOW_EMAIL_FALLBACK",
        description="Accept an unauthenticated ?email= parameter when no session exists.",
    )


class GeminiSettings(BaseSettings):
    """Configuration for the proxied completion endpoint."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    api_url: Optional[str] = Field(None, validation_alias="GEMINI_API_URL")
    api_key: Optional[str] = Field(None, validation_alias="GEMINI_API_KEY")

    @property
    def configured(self) -> bool:
        return bool(self.api_url and self.api_key)


class StoreSettings(BaseSettings):
    """Key-value store backing tokens, sessions and OAuth state."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    backend: str = Field(
        "sqlite",
        validation_alias="STORE_BACKEND",
        description="One of 'sqlite', 'dynamodb' or 'memory'.",
    )
    db_path: str = Field("data/cloudassistant.db", validation_alias="STORE_DB_PATH")
    dynamodb_table_name: Optional[str] = Field(None, validation_alias="DYNAMODB_TABLE_NAME")
    region_name: str = Field("us-east-1", validation_alias="AWS_REGION")

    @field_validator("backend")
    @classmethod
    def _check_backend(cls, value: str) -> str:
        backend = value.strip().lower()
        if backend not in {"sqlite", "dynamodb", "memory"}:
            raise ValueError(f"Unsupported store backend '{value}'.")
        return backend


class SecuritySettings(BaseSettings):
    """Security-related configuration."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    token_encryption_secret: Optional[str] = Field(
        None,
        validation_alias="TOKEN_ENCRYPTION_SECRET",
        description=(
            "Secret used to derive the symmetric key for encrypting stored tokens."
        ),
    )


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    http_timeout_seconds: float = Field(10.0, validation_alias="HTTP_TIMEOUT_SECONDS")
    frontend_origin: Optional[str] = Field(
        None,
        validation_alias="FRONTEND_ORIGIN",
        description="Origin allowed to receive the sign-in postMessage. Defaults to '*'.",
    )
    cors_allow_origins: str = Field(
        "",
        validation_alias="CORS_ALLOW_ORIGINS",
        description="Comma-separated origins allowed to call the API from a browser.",
    )
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    oauth: OAuthSettings = Field(default_factory=OAuthSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)
    google: GoogleSettings = Field(default_factory=GoogleSettings)
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "DEFAULT_SCOPES",
    "GeminiSettings",
    "GoogleSettings",
    "OAuthSettings",
    "SecuritySettings",
    "SessionSettings",
    "StoreSettings",
    "get_settings",
]
