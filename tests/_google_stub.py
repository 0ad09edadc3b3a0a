"""In-process stand-in for the Google and completion endpoints."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qs

import httpx

from cloudassistant.clients import GeminiClient, GoogleDriveClient, GoogleOAuthClient, InMemoryStore
from cloudassistant.core.config import GeminiSettings, GoogleSettings, OAuthSettings
from cloudassistant.services import (
    ChatProxyService,
    DriveProxyService,
    OAuthFlowService,
    SessionResolver,
    TokenCipherService,
    TokenRefreshManager,
    TokenStore,
)

COMPLETION_URL = "https://gemini.example.com/v1/complete"

DEFAULT_FILES = [
    {"id": "doc-1", "name": "Roadmap", "mimeType": "application/vnd.google-apps.document"},
    {"id": "txt-1", "name": "notes.txt", "mimeType": "text/plain"},
    {"id": "pdf-1", "name": "report.pdf", "mimeType": "application/pdf"},
    {"id": "img-1", "name": "photo.png", "mimeType": "image/png"},
    {"id": "txt-2", "name": "todo.txt", "mimeType": "text/plain"},
    {"id": "txt-3", "name": "extra.txt", "mimeType": "text/plain"},
]


class FakeGoogle:
    """Answers token, userinfo, Drive and completion requests and records them."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.token_response: dict[str, Any] = {
            "access_token": "access-1",
            "refresh_token": "refresh-1",
            "scope": "openid email profile https://www.googleapis.com/auth/drive.readonly",
            "expires_in": 3599,
            "token_type": "Bearer",
        }
        self.refresh_response: dict[str, Any] = {"access_token": "access-2", "expires_in": 3599}
        self.userinfo: dict[str, Any] = {"email": "ada@example.com", "sub": "1001"}
        self.list_statuses: list[int] = []
        self.files: Any = list(DEFAULT_FILES)
        self.file_contents: dict[str, str] = {
            "doc-1": "Exported roadmap text",
            "txt-1": "n" * 2000,
        }
        self.fail_refresh = False
        self.fail_listing = False
        self.fail_content = False
        self.completion_status = 200
        self.completion_body = b'{"candidates":[{"text":"hello"}]}'
        self.transport = httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = request.url

        if url.host == "oauth2.googleapis.com" and url.path == "/token":
            form = parse_qs(request.content.decode())
            if form["grant_type"][0] == "authorization_code":
                body = self.token_response
            elif self.fail_refresh:
                raise httpx.ConnectError("token endpoint unreachable", request=request)
            else:
                body = self.refresh_response
            return httpx.Response(400 if "error" in body else 200, json=body)

        if url.path == "/oauth2/v3/userinfo":
            return httpx.Response(200, json=self.userinfo)

        if url.path == "/drive/v3/files":
            if self.fail_listing:
                raise httpx.ConnectError("drive unreachable", request=request)
            status = self.list_statuses.pop(0) if self.list_statuses else 200
            if status != 200:
                return httpx.Response(status, json={"error": {"code": status, "message": "denied"}})
            page_size = int(url.params["pageSize"])
            return httpx.Response(200, json={"files": self.files[:page_size]})

        if url.path.startswith("/drive/v3/files/"):
            if self.fail_content:
                return httpx.Response(500, text="backend error")
            file_id = url.path.split("/")[4]
            return httpx.Response(200, text=self.file_contents.get(file_id, ""))

        if str(url) == COMPLETION_URL:
            return httpx.Response(
                self.completion_status,
                content=self.completion_body,
                headers={"content-type": "application/json"},
            )

        return httpx.Response(404)

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.path == path]

    def grants(self) -> list[str]:
        return [
            parse_qs(request.content.decode())["grant_type"][0]
            for request in self.requests_to("/token")
        ]

    def bearer_tokens(self, path: str) -> list[str]:
        return [request.headers["authorization"] for request in self.requests_to(path)]

    def completion_prompts(self) -> list[str]:
        return [
            json.loads(request.content)["prompt"]
            for request in self.requests
            if str(request.url) == COMPLETION_URL
        ]


@dataclass
class Services:
    fake: FakeGoogle
    backend: InMemoryStore
    store: TokenStore
    oauth_client: GoogleOAuthClient
    flow: OAuthFlowService
    resolver: SessionResolver
    refresh: TokenRefreshManager
    drive_proxy: DriveProxyService
    chat_proxy: ChatProxyService
    nonces: list[str] = field(default_factory=list)


def build_services(
    fake: FakeGoogle | None = None,
    *,
    gemini_configured: bool = True,
    enforce_state: bool = True,
    allow_email_fallback: bool = True,
    redirect_uri: str | None = None,
    clock=None,
) -> Services:
    """Wire the real services against the fake endpoints and an in-memory store."""
    fake = fake or FakeGoogle()
    backend = InMemoryStore(clock=clock) if clock else InMemoryStore()
    store = TokenStore(
        backend,
        TokenCipherService(secret="unit-test-secret"),
        session_ttl_seconds=60 * 60 * 24 * 30,
        state_ttl_seconds=600,
    )
    google_settings = GoogleSettings(GOOGLE_CLIENT_ID="client-id", GOOGLE_CLIENT_SECRET="client-secret")
    oauth_client = GoogleOAuthClient(google_settings, OAuthSettings(), transport=fake.transport)

    nonces: list[str] = []
    counter = iter(range(1, 10_000))

    def nonce_factory() -> str:
        nonce = f"nonce-{next(counter)}"
        nonces.append(nonce)
        return nonce

    sessions = iter(range(1, 10_000))
    flow = OAuthFlowService(
        oauth_client,
        store,
        redirect_uri=redirect_uri,
        enforce_state=enforce_state,
        nonce_factory=nonce_factory,
        session_id_factory=lambda: f"session-{next(sessions)}",
    )
    resolver = SessionResolver(store, allow_email_fallback=allow_email_fallback)
    refresh = TokenRefreshManager(oauth_client, store)
    drive_proxy = DriveProxyService(GoogleDriveClient(transport=fake.transport), store, refresh)

    if gemini_configured:
        gemini_settings = GeminiSettings(GEMINI_API_URL=COMPLETION_URL, GEMINI_API_KEY="gemini-key")
    else:
        gemini_settings = GeminiSettings(GEMINI_API_URL=None, GEMINI_API_KEY=None)
    chat_proxy = ChatProxyService(GeminiClient(gemini_settings, transport=fake.transport), drive_proxy)

    return Services(
        fake=fake,
        backend=backend,
        store=store,
        oauth_client=oauth_client,
        flow=flow,
        resolver=resolver,
        refresh=refresh,
        drive_proxy=drive_proxy,
        chat_proxy=chat_proxy,
        nonces=nonces,
    )
