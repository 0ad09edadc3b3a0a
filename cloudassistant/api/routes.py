"""
FastAPI routes for the Cloud Assistant backend.

``auth_router`` is mounted at the site root (the callback URL is registered
with Google); ``router`` is mounted under ``/api``.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import HTMLResponse, RedirectResponse

from cloudassistant.api.pages import render_auth_complete_page
from cloudassistant.core.config import AppSettings
from cloudassistant.core.errors import UnauthenticatedError
from cloudassistant.dependencies import (
    get_app_settings,
    get_chat_proxy_service,
    get_drive_proxy_service,
    get_oauth_flow_service,
    get_session_resolver,
)
from cloudassistant.models import now_millis
from cloudassistant.services import ProxiedResponse

auth_router = APIRouter()
router = APIRouter()


def _origin(request: Request) -> str:
    return str(request.base_url).rstrip("/")


def _session_cookie(settings: AppSettings, session_id: str) -> str:
    session = settings.session
    parts = [f"{session.cookie_name}={session_id}", "Path=/"]
    if session.cookie_secure:
        parts.append("Secure")
    parts.extend(["HttpOnly", "SameSite=Lax", f"Max-Age={session.max_age_seconds}"])
    return "; ".join(parts)


def _relay(proxied: ProxiedResponse) -> Response:
    return Response(
        content=proxied.content,
        status_code=proxied.status_code,
        media_type=proxied.media_type,
    )


@router.get("/ping", status_code=HTTPStatus.OK)
async def ping() -> dict:
    """Liveness probe."""
    return {"ok": True, "now": now_millis()}


@auth_router.get("/auth/google/start")
async def start_google_sign_in(
    request: Request,
    flow: Annotated[Any, Depends(get_oauth_flow_service)],
) -> RedirectResponse:
    """Redirect the browser to the Google consent screen."""
    authorization_url = flow.start(_origin(request))
    return RedirectResponse(url=authorization_url, status_code=HTTPStatus.FOUND)


@auth_router.get("/auth/google/callback")
async def complete_google_sign_in(
    request: Request,
    flow: Annotated[Any, Depends(get_oauth_flow_service)],
    settings: Annotated[AppSettings, Depends(get_app_settings)],
    code: str | None = Query(default=None, description="Authorization code returned by Google."),
    state: str | None = Query(default=None, description="State nonce issued by /start."),
) -> HTMLResponse:
    """Complete the exchange, open a session and notify the opener window."""
    result = await flow.complete(code=code, state=state, origin=_origin(request))

    page = render_auth_complete_page(result.email, settings.frontend_origin or "*")
    response = HTMLResponse(content=page)
    response.headers.append("set-cookie", _session_cookie(settings, result.session.session_id))
    return response


@router.get("/drive/list")
async def list_drive_files(
    request: Request,
    resolver: Annotated[Any, Depends(get_session_resolver)],
    drive_proxy: Annotated[Any, Depends(get_drive_proxy_service)],
    email: str | None = Query(
        default=None,
        description="Legacy identity parameter, used only when no session cookie resolves.",
    ),
) -> Response:
    """Return the signed-in user's Drive file listing."""
    identity = resolver.identify(request.headers.get("cookie"), email)
    if identity is None:
        raise UnauthenticatedError("Missing authenticated session or email param")
    return _relay(await drive_proxy.list_files(identity.email))


@router.post("/chat/gemini")
async def proxy_chat(
    request: Request,
    resolver: Annotated[Any, Depends(get_session_resolver)],
    chat_proxy: Annotated[Any, Depends(get_chat_proxy_service)],
) -> Response:
    """Forward a chat prompt, enriched with Drive context when signed in."""
    try:
        body = await request.json()
    except ValueError:
        body = {}
    prompt = body.get("prompt") if isinstance(body, dict) else None
    email = resolver.resolve(request.headers.get("cookie"))
    return _relay(await chat_proxy.forward(str(prompt or ""), email))


__all__ = ["auth_router", "router"]
