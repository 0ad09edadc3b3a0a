"""
FastAPI application entrypoint for the Cloud Assistant backend.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from cloudassistant import __version__
from cloudassistant.api.routes import auth_router, router as api_router
from cloudassistant.core.config import get_settings
from cloudassistant.core.errors import CloudAssistantError, TokenExchangeError, UnhandledError
from cloudassistant.core.logging import configure_logging

logger = logging.getLogger(__name__)


async def _handle_backend_error(request: Request, exc: CloudAssistantError) -> Response:
    if isinstance(exc, TokenExchangeError):
        return JSONResponse(status_code=exc.status_code, content=exc.body)
    return PlainTextResponse(exc.detail, status_code=exc.status_code)


async def _wrap_unhandled_errors(request: Request, call_next) -> Response:
    try:
        return await call_next(request)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Unhandled error serving %s %s", request.method, request.url.path)
        error = UnhandledError(exc)
        return PlainTextResponse(error.detail, status_code=error.status_code)


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Cloud Assistant Backend",
        version=__version__,
        description="Google sign-in, Drive listing and chat proxy for the Cloud Assistant page.",
    )
    app.add_exception_handler(CloudAssistantError, _handle_backend_error)
    app.middleware("http")(_wrap_unhandled_errors)
    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["Content-Type"],
        )

    app.include_router(auth_router)
    app.include_router(api_router, prefix="/api")
    return app


app = create_app()

__all__ = ["app", "create_app"]
