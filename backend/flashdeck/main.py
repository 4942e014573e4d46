"""FastAPI application factory hosting the deck core's error boundary."""

from __future__ import annotations

from fastapi import FastAPI

from flashdeck.core.config import settings
from flashdeck.core.db import dispose_engine
from flashdeck.core.errors import register_exception_handlers
from flashdeck.core.logging import configure_logging
from flashdeck.dependencies import build_moderation_client

configure_logging(settings.log_level)

moderation_client = build_moderation_client()


def create_app() -> FastAPI:
    """Build the FastAPI application that routers are mounted on."""

    application = FastAPI(
        title=settings.project_name,
        debug=settings.debug,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    register_exception_handlers(application)

    @application.on_event("shutdown")
    async def _shutdown() -> None:
        await moderation_client.drain()
        await dispose_engine()

    return application


app = create_app()

__all__ = ["app", "create_app", "moderation_client"]
