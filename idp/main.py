"""FastAPI application entrypoint for the identity provider."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from idp.core.config import IdPSettings
from idp.core.config import get_settings
from idp.core.errors import ErrorDispatcher
from idp.core.errors import register_error_handlers
from idp.core.logging import configure_logging
from idp.core.messages import MessageResolver
from idp.core.messages import get_message_resolver

logger = logging.getLogger(__name__)


def create_app(
    settings: IdPSettings | None = None,
    resolver: MessageResolver | None = None,
) -> FastAPI:
    """Build the application with the central error dispatcher installed."""
    settings = settings or get_settings()
    configure_logging(settings)
    logger.info("Starting %s with settings=%s", settings.service_name, settings.safe_for_logging())

    app = FastAPI(title=settings.service_name)
    register_error_handlers(app, ErrorDispatcher(resolver or get_message_resolver()))

    @app.get("/health")
    def health() -> dict[str, str]:
        """Health check endpoint for service readiness."""
        return {"status": "ok"}

    return app


app = create_app()
