"""Application factory for the FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers) so
tests and the ASGI entrypoint build the same application.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from app.adapters.llm.factory import validate_environment
from app.api.routes import chat_router, health_router
from app.core.config import settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    # Credential problems are reported up front, not on the first chat request
    status = validate_environment(settings.llm)
    if not status.is_valid:
        logger.warning(
            "llm.configuration_invalid",
            extra={"provider": settings.llm.provider, "reason": status.error},
        )

    app = FastAPI(
        title="HR Copilot Chat API",
        description=(
            "Recruiter-facing chat over evaluated candidates: classifies the "
            "question, retrieves supporting resume sentences and returns a "
            "grounded answer. Requires X-API-Key."
        ),
        version="0.1.0",
    )

    app.middleware("http")(request_id_middleware)
    setup_exception_handlers(app)

    app.include_router(chat_router, prefix="/v1")
    app.include_router(health_router)

    return app
