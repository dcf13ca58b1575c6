"""
Application entry point.

Creates a FastAPI application and wires together:
- The response envelope middleware
- Last-resort error handlers
- Logging configuration
- The health router

No business logic belongs here.
"""

from typing import Optional

from fastapi import FastAPI

from kibo.core.config import EnvelopeSettings, settings
from kibo.interfaces.health import router as health_router
from kibo.interfaces.middleware import install_envelope
from kibo.shared.errors.handlers import register_error_handlers
from kibo.shared.logging import configure_logging


def create_app(config: Optional[EnvelopeSettings] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    This is the composition root of the application.

    Args:
        config: Settings to use. Defaults to the environment-loaded ones.

    Returns:
        A fully configured FastAPI application instance.
    """
    config = config if config is not None else settings
    configure_logging(level=config.log_level)

    app = FastAPI(
        title=config.project_name,
        version=config.version,
        docs_url="/docs" if config.debug else None,
        redoc_url="/redoc" if config.debug else None,
    )

    # --- Response Envelope ---
    install_envelope(app, config)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix="/api/v1")

    return app


app = create_app()
