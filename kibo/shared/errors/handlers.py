"""
Last-resort error handlers for FastAPI.

The envelope middleware absorbs failures of the routes it wraps.
Anything raised outside of it (by middleware registered after it, for
instance) ends up here and gets the same plain 500 body the envelope
layer uses when it does not wrap.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from kibo.application.envelope.build_envelope import GENERIC_ERROR_MESSAGE, HTTP_500

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register the catch-all error handler on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> PlainTextResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=HTTP_500)
