"""
Kibo: a response-shaping layer for JSON HTTP APIs.

Wraps every outgoing JSON response into a uniform envelope
(success, responded_at, version, location, body) and converts
unhandled application failures into a consistent error envelope.

Layers:
    - domain: Request-scoped entities, negotiation, version parsing, errors.
    - application: Envelope building and the invoker around the wrapped app.
    - interfaces: Starlette/FastAPI middleware adapter and wire schemas.
    - shared: Cross-cutting concerns (logging, last-resort error handlers).
"""

from kibo.application.envelope.invoke import (
    AsyncResponseEnvelopeMiddleware,
    ResponseEnvelopeMiddleware,
)
from kibo.core.config import EnvelopeSettings
from kibo.domain.envelope.entities import RawResponse, RequestContext

__version__ = "0.1.0"

__all__ = [
    "AsyncResponseEnvelopeMiddleware",
    "EnvelopeSettings",
    "RawResponse",
    "RequestContext",
    "ResponseEnvelopeMiddleware",
]
