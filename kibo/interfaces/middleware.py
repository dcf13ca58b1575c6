"""
Response envelope HTTP middleware.

Adapts the envelope layer to Starlette/FastAPI: turns the incoming
request into a RequestContext, runs the downstream app through the
async invoker, and writes the resulting RawResponse back out.

Pass-through responses are replayed byte-for-byte with their original
status and raw headers.
"""

import logging
from typing import Optional

from starlette.applications import Starlette
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from kibo.application.envelope.build_envelope import EnvelopeBuilder
from kibo.application.envelope.invoke import AsyncResponseEnvelopeMiddleware
from kibo.core.config import EnvelopeSettings
from kibo.domain.envelope.entities import (
    Chunk,
    RawResponse,
    RequestContext,
    ResponseHeaders,
)
from kibo.domain.envelope.ports import AsyncDownstreamApplication

logger = logging.getLogger(__name__)


def request_context(request: Request) -> RequestContext:
    """Build the request context from a Starlette request.

    The ASGI ``raw_path``, when the server provides it, is used as the
    alternate path.
    """
    raw_path = request.scope.get("raw_path")
    alternate_path = raw_path.decode("latin-1") if raw_path else None
    return RequestContext(
        path=request.url.path,
        accept=request.headers.get("accept"),
        alternate_path=alternate_path,
    )


def _as_bytes(chunk: Chunk) -> bytes:
    if isinstance(chunk, bytes):
        return chunk
    return chunk.encode("utf-8")


class CallNextDownstream(AsyncDownstreamApplication):
    """Adapter: the rest of the ASGI stack as a downstream application.

    Keeps the Starlette response and the captured body so that a
    pass-through can be replayed exactly.
    """

    def __init__(self, request: Request, call_next: RequestResponseEndpoint) -> None:
        self._request = request
        self._call_next = call_next
        self.response: Optional[Response] = None
        self.raw: Optional[RawResponse] = None

    async def invoke(self, context: RequestContext) -> RawResponse:
        response = await self._call_next(self._request)
        chunks = []
        async for chunk in response.body_iterator:
            if chunk:
                chunks.append(_as_bytes(chunk))
        self.response = response
        self.raw = RawResponse(
            status=response.status_code,
            headers=ResponseHeaders(response.headers.items()),
            body=tuple(chunks),
        )
        return self.raw

    def replay(self) -> Response:
        """Rebuild the downstream response exactly as it was produced."""
        replayed = Response(
            content=b"".join(self.raw.body),
            status_code=self.response.status_code,
        )
        replayed.raw_headers = list(self.response.raw_headers)
        replayed.background = self.response.background
        return replayed


def to_starlette_response(raw: RawResponse) -> Response:
    """Write a RawResponse out as a Starlette response.

    Headers are copied pair by pair, so repeated names survive. A
    Content-Length is only computed when the response carries none.
    """
    return Response(
        content=b"".join(_as_bytes(chunk) for chunk in raw.body),
        status_code=raw.status,
        headers=ResponseHeaders(raw.headers),
    )


class ResponseEnvelopeHTTPMiddleware(BaseHTTPMiddleware):
    """Middleware that wraps JSON responses in the uniform envelope.

    Unhandled errors raised by the downstream app are absorbed and
    turned into error responses. The configuration is fixed at
    construction.
    """

    def __init__(self, app: ASGIApp, config: Optional[EnvelopeSettings] = None) -> None:
        super().__init__(app)
        self.config = config if config is not None else EnvelopeSettings()
        self.builder = EnvelopeBuilder(self.config)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process request and shape the response."""
        context = request_context(request)
        downstream = CallNextDownstream(request, call_next)
        invoker = AsyncResponseEnvelopeMiddleware(
            downstream, self.config, builder=self.builder
        )

        result = await invoker(context)
        if downstream.raw is not None and result is downstream.raw:
            return downstream.replay()
        return to_starlette_response(result)


def install_envelope(app: Starlette, config: Optional[EnvelopeSettings] = None) -> None:
    """Register the envelope middleware on a Starlette/FastAPI app.

    Args:
        app: The application instance.
        config: Envelope settings. Defaults to settings loaded from
            the environment.
    """
    app.add_middleware(ResponseEnvelopeHTTPMiddleware, config=config)
    logger.debug("Response envelope middleware installed")
