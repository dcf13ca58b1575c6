"""
Use case: Invoke the wrapped application and shape its response.

Input: RequestContext.
Output: RawResponse (passed through, wrapped, or an error response).
Side effects: Calls the wrapped application exactly once.
Failure cases: None. Every failure raised by the wrapped application,
    or while wrapping its response, is converted into an error response.
"""

import inspect
import logging
from typing import Awaitable, Callable, Optional, Union

from kibo.application.envelope.build_envelope import EnvelopeBuilder
from kibo.core.config import EnvelopeSettings
from kibo.domain.envelope.entities import RawResponse, RequestContext
from kibo.domain.envelope.ports import (
    AsyncDownstreamApplication,
    DownstreamApplication,
)

logger = logging.getLogger(__name__)

SyncApp = Union[DownstreamApplication, Callable[[RequestContext], RawResponse]]
AsyncApp = Union[
    AsyncDownstreamApplication,
    DownstreamApplication,
    Callable[[RequestContext], Union[RawResponse, Awaitable[RawResponse]]],
]


def _entry_point(app):
    if isinstance(app, (DownstreamApplication, AsyncDownstreamApplication)):
        return app.invoke
    return app


class _EnvelopeInvoker:
    """Shared recovery logic for the sync and async invokers."""

    def __init__(
        self,
        config: Optional[EnvelopeSettings] = None,
        builder: Optional[EnvelopeBuilder] = None,
    ) -> None:
        self._config = config if config is not None else EnvelopeSettings()
        self._builder = builder if builder is not None else EnvelopeBuilder(self._config)

    @property
    def config(self) -> EnvelopeSettings:
        return self._config

    @property
    def builder(self) -> EnvelopeBuilder:
        return self._builder

    def recover(
        self,
        error: Exception,
        context: RequestContext,
        response: Optional[RawResponse],
    ) -> RawResponse:
        """Turn a failure into an error response and wrap it once more.

        Args:
            error: The caught failure.
            context: The incoming request context.
            response: The downstream response if the failure happened
                after it was produced (for example while parsing its
                body), otherwise None.
        """
        logger.exception(
            "Unhandled error on %s: %s", context.effective_path, type(error).__name__
        )
        error_response = self._builder.build_error_envelope(error, context, response)
        return self._builder.build_success_envelope(context, error_response)


class ResponseEnvelopeMiddleware(_EnvelopeInvoker):
    """Wraps a synchronous application with the envelope layer.

    Usage:
        wrapped = ResponseEnvelopeMiddleware(app, EnvelopeSettings(expose_errors=True))
        response = wrapped(RequestContext(path="/api/v1/items", accept="application/json"))
    """

    def __init__(
        self,
        app: SyncApp,
        config: Optional[EnvelopeSettings] = None,
        builder: Optional[EnvelopeBuilder] = None,
    ) -> None:
        super().__init__(config, builder)
        self._call = _entry_point(app)

    def __call__(self, context: RequestContext) -> RawResponse:
        response = None
        try:
            response = self._call(context)
            return self._builder.build_success_envelope(context, response)
        except Exception as exc:
            return self.recover(exc, context, response)


class AsyncResponseEnvelopeMiddleware(_EnvelopeInvoker):
    """Wraps an application whose call may suspend on IO.

    Performs no work while the application is suspended and adds no
    timeout, cancellation or retry of its own.
    """

    def __init__(
        self,
        app: AsyncApp,
        config: Optional[EnvelopeSettings] = None,
        builder: Optional[EnvelopeBuilder] = None,
    ) -> None:
        super().__init__(config, builder)
        self._call = _entry_point(app)

    async def __call__(self, context: RequestContext) -> RawResponse:
        response = None
        try:
            result = self._call(context)
            if inspect.isawaitable(result):
                result = await result
            response = result
            return self._builder.build_success_envelope(context, response)
        except Exception as exc:
            return self.recover(exc, context, response)
