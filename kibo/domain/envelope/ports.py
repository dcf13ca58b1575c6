"""
Port interfaces (ABCs) for the envelope bounded context.

The wrapped application is an external collaborator. Adapters for a
concrete transport implement one of these interfaces; plain callables
with the same signature are accepted as well.
"""

from abc import ABC, abstractmethod

from kibo.domain.envelope.entities import RawResponse, RequestContext


class DownstreamApplication(ABC):
    """Port for a synchronous wrapped application."""

    @abstractmethod
    def invoke(self, context: RequestContext) -> RawResponse:
        """Handle the request once and return its raw response."""
        raise NotImplementedError


class AsyncDownstreamApplication(ABC):
    """Port for a wrapped application whose call may suspend on IO."""

    @abstractmethod
    async def invoke(self, context: RequestContext) -> RawResponse:
        """Handle the request once and return its raw response."""
        raise NotImplementedError
