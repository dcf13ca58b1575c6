"""
Content negotiation for the envelope layer.

Only a single media type is recognised, compared by exact string
equality: no parameter parsing and no wildcard support.
"""

import logging
from typing import Optional

from kibo.domain.envelope.entities import RawResponse, RequestContext

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


def is_supported_content_type(content_type: Optional[str]) -> bool:
    """Return True if the media type is exactly the JSON media type."""
    return content_type == JSON_CONTENT_TYPE


class NegotiationPolicy:
    """Decides whether a response must be wrapped in an envelope.

    The response is wrapped when the server declares a JSON
    Content-Type or when the client asks for JSON. Either side is
    enough.
    """

    def client_wants_json(self, request: RequestContext) -> bool:
        return is_supported_content_type(request.accept)

    def server_says_json(self, response: Optional[RawResponse]) -> bool:
        if response is None:
            return False
        return is_supported_content_type(response.header("Content-Type"))

    def should_wrap(
        self, request: RequestContext, response: Optional[RawResponse]
    ) -> bool:
        """Return True if the response must be wrapped.

        Args:
            request: The incoming request context.
            response: The downstream response, or None when the
                downstream failed before producing one.
        """
        wrap = self.server_says_json(response) or self.client_wants_json(request)
        logger.debug("Negotiation for %s: wrap=%s", request.effective_path, wrap)
        return wrap
