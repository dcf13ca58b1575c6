"""
Use case: Build response envelopes.

Input: RequestContext plus the downstream RawResponse (or the failure
    raised while producing it).
Output: RawResponse, either passed through untouched or rewritten
    with a single-chunk JSON envelope.
Side effects: None.
Failure cases: BodyParseError when a chunk of a response that must be
    wrapped is not valid JSON.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Sequence

from kibo.application.envelope.schemas import (
    EnvelopeSchema,
    ErrorDetail,
    ErrorEnvelopeSchema,
)
from kibo.core.config import EnvelopeSettings
from kibo.domain.envelope.entities import (
    Chunk,
    EnvelopeDecision,
    RawResponse,
    RequestContext,
    ResponseHeaders,
)
from kibo.domain.envelope.errors import BodyParseError
from kibo.domain.envelope.negotiation import NegotiationPolicy
from kibo.domain.envelope.versioning import extract_version

logger = logging.getLogger(__name__)

HTTP_200 = 200
HTTP_400 = 400
HTTP_500 = 500

GENERIC_ERROR_MESSAGE = "Error"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def is_successful_status(status: int) -> bool:
    return status < HTTP_400


def normalize_body(chunks: Sequence[Chunk]) -> Any:
    """Parse each chunk as JSON and collapse the result.

    Zero chunks give None, one chunk gives its parsed value, several
    chunks give the list of parsed values in their original order.

    Raises:
        BodyParseError: If any chunk is not valid JSON.
    """
    payload = []
    for index, chunk in enumerate(chunks):
        try:
            payload.append(json.loads(chunk))
        except ValueError as exc:
            raise BodyParseError(index, str(exc)) from exc

    if not payload:
        return None
    if len(payload) == 1:
        return payload[0]
    return payload


def _as_text(chunk: Chunk) -> str:
    if isinstance(chunk, bytes):
        return chunk.decode("utf-8", errors="replace")
    return chunk


def _with_header(headers: Mapping[str, str], name: str, value: str) -> ResponseHeaders:
    """Copy headers, replacing ``name`` whatever its original casing.

    Every other pair is kept, repeated names included.
    """
    return ResponseHeaders(headers).replace(name, value)


class EnvelopeBuilder:
    """Assembles success and error envelopes.

    The builder holds only immutable configuration and is safe to share
    across concurrent requests.
    """

    def __init__(
        self,
        config: Optional[EnvelopeSettings] = None,
        policy: Optional[NegotiationPolicy] = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._config = config if config is not None else EnvelopeSettings()
        self._policy = policy if policy is not None else NegotiationPolicy()
        self._clock = clock

    @property
    def policy(self) -> NegotiationPolicy:
        return self._policy

    def decide(self, request: RequestContext, response: RawResponse) -> EnvelopeDecision:
        """Work out the envelope and the status override for a response.

        Args:
            request: The incoming request context.
            response: The downstream response.

        Returns:
            A pass-through decision when negotiation declines wrapping,
            otherwise the serialized envelope and, for error statuses,
            a 200 status override.

        Raises:
            BodyParseError: If a body chunk is not valid JSON.
        """
        if not self._policy.should_wrap(request, response):
            return EnvelopeDecision()

        success = is_successful_status(response.status)
        envelope = EnvelopeSchema(
            success=success,
            responded_at=self._clock(),
            version=extract_version(request.effective_path),
            location=request.effective_path,
            body=normalize_body(response.body),
        )
        return EnvelopeDecision(
            payload=envelope.model_dump_json(),
            status_override=None if success else HTTP_200,
        )

    def build_success_envelope(
        self, request: RequestContext, response: RawResponse
    ) -> RawResponse:
        """Wrap a downstream response, or return it unchanged.

        The returned object is the very same ``response`` instance on
        pass-through.
        """
        decision = self.decide(request, response)
        if decision.passthrough:
            return response

        payload = decision.payload
        headers = _with_header(
            response.headers, "Content-Length", str(len(payload.encode("utf-8")))
        )
        status = response.status
        if decision.status_override is not None:
            status = decision.status_override
        logger.debug(
            "Wrapped response for %s (status %d -> %d)",
            request.effective_path,
            response.status,
            status,
        )
        return RawResponse(status=status, headers=headers, body=(payload,))

    def build_error_envelope(
        self,
        error: Exception,
        request: RequestContext,
        original: Optional[RawResponse] = None,
    ) -> RawResponse:
        """Convert a failure into a 500 response.

        The status is always 500. Negotiation only decides whether the
        body is the plain string ``Error`` or an error envelope.

        Args:
            error: The caught failure.
            request: The incoming request context.
            original: The downstream response, if one had been produced
                before the failure.
        """
        body = GENERIC_ERROR_MESSAGE
        if self._policy.should_wrap(request, original):
            body = self._error_json(error, original)
        return RawResponse(status=HTTP_500, headers={}, body=(body,))

    def _error_json(self, error: Exception, original: Optional[RawResponse]) -> str:
        detail = ErrorDetail(message=GENERIC_ERROR_MESSAGE)
        if self._config.expose_errors:
            detail = ErrorDetail(message=str(error))
            if original is not None:
                detail = ErrorDetail(
                    message=str(error),
                    data=[_as_text(chunk) for chunk in original.body],
                )
        return ErrorEnvelopeSchema(error=detail).to_json()
