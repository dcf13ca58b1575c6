"""
Domain-specific errors for the envelope bounded context.

Failures raised by the wrapped application are not modelled here:
any exception it raises is caught by the invoker as-is.
"""


class EnvelopeError(Exception):
    """Base error for all envelope layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class BodyParseError(EnvelopeError):
    """Raised when a response body chunk is not valid JSON."""

    def __init__(self, index: int, reason: str) -> None:
        super().__init__(f"Response body chunk {index} is not valid JSON: {reason}")
        self.index = index
        self.reason = reason
