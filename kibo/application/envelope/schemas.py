"""
Pydantic schemas for the envelope wire format.

Field names and order are part of the public contract and must not
change. No business logic belongs here.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class EnvelopeSchema(BaseModel):
    """Uniform structure wrapping every JSON response.

    Attributes:
        success: False when the original status was 400 or above.
        responded_at: UTC time the envelope was built.
        version: API version parsed from the request path.
        location: The effective request path, echoed back.
        body: The parsed original payload (null, a value, or a list).
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    responded_at: datetime
    version: int = Field(..., ge=0)
    location: str
    body: Any = None


class ErrorDetail(BaseModel):
    """Error description. ``data`` is only set when errors are exposed."""

    message: str
    data: Optional[list[str]] = None


class ErrorEnvelopeSchema(BaseModel):
    """Body produced when the wrapped application fails."""

    error: ErrorDetail

    def to_json(self) -> str:
        """Serialize, leaving out fields that were never set."""
        return self.model_dump_json(exclude_unset=True)
