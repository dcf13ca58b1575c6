"""
Domain entities for the envelope bounded context.

All entities are request-scoped: created fresh per invocation and
discarded once the response is returned. They contain no framework
imports and no IO operations.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Mapping, Optional, Union

Chunk = Union[str, bytes]
HeaderPairs = Union[Mapping[str, str], Iterable[tuple[str, str]]]


class ResponseHeaders(Mapping[str, str]):
    """Ordered header pairs in which a name may repeat.

    Names are matched case-insensitively. ``items()`` returns every
    pair, repeats included (Set-Cookie, Vary, Link), so handing an
    instance to anything that copies headers through ``items()`` keeps
    them all.
    """

    def __init__(self, headers: HeaderPairs = ()) -> None:
        pairs = headers.items() if isinstance(headers, Mapping) else headers
        self._pairs = [(str(key), str(value)) for key, value in pairs]

    def __getitem__(self, name: str) -> str:
        wanted = name.lower()
        for key, value in self._pairs:
            if key.lower() == wanted:
                return value
        raise KeyError(name)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        wanted = name.lower()
        return any(key.lower() == wanted for key, _ in self._pairs)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._pairs)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._pairs!r})"

    def keys(self) -> list[str]:  # type: ignore[override]
        return [key for key, _ in self._pairs]

    def values(self) -> list[str]:  # type: ignore[override]
        return [value for _, value in self._pairs]

    def items(self) -> list[tuple[str, str]]:  # type: ignore[override]
        return list(self._pairs)

    def getlist(self, name: str) -> list[str]:
        wanted = name.lower()
        return [value for key, value in self._pairs if key.lower() == wanted]

    def replace(self, name: str, value: str) -> "ResponseHeaders":
        """Return a copy where ``name`` has the single value ``value``."""
        wanted = name.lower()
        kept = [(key, val) for key, val in self._pairs if key.lower() != wanted]
        return ResponseHeaders(kept + [(name, value)])


@dataclass(frozen=True)
class RequestContext:
    """Immutable view of the incoming request.

    Attributes:
        path: The primary request path.
        accept: The client's preferred media type (raw Accept header).
        alternate_path: Override path. Takes priority over ``path``
            whenever it is not None.
    """

    path: str
    accept: Optional[str] = None
    alternate_path: Optional[str] = None

    @property
    def effective_path(self) -> str:
        """Path used for both version extraction and location reporting."""
        if self.alternate_path is not None:
            return self.alternate_path
        return self.path


@dataclass(frozen=True)
class RawResponse:
    """A (status, headers, body) triple as produced by the wrapped app.

    Body chunks are kept in their original order. They may be text or
    raw bytes, depending on the transport that produced them. Headers
    are any string mapping; use ResponseHeaders when names repeat.
    """

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: tuple[Chunk, ...] = ()

    def header(self, name: str) -> Optional[str]:
        """Return a header value, matching the name case-insensitively."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


@dataclass(frozen=True)
class EnvelopeDecision:
    """Outcome of the success-path envelope construction.

    Keeps the two decisions the wrapper makes apart: whether the body
    is replaced by an envelope, and whether the transport status is
    rewritten.

    Attributes:
        payload: The serialized envelope, or None for pass-through.
        status_override: Status to put on the wire, or None to keep
            the original one.
    """

    payload: Optional[str] = None
    status_override: Optional[int] = None

    @property
    def passthrough(self) -> bool:
        return self.payload is None
