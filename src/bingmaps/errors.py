"""Error model for Bing Maps requests.

Every failed call raises a single exception type, ``BingMapsError``, tagged
with exactly one ``ErrorKind``. The set of kinds is closed so callers can
handle each outcome exhaustively:

- ``SERVICE``: Bing Maps answered with a non-2xx status (see ``RequestError``).
- ``TRANSPORT``: the HTTP exchange could not be completed.
- ``BODY_READ``: the exchange completed but the body could not be read.
- ``CONVERSION``: a parameter could not be encoded, or the body did not match
  the expected schema.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Closed set of failure kinds."""

    SERVICE = "service"
    TRANSPORT = "transport"
    BODY_READ = "body_read"
    CONVERSION = "conversion"


_DESCRIPTIONS = {
    ErrorKind.SERVICE: "error reported by bing maps",
    ErrorKind.TRANSPORT: "error communicating with bing maps",
    ErrorKind.BODY_READ: "error reading response from bing maps",
    ErrorKind.CONVERSION: "error converting between wire format and python types",
}


@dataclass(frozen=True)
class RequestError:
    """An error reported by Bing Maps in a request's response.

    Attributes:
        http_status: The HTTP status in the response.
        should_wait: The service may normally have a result for this query but
            its servers are currently overloaded. Wait a few seconds and retry.
    """

    http_status: int
    should_wait: bool = False

    def __str__(self) -> str:
        return f"RequestError({self.http_status})"


class BingMapsError(Exception):
    """A failure communicating with the Bing Maps API.

    Instances are created through the per-kind constructors (``service``,
    ``transport``, ``body_read``, ``conversion``) so that each error carries
    exactly one payload: a ``RequestError`` for ``SERVICE``, the underlying
    exception for every other kind.
    """

    def __init__(
        self,
        kind: ErrorKind,
        *,
        request_error: Optional[RequestError] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        if (request_error is None) == (cause is None):
            raise ValueError("BingMapsError requires exactly one of request_error or cause")
        if (kind is ErrorKind.SERVICE) != (request_error is not None):
            raise ValueError(f"{kind.value} errors cannot carry this payload")
        self.kind = kind
        self.request_error = request_error
        self.cause = cause
        super().__init__(self._format())

    @classmethod
    def service(cls, request_error: RequestError) -> "BingMapsError":
        return cls(ErrorKind.SERVICE, request_error=request_error)

    @classmethod
    def transport(cls, exc: BaseException) -> "BingMapsError":
        return cls(ErrorKind.TRANSPORT, cause=exc)

    @classmethod
    def body_read(cls, exc: BaseException) -> "BingMapsError":
        return cls(ErrorKind.BODY_READ, cause=exc)

    @classmethod
    def conversion(cls, exc: BaseException) -> "BingMapsError":
        return cls(ErrorKind.CONVERSION, cause=exc)

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self.kind]

    @property
    def http_status(self) -> Optional[int]:
        """HTTP status for service errors, None otherwise."""
        if self.request_error is None:
            return None
        return self.request_error.http_status

    @property
    def should_wait(self) -> bool:
        """True when the service asked the caller to back off and retry."""
        return self.request_error is not None and self.request_error.should_wait

    def _format(self) -> str:
        detail = self.request_error if self.request_error is not None else self.cause
        return f"{self.description}: {detail}"

    def __repr__(self) -> str:
        payload = self.request_error if self.request_error is not None else self.cause
        return f"BingMapsError(kind={self.kind.value!r}, payload={payload!r})"


__all__ = [
    "ErrorKind",
    "RequestError",
    "BingMapsError",
]
