"""Transport outcome model: what one HTTP round trip produced."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional


class TransportErrorKind(str, Enum):
    """Transport-level failures (no HTTP status was received)."""

    TIMEOUT = "timeout"
    CONNECTION_REFUSED = "connection_refused"
    DNS_FAILURE = "dns_failure"
    CANCELLED = "cancelled"
    OTHER = "other"


@dataclass(frozen=True)
class TransportOutcome:
    """Either a response (status_code set) or a transport error."""

    status_code: Optional[int] = None
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    transport_error: Optional[TransportErrorKind] = None
    detail: Optional[str] = None

    def __post_init__(self):
        if (self.status_code is None) == (self.transport_error is None):
            raise ValueError("TransportOutcome needs exactly one of status_code or transport_error")
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @classmethod
    def response(cls, status_code: int, headers: Optional[Dict[str, str]] = None, body: bytes = b"") -> "TransportOutcome":
        return cls(status_code=status_code, headers=headers or {}, body=body)

    @classmethod
    def failure(cls, kind: TransportErrorKind, detail: Optional[str] = None) -> "TransportOutcome":
        return cls(transport_error=kind, detail=detail)

    @property
    def is_transport_error(self) -> bool:
        return self.transport_error is not None
