"""Attempt records and terminal orchestration results."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from http_orchestrator.core.retry_config import AttemptOutcome
from http_orchestrator.models.transport import TransportErrorKind


class ResultOutcome(str, Enum):
    """Terminal outcome of one orchestration call."""

    SUCCESS = "success"
    FATAL_CLIENT_ERROR = "fatal_client_error"
    RETRIES_EXHAUSTED = "retries_exhausted"
    TRANSPORT_FAILURE = "transport_failure"


@dataclass(frozen=True)
class AttemptRecord:
    """One transport invocation and its classification."""

    attempt_number: int
    outcome: AttemptOutcome
    status_code: Optional[int] = None
    transport_error: Optional[TransportErrorKind] = None
    wait_before_next_millis: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "attempt_number": self.attempt_number,
            "status_code": self.status_code,
            "transport_error": self.transport_error.value if self.transport_error else None,
            "outcome": self.outcome.value,
            "wait_before_next_millis": self.wait_before_next_millis,
        }


def _decode(payload: Optional[bytes]) -> Optional[str]:
    if payload is None:
        return None
    return payload.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class OrchestrationResult:
    """Terminal value handed to the caller; never mutated after creation.

    response_body and response_headers are only set on SUCCESS. error_body
    keeps the body of the last non-success response for diagnostics.
    """

    outcome: ResultOutcome
    attempt_history: Tuple[AttemptRecord, ...]
    total_elapsed_millis: int
    final_status_code: Optional[int] = None
    response_body: Optional[bytes] = None
    response_headers: Mapping[str, str] = field(default_factory=dict)
    error_body: Optional[bytes] = None
    transport_error: Optional[TransportErrorKind] = None
    cancelled: bool = False

    def __post_init__(self):
        object.__setattr__(self, "response_headers", MappingProxyType(dict(self.response_headers)))

    @property
    def succeeded(self) -> bool:
        return self.outcome == ResultOutcome.SUCCESS

    @property
    def attempts(self) -> int:
        return len(self.attempt_history)

    @property
    def waits_millis(self) -> Tuple[int, ...]:
        """Backoff waits that were scheduled between attempts, in order."""
        return tuple(r.wait_before_next_millis for r in self.attempt_history if r.wait_before_next_millis)

    def to_dict(self) -> Dict[str, Any]:
        """Export as a JSON-safe dict (bodies decoded as UTF-8)."""
        return {
            "outcome": self.outcome.value,
            "final_status_code": self.final_status_code,
            "response_body": _decode(self.response_body),
            "response_headers": dict(self.response_headers),
            "error_body": _decode(self.error_body),
            "transport_error": self.transport_error.value if self.transport_error else None,
            "cancelled": self.cancelled,
            "attempt_history": [record.to_dict() for record in self.attempt_history],
            "total_elapsed_millis": self.total_elapsed_millis,
        }
