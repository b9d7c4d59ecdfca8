"""Retry state for one orchestration call.

Tracks the attempt counter, accumulated backoff and attempt history.
"""

from typing import Any, Dict, List, Optional, Tuple

from http_orchestrator.core.retry_config import AttemptOutcome
from http_orchestrator.models.result import AttemptRecord
from http_orchestrator.models.transport import TransportOutcome


class RetryState:
    """Mutable attempt bookkeeping, owned by exactly one Orchestrator run.

    attempt is 0 for the initial attempt and only grows when a retry is
    scheduled, so it never exceeds max_retries.
    """

    def __init__(self, max_retries: int):
        """Initialize state before the first attempt.

        Args:
            max_retries: Retry ceiling, fixed for the lifetime of the state
        """
        if max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {max_retries}")
        self.max_retries = max_retries
        self.attempt = 0
        self.cumulative_wait_millis = 0
        self._history: List[AttemptRecord] = []

    @property
    def history(self) -> Tuple[AttemptRecord, ...]:
        """Snapshot of the attempt history in chronological order."""
        return tuple(self._history)

    @property
    def retries_remaining(self) -> int:
        return self.max_retries - self.attempt

    def can_retry(self) -> bool:
        return self.attempt < self.max_retries

    @property
    def next_attempt_number(self) -> int:
        """1-based number of the attempt that will be recorded next."""
        return len(self._history) + 1

    def record(
        self,
        outcome: TransportOutcome,
        classification: AttemptOutcome,
        wait_before_next_millis: int = 0,
    ) -> AttemptRecord:
        """Append the record of a finished attempt.

        Args:
            outcome: What the transport returned
            classification: Classifier verdict for outcome
            wait_before_next_millis: Backoff scheduled after this attempt (0 if none)

        Returns:
            The appended AttemptRecord
        """
        record = AttemptRecord(
            attempt_number=self.next_attempt_number,
            outcome=classification,
            status_code=outcome.status_code,
            transport_error=outcome.transport_error,
            wait_before_next_millis=wait_before_next_millis,
        )
        self._history.append(record)
        return record

    def schedule_retry(self, wait_millis: int) -> None:
        """Account for a backoff wait and advance the retry counter.

        Raises:
            RuntimeError: If the retry budget is already spent
        """
        if not self.can_retry():
            raise RuntimeError(
                f"Retry budget exhausted: attempt {self.attempt} of max_retries {self.max_retries}"
            )
        self.cumulative_wait_millis += wait_millis
        self.attempt += 1

    def last_record(self) -> Optional[AttemptRecord]:
        return self._history[-1] if self._history else None

    def to_dict(self) -> Dict[str, Any]:
        """Export state for progress events."""
        return {
            "attempt": self.attempt,
            "max_retries": self.max_retries,
            "cumulative_wait_millis": self.cumulative_wait_millis,
            "history": [record.to_dict() for record in self._history],
        }
