"""Retry configuration for the HTTP orchestrator.

Immutable configuration for the attempt loop and the per-attempt outcome
categories shared by the classifier and the orchestrator.
"""

from dataclasses import dataclass
from enum import Enum

DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY_MILLIS = 1000
DEFAULT_TIMEOUT_MILLIS = 10000


class AttemptOutcome(str, Enum):
    """Classification of a single attempt.

    - SUCCESS: 2xx response, stop immediately
    - RETRYABLE: transport failure, 5xx or 429, retry while budget remains
    - FATAL: any other status (4xx client errors included), never retried
    """

    SUCCESS = "success"
    RETRYABLE = "retryable"
    FATAL = "fatal"


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior.

    These three values are the whole tunable surface of an orchestration.
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    base_delay_millis: int = DEFAULT_BASE_DELAY_MILLIS
    timeout_millis: int = DEFAULT_TIMEOUT_MILLIS

    def __post_init__(self):
        if not isinstance(self.max_retries, int) or self.max_retries < 0:
            raise ValueError(f"max_retries must be a non-negative integer, got {self.max_retries!r}")
        if not isinstance(self.base_delay_millis, int) or self.base_delay_millis <= 0:
            raise ValueError(
                f"base_delay_millis must be a positive integer, got {self.base_delay_millis!r}"
            )
        if not isinstance(self.timeout_millis, int) or self.timeout_millis <= 0:
            raise ValueError(f"timeout_millis must be a positive integer, got {self.timeout_millis!r}")
