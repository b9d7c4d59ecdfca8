"""Backoff policies for the HTTP orchestrator."""

import random
from typing import Optional

from http_orchestrator.core.retry_config import DEFAULT_BASE_DELAY_MILLIS


class BackoffPolicy:
    """Exponential backoff: wait = base_delay_millis * 2 ** attempt_number.

    With the default 1000 ms base, retries 1, 2 and 3 wait 2000, 4000 and
    8000 ms. Deterministic and free of side effects.
    """

    def __init__(self, base_delay_millis: int = DEFAULT_BASE_DELAY_MILLIS):
        if base_delay_millis <= 0:
            raise ValueError(f"base_delay_millis must be positive, got {base_delay_millis}")
        self.base_delay_millis = base_delay_millis

    def wait_for(self, attempt_number: int) -> int:
        """Return the wait in milliseconds before retry number attempt_number.

        Args:
            attempt_number: 1-based retry number

        Raises:
            ValueError: If attempt_number < 1
        """
        if attempt_number < 1:
            raise ValueError(f"attempt_number must be >= 1, got {attempt_number}")
        return self.base_delay_millis * (2**attempt_number)


class JitteredBackoffPolicy(BackoffPolicy):
    """Exponential backoff plus a random jitter in [0, max_jitter_millis].

    Opt-in only; pass a seeded random.Random for reproducible waits.
    """

    def __init__(
        self,
        base_delay_millis: int = DEFAULT_BASE_DELAY_MILLIS,
        max_jitter_millis: int = 250,
        rng: Optional[random.Random] = None,
    ):
        super().__init__(base_delay_millis)
        if max_jitter_millis < 0:
            raise ValueError(f"max_jitter_millis must be >= 0, got {max_jitter_millis}")
        self.max_jitter_millis = max_jitter_millis
        self.rng = rng or random.Random()

    def wait_for(self, attempt_number: int) -> int:
        return super().wait_for(attempt_number) + self.rng.randint(0, self.max_jitter_millis)
