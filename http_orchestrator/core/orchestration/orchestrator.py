"""Orchestrator for the HTTP orchestrator.

Drives one request through the attempt loop:
Transport -> StatusClassifier -> (BackoffPolicy -> wait -> retry) | terminate.
"""

import asyncio
import time
from enum import Enum
from typing import Any, AsyncGenerator, Awaitable, Callable, Dict, Mapping, Optional, Tuple

from http_orchestrator.core.execution.backoff import BackoffPolicy
from http_orchestrator.core.execution.status_classifier import StatusClassifier
from http_orchestrator.core.execution.transport import RequestsTransport, Transport
from http_orchestrator.core.logging import logger
from http_orchestrator.core.orchestration.retry_state import RetryState
from http_orchestrator.core.retry_config import AttemptOutcome, RetryConfig
from http_orchestrator.models.request import RequestDescriptor, validate_request
from http_orchestrator.models.result import OrchestrationResult, ResultOutcome
from http_orchestrator.models.transport import TransportErrorKind, TransportOutcome

Sleeper = Callable[[float], Awaitable[None]]


class OrchestrationState(str, Enum):
    """States of the attempt loop. SUCCEEDED onwards are terminal."""

    INITIAL = "initial"
    ATTEMPTING = "attempting"
    WAITING_TO_RETRY = "waiting_to_retry"
    SUCCEEDED = "succeeded"
    FAILED_FATAL = "failed_fatal"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


TERMINAL_STATES = frozenset(
    {
        OrchestrationState.SUCCEEDED,
        OrchestrationState.FAILED_FATAL,
        OrchestrationState.EXHAUSTED,
        OrchestrationState.CANCELLED,
    }
)


class Orchestrator:
    """Run one validated request with bounded, sequential retries.

    An instance serves exactly one call: create it, await run() (or iterate
    run_stream()), read the OrchestrationResult. cancel() may be called from
    the same event loop at any point while the call is in flight.

    All collaborators can be injected; sleep exists so tests can observe
    backoff waits without spending wall-clock time.
    """

    def __init__(
        self,
        descriptor: RequestDescriptor,
        transport: Optional[Transport] = None,
        config: Optional[RetryConfig] = None,
        backoff: Optional[BackoffPolicy] = None,
        sleep: Sleeper = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize Orchestrator for a single call.

        Args:
            descriptor: Validated request to send
            transport: Transport instance (a fresh RequestsTransport if not provided)
            config: RetryConfig (defaults if not provided)
            backoff: BackoffPolicy (built from config.base_delay_millis if not provided)
            sleep: Awaitable sleep taking seconds
            clock: Monotonic clock in seconds, for elapsed time
        """
        self.descriptor = descriptor
        self.config = config or RetryConfig()
        self.transport = transport or RequestsTransport()
        self.backoff = backoff or BackoffPolicy(self.config.base_delay_millis)
        self._sleep = sleep
        self._clock = clock
        self._cancel_requested = asyncio.Event()
        self._started = False
        self.state = OrchestrationState.INITIAL
        self.result: Optional[OrchestrationResult] = None

    def cancel(self) -> None:
        """Request cancellation; the run ends with TRANSPORT_FAILURE."""
        if self.state not in TERMINAL_STATES:
            self._cancel_requested.set()

    @property
    def cancel_requested(self) -> bool:
        return self._cancel_requested.is_set()

    async def run(self) -> OrchestrationResult:
        """Execute the call to completion and return its result."""
        async for _ in self.run_stream():
            pass
        return self.result

    async def run_stream(self) -> AsyncGenerator[Dict[str, Any], None]:
        """Execute the call, yielding progress events.

        Yields events:
        - attempt_start: {"event": "attempt_start", "data": {"attempt_number": n, "retry": r}}
        - attempt_complete: {"event": "attempt_complete", "data": {attempt record}}
        - backoff: {"event": "backoff", "data": {"wait_millis": w, "next_attempt_number": n}}
        - complete: {"event": "complete", "data": {orchestration result}}

        Raises:
            RuntimeError: If this instance already ran
        """
        if self._started:
            raise RuntimeError("Orchestrator instances are single-use; create a new one per call")
        self._started = True

        retry_state = RetryState(self.config.max_retries)
        started_at = self._clock()

        logger.info(
            "orchestration_started",
            url=self.descriptor.url,
            method=self.descriptor.method.value,
            max_retries=self.config.max_retries,
        )

        while True:
            if self.cancel_requested:
                break

            self.state = OrchestrationState.ATTEMPTING
            yield {
                "event": "attempt_start",
                "data": {"attempt_number": retry_state.next_attempt_number, "retry": retry_state.attempt},
            }

            completed, outcome = await self._interruptible(self.transport.execute(self.descriptor))
            if not completed:
                break

            classification = StatusClassifier.classify(outcome)

            if classification == AttemptOutcome.RETRYABLE and retry_state.can_retry():
                wait_millis = self.backoff.wait_for(retry_state.attempt + 1)
                record = retry_state.record(outcome, classification, wait_millis)
                retry_state.schedule_retry(wait_millis)
                self.state = OrchestrationState.WAITING_TO_RETRY
                self._log_attempt(record.to_dict())

                yield {"event": "attempt_complete", "data": record.to_dict()}
                yield {
                    "event": "backoff",
                    "data": {"wait_millis": wait_millis, "next_attempt_number": retry_state.next_attempt_number},
                }
                logger.info(
                    "backoff_scheduled",
                    url=self.descriptor.url,
                    wait_millis=wait_millis,
                    retry=retry_state.attempt,
                    cumulative_wait_millis=retry_state.cumulative_wait_millis,
                )

                completed, _ = await self._interruptible(self._sleep(wait_millis / 1000))
                if not completed:
                    break
                continue

            record = retry_state.record(outcome, classification)
            self._log_attempt(record.to_dict())
            yield {"event": "attempt_complete", "data": record.to_dict()}

            self.result = self._terminate(classification, outcome, retry_state, started_at)
            yield {"event": "complete", "data": self.result.to_dict()}
            return

        self.result = self._cancelled(retry_state, started_at)
        yield {"event": "complete", "data": self.result.to_dict()}

    async def _interruptible(self, awaitable: Awaitable[Any]) -> Tuple[bool, Any]:
        """Await awaitable unless cancel() fires first.

        Returns:
            (True, value) when awaitable finished, (False, None) when cancelled
        """
        work = asyncio.ensure_future(awaitable)
        cancel_wait = asyncio.ensure_future(self._cancel_requested.wait())
        try:
            done, _ = await asyncio.wait({work, cancel_wait}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for future in (work, cancel_wait):
                if not future.done():
                    future.cancel()

        if work in done:
            return True, work.result()
        return False, None

    def _terminate(
        self,
        classification: AttemptOutcome,
        outcome: TransportOutcome,
        retry_state: RetryState,
        started_at: float,
    ) -> OrchestrationResult:
        if classification == AttemptOutcome.SUCCESS:
            self.state = OrchestrationState.SUCCEEDED
            result = OrchestrationResult(
                outcome=ResultOutcome.SUCCESS,
                attempt_history=retry_state.history,
                total_elapsed_millis=self._elapsed_millis(started_at),
                final_status_code=outcome.status_code,
                response_body=outcome.body,
                response_headers=dict(outcome.headers),
            )
        elif classification == AttemptOutcome.FATAL:
            self.state = OrchestrationState.FAILED_FATAL
            result = OrchestrationResult(
                outcome=ResultOutcome.FATAL_CLIENT_ERROR,
                attempt_history=retry_state.history,
                total_elapsed_millis=self._elapsed_millis(started_at),
                final_status_code=outcome.status_code,
                error_body=outcome.body,
            )
        else:
            self.state = OrchestrationState.EXHAUSTED
            result = OrchestrationResult(
                outcome=ResultOutcome.RETRIES_EXHAUSTED,
                attempt_history=retry_state.history,
                total_elapsed_millis=self._elapsed_millis(started_at),
                final_status_code=outcome.status_code,
                error_body=None if outcome.is_transport_error else outcome.body,
                transport_error=outcome.transport_error,
            )

        logger.info(
            "orchestration_finished",
            url=self.descriptor.url,
            outcome=result.outcome.value,
            final_status_code=result.final_status_code,
            attempts=result.attempts,
            cumulative_wait_millis=retry_state.cumulative_wait_millis,
            elapsed_ms=result.total_elapsed_millis,
        )
        return result

    def _cancelled(self, retry_state: RetryState, started_at: float) -> OrchestrationResult:
        self.state = OrchestrationState.CANCELLED
        last = retry_state.last_record()
        result = OrchestrationResult(
            outcome=ResultOutcome.TRANSPORT_FAILURE,
            attempt_history=retry_state.history,
            total_elapsed_millis=self._elapsed_millis(started_at),
            final_status_code=last.status_code if last else None,
            transport_error=TransportErrorKind.CANCELLED,
            cancelled=True,
        )
        logger.warning(
            "orchestration_cancelled",
            url=self.descriptor.url,
            attempts=result.attempts,
            elapsed_ms=result.total_elapsed_millis,
        )
        return result

    def _log_attempt(self, record: Dict[str, Any]) -> None:
        logger.info("attempt_completed", url=self.descriptor.url, **record)

    def _elapsed_millis(self, started_at: float) -> int:
        return int((self._clock() - started_at) * 1000)


async def orchestrate(
    raw_fields: Mapping[str, Any],
    transport: Optional[Transport] = None,
    config: Optional[RetryConfig] = None,
) -> OrchestrationResult:
    """Validate raw request fields and run them through a fresh Orchestrator.

    Raises:
        RequestValidationError: Before any network activity, if raw_fields are invalid
    """
    config = config or RetryConfig()
    descriptor = validate_request(raw_fields, default_timeout_millis=config.timeout_millis)
    return await Orchestrator(descriptor, transport=transport, config=config).run()
