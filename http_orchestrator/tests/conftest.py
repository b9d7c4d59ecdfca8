"""Shared fixtures: scripted transports and a sleep that only records waits."""

import asyncio
from typing import Callable, List, Optional, Sequence, Union

import pytest

from http_orchestrator.core.execution import Transport
from http_orchestrator.models import RequestDescriptor, TransportErrorKind, TransportOutcome, validate_request

Scripted = Union[int, TransportErrorKind, TransportOutcome]


def _to_outcome(item: Scripted) -> TransportOutcome:
    if isinstance(item, TransportOutcome):
        return item
    if isinstance(item, TransportErrorKind):
        return TransportOutcome.failure(item, "scripted failure")
    return TransportOutcome.response(item, {"Content-Type": "text/plain"}, f"status {item}".encode())


class ScriptedTransport(Transport):
    """Returns scripted outcomes in order; the last one repeats once the script runs out."""

    def __init__(self, script: Sequence[Scripted]):
        self.script = [_to_outcome(item) for item in script]
        self.calls = 0
        self.descriptors: List[RequestDescriptor] = []
        self.closed = False

    async def execute(self, descriptor: RequestDescriptor) -> TransportOutcome:
        self.descriptors.append(descriptor)
        outcome = self.script[min(self.calls, len(self.script) - 1)]
        self.calls += 1
        return outcome

    def close(self) -> None:
        self.closed = True


class HangingTransport(Transport):
    """Answers with the scripted outcomes, then never answers again.

    started is set once a call is hanging; was_cancelled records whether
    that in-flight call was cancelled.
    """

    def __init__(self, before: Sequence[Scripted] = ()):
        self.before = [_to_outcome(item) for item in before]
        self.calls = 0
        self.started = asyncio.Event()
        self.was_cancelled = False

    async def execute(self, descriptor: RequestDescriptor) -> TransportOutcome:
        self.calls += 1
        if self.calls <= len(self.before):
            return self.before[self.calls - 1]
        self.started.set()
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.was_cancelled = True
            raise


class RecordingSleep:
    """Stands in for asyncio.sleep; records requested waits in milliseconds.

    With hang=True the wait never finishes on its own, like a long backoff.
    """

    def __init__(self, on_sleep: Optional[Callable[[], None]] = None, hang: bool = False):
        self.waits_millis: List[int] = []
        self.on_sleep = on_sleep
        self.hang = hang
        self.sleeping = asyncio.Event()

    async def __call__(self, seconds: float) -> None:
        self.waits_millis.append(round(seconds * 1000))
        self.sleeping.set()
        if self.on_sleep is not None:
            self.on_sleep()
        if self.hang:
            await asyncio.Event().wait()
        await asyncio.sleep(0)


@pytest.fixture
def descriptor() -> RequestDescriptor:
    return validate_request({"url": "https://api.example.com/v1/items", "method": "GET"})


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def scripted_transport():
    def factory(*script: Scripted) -> ScriptedTransport:
        return ScriptedTransport(script)

    return factory


@pytest.fixture
def hanging_transport() -> HangingTransport:
    return HangingTransport()


@pytest.fixture
def make_hanging_transport():
    def factory(*before: Scripted) -> HangingTransport:
        return HangingTransport(before)

    return factory


@pytest.fixture
def make_sleep():
    def factory(on_sleep: Optional[Callable[[], None]] = None, hang: bool = False) -> RecordingSleep:
        return RecordingSleep(on_sleep, hang)

    return factory
