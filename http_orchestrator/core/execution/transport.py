"""Transport for the HTTP orchestrator.

Performs exactly one HTTP round trip per call and reports either the
response or the kind of transport failure. Never retries on its own.
"""

import asyncio
import socket
from abc import ABC, abstractmethod
from typing import Iterator, Optional

import requests

from http_orchestrator.core.logging import logger
from http_orchestrator.models.request import RequestDescriptor
from http_orchestrator.models.transport import TransportErrorKind, TransportOutcome

_DNS_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "temporary failure in name resolution",
    "failed to resolve",
)


class Transport(ABC):
    """One HTTP round trip. Implementations must be safe for concurrent calls."""

    @abstractmethod
    async def execute(self, descriptor: RequestDescriptor) -> TransportOutcome:
        """Send the request described by descriptor.

        Returns:
            TransportOutcome with a status code, or with a transport error
            (timeouts never carry a status code)
        """

    def close(self) -> None:
        """Release pooled resources, if any."""


def _exception_chain(error: BaseException) -> Iterator[BaseException]:
    """Walk causes, contexts, args and urllib3 .reason attributes."""
    seen = set()
    pending = [error]
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        for linked in (current.__cause__, current.__context__, getattr(current, "reason", None)):
            if isinstance(linked, BaseException):
                pending.append(linked)
        pending.extend(arg for arg in getattr(current, "args", ()) if isinstance(arg, BaseException))


def classify_connection_error(error: BaseException) -> TransportErrorKind:
    """Map a connection-level exception to a TransportErrorKind."""
    for link in _exception_chain(error):
        if isinstance(link, ConnectionRefusedError):
            return TransportErrorKind.CONNECTION_REFUSED
        if isinstance(link, socket.gaierror) or type(link).__name__ == "NameResolutionError":
            return TransportErrorKind.DNS_FAILURE

    message = str(error).lower()
    if "connection refused" in message:
        return TransportErrorKind.CONNECTION_REFUSED
    if any(marker in message for marker in _DNS_MARKERS):
        return TransportErrorKind.DNS_FAILURE
    return TransportErrorKind.OTHER


class RequestsTransport(Transport):
    """Transport backed by a shared requests.Session.

    The blocking call runs in a worker thread so the event loop stays free
    while a request is in flight. Cancelling the awaiting task releases the
    caller immediately; the worker thread finishes in the background.
    """

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()

    async def execute(self, descriptor: RequestDescriptor) -> TransportOutcome:
        timeout_seconds = descriptor.timeout_millis / 1000
        try:
            # requests applies its timeout per socket operation; wait_for caps the total
            return await asyncio.wait_for(
                asyncio.to_thread(self._send, descriptor),
                timeout=timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "transport_error",
                url=descriptor.url,
                method=descriptor.method.value,
                kind=TransportErrorKind.TIMEOUT.value,
                detail="total timeout exceeded",
            )
            return TransportOutcome.failure(
                TransportErrorKind.TIMEOUT, f"No response within {descriptor.timeout_millis}ms"
            )

    def _send(self, descriptor: RequestDescriptor) -> TransportOutcome:
        """Blocking round trip, run in a worker thread."""
        try:
            response = self.session.request(
                descriptor.method.value,
                descriptor.url,
                headers=descriptor.header_dict(),
                data=descriptor.body,
                timeout=descriptor.timeout_millis / 1000,
                allow_redirects=True,
            )
        # Timeout first: ConnectTimeout is also a ConnectionError
        except requests.exceptions.Timeout as e:
            return self._failure(descriptor, TransportErrorKind.TIMEOUT, e)
        except requests.exceptions.ConnectionError as e:
            return self._failure(descriptor, classify_connection_error(e), e)
        except requests.exceptions.RequestException as e:
            return self._failure(descriptor, TransportErrorKind.OTHER, e)

        return TransportOutcome.response(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.content,
        )

    @staticmethod
    def _failure(
        descriptor: RequestDescriptor, kind: TransportErrorKind, error: Exception
    ) -> TransportOutcome:
        logger.warning(
            "transport_error",
            url=descriptor.url,
            method=descriptor.method.value,
            kind=kind.value,
            error_type=type(error).__name__,
            detail=str(error)[:200],
        )
        return TransportOutcome.failure(kind, str(error))

    def close(self) -> None:
        self.session.close()
