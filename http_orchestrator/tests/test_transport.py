"""Tests for RequestsTransport error mapping and request shaping."""

import socket
import time

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from http_orchestrator.core.execution import RequestsTransport
from http_orchestrator.core.execution.transport import classify_connection_error
from http_orchestrator.models import TransportErrorKind, validate_request


def _response(status_code: int, body: bytes = b"", headers=None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = body
    response.headers = CaseInsensitiveDict(headers or {})
    return response


def _transport_raising(monkeypatch, error: Exception) -> RequestsTransport:
    transport = RequestsTransport()

    def fake_request(*args, **kwargs):
        raise error

    monkeypatch.setattr(transport.session, "request", fake_request)
    return transport


class TestResponses:
    """Test successful round trips."""

    @pytest.mark.asyncio
    async def test_response_fields_are_copied(self, monkeypatch):
        transport = RequestsTransport()
        sent = {}

        def fake_request(method, url, **kwargs):
            sent.update(method=method, url=url, **kwargs)
            return _response(201, b'{"id": 7}', {"Content-Type": "application/json"})

        monkeypatch.setattr(transport.session, "request", fake_request)
        descriptor = validate_request(
            {
                "url": "https://api.example.com/orders",
                "method": "post",
                "headers": {"Authorization": "Bearer t"},
                "body": {"sku": "A-100"},
                "timeout_millis": 2500,
            }
        )

        outcome = await transport.execute(descriptor)

        assert outcome.status_code == 201
        assert outcome.body == b'{"id": 7}'
        assert outcome.headers == {"Content-Type": "application/json"}
        assert outcome.transport_error is None
        assert sent["method"] == "POST"
        assert sent["url"] == "https://api.example.com/orders"
        assert sent["headers"] == {"Authorization": "Bearer t", "Content-Type": "application/json"}
        assert sent["data"] == b'{"sku": "A-100"}'
        assert sent["timeout"] == 2.5

    @pytest.mark.asyncio
    async def test_error_statuses_are_not_exceptions(self, monkeypatch):
        """A 503 comes back as a status code, not a transport error."""
        transport = RequestsTransport()
        monkeypatch.setattr(transport.session, "request", lambda *a, **k: _response(503, b"down"))

        outcome = await transport.execute(validate_request({"url": "https://example.com"}))

        assert outcome.status_code == 503
        assert outcome.is_transport_error is False


class TestTransportErrors:
    """Test mapping of requests exceptions to TransportErrorKind."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error, kind",
        [
            (requests.exceptions.ReadTimeout("read timed out"), TransportErrorKind.TIMEOUT),
            (requests.exceptions.ConnectTimeout("connect timed out"), TransportErrorKind.TIMEOUT),
            (
                requests.exceptions.ConnectionError(ConnectionRefusedError(111, "Connection refused")),
                TransportErrorKind.CONNECTION_REFUSED,
            ),
            (
                requests.exceptions.ConnectionError(socket.gaierror(-2, "Name or service not known")),
                TransportErrorKind.DNS_FAILURE,
            ),
            (requests.exceptions.ConnectionError("Connection reset by peer"), TransportErrorKind.OTHER),
            (requests.exceptions.TooManyRedirects("Exceeded 30 redirects."), TransportErrorKind.OTHER),
        ],
    )
    async def test_exception_mapping(self, monkeypatch, error, kind):
        transport = _transport_raising(monkeypatch, error)

        outcome = await transport.execute(validate_request({"url": "https://example.com"}))

        assert outcome.transport_error == kind
        assert outcome.status_code is None

    @pytest.mark.asyncio
    async def test_total_timeout_is_enforced(self, monkeypatch):
        """A call that outlives timeout_millis yields TIMEOUT, never a status."""
        transport = RequestsTransport()

        def slow_request(*args, **kwargs):
            time.sleep(0.3)
            return _response(200)

        monkeypatch.setattr(transport.session, "request", slow_request)
        descriptor = validate_request({"url": "https://example.com", "timeout_millis": 20})

        outcome = await transport.execute(descriptor)

        assert outcome.transport_error == TransportErrorKind.TIMEOUT
        assert outcome.status_code is None

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self, monkeypatch):
        """Programming errors are not disguised as transport failures."""
        transport = _transport_raising(monkeypatch, TypeError("bad argument"))
        with pytest.raises(TypeError):
            await transport.execute(validate_request({"url": "https://example.com"}))


class TestClassifyConnectionError:
    """Test exception-chain inspection."""

    def test_finds_cause(self):
        try:
            try:
                raise ConnectionRefusedError(111, "refused")
            except ConnectionRefusedError as inner:
                raise requests.exceptions.ConnectionError("wrapped") from inner
        except requests.exceptions.ConnectionError as e:
            assert classify_connection_error(e) == TransportErrorKind.CONNECTION_REFUSED

    def test_follows_reason_attribute(self):
        """urllib3 MaxRetryError keeps the root failure in .reason."""

        class MaxRetryLike(Exception):
            def __init__(self, reason):
                super().__init__("Max retries exceeded")
                self.reason = reason

        error = requests.exceptions.ConnectionError(MaxRetryLike(socket.gaierror(-3, "try again")))
        assert classify_connection_error(error) == TransportErrorKind.DNS_FAILURE

    def test_falls_back_to_message(self):
        error = requests.exceptions.ConnectionError("Failed to resolve 'api.example.invalid'")
        assert classify_connection_error(error) == TransportErrorKind.DNS_FAILURE
