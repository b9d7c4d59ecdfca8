"""Request descriptor model and validation.

A RequestDescriptor is the only input the orchestrator accepts. It is built
from the raw field set handed over by a parameter-extraction step and is
never mutated afterwards.
"""

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import urlparse

from requests.exceptions import InvalidHeader
from requests.utils import check_header_validity

from http_orchestrator.core.retry_config import DEFAULT_TIMEOUT_MILLIS


# RFC 7230 token
_HEADER_NAME = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


class HttpMethod(str, Enum):
    """Supported HTTP methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


class ValidationErrorKind(str, Enum):
    """Reasons a raw request field set can be rejected."""

    MISSING_URL = "missing_url"
    INVALID_URL = "invalid_url"
    INVALID_METHOD = "invalid_method"
    INVALID_HEADERS = "invalid_headers"
    DUPLICATE_HEADER_KEY = "duplicate_header_key"
    INVALID_BODY = "invalid_body"
    INVALID_TIMEOUT = "invalid_timeout"


class RequestValidationError(ValueError):
    """Raised when raw request fields cannot be turned into a RequestDescriptor."""

    def __init__(self, kind: ValidationErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind.value, "message": self.message}


@dataclass(frozen=True)
class RequestDescriptor:
    """Validated, immutable description of one outbound HTTP request."""

    url: str
    method: HttpMethod
    headers: Tuple[Tuple[str, str], ...] = ()
    body: Optional[bytes] = None
    timeout_millis: int = DEFAULT_TIMEOUT_MILLIS

    def header_dict(self) -> Dict[str, str]:
        """Return a fresh dict copy of the headers."""
        return dict(self.headers)

    def get_header(self, name: str) -> Optional[str]:
        """Look up a header value case-insensitively."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None


def _validate_url(raw_url: Any) -> str:
    if raw_url is None or (isinstance(raw_url, str) and not raw_url.strip()):
        raise RequestValidationError(ValidationErrorKind.MISSING_URL, "Request URL is required")
    if not isinstance(raw_url, str):
        raise RequestValidationError(
            ValidationErrorKind.INVALID_URL, f"Request URL must be a string, got {type(raw_url).__name__}"
        )

    url = raw_url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise RequestValidationError(
            ValidationErrorKind.INVALID_URL, f"Request URL must be an absolute http(s) URL: {url!r}"
        )
    return url


def _validate_method(raw_method: Any) -> HttpMethod:
    if raw_method is None:
        return HttpMethod.GET
    if isinstance(raw_method, HttpMethod):
        return raw_method
    if isinstance(raw_method, str):
        try:
            return HttpMethod(raw_method.strip().upper())
        except ValueError:
            pass
    allowed = ", ".join(m.value for m in HttpMethod)
    raise RequestValidationError(
        ValidationErrorKind.INVALID_METHOD, f"Method {raw_method!r} is not one of: {allowed}"
    )


def _check_header(name: str, value: str) -> str:
    """Reject names and values the wire cannot carry (CR/LF, NUL, non latin-1)."""
    if not _HEADER_NAME.match(name):
        raise RequestValidationError(
            ValidationErrorKind.INVALID_HEADERS, f"Header name {name!r} is not a valid token"
        )
    try:
        check_header_validity((name, value))
    except InvalidHeader as e:
        raise RequestValidationError(ValidationErrorKind.INVALID_HEADERS, str(e)) from None
    if "\0" in value:
        raise RequestValidationError(
            ValidationErrorKind.INVALID_HEADERS, f"Header {name!r} value contains a NUL byte"
        )
    try:
        value.encode("latin-1")
    except UnicodeEncodeError:
        raise RequestValidationError(
            ValidationErrorKind.INVALID_HEADERS, f"Header {name!r} value is not latin-1 encodable"
        ) from None
    return value


def _validate_headers(raw_headers: Any) -> Dict[str, str]:
    if raw_headers is None:
        return {}
    if not isinstance(raw_headers, Mapping):
        raise RequestValidationError(
            ValidationErrorKind.INVALID_HEADERS,
            f"Headers must be a mapping, got {type(raw_headers).__name__}",
        )

    headers: Dict[str, str] = {}
    seen: Dict[str, str] = {}
    for key, value in raw_headers.items():
        if not isinstance(key, str) or not key.strip():
            raise RequestValidationError(
                ValidationErrorKind.INVALID_HEADERS, f"Header names must be non-empty strings: {key!r}"
            )
        name = key.strip()
        folded = name.lower()
        if folded in seen:
            raise RequestValidationError(
                ValidationErrorKind.DUPLICATE_HEADER_KEY,
                f"Header {name!r} collides with {seen[folded]!r}",
            )
        seen[folded] = name
        headers[name] = _check_header(name, "" if value is None else str(value))
    return headers


def _encode_body(raw_body: Any, headers: Dict[str, str]) -> Optional[bytes]:
    """Coerce the body to bytes; JSON-encodes structured bodies."""
    if raw_body is None:
        return None
    if isinstance(raw_body, bytes):
        return raw_body
    if isinstance(raw_body, str):
        return raw_body.encode("utf-8")
    if isinstance(raw_body, (dict, list)):
        if not any(key.lower() == "content-type" for key in headers):
            headers["Content-Type"] = "application/json"
        return json.dumps(raw_body).encode("utf-8")
    raise RequestValidationError(
        ValidationErrorKind.INVALID_BODY,
        f"Body must be bytes, str, dict or list, got {type(raw_body).__name__}",
    )


def _validate_timeout(raw_timeout: Any) -> int:
    if raw_timeout is None:
        return DEFAULT_TIMEOUT_MILLIS
    if isinstance(raw_timeout, bool) or not isinstance(raw_timeout, int) or raw_timeout <= 0:
        raise RequestValidationError(
            ValidationErrorKind.INVALID_TIMEOUT,
            f"timeout_millis must be a positive integer, got {raw_timeout!r}",
        )
    return raw_timeout


def validate_request(raw_fields: Mapping[str, Any], default_timeout_millis: Optional[int] = None) -> RequestDescriptor:
    """Validate a raw field set and build a RequestDescriptor.

    Args:
        raw_fields: Mapping with url, method, headers, body and timeout_millis
            (only url is required)
        default_timeout_millis: Timeout used when raw_fields carries none

    Returns:
        Frozen RequestDescriptor

    Raises:
        RequestValidationError: With the kind of the first problem found
    """
    url = _validate_url(raw_fields.get("url"))
    method = _validate_method(raw_fields.get("method"))
    headers = _validate_headers(raw_fields.get("headers"))
    body = _encode_body(raw_fields.get("body"), headers)

    raw_timeout = raw_fields.get("timeout_millis")
    if raw_timeout is None and default_timeout_millis is not None:
        raw_timeout = default_timeout_millis
    timeout_millis = _validate_timeout(raw_timeout)

    return RequestDescriptor(
        url=url,
        method=method,
        headers=tuple(headers.items()),
        body=body,
        timeout_millis=timeout_millis,
    )
