"""Models for the HTTP orchestrator."""

from http_orchestrator.models.request import (
    HttpMethod,
    RequestDescriptor,
    RequestValidationError,
    ValidationErrorKind,
    validate_request,
)
from http_orchestrator.models.result import AttemptRecord, OrchestrationResult, ResultOutcome
from http_orchestrator.models.transport import TransportErrorKind, TransportOutcome

__all__ = [
    "HttpMethod",
    "RequestDescriptor",
    "RequestValidationError",
    "ValidationErrorKind",
    "validate_request",
    "AttemptRecord",
    "OrchestrationResult",
    "ResultOutcome",
    "TransportErrorKind",
    "TransportOutcome",
]
