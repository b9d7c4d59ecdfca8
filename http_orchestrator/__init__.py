"""HTTP call orchestrator: one request, classified outcomes, bounded retries."""

from http_orchestrator.core.execution import BackoffPolicy, RequestsTransport, StatusClassifier, Transport
from http_orchestrator.core.orchestration import Orchestrator, orchestrate
from http_orchestrator.core.retry_config import AttemptOutcome, RetryConfig
from http_orchestrator.models import (
    OrchestrationResult,
    RequestDescriptor,
    RequestValidationError,
    ResultOutcome,
    validate_request,
)

__all__ = [
    "AttemptOutcome",
    "BackoffPolicy",
    "OrchestrationResult",
    "Orchestrator",
    "RequestDescriptor",
    "RequestValidationError",
    "RequestsTransport",
    "ResultOutcome",
    "RetryConfig",
    "StatusClassifier",
    "Transport",
    "orchestrate",
    "validate_request",
]
