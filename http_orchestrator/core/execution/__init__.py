"""Execution module for the HTTP orchestrator.

Provides the transport, the status classifier and backoff policies.
"""

from http_orchestrator.core.execution.backoff import BackoffPolicy, JitteredBackoffPolicy
from http_orchestrator.core.execution.status_classifier import StatusClassifier
from http_orchestrator.core.execution.transport import RequestsTransport, Transport

__all__ = ["BackoffPolicy", "JitteredBackoffPolicy", "StatusClassifier", "RequestsTransport", "Transport"]
