"""Orchestration module for the HTTP orchestrator.

Provides the attempt-loop state machine and its per-call retry state.
"""

from http_orchestrator.core.orchestration.orchestrator import (
    OrchestrationState,
    Orchestrator,
    orchestrate,
)
from http_orchestrator.core.orchestration.retry_state import RetryState

__all__ = ["OrchestrationState", "Orchestrator", "RetryState", "orchestrate"]
