"""FastAPI dependencies for the HTTP orchestrator API.

Dependency injection functions for route handlers.
"""

from fastapi import Request

from http_orchestrator.core.execution import Transport
from http_orchestrator.core.retry_config import RetryConfig


def get_transport(request: Request) -> Transport:
    """Get the shared Transport from app state.

    Note:
        One transport serves every call; each call still gets its own Orchestrator.
    """
    return request.app.state.transport


def get_retry_config(request: Request) -> RetryConfig:
    """Get the app-wide RetryConfig from app state."""
    return request.app.state.retry_config
