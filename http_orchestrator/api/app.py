"""FastAPI application factory for the HTTP orchestrator."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from http_orchestrator.api.middleware import request_id_middleware
from http_orchestrator.api.routes import calls, system
from http_orchestrator.config import Config
from http_orchestrator.core.execution import RequestsTransport, Transport
from http_orchestrator.core.logging import logger
from http_orchestrator.core.retry_config import RetryConfig


def create_app(
    transport: Optional[Transport] = None, retry_config: Optional[RetryConfig] = None
) -> FastAPI:
    """Create and configure FastAPI app. Factory pattern for testability.

    Args:
        transport: Transport shared by all calls (RequestsTransport if not provided).
            An injected transport stays open on shutdown; its owner closes it.
        retry_config: Retry settings (read from environment if not provided)
    """
    owns_transport = transport is None
    shared_transport = RequestsTransport() if owns_transport else transport

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        # --- SHUTDOWN ---
        if owns_transport:
            shared_transport.close()
            logger.info("transport_closed", transport=type(shared_transport).__name__)

    app = FastAPI(
        title="http-orchestrator",
        description=(
            "Executes outbound HTTP requests, classifies responses by status code "
            "and retries transient failures (5xx, 429, timeouts) with exponential backoff."
        ),
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware
    app.middleware("http")(request_id_middleware)

    # Register routes
    app.include_router(system.router)
    app.include_router(calls.router)

    app.state.transport = shared_transport
    app.state.retry_config = retry_config or Config.retry_config()

    return app
