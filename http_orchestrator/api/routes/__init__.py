"""Routes for the HTTP orchestrator API."""

from http_orchestrator.api.routes import calls, system

__all__ = ["calls", "system"]
