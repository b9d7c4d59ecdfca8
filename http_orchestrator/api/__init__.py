"""HTTP API for the HTTP orchestrator."""

from http_orchestrator.api.app import create_app

__all__ = ["create_app"]
