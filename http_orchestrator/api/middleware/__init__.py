"""Middleware for the HTTP orchestrator API."""

from http_orchestrator.api.middleware.request_id import request_id_middleware

__all__ = ["request_id_middleware"]
