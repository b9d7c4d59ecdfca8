"""API utilities for the HTTP orchestrator."""

from http_orchestrator.api.utils.sse import format_sse_event

__all__ = ["format_sse_event"]
