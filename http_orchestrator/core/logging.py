"""Structured logging configuration for the HTTP orchestrator.

Uses structlog for JSON-formatted log lines with context variables
(request ids bound by the API layer show up on every orchestrator event).
"""

import logging

import structlog


def configure_logging(level: int = logging.INFO):
    """Configure structured logging with JSON output."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger()


# Global logger instance
logger = configure_logging()


def get_logger():
    """Get the configured logger instance."""
    return logger
