"""Configuration management for the HTTP orchestrator.

Centralizes all environment variable access for better testability.
"""

import os
from typing import Optional

from http_orchestrator.core.retry_config import (
    DEFAULT_BASE_DELAY_MILLIS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT_MILLIS,
    RetryConfig,
)

ENV_PREFIX = "HTTP_ORCHESTRATOR_"


def _int_from_env(name: str, default: int) -> int:
    """Read an integer environment variable, falling back to default when unset."""
    raw: Optional[str] = os.environ.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None


class Config:
    """Application configuration loaded from environment variables."""

    @staticmethod
    def max_retries() -> int:
        """Get retry ceiling (retries after the initial attempt)."""
        return _int_from_env("MAX_RETRIES", DEFAULT_MAX_RETRIES)

    @staticmethod
    def base_delay_millis() -> int:
        """Get backoff base delay in milliseconds."""
        return _int_from_env("BASE_DELAY_MILLIS", DEFAULT_BASE_DELAY_MILLIS)

    @staticmethod
    def timeout_millis() -> int:
        """Get default per-attempt timeout in milliseconds."""
        return _int_from_env("TIMEOUT_MILLIS", DEFAULT_TIMEOUT_MILLIS)

    @staticmethod
    def retry_config() -> RetryConfig:
        """Build a RetryConfig from the environment.

        Raises:
            ValueError: If any variable is malformed or out of range
        """
        return RetryConfig(
            max_retries=Config.max_retries(),
            base_delay_millis=Config.base_delay_millis(),
            timeout_millis=Config.timeout_millis(),
        )


# Singleton instance for easy access
config = Config()
