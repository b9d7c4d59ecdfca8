"""System routes for the HTTP orchestrator API."""

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from http_orchestrator.api.dependencies import get_retry_config
from http_orchestrator.core.retry_config import RetryConfig

router = APIRouter(tags=["System"])


@router.get("/health")
async def health(config: RetryConfig = Depends(get_retry_config)) -> Dict[str, Any]:
    """Service status and the retry configuration calls run with."""
    return {
        "status": "healthy",
        "retry_config": asdict(config),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
