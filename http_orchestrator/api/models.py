"""Request models for the HTTP orchestrator API."""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


class CallRequest(BaseModel):
    """Request for /call endpoint - one outbound HTTP call with retries.

    url, method and headers are checked by validate_request so that rejected
    input reports the same error kinds as in-process callers get.
    """

    url: Optional[str] = None
    method: Optional[str] = "GET"
    headers: Dict[str, Any] = Field(default_factory=dict)
    body: Optional[Union[str, Dict[str, Any], List[Any]]] = None
    timeout_millis: Optional[int] = Field(None, description="Per-attempt timeout in milliseconds")
    max_retries: Optional[int] = Field(None, ge=0, le=10, description="Override the configured retry ceiling")
    stream: bool = Field(default=False, description="Stream attempt progress as SSE events")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "url": "https://api.example.com/v1/orders/42",
                    "method": "GET",
                    "headers": {"Accept": "application/json"},
                },
                {
                    "url": "https://api.example.com/v1/orders",
                    "method": "POST",
                    "body": {"sku": "A-100", "quantity": 2},
                    "max_retries": 1,
                    "stream": True,
                },
            ]
        }
    }

    def to_raw_fields(self) -> Dict[str, Any]:
        """Raw field set in the shape validate_request expects."""
        return {
            "url": self.url,
            "method": self.method,
            "headers": self.headers,
            "body": self.body,
            "timeout_millis": self.timeout_millis,
        }
