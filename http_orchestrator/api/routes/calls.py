"""Call routes for the HTTP orchestrator API - run one outbound request with retries."""

from dataclasses import replace

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse

from http_orchestrator.api.dependencies import get_retry_config, get_transport
from http_orchestrator.api.models import CallRequest
from http_orchestrator.api.utils import format_sse_event
from http_orchestrator.core.execution import Transport
from http_orchestrator.core.logging import logger
from http_orchestrator.core.orchestration import Orchestrator
from http_orchestrator.core.retry_config import RetryConfig
from http_orchestrator.models import RequestValidationError, validate_request

router = APIRouter(tags=["Calls"])


@router.post("/call")
async def call_route(
    request_data: CallRequest,
    transport: Transport = Depends(get_transport),
    base_config: RetryConfig = Depends(get_retry_config),
):
    """Execute one HTTP request, retrying transient failures with backoff.

    The response is 200 whatever the remote outcome; the remote outcome is
    reported in the payload. Invalid request fields give 422.

    SSE Events (stream=true):
    - **attempt_start**: An attempt is about to be sent
    - **attempt_complete**: Attempt record (status code or transport error, classification)
    - **backoff**: Wait scheduled before the next attempt
    - **complete**: Final orchestration result

    Returns:
        - **success**: bool, true only for a 2xx final response
        - **result**: Orchestration result with full attempt history
    """
    config = base_config
    if request_data.max_retries is not None:
        config = replace(base_config, max_retries=request_data.max_retries)

    try:
        descriptor = validate_request(
            request_data.to_raw_fields(), default_timeout_millis=config.timeout_millis
        )
    except RequestValidationError as e:
        logger.warning("request_validation_failed", kind=e.kind.value, error=e.message)
        return JSONResponse(status_code=422, content={"success": False, "error": e.to_dict()})

    orchestrator = Orchestrator(descriptor, transport=transport, config=config)

    if request_data.stream:

        async def event_generator():
            sequence = 0
            async for event in orchestrator.run_stream():
                sequence += 1
                yield format_sse_event(event["event"], event["data"], event_id=sequence)

        return StreamingResponse(
            event_generator(),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "X-Accel-Buffering": "no",
            },
        )

    result = await orchestrator.run()
    return {"success": result.succeeded, "result": result.to_dict()}
