"""Server-Sent Events framing for orchestration progress."""

import json
from typing import Any, Dict, Optional


def format_sse_event(event: str, data: Dict[str, Any], event_id: Optional[int] = None) -> str:
    """Frame one orchestration event as a named SSE message.

    The event name goes on its own ``event:`` line so browsers can
    dispatch with ``addEventListener(name)``; ``data`` is one line of JSON.

    Args:
        event: Event name (attempt_start, attempt_complete, backoff, complete)
        data: JSON-safe event payload
        event_id: Position of the event in the stream, sent as ``id:``

    Returns:
        "id: N\\nevent: name\\ndata: {json}\\n\\n"
    """
    lines = []
    if event_id is not None:
        lines.append(f"id: {event_id}")
    lines.append(f"event: {event}")
    lines.append(f"data: {json.dumps(data, separators=(',', ':'))}")
    return "\n".join(lines) + "\n\n"
