"""
Server-side event logging helper.

Emits structured log records for product events (recommendations shown, depth
calculated). Nothing is persisted; log shipping picks these up.
"""
import logging
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)


def log_event(
    event_name: str,
    properties: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
    session_id: Optional[str] = None,
) -> None:
    """
    Log an event as a structured record.

    Args:
        event_name: Name of the event (e.g., "recommendations_generated", "depth_calculated")
        properties: Optional dict of event properties
        request_id: Optional request ID for correlating events
        session_id: Optional session ID
    """
    log_data = {
        "event_name": event_name,
        "request_id": request_id,
        "session_id": session_id,
        "properties": properties,
    }
    logger.info("event_logged", extra=log_data)


def log_event_best_effort(
    event_name: str,
    properties: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
    session_id: Optional[str] = None,
) -> None:
    """
    Log an event, never raising.

    Use this in request paths where instrumentation must not break the response.
    """
    try:
        log_event(
            event_name=event_name,
            properties=properties,
            request_id=request_id,
            session_id=session_id,
        )
    except Exception as e:
        # Never break the request path - log warning and continue
        logger.warning(
            "Failed to log event: event_name=%s, request_id=%s, error=%s",
            event_name,
            request_id,
            str(e),
            exc_info=True,
        )
