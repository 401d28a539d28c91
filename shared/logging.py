"""
Structured logging for the gateway and the client.

Every event is rendered as one JSON line carrying the service name, the
current OpenTelemetry trace and span ids, and the request correlation held
in context variables. The caller's API key only ever enters the log context
in masked form.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

import structlog
from opentelemetry import trace

EventDict = Dict[str, Any]

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
api_key_var: ContextVar[Optional[str]] = ContextVar("api_key", default=None)


def configure_logging(service_name: str, log_level: str = "info") -> None:
    """Install the JSON pipeline for ``service_name``."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_service_context,
            add_trace_context,
            add_correlation_context,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )


def add_service_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    # Logger names look like "gateway.rate_limiter" or "steam_client"
    logger_name = event_dict.get("logger", "")
    event_dict["service"] = logger_name.split(".", 1)[0] if logger_name else "unknown"
    return event_dict


def add_trace_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    span = trace.get_current_span()
    if not span.is_recording():
        return event_dict

    span_context = span.get_span_context()
    if span_context.trace_id:
        event_dict["trace_id"] = f"{span_context.trace_id:032x}"
    if span_context.span_id:
        event_dict["span_id"] = f"{span_context.span_id:016x}"
    return event_dict


def add_correlation_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    request_id = request_id_var.get()
    if request_id:
        event_dict.setdefault("request_id", request_id)

    masked_key = api_key_var.get()
    if masked_key:
        event_dict.setdefault("api_key", masked_key)
    return event_dict


def set_request_id(request_id: Optional[str] = None) -> str:
    """Bind ``request_id`` (or a fresh UUID) to the current request."""
    request_id = request_id or str(uuid.uuid4())
    request_id_var.set(request_id)
    return request_id


def set_api_key_context(masked_api_key: Optional[str]) -> None:
    api_key_var.set(masked_api_key)


def clear_context() -> None:
    request_id_var.set(None)
    api_key_var.set(None)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
