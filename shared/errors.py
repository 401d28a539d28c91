"""
Shared error handling for the Steam Access Gateway.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel

from opentelemetry import trace


class ErrorResponse(BaseModel):
    """Standard error response format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class AccessLayerException(Exception):
    """Base exception for gateway and client errors."""

    status_code: int = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to the detailed error response."""
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            code=self.code,
            message=self.message,
            details=self.details
        )

    def to_body(self) -> Dict[str, str]:
        """Body returned to gateway callers."""
        return {"error": self.message}


class MissingCredentialError(AccessLayerException):
    """No API key was supplied on a protected path."""

    status_code = 401

    def __init__(self, message: str = "API key is required", details: Optional[Dict[str, Any]] = None):
        super().__init__("MISSING_CREDENTIAL", message, details)


class InvalidCredentialError(AccessLayerException):
    """The supplied API key is not in the configured set."""

    status_code = 401

    def __init__(self, message: str = "Invalid API key", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_CREDENTIAL", message, details)


class RateLimitExceededError(AccessLayerException):
    """A per-key rate window ceiling was hit."""

    status_code = 429

    def __init__(self, message: str = "Rate limit exceeded", details: Optional[Dict[str, Any]] = None):
        super().__init__("RATE_LIMIT_EXCEEDED", message, details)


class InvalidArgumentError(AccessLayerException, ValueError):
    """Malformed caller input."""

    status_code = 400

    def __init__(self, message: str = "Invalid argument", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_ARGUMENT", message, details)


class UpstreamTransportError(AccessLayerException):
    """Network, timeout or HTTP status failure talking to Steam."""

    status_code = 502

    def __init__(self, message: str = "Steam API request failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("UPSTREAM_TRANSPORT_ERROR", message, details)


class DecodeError(AccessLayerException):
    """Upstream body is not valid structured data."""

    status_code = 502

    def __init__(self, message: str = "Failed to decode Steam API response", details: Optional[Dict[str, Any]] = None):
        super().__init__("DECODE_ERROR", message, details)


class ConfigurationError(AccessLayerException):
    """Raised at startup when required settings are missing."""

    status_code = 500

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)
