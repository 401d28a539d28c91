"""
Domain utilities for the Gateway Service.

Includes cross-cutting middleware that does not belong to adapters or
transport-specific layers.
"""

from .api_key_middleware import ApiKeyMiddleware, error_response

__all__ = [
    "ApiKeyMiddleware",
    "error_response",
]
