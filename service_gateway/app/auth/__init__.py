"""
Authentication helpers for the Gateway service.
"""

from .api_key import ApiKeyAuthenticator, ApiKeyRegistry, AuthOutcome, AuthResult, mask_api_key

__all__ = [
    "ApiKeyAuthenticator",
    "ApiKeyRegistry",
    "AuthOutcome",
    "AuthResult",
    "mask_api_key",
]
