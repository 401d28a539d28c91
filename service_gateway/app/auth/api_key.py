"""
API key authentication for the Gateway.

The authenticator is pure: it inspects a request's path, headers and query
string and reports an outcome. Turning an outcome into an HTTP response is
the middleware's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Optional, Tuple

from shared.config import ApiKeySettings


def mask_api_key(api_key: Optional[str]) -> str:
    """Redacted form of a key that is safe to log."""
    if not api_key or len(api_key) <= 8:
        return "***"
    return f"{api_key[:4]}...{api_key[-4:]}"


class AuthOutcome(str, Enum):
    ADMITTED = "admitted"
    MISSING_KEY = "missing_key"
    INVALID_KEY = "invalid_key"


@dataclass(frozen=True)
class AuthResult:
    """Outcome of authenticating one request.

    ``credential`` is only set for an admitted request that presented a
    valid key; exempt paths and disabled authentication admit without one.
    """

    outcome: AuthOutcome
    credential: Optional[str] = None
    masked_key: Optional[str] = None

    @property
    def admitted(self) -> bool:
        return self.outcome is AuthOutcome.ADMITTED


@dataclass(frozen=True)
class ApiKeyRegistry:
    """Immutable snapshot of the inbound authentication settings."""

    valid_keys: frozenset
    require_api_key: bool = True
    header_name: str = "X-API-Key"
    query_parameter_name: str = "api_key"
    exempt_path_prefixes: Tuple[str, ...] = ()
    rate_limit_enabled: bool = True

    @classmethod
    def from_settings(cls, settings: ApiKeySettings) -> "ApiKeyRegistry":
        return cls(
            valid_keys=frozenset(key for key in settings.valid_api_keys if key),
            require_api_key=settings.require_api_key,
            header_name=settings.header_name,
            query_parameter_name=settings.query_parameter_name,
            exempt_path_prefixes=tuple(prefix.lower() for prefix in settings.exempt_path_prefixes),
            rate_limit_enabled=settings.rate_limit.enabled,
        )

    def is_exempt(self, path: str) -> bool:
        lowered = (path or "").lower()
        return any(lowered.startswith(prefix) for prefix in self.exempt_path_prefixes)


class ApiKeyAuthenticator:
    """Checks the caller's API key against the configured registry."""

    def __init__(self, registry: ApiKeyRegistry):
        self.registry = registry

    def extract_key(self, headers: Mapping[str, str], query_params: Mapping[str, str]) -> Optional[str]:
        """Header first, then query string; empty values count as absent."""
        header_value = headers.get(self.registry.header_name)
        if header_value:
            return header_value

        query_value = query_params.get(self.registry.query_parameter_name)
        if query_value:
            return query_value

        return None

    def authenticate(
        self,
        path: str,
        headers: Mapping[str, str],
        query_params: Mapping[str, str],
    ) -> AuthResult:
        if self.registry.is_exempt(path):
            return AuthResult(AuthOutcome.ADMITTED)

        if not self.registry.require_api_key:
            return AuthResult(AuthOutcome.ADMITTED)

        api_key = self.extract_key(headers, query_params)
        if api_key is None:
            return AuthResult(AuthOutcome.MISSING_KEY)

        masked = mask_api_key(api_key)
        if api_key not in self.registry.valid_keys:
            return AuthResult(AuthOutcome.INVALID_KEY, masked_key=masked)

        return AuthResult(AuthOutcome.ADMITTED, credential=api_key, masked_key=masked)

    @staticmethod
    def configured(keys: Iterable[str], **overrides) -> "ApiKeyAuthenticator":
        """Build an authenticator straight from a list of keys."""
        settings = ApiKeySettings(valid_api_keys=list(keys), **overrides)
        return ApiKeyAuthenticator(ApiKeyRegistry.from_settings(settings))
