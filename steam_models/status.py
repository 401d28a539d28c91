"""
Gateway status payload.
"""

from datetime import datetime, timezone

from pydantic import Field

from .decoding import IntOrString, SteamModel


class StatusResponse(SteamModel):
    """Current status and configuration summary of the gateway."""

    steam_api_key_configured: bool = False
    api_key_auth_enabled: bool = False
    rate_limit_enabled: bool = False
    cors_enabled: bool = False
    base_url: str = ""
    timeout_seconds: IntOrString = 0
    max_retries: IntOrString = 0
    enable_logging: bool = False
    version: str = ""
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    status: str = "Healthy"
