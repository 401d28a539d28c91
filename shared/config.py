"""
Shared configuration management for the Steam Access Gateway.
"""

from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_EXEMPT_PATH_PREFIXES = [
    "/api/status",
    "/health",
    "/swagger",
    "/docs",
    "/openapi.json",
    "/metrics",
]


class SteamApiSettings(BaseModel):
    """Upstream Steam Web API settings."""

    # Shared credential attached to every versioned-interface call
    api_key: str = ""
    base_url: str = "https://api.steampowered.com"
    store_base_url: str = "https://store.steampowered.com/api"
    timeout_seconds: int = 30
    # Advisory only; the gateway never retries upstream calls itself
    max_retries: int = 3
    enable_logging: bool = False


class RateLimitSettings(BaseModel):
    """Per-key sliding window ceilings."""

    enabled: bool = True
    requests_per_minute: int = Field(default=100, ge=0)
    requests_per_hour: int = Field(default=1000, ge=0)
    sweep_interval_seconds: float = 300.0


class ApiKeySettings(BaseModel):
    """Inbound API key authentication settings."""

    valid_api_keys: List[str] = Field(default_factory=list)
    require_api_key: bool = True
    header_name: str = "X-API-Key"
    query_parameter_name: str = "api_key"
    exempt_path_prefixes: List[str] = Field(default_factory=lambda: list(DEFAULT_EXEMPT_PATH_PREFIXES))
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)


class CorsSettings(BaseModel):
    """Cross-origin settings."""

    enabled: bool = False
    allowed_origins: List[str] = Field(default_factory=list)
    allowed_methods: List[str] = Field(default_factory=lambda: ["GET", "POST", "PUT", "DELETE", "OPTIONS"])
    allowed_headers: List[str] = Field(default_factory=lambda: ["Content-Type", "X-API-Key", "Authorization"])
    allow_credentials: bool = False
    preflight_max_age: int = 86400
    exposed_headers: List[str] = Field(default_factory=list)


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="STEAM_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = "local"
    log_level: str = "info"


class ServiceConfig(BaseConfig):
    """Gateway service configuration."""

    service_name: str = "gateway"
    host: str = "0.0.0.0"
    port: int = 5000

    upstream: SteamApiSettings = Field(default_factory=SteamApiSettings)
    auth: ApiKeySettings = Field(default_factory=ApiKeySettings)
    cors: CorsSettings = Field(default_factory=CorsSettings)


class SteamApiClientSettings(BaseSettings):
    """Settings for the typed client of the gateway."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="STEAM_CLIENT_",
        case_sensitive=False,
        extra="ignore"
    )

    base_url: str = "http://localhost:5000"
    api_key: Optional[str] = None
    timeout_seconds: int = 30
    max_retries: int = 3
    enable_logging: bool = False
    user_agent: str = "steam-access-client/1.0.0"
