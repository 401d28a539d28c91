"""
Unit tests for Gateway API key authentication.
"""

import dataclasses

import pytest

from service_gateway.app.auth.api_key import (
    ApiKeyAuthenticator,
    ApiKeyRegistry,
    AuthOutcome,
    mask_api_key,
)
from shared.config import ApiKeySettings, RateLimitSettings

VALID_KEY = "test-key-0123456789"


class TestMaskApiKey:
    """Masking of keys for logs and request context."""

    @pytest.mark.parametrize("key", ["", "a", "abc123de", "12345678"])
    def test_short_keys_are_fully_redacted(self, key):
        assert mask_api_key(key) == "***"

    def test_eight_character_key_is_not_partially_shown(self):
        assert mask_api_key("abc123de") != "abc1...3de"

    @pytest.mark.parametrize("key", ["123456789", "abcdefghij", VALID_KEY])
    def test_long_keys_keep_first_and_last_four(self, key):
        masked = mask_api_key(key)

        assert masked == f"{key[:4]}...{key[-4:]}"
        assert masked.startswith(key[:4])
        assert masked.endswith(key[-4:])

    def test_none_is_redacted(self):
        assert mask_api_key(None) == "***"


class TestApiKeyRegistry:
    """Registry snapshot built from settings."""

    def test_from_settings(self):
        settings = ApiKeySettings(
            valid_api_keys=[VALID_KEY, "", "other-key-12345"],
            header_name="X-Custom-Key",
            query_parameter_name="key",
            exempt_path_prefixes=["/API/Status"],
            rate_limit=RateLimitSettings(enabled=False),
        )

        registry = ApiKeyRegistry.from_settings(settings)

        assert registry.valid_keys == frozenset({VALID_KEY, "other-key-12345"})
        assert registry.header_name == "X-Custom-Key"
        assert registry.query_parameter_name == "key"
        assert registry.exempt_path_prefixes == ("/api/status",)
        assert registry.rate_limit_enabled is False

    def test_registry_is_immutable(self):
        registry = ApiKeyRegistry.from_settings(ApiKeySettings(valid_api_keys=[VALID_KEY]))

        with pytest.raises(dataclasses.FrozenInstanceError):
            registry.require_api_key = False

    @pytest.mark.parametrize("path", ["/api/status", "/API/STATUS/health", "/health", "/healthz", "/swagger/index.html"])
    def test_default_exempt_prefixes(self, path):
        registry = ApiKeyRegistry.from_settings(ApiKeySettings())
        assert registry.is_exempt(path) is True

    @pytest.mark.parametrize("path", ["/api/steamuser/summaries", "/", "/api/stat"])
    def test_protected_paths(self, path):
        registry = ApiKeyRegistry.from_settings(ApiKeySettings())
        assert registry.is_exempt(path) is False


class TestApiKeyAuthenticator:
    """Test cases for ApiKeyAuthenticator."""

    @pytest.fixture
    def authenticator(self):
        return ApiKeyAuthenticator(ApiKeyRegistry.from_settings(ApiKeySettings(valid_api_keys=[VALID_KEY])))

    def test_valid_header_key(self, authenticator):
        result = authenticator.authenticate("/api/steamuser/bans", {"X-API-Key": VALID_KEY}, {})

        assert result.outcome is AuthOutcome.ADMITTED
        assert result.admitted is True
        assert result.credential == VALID_KEY
        assert result.masked_key == "test...6789"

    def test_query_parameter_fallback(self, authenticator):
        result = authenticator.authenticate("/api/steamuser/bans", {}, {"api_key": VALID_KEY})

        assert result.outcome is AuthOutcome.ADMITTED
        assert result.credential == VALID_KEY

    def test_header_takes_precedence_over_query(self, authenticator):
        result = authenticator.authenticate(
            "/api/steamuser/bans",
            {"X-API-Key": "wrong-key-999999"},
            {"api_key": VALID_KEY},
        )

        assert result.outcome is AuthOutcome.INVALID_KEY

    def test_empty_header_falls_back_to_query(self, authenticator):
        result = authenticator.authenticate("/api/steamuser/bans", {"X-API-Key": ""}, {"api_key": VALID_KEY})

        assert result.outcome is AuthOutcome.ADMITTED

    def test_missing_key(self, authenticator):
        result = authenticator.authenticate("/api/steamuser/bans", {}, {})

        assert result.outcome is AuthOutcome.MISSING_KEY
        assert result.credential is None

    def test_empty_values_count_as_missing(self, authenticator):
        result = authenticator.authenticate("/api/steamuser/bans", {"X-API-Key": ""}, {"api_key": ""})

        assert result.outcome is AuthOutcome.MISSING_KEY

    def test_invalid_key(self, authenticator):
        result = authenticator.authenticate("/api/steamuser/bans", {"X-API-Key": "not-a-valid-key"}, {})

        assert result.outcome is AuthOutcome.INVALID_KEY
        assert result.credential is None
        assert result.masked_key == "not-...-key"

    def test_validation_is_exact_match(self, authenticator):
        result = authenticator.authenticate("/api/steamuser/bans", {"X-API-Key": VALID_KEY.upper()}, {})

        assert result.outcome is AuthOutcome.INVALID_KEY

    def test_exempt_path_skips_extraction(self, authenticator):
        result = authenticator.authenticate("/api/status", {"X-API-Key": "not-a-valid-key"}, {})

        assert result.outcome is AuthOutcome.ADMITTED
        assert result.credential is None
        assert result.masked_key is None

    def test_not_required_admits_without_credential(self):
        authenticator = ApiKeyAuthenticator.configured([VALID_KEY], require_api_key=False)

        result = authenticator.authenticate("/api/steamuser/bans", {"X-API-Key": "anything"}, {})

        assert result.outcome is AuthOutcome.ADMITTED
        assert result.credential is None

    def test_custom_names(self):
        authenticator = ApiKeyAuthenticator.configured(
            [VALID_KEY],
            header_name="X-Steam-Key",
            query_parameter_name="token",
        )

        by_header = authenticator.authenticate("/api/player/level/1", {"X-Steam-Key": VALID_KEY}, {})
        by_query = authenticator.authenticate("/api/player/level/1", {}, {"token": VALID_KEY})
        default_header = authenticator.authenticate("/api/player/level/1", {"X-API-Key": VALID_KEY}, {})

        assert by_header.admitted
        assert by_query.admitted
        assert default_header.outcome is AuthOutcome.MISSING_KEY

    def test_no_configured_keys_rejects(self):
        authenticator = ApiKeyAuthenticator.configured([])

        result = authenticator.authenticate("/api/player/level/1", {"X-API-Key": VALID_KEY}, {})

        assert result.outcome is AuthOutcome.INVALID_KEY
