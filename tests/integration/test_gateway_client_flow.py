"""
End-to-end tests: client facade -> gateway app -> stubbed Steam API.
"""

import httpx
import pytest

from service_gateway.app.main import GatewayService
from shared.config import ApiKeySettings, RateLimitSettings, ServiceConfig, SteamApiClientSettings, SteamApiSettings
from shared.errors import UpstreamTransportError
from steam_client import SteamApiClient

CALLER_KEY = "integration-key-42"
STEAM_ID = "76561197960435530"


def steam_api(request: httpx.Request) -> httpx.Response:
    """Minimal stand-in for api.steampowered.com and the store."""
    if request.url.params.get("key") not in (None, "STEAMKEY"):
        return httpx.Response(403)

    path = request.url.path
    if path == "/ISteamUser/ResolveVanityURL/v0001/":
        if request.url.params["vanityurl"] == "ac89":
            return httpx.Response(200, json={"response": {"steamid": STEAM_ID, "success": 1}})
        return httpx.Response(200, json={"response": {"success": 42, "message": "No match"}})

    if path == "/ISteamUser/GetPlayerSummaries/v0002/":
        return httpx.Response(200, json={"response": {"players": [
            {"steamid": STEAM_ID, "personaname": "Robin", "personastate": "1", "lastlogoff": 1700000000}
        ]}})

    if path == "/api/appdetails":
        return httpx.Response(200, json={request.url.params["appids"]: {"success": True, "data": {
            "name": "Portal 2",
            "required_age": "0",
            "pc_requirements": {"minimum": "foo"},
            "linux_requirements": [],
        }}})

    return httpx.Response(404)


@pytest.fixture
def gateway():
    config = ServiceConfig(
        upstream=SteamApiSettings(
            api_key="STEAMKEY",
            base_url="https://api.steampowered.test",
            store_base_url="https://store.steampowered.test/api",
        ),
        auth=ApiKeySettings(
            valid_api_keys=[CALLER_KEY],
            rate_limit=RateLimitSettings(requests_per_minute=3, requests_per_hour=100),
        ),
    )
    return GatewayService(config, http_client=httpx.AsyncClient(transport=httpx.MockTransport(steam_api)))


def client_for(gateway: GatewayService, api_key=CALLER_KEY) -> SteamApiClient:
    http_client = httpx.AsyncClient(transport=httpx.ASGITransport(app=gateway.app))
    return SteamApiClient(
        SteamApiClientSettings(base_url="http://gateway.test", api_key=api_key),
        http_client=http_client,
    )


class TestGatewayClientFlow:
    """Full request path through authentication, translation and decoding."""

    @pytest.mark.asyncio
    async def test_resolve_profile_url(self, gateway):
        client = client_for(gateway)

        result = await client.resolve_vanity_url("https://steamcommunity.com/id/ac89/")

        assert result.response.steam_id == STEAM_ID
        assert result.response.success == 1

    @pytest.mark.asyncio
    async def test_resolve_unknown_vanity(self, gateway):
        client = client_for(gateway)

        result = await client.resolve_vanity_url("nobody-here")

        assert result.response.success == 42
        assert result.response.message == "No match"

    @pytest.mark.asyncio
    async def test_player_summaries(self, gateway):
        client = client_for(gateway)

        result = await client.get_player_summaries([STEAM_ID])
        player = result.response.players[0]

        assert player.persona_name == "Robin"
        assert player.persona_state == 1
        assert player.last_logoff_at.year == 2023

    @pytest.mark.asyncio
    async def test_store_details_tolerance_survives_round_trip(self, gateway):
        client = client_for(gateway)

        result = await client.get_store_app_details(620)
        app = result["620"].data

        assert app.name == "Portal 2"
        assert app.required_age == 0
        assert app.pc_requirements.minimum == "foo"
        assert app.linux_requirements is None

    @pytest.mark.asyncio
    async def test_status_without_key(self, gateway):
        client = client_for(gateway, api_key=None)

        status = await client.get_status()

        assert status.status == "Healthy"
        assert status.steam_api_key_configured is True

    @pytest.mark.asyncio
    async def test_missing_key_surfaces_as_transport_error(self, gateway):
        client = client_for(gateway, api_key=None)

        with pytest.raises(UpstreamTransportError) as exc_info:
            await client.get_player_summaries(STEAM_ID)

        assert exc_info.value.details["status_code"] == 401

    @pytest.mark.asyncio
    async def test_rate_limit_through_client(self, gateway):
        client = client_for(gateway)

        for _ in range(3):
            await client.get_player_summaries(STEAM_ID)

        with pytest.raises(UpstreamTransportError) as exc_info:
            await client.get_player_summaries(STEAM_ID)

        assert exc_info.value.details["status_code"] == 429
        assert '"Rate limit exceeded"' in exc_info.value.details["body"]
