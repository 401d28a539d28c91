"""
Unit tests for the gateway client.
"""

import httpx
import pytest

from shared.config import SteamApiClientSettings
from shared.errors import DecodeError, InvalidArgumentError, UpstreamTransportError
from steam_client import SteamApiClient


class RecordingTransport:
    """Captures outgoing requests and returns a fixed response."""

    def __init__(self, response: httpx.Response):
        self.response = response
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def make_client(response: httpx.Response, **settings):
    settings.setdefault("base_url", "http://localhost:5000")
    transport = RecordingTransport(response)
    client = SteamApiClient(
        SteamApiClientSettings(**settings),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(transport)),
    )
    return client, transport


class TestSteamApiClient:
    """Test cases for SteamApiClient."""

    @pytest.mark.asyncio
    async def test_get_status(self):
        client, transport = make_client(httpx.Response(200, json={"status": "Healthy", "version": "1.0.0"}))

        status = await client.get_status()

        assert status.status == "Healthy"
        assert status.version == "1.0.0"
        assert str(transport.last.url) == "http://localhost:5000/api/status"

    @pytest.mark.asyncio
    async def test_headers_with_api_key(self):
        client, transport = make_client(httpx.Response(200, json={}), api_key="client-key-123456", user_agent="tests/1.0")

        await client.get_status()

        assert transport.last.headers["X-API-Key"] == "client-key-123456"
        assert transport.last.headers["User-Agent"] == "tests/1.0"

    @pytest.mark.asyncio
    async def test_no_api_key_header_when_unset(self):
        client, transport = make_client(httpx.Response(200, json={}))

        await client.get_status()

        assert "X-API-Key" not in transport.last.headers
        assert transport.last.headers["User-Agent"] == "steam-access-client/1.0.0"

    @pytest.mark.asyncio
    async def test_get_player_summaries(self):
        client, transport = make_client(httpx.Response(200, json={
            "response": {"players": [{"steamid": "76561198000000000", "personaname": "TestUser"}]}
        }))

        result = await client.get_player_summaries(["76561198000000000", 76561198000000001])

        assert result.response.players[0].persona_name == "TestUser"
        assert str(transport.last.url) == (
            "http://localhost:5000/api/steamuser/summaries?steamIds=76561198000000000%2C76561198000000001"
        )

    @pytest.mark.asyncio
    async def test_get_player_bans(self):
        client, _ = make_client(httpx.Response(200, json={
            "players": [{"SteamId": "76561198000000000", "CommunityBanned": False, "VACBanned": False}]
        }))

        result = await client.get_player_bans("76561198000000000")

        assert result.players[0].steam_id == "76561198000000000"
        assert result.players[0].vac_banned is False

    @pytest.mark.asyncio
    async def test_get_friend_list(self):
        client, transport = make_client(httpx.Response(200, json={
            "friendslist": {"friends": [{"steamid": "76561198000000001", "relationship": "friend"}]}
        }))

        result = await client.get_friend_list("76561198000000000")

        assert result.friendslist.friends[0].relationship == "friend"
        assert str(transport.last.url).endswith("/api/steamuser/friends/76561198000000000?relationship=all")

    @pytest.mark.asyncio
    async def test_get_owned_games(self):
        client, transport = make_client(httpx.Response(200, json={
            "response": {"game_count": 1, "games": [{"appid": 730, "name": "Counter-Strike 2"}]}
        }))

        result = await client.get_owned_games("76561198000000000", include_app_info=True)

        assert result.response.game_count == 1
        assert result.response.games[0].appid == 730
        assert transport.last.url.params["includeAppInfo"] == "true"
        assert transport.last.url.params["includePlayedFreeGames"] == "false"
        assert "appIdsFilter" not in transport.last.url.params

    @pytest.mark.asyncio
    async def test_get_recently_played_games_without_count(self):
        client, transport = make_client(httpx.Response(200, json={"response": {"total_count": 0}}))

        result = await client.get_recently_played_games("76561198000000000")

        assert result.response.total_count == 0
        assert result.response.games == []
        assert str(transport.last.url) == "http://localhost:5000/api/player/recent-games/76561198000000000"

    @pytest.mark.asyncio
    async def test_get_news_for_app(self):
        client, transport = make_client(httpx.Response(200, json={
            "appnews": {"appid": 730, "newsitems": [{"gid": "1", "title": "Test News"}]}
        }))

        result = await client.get_news_for_app(730, count=5)

        assert result.appnews.appid == 730
        assert result.appnews.newsitems[0].title == "Test News"
        assert transport.last.url.params["count"] == "5"
        assert transport.last.url.params["maxLength"] == "0"

    @pytest.mark.asyncio
    async def test_get_player_achievements(self):
        client, transport = make_client(httpx.Response(200, json={
            "playerstats": {
                "steamID": "76561198000000000",
                "gameName": "Test Game",
                "success": True,
                "achievements": [{"apiname": "WIN", "achieved": 1, "unlocktime": 1700000000}],
            }
        }))

        result = await client.get_player_achievements("76561198000000000", 730, language="english")

        stats = result.playerstats
        assert stats.steam_id == "76561198000000000"
        assert stats.game_name == "Test Game"
        assert stats.success is True
        assert stats.achievements[0].achieved is True
        assert transport.last.url.params["language"] == "english"

    @pytest.mark.asyncio
    async def test_get_store_app_details(self):
        client, transport = make_client(httpx.Response(200, json={
            "730": {"success": True, "data": {"name": "Counter-Strike 2", "mac_requirements": []}}
        }))

        result = await client.get_store_app_details(730)

        assert result["730"].data.name == "Counter-Strike 2"
        assert result["730"].data.mac_requirements is None
        assert str(transport.last.url) == "http://localhost:5000/api/steamstore/appdetails/730"

    @pytest.mark.asyncio
    async def test_get_store_app_details_multiple(self):
        client, transport = make_client(httpx.Response(200, json={"730": {"success": True}, "440": {"success": False}}))

        result = await client.get_store_app_details_multiple([730, 440])

        assert set(result) == {"730", "440"}
        assert transport.last.url.params["appIds"] == "730,440"

    @pytest.mark.asyncio
    async def test_resolve_vanity_url_from_profile_url(self):
        client, transport = make_client(httpx.Response(200, json={
            "response": {"steamid": "76561198000000000", "success": 1}
        }))

        result = await client.resolve_vanity_url("https://steamcommunity.com/id/ac89")

        assert result.response.steam_id == "76561198000000000"
        assert result.response.success == 1
        assert transport.last.url.raw_path == b"/api/steamuser/resolve/ac89?urlType=1"

    @pytest.mark.asyncio
    async def test_resolve_vanity_url_rejects_empty_input(self):
        client, transport = make_client(httpx.Response(200, json={}))

        with pytest.raises(InvalidArgumentError) as exc_info:
            await client.resolve_vanity_url("")

        assert exc_info.value.message == "Vanity URL cannot be null or empty"
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        client, _ = make_client(httpx.Response(401, json={"error": "API key is required"}))

        with pytest.raises(UpstreamTransportError) as exc_info:
            await client.get_app_list()

        assert exc_info.value.details["status_code"] == 401

    @pytest.mark.asyncio
    async def test_connection_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = SteamApiClient(
            SteamApiClientSettings(),
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )

        with pytest.raises(UpstreamTransportError):
            await client.get_app_list()

    @pytest.mark.asyncio
    async def test_invalid_body_raises_decode_error(self):
        client, _ = make_client(httpx.Response(200, text="not json"))

        with pytest.raises(DecodeError):
            await client.get_global_achievement_percentages_for_app(440)

    @pytest.mark.asyncio
    async def test_context_manager_closes_owned_client(self):
        async with SteamApiClient(SteamApiClientSettings()) as client:
            inner = client._client

        assert inner.is_closed

    @pytest.mark.asyncio
    async def test_supplied_client_is_left_open(self):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))

        async with SteamApiClient(SteamApiClientSettings(), http_client=http_client):
            pass

        assert not http_client.is_closed
        await http_client.aclose()
