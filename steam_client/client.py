"""
Typed async client for the Steam API gateway.
"""

from typing import Any, Iterable, Optional, Type, TypeVar, Union
from urllib.parse import quote

import httpx

from service_gateway.app.adapters.upstream_request import RequestTranslator, StoreRequest
from shared.config import SteamApiClientSettings
from shared.errors import DecodeError, UpstreamTransportError
from shared.logging import get_logger
from steam_models import (
    AchievementPercentagesResponse,
    AppListResponse,
    FriendListResponse,
    GameNewsResponse,
    OwnedGamesResponse,
    PlayerAchievementsResponse,
    PlayerBansResponse,
    PlayerSummariesResponse,
    RecentlyPlayedGamesResponse,
    StatusResponse,
    SteamResponse,
    StoreAppDetailsMap,
    VanityUrlResponse,
    decode,
)

from .vanity import extract_vanity_token

T = TypeVar("T")

SteamIds = Union[str, Iterable[Union[str, int]]]


def _join_ids(values: SteamIds) -> str:
    if isinstance(values, str):
        return values
    return ",".join(str(value) for value in values)


def _segment(value: Any) -> str:
    return quote(str(value), safe="")


class SteamApiClient:
    """One method per gateway operation, returning decoded models.

    Use as an async context manager, or call ``close()`` when done. A
    caller-supplied ``http_client`` is used as is and left open.
    """

    def __init__(self, settings: Optional[SteamApiClientSettings] = None, http_client: Optional[httpx.AsyncClient] = None):
        self.settings = settings or SteamApiClientSettings()
        self.translator = RequestTranslator.for_base_url(self.settings.base_url)
        self.logger = get_logger("steam_client.api")

        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=float(self.settings.timeout_seconds))

    def default_headers(self) -> dict:
        headers = {"User-Agent": self.settings.user_agent}
        if self.settings.api_key:
            headers["X-API-Key"] = self.settings.api_key
        return headers

    async def __aenter__(self) -> "SteamApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def get_status(self) -> StatusResponse:
        return await self._get("api/status", None, StatusResponse)

    async def get_player_summaries(self, steam_ids: SteamIds) -> SteamResponse[PlayerSummariesResponse]:
        return await self._get(
            "api/steamuser/summaries",
            {"steamIds": _join_ids(steam_ids)},
            SteamResponse[PlayerSummariesResponse]
        )

    async def get_friend_list(self, steam_id: str, relationship: str = "all") -> FriendListResponse:
        return await self._get(
            f"api/steamuser/friends/{_segment(steam_id)}",
            {"relationship": relationship},
            FriendListResponse
        )

    async def get_player_bans(self, steam_ids: SteamIds) -> PlayerBansResponse:
        return await self._get("api/steamuser/bans", {"steamIds": _join_ids(steam_ids)}, PlayerBansResponse)

    async def get_owned_games(
        self,
        steam_id: str,
        include_app_info: bool = False,
        include_played_free_games: bool = False,
        app_ids_filter: Optional[str] = None,
    ) -> SteamResponse[OwnedGamesResponse]:
        params = [
            ("includeAppInfo", include_app_info),
            ("includePlayedFreeGames", include_played_free_games),
            ("appIdsFilter", app_ids_filter or None),
        ]
        return await self._get(
            f"api/player/owned-games/{_segment(steam_id)}",
            params,
            SteamResponse[OwnedGamesResponse]
        )

    async def get_recently_played_games(
        self,
        steam_id: str,
        count: Optional[int] = None,
    ) -> SteamResponse[RecentlyPlayedGamesResponse]:
        return await self._get(
            f"api/player/recent-games/{_segment(steam_id)}",
            {"count": count},
            SteamResponse[RecentlyPlayedGamesResponse]
        )

    async def get_news_for_app(
        self,
        app_id: int,
        count: int = 20,
        max_length: int = 0,
        feeds: Optional[str] = None,
        tags: Optional[str] = None,
    ) -> GameNewsResponse:
        params = [
            ("count", count),
            ("maxLength", max_length),
            ("feeds", feeds or None),
            ("tags", tags or None),
        ]
        return await self._get(f"api/steamnews/app/{_segment(app_id)}", params, GameNewsResponse)

    async def get_global_achievement_percentages_for_app(self, game_id: int) -> AchievementPercentagesResponse:
        return await self._get(
            f"api/steamuserstats/achievements/{_segment(game_id)}/global",
            None,
            AchievementPercentagesResponse
        )

    async def get_player_achievements(
        self,
        steam_id: str,
        app_id: int,
        language: Optional[str] = None,
    ) -> PlayerAchievementsResponse:
        return await self._get(
            f"api/steamuserstats/achievements/{_segment(steam_id)}/{_segment(app_id)}",
            {"language": language or None},
            PlayerAchievementsResponse
        )

    async def get_app_list(self) -> AppListResponse:
        return await self._get("api/steamapps/list", None, AppListResponse)

    async def get_store_app_details(self, app_id: int) -> StoreAppDetailsMap:
        return await self._get(f"api/steamstore/appdetails/{_segment(app_id)}", None, StoreAppDetailsMap)

    async def get_store_app_details_multiple(self, app_ids: SteamIds) -> StoreAppDetailsMap:
        return await self._get("api/steamstore/appdetails", {"appIds": _join_ids(app_ids)}, StoreAppDetailsMap)

    async def resolve_vanity_url(self, vanity_url: str, url_type: int = 1) -> SteamResponse[VanityUrlResponse]:
        """Resolve a vanity name or profile URL to a Steam ID."""
        token = extract_vanity_token(vanity_url)
        return await self._get(
            f"api/steamuser/resolve/{_segment(token)}",
            {"urlType": url_type},
            SteamResponse[VanityUrlResponse]
        )

    def build_url(self, path: str, params: Any = None) -> str:
        return self.translator.build(StoreRequest(path, params))

    async def _get(self, path: str, params: Any, target: Type[T]) -> T:
        url = self.build_url(path, params)

        if self.settings.enable_logging:
            self.logger.info("Making GET request", url=url)

        try:
            response = await self._client.get(url, headers=self.default_headers())
        except httpx.HTTPError as exc:
            self.logger.error("HTTP request failed", url=url, error=str(exc))
            raise UpstreamTransportError(f"Gateway request failed: {exc}", details={"url": url}) from exc

        if self.settings.enable_logging:
            self.logger.info("Received response", url=url, status_code=response.status_code)

        if response.is_error:
            self.logger.error("Gateway returned an error status", url=url, status_code=response.status_code)
            raise UpstreamTransportError(
                f"Gateway request failed with status {response.status_code}",
                details={"url": url, "status_code": response.status_code, "body": response.text}
            )

        try:
            return decode(response.content, target)
        except DecodeError:
            self.logger.error("Failed to decode response", url=url, body_size=len(response.content))
            raise
