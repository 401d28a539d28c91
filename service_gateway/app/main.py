"""
Steam API gateway service.
"""

import ipaddress
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

import httpx
from fastapi import HTTPException, Query, Response

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.errors import ConfigurationError
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
)

from .adapters.steam_api_client import SteamApiService
from .adapters.upstream_request import InterfaceRequest, StoreRequest
from .auth.api_key import ApiKeyAuthenticator, ApiKeyRegistry
from .domain.api_key_middleware import ApiKeyMiddleware
from .ratelimit.sliding_window import SlidingWindowRateLimiter

SERVICE_VERSION = "1.0.0"
MAX_STEAM_IDS = 100
STEAM_ID_MAX = 2 ** 64 - 1


class GatewayService(BaseService):
    """Steam API gateway service implementation."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        config = config or ServiceConfig()
        if not config.upstream.api_key:
            raise ConfigurationError(
                "Steam API key is required",
                details={"setting": "STEAM_UPSTREAM__API_KEY"}
            )

        self.registry = ApiKeyRegistry.from_settings(config.auth)
        self.authenticator = ApiKeyAuthenticator(self.registry)

        rate_settings = config.auth.rate_limit
        self.rate_limiter: Optional[SlidingWindowRateLimiter] = None
        if self.registry.rate_limit_enabled:
            limiter_kwargs = {"sweep_interval_seconds": rate_settings.sweep_interval_seconds}
            if clock is not None:
                limiter_kwargs["clock"] = clock
            self.rate_limiter = SlidingWindowRateLimiter(
                rate_settings.requests_per_minute,
                rate_settings.requests_per_hour,
                **limiter_kwargs
            )

        super().__init__(config.service_name, config)

        self.steam_api = SteamApiService(self.config.upstream, http_client=http_client, metrics=self.metrics)

        if not self.registry.valid_keys and self.registry.require_api_key:
            self.logger.warning("No valid API keys configured; protected routes will reject every request")

        @self.app.on_event("shutdown")
        async def _shutdown():
            await self.steam_api.close()

        self._setup_status_routes()
        self._setup_steam_user_routes()
        self._setup_player_routes()
        self._setup_news_routes()
        self._setup_user_stats_routes()
        self._setup_apps_routes()
        self._setup_store_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.gateway_service = self

    def _setup_middleware(self):
        """Add the API key gate innermost, then the common middleware."""
        self.app.add_middleware(
            ApiKeyMiddleware,
            authenticator=self.authenticator,
            rate_limiter=self.rate_limiter,
            metrics=self.metrics,
        )
        super()._setup_middleware()

    async def _check_dependencies(self):
        return {"steam_api_key": "ok" if self.config.upstream.api_key else "missing"}

    def _status(self) -> StatusResponse:
        upstream = self.config.upstream
        return StatusResponse(
            steam_api_key_configured=bool(upstream.api_key),
            api_key_auth_enabled=self.registry.require_api_key,
            rate_limit_enabled=self.rate_limiter is not None,
            cors_enabled=self.config.cors.enabled,
            base_url=upstream.base_url,
            timeout_seconds=upstream.timeout_seconds,
            max_retries=upstream.max_retries,
            enable_logging=upstream.enable_logging,
            version=SERVICE_VERSION,
        )

    async def _passthrough(self, request: InterfaceRequest) -> Response:
        """Forward a call whose reply has no typed model."""
        body = await self.steam_api.get_raw(request)
        return Response(content=body, media_type="application/json")

    # Validation helpers

    def _require_steam_id(self, steam_id: Optional[str]) -> str:
        if not steam_id or not steam_id.strip():
            raise HTTPException(status_code=400, detail="Steam ID is required")
        if not self._is_steam_id(steam_id):
            raise HTTPException(status_code=400, detail="Invalid Steam ID format")
        return steam_id

    def _require_steam_ids(self, steam_ids: Optional[str], limit: Optional[int] = None) -> List[str]:
        if not steam_ids or not steam_ids.strip():
            raise HTTPException(status_code=400, detail="Steam IDs are required")

        ids = [value.strip() for value in steam_ids.split(",") if value.strip()]
        if not ids:
            raise HTTPException(status_code=400, detail="At least one Steam ID is required")
        if limit is not None and len(ids) > limit:
            raise HTTPException(status_code=400, detail=f"Maximum of {limit} Steam IDs allowed per request")

        for steam_id in ids:
            if not self._is_steam_id(steam_id):
                raise HTTPException(status_code=400, detail=f"Invalid Steam ID format: {steam_id}")
        return ids

    @staticmethod
    def _is_steam_id(value: str) -> bool:
        value = value.strip()
        return value.isdigit() and int(value) <= STEAM_ID_MAX

    @staticmethod
    def _require_positive(value: int, label: str) -> int:
        if value <= 0:
            raise HTTPException(status_code=400, detail=f"{label} must be a positive integer")
        return value

    @staticmethod
    def _require_app_ids(app_ids: str, message: str) -> List[str]:
        ids = [value.strip() for value in app_ids.split(",") if value.strip()]
        for value in ids:
            if not value.lstrip("-").isdigit() or int(value) <= 0:
                raise HTTPException(status_code=400, detail=f"{message}: {value}")
        return ids

    @staticmethod
    def _is_server_address(addr: str) -> bool:
        if not addr or not addr.strip():
            return False

        host, _, port = addr.rpartition(":") if addr.count(":") == 1 else (addr, "", "")
        if port and not port.isdigit():
            return False
        try:
            ipaddress.ip_address(host.strip("[]"))
        except ValueError:
            return False
        return True

    def _setup_status_routes(self):
        """Status and banner routes; exempt from API key checks by default."""

        @self.app.get("/")
        async def root():
            return {
                "service": "Steam API Gateway",
                "version": SERVICE_VERSION,
                "status": "/api/status",
                "docs": "/docs",
            }

        @self.app.get("/api/status")
        async def get_status():
            """Current status and configuration summary."""
            self.logger.info("Status endpoint called")
            return self._status()

        @self.app.get("/api/status/health")
        async def get_status_health():
            return {"status": "Healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    def _setup_steam_user_routes(self):
        """ISteamUser routes."""

        @self.app.get("/api/steamuser/summaries")
        async def get_player_summaries(steam_ids: Optional[str] = Query(None, alias="steamIds")):
            ids = self._require_steam_ids(steam_ids, limit=MAX_STEAM_IDS)
            self.logger.info("Getting player summaries", count=len(ids))
            return await self.steam_api.get(
                InterfaceRequest("ISteamUser", "GetPlayerSummaries", "v0002", {"steamids": ",".join(ids)}),
                SteamResponse[PlayerSummariesResponse]
            )

        @self.app.get("/api/steamuser/friends/{steam_id}")
        async def get_friend_list(steam_id: str, relationship: str = Query("all")):
            self._require_steam_id(steam_id)
            if relationship not in ("all", "friend"):
                raise HTTPException(status_code=400, detail="Relationship must be 'all' or 'friend'")

            self.logger.info("Getting friend list", steam_id=steam_id, relationship=relationship)
            return await self.steam_api.get(
                InterfaceRequest(
                    "ISteamUser",
                    "GetFriendList",
                    "v0001",
                    {"steamid": steam_id, "relationship": relationship}
                ),
                FriendListResponse
            )

        @self.app.get("/api/steamuser/bans")
        async def get_player_bans(steam_ids: Optional[str] = Query(None, alias="steamIds")):
            ids = self._require_steam_ids(steam_ids)
            self.logger.info("Getting player bans", count=len(ids))
            return await self.steam_api.get(
                InterfaceRequest("ISteamUser", "GetPlayerBans", "v1", {"steamids": ",".join(ids)}),
                PlayerBansResponse
            )

        @self.app.get("/api/steamuser/groups/{steam_id}")
        async def get_user_group_list(steam_id: str):
            self._require_steam_id(steam_id)
            self.logger.info("Getting user groups", steam_id=steam_id)
            return await self._passthrough(
                InterfaceRequest("ISteamUser", "GetUserGroupList", "v1", {"steamid": steam_id})
            )

        @self.app.get("/api/steamuser/resolve/{vanity_url}")
        async def resolve_vanity_url(vanity_url: str, url_type: int = Query(1, alias="urlType")):
            if not vanity_url.strip():
                raise HTTPException(status_code=400, detail="Vanity URL is required")
            if url_type not in (1, 2):
                raise HTTPException(
                    status_code=400,
                    detail="URL type must be 1 (individual profile) or 2 (group)"
                )

            self.logger.info("Resolving vanity URL", vanity_url=vanity_url, url_type=url_type)
            return await self.steam_api.get(
                InterfaceRequest(
                    "ISteamUser",
                    "ResolveVanityURL",
                    "v0001",
                    {"vanityurl": vanity_url, "url_type": url_type}
                ),
                SteamResponse[VanityUrlResponse]
            )

    def _setup_player_routes(self):
        """IPlayerService routes."""

        @self.app.get("/api/player/owned-games/{steam_id}")
        async def get_owned_games(
            steam_id: str,
            include_app_info: bool = Query(False, alias="includeAppInfo"),
            include_played_free_games: bool = Query(False, alias="includePlayedFreeGames"),
            app_ids_filter: Optional[str] = Query(None, alias="appIdsFilter"),
        ):
            self._require_steam_id(steam_id)
            params: List[Any] = [
                ("steamid", steam_id),
                ("include_appinfo", include_app_info),
                ("include_played_free_games", include_played_free_games),
            ]
            if app_ids_filter:
                for value in app_ids_filter.split(","):
                    value = value.strip()
                    if value and not value.lstrip("-").isdigit():
                        raise HTTPException(status_code=400, detail=f"Invalid App ID format: {value}")
                params.append(("appids_filter", app_ids_filter))

            self.logger.info("Getting owned games", steam_id=steam_id, include_app_info=include_app_info)
            return await self.steam_api.get(
                InterfaceRequest("IPlayerService", "GetOwnedGames", "v0001", params),
                SteamResponse[OwnedGamesResponse]
            )

        @self.app.get("/api/player/recent-games/{steam_id}")
        async def get_recently_played_games(steam_id: str, count: Optional[int] = Query(None)):
            self._require_steam_id(steam_id)
            if count is not None and not 1 <= count <= 100:
                raise HTTPException(status_code=400, detail="Count must be between 1 and 100")

            self.logger.info("Getting recently played games", steam_id=steam_id, count=count)
            return await self.steam_api.get(
                InterfaceRequest(
                    "IPlayerService",
                    "GetRecentlyPlayedGames",
                    "v0001",
                    [("steamid", steam_id), ("count", count)]
                ),
                SteamResponse[RecentlyPlayedGamesResponse]
            )

        @self.app.get("/api/player/level/{steam_id}")
        async def get_steam_level(steam_id: str):
            self._require_steam_id(steam_id)
            return await self._passthrough(
                InterfaceRequest("IPlayerService", "GetSteamLevel", "v0001", {"steamid": steam_id})
            )

        @self.app.get("/api/player/badges/{steam_id}")
        async def get_badges(steam_id: str):
            self._require_steam_id(steam_id)
            return await self._passthrough(
                InterfaceRequest("IPlayerService", "GetBadges", "v0001", {"steamid": steam_id})
            )

        @self.app.get("/api/player/badge-progress/{steam_id}")
        async def get_community_badge_progress(steam_id: str, badge_id: Optional[int] = Query(None, alias="badgeId")):
            self._require_steam_id(steam_id)
            return await self._passthrough(
                InterfaceRequest(
                    "IPlayerService",
                    "GetCommunityBadgeProgress",
                    "v0001",
                    [("steamid", steam_id), ("badgeid", badge_id)]
                )
            )

    def _setup_news_routes(self):
        """ISteamNews routes."""

        def news_params(app_id: int, count: int, max_length: int, feeds: Optional[str], tags: Optional[str]):
            self._require_positive(app_id, "App ID")
            if not 1 <= count <= 20:
                raise HTTPException(status_code=400, detail="Count must be between 1 and 20")
            if max_length < 0:
                raise HTTPException(status_code=400, detail="Max length must be 0 or greater")
            return [
                ("appid", app_id),
                ("count", count),
                ("maxlength", max_length),
                ("feeds", feeds or None),
                ("tags", tags or None),
            ]

        @self.app.get("/api/steamnews/app/{app_id}")
        async def get_news_for_app(
            app_id: int,
            count: int = Query(20),
            max_length: int = Query(0, alias="maxLength"),
            feeds: Optional[str] = Query(None),
            tags: Optional[str] = Query(None),
        ):
            params = news_params(app_id, count, max_length, feeds, tags)
            self.logger.info("Getting news for app", app_id=app_id, count=count)
            return await self.steam_api.get(
                InterfaceRequest("ISteamNews", "GetNewsForApp", "v0002", params),
                GameNewsResponse
            )

        @self.app.get("/api/steamnews/app/{app_id}/authed")
        async def get_news_for_app_authed(
            app_id: int,
            count: int = Query(20),
            max_length: int = Query(0, alias="maxLength"),
            feeds: Optional[str] = Query(None),
            tags: Optional[str] = Query(None),
            end_date: Optional[int] = Query(None, alias="endDate"),
            days: Optional[int] = Query(None),
        ):
            params = news_params(app_id, count, max_length, feeds, tags)
            if days is not None and not 1 <= days <= 365:
                raise HTTPException(status_code=400, detail="Days must be between 1 and 365")
            params.extend([("enddate", end_date), ("days", days)])

            self.logger.info("Getting authed news for app", app_id=app_id, count=count)
            return await self.steam_api.get(
                InterfaceRequest("ISteamNews", "GetNewsForAppAuthed", "v0001", params),
                GameNewsResponse
            )

    def _setup_user_stats_routes(self):
        """ISteamUserStats routes."""

        @self.app.get("/api/steamuserstats/achievements/{game_id}/global")
        async def get_global_achievement_percentages(game_id: int):
            self._require_positive(game_id, "Game ID")
            return await self.steam_api.get(
                InterfaceRequest(
                    "ISteamUserStats",
                    "GetGlobalAchievementPercentagesForApp",
                    "v0002",
                    {"gameid": game_id}
                ),
                AchievementPercentagesResponse
            )

        @self.app.get("/api/steamuserstats/players/{app_id}/current")
        async def get_number_of_current_players(app_id: int):
            self._require_positive(app_id, "App ID")
            return await self._passthrough(
                InterfaceRequest("ISteamUserStats", "GetNumberOfCurrentPlayers", "v0001", {"appid": app_id})
            )

        @self.app.get("/api/steamuserstats/achievements/{steam_id}/{app_id}")
        async def get_player_achievements(steam_id: str, app_id: int, language: Optional[str] = Query(None)):
            self._require_steam_id(steam_id)
            self._require_positive(app_id, "App ID")

            self.logger.info("Getting player achievements", steam_id=steam_id, app_id=app_id)
            return await self.steam_api.get(
                InterfaceRequest(
                    "ISteamUserStats",
                    "GetPlayerAchievements",
                    "v0001",
                    [("steamid", steam_id), ("appid", app_id), ("l", language or None)]
                ),
                PlayerAchievementsResponse
            )

        @self.app.get("/api/steamuserstats/stats/{steam_id}/{app_id}")
        async def get_user_stats_for_game(steam_id: str, app_id: int):
            self._require_steam_id(steam_id)
            self._require_positive(app_id, "App ID")
            return await self._passthrough(
                InterfaceRequest(
                    "ISteamUserStats",
                    "GetUserStatsForGame",
                    "v0002",
                    {"steamid": steam_id, "appid": app_id}
                )
            )

    def _setup_apps_routes(self):
        """ISteamApps routes."""

        @self.app.get("/api/steamapps/list")
        async def get_app_list():
            self.logger.info("Getting app list")
            return await self.steam_api.get(InterfaceRequest("ISteamApps", "GetAppList", "v0002"), AppListResponse)

        @self.app.get("/api/steamapps/list/v2")
        async def get_app_list_v2():
            return await self.steam_api.get(InterfaceRequest("ISteamApps", "GetAppList", "v2"), AppListResponse)

        @self.app.get("/api/steamapps/list/v1")
        async def get_app_list_v1():
            return await self._passthrough(InterfaceRequest("ISteamApps", "GetAppList", "v1"))

        @self.app.get("/api/steamapps/servers/{addr}")
        async def get_servers_at_address(addr: str):
            if not self._is_server_address(addr):
                raise HTTPException(status_code=400, detail="Invalid IP address format")

            self.logger.info("Getting servers at address", addr=addr)
            return await self._passthrough(
                InterfaceRequest("ISteamApps", "GetServersAtAddress", "v0001", {"addr": addr})
            )

        @self.app.get("/api/steamapps/up-to-date/{app_id}")
        async def up_to_date_check(app_id: int, version: int = Query(0)):
            self._require_positive(app_id, "App ID")
            self._require_positive(version, "Version")
            return await self._passthrough(
                InterfaceRequest("ISteamApps", "UpToDateCheck", "v0001", {"appid": app_id, "version": version})
            )

    def _setup_store_routes(self):
        """Steam store routes; the store surface takes no Steam credential."""

        @self.app.get("/api/steamstore/appdetails/{app_id}")
        async def get_app_details(app_id: int):
            self._require_positive(app_id, "App ID")
            self.logger.info("Getting store details", app_id=app_id)
            return await self.steam_api.get(StoreRequest("appdetails", {"appids": app_id}), StoreAppDetailsMap)

        @self.app.get("/api/steamstore/appdetails")
        async def get_app_details_multiple(app_ids: Optional[str] = Query(None, alias="appIds")):
            if not app_ids or not app_ids.strip():
                raise HTTPException(status_code=400, detail="App IDs parameter is required")

            ids = self._require_app_ids(app_ids, "Invalid app ID")
            self.logger.info("Getting store details", count=len(ids))
            return await self.steam_api.get(
                StoreRequest("appdetails", {"appids": ",".join(ids)}),
                StoreAppDetailsMap
            )


def create_app():
    """Create FastAPI application."""
    service = GatewayService()
    return service.app


if __name__ == "__main__":
    service = GatewayService()
    service.run()
