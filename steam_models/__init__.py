"""
Typed Steam entities and tolerant decoding.

Shared by the gateway (decoding upstream bodies) and the client facade
(decoding gateway bodies):

- decoding: ``decode``, ``SteamModel`` and the reusable field strategies
- player / game / store: entity models
- responses: operation envelopes
- status: gateway status payload
"""

from .decoding import (
    DecodeError,
    IntOrString,
    ObjectOrEmpty,
    SteamModel,
    decode,
    int_or_zero,
    object_or_absent,
)
from .game import Achievement, AchievementPercentage, GameNews, SteamApp
from .player import Friend, OwnedGame, PlayerBans, PlayerStatus, PlayerSummary, RecentlyPlayedGame
from .responses import (
    AchievementPercentagesResponse,
    AppListResponse,
    FriendListResponse,
    GameNewsResponse,
    OwnedGamesResponse,
    PlayerAchievementsResponse,
    PlayerBansResponse,
    PlayerSummariesResponse,
    RecentlyPlayedGamesResponse,
    SteamResponse,
    VanityUrlResponse,
)
from .status import StatusResponse
from .store import StoreAppDetails, StoreAppDetailsMap, StoreAppDetailsResponse, StoreRequirements

__all__ = [
    "Achievement",
    "AchievementPercentage",
    "AchievementPercentagesResponse",
    "AppListResponse",
    "DecodeError",
    "Friend",
    "FriendListResponse",
    "GameNews",
    "GameNewsResponse",
    "IntOrString",
    "ObjectOrEmpty",
    "OwnedGame",
    "OwnedGamesResponse",
    "PlayerAchievementsResponse",
    "PlayerBans",
    "PlayerBansResponse",
    "PlayerStatus",
    "PlayerSummariesResponse",
    "PlayerSummary",
    "RecentlyPlayedGame",
    "RecentlyPlayedGamesResponse",
    "StatusResponse",
    "SteamApp",
    "SteamModel",
    "SteamResponse",
    "StoreAppDetails",
    "StoreAppDetailsMap",
    "StoreAppDetailsResponse",
    "StoreRequirements",
    "VanityUrlResponse",
    "decode",
    "int_or_zero",
    "object_or_absent",
]
