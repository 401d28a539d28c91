"""
Response envelopes for the Steam Web API operations the gateway exposes.

Steam wraps payloads under operation-specific keys (``response``,
``friendslist``, ``appnews`` and so on); each envelope mirrors that key so
a decoded model serializes back to the same wire shape.
"""

from typing import Generic, List, Optional, TypeVar

from pydantic import Field

from .decoding import IntOrString, SteamModel
from .game import Achievement, AchievementPercentage, GameNews, SteamApp
from .player import Friend, OwnedGame, PlayerBans, PlayerSummary, RecentlyPlayedGame

T = TypeVar("T")


class SteamResponse(SteamModel, Generic[T]):
    """Generic ``{"response": {...}}`` wrapper."""

    response: Optional[T] = None


class PlayerSummariesResponse(SteamModel):
    players: List[PlayerSummary] = Field(default_factory=list)


class FriendList(SteamModel):
    friends: List[Friend] = Field(default_factory=list)


class FriendListResponse(SteamModel):
    """GetFriendList result; private profiles yield an empty list."""

    friendslist: FriendList = Field(default_factory=FriendList)


class PlayerBansResponse(SteamModel):
    """GetPlayerBans result; Steam sends it without a ``response`` wrapper."""

    players: List[PlayerBans] = Field(default_factory=list)


class OwnedGamesResponse(SteamModel):
    game_count: IntOrString = 0
    games: List[OwnedGame] = Field(default_factory=list)


class RecentlyPlayedGamesResponse(SteamModel):
    total_count: IntOrString = 0
    games: List[RecentlyPlayedGame] = Field(default_factory=list)


class AppNews(SteamModel):
    appid: IntOrString = 0
    newsitems: List[GameNews] = Field(default_factory=list)
    count: IntOrString = 0


class GameNewsResponse(SteamModel):
    appnews: AppNews = Field(default_factory=AppNews)


class AchievementPercentages(SteamModel):
    achievements: List[AchievementPercentage] = Field(default_factory=list)


class AchievementPercentagesResponse(SteamModel):
    achievementpercentages: AchievementPercentages = Field(default_factory=AchievementPercentages)


class PlayerStats(SteamModel):
    steam_id: str = Field("", alias="steamid")
    game_name: str = Field("", alias="gamename")
    achievements: List[Achievement] = Field(default_factory=list)
    success: bool = False
    error: str = ""


class PlayerAchievementsResponse(SteamModel):
    playerstats: PlayerStats = Field(default_factory=PlayerStats)


class AppList(SteamModel):
    apps: List[SteamApp] = Field(default_factory=list)


class AppListResponse(SteamModel):
    applist: AppList = Field(default_factory=AppList)


class VanityUrlResponse(SteamModel):
    """ResolveVanityURL result; ``success`` is 1 on a match, 42 otherwise."""

    steam_id: str = Field("", alias="steamid")
    success: IntOrString = 0
    message: str = ""
