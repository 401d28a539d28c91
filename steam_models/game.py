"""
Game and app entities.
"""

from pydantic import Field

from .decoding import IntOrString, SteamModel


class SteamApp(SteamModel):
    appid: IntOrString = 0
    name: str = ""


class GameNews(SteamModel):
    """A news item for an app."""

    gid: str = ""
    title: str = ""
    url: str = ""
    is_external_url: bool = False
    author: str = ""
    contents: str = ""
    feed_label: str = Field("", alias="feedlabel")
    date: IntOrString = 0
    feed_name: str = Field("", alias="feedname")
    feed_type: IntOrString = 0
    appid: IntOrString = 0


class Achievement(SteamModel):
    """A player's achievement state for one game."""

    api_name: str = Field("", alias="apiname")
    achieved: bool = False
    unlock_time: IntOrString = Field(0, alias="unlocktime")
    name: str = ""
    description: str = ""


class AchievementPercentage(SteamModel):
    """Share of all players holding an achievement."""

    name: str = ""
    percent: float = 0.0
