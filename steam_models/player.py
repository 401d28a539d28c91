"""
Player-centric Steam entities.
"""

from datetime import datetime, timezone
from enum import IntEnum
from typing import Optional

from pydantic import Field

from .decoding import IntOrString, SteamModel


class PlayerStatus(IntEnum):
    """Steam persona state."""

    OFFLINE = 0
    ONLINE = 1
    BUSY = 2
    AWAY = 3
    SNOOZE = 4
    LOOKING_TO_TRADE = 5
    LOOKING_TO_PLAY = 6


def _from_unix(value: int) -> Optional[datetime]:
    if value <= 0:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


class PlayerSummary(SteamModel):
    """Basic profile information for a Steam user."""

    steam_id: str = Field("", alias="steamid")
    persona_name: str = Field("", alias="personaname")
    profile_url: str = Field("", alias="profileurl")
    avatar: str = ""
    avatar_medium: str = Field("", alias="avatarmedium")
    avatar_full: str = Field("", alias="avatarfull")
    persona_state: IntOrString = Field(0, alias="personastate")
    community_visibility_state: IntOrString = Field(0, alias="communityvisibilitystate")
    profile_state: IntOrString = Field(0, alias="profilestate")
    comment_permission: IntOrString = Field(0, alias="commentpermission")
    real_name: str = Field("", alias="realname")
    primary_clan_id: str = Field("", alias="primaryclanid")
    last_logoff: IntOrString = Field(0, alias="lastlogoff")
    time_created: IntOrString = Field(0, alias="timecreated")
    game_id: str = Field("", alias="gameid")
    game_extra_info: str = Field("", alias="gameextrainfo")
    game_server_ip: str = Field("", alias="gameserverip")
    loc_country_code: str = Field("", alias="loccountrycode")
    loc_state_code: str = Field("", alias="locstatecode")
    loc_city_id: IntOrString = Field(0, alias="loccityid")

    @property
    def status(self) -> PlayerStatus:
        try:
            return PlayerStatus(self.persona_state)
        except ValueError:
            return PlayerStatus.OFFLINE

    @property
    def last_logoff_at(self) -> Optional[datetime]:
        return _from_unix(self.last_logoff)

    @property
    def created_at(self) -> Optional[datetime]:
        return _from_unix(self.time_created)


class Friend(SteamModel):
    """Entry of a user's friend list."""

    steam_id: str = Field("", alias="steamid")
    relationship: str = ""
    friend_since: IntOrString = 0


class PlayerBans(SteamModel):
    """Ban information for a Steam user.

    Steam sends these fields in PascalCase (``VACBanned``); matching is
    case-insensitive so the lowercase aliases still apply.
    """

    steam_id: str = Field("", alias="steamid")
    community_banned: bool = Field(False, alias="communitybanned")
    vac_banned: bool = Field(False, alias="vacbanned")
    number_of_vac_bans: IntOrString = Field(0, alias="numberofvacbans")
    days_since_last_ban: IntOrString = Field(0, alias="dayssincelastban")
    number_of_game_bans: IntOrString = Field(0, alias="numberofgamebans")
    economy_ban: str = Field("", alias="economyban")


class OwnedGame(SteamModel):
    """A game in a user's library with playtime."""

    appid: IntOrString = 0
    name: str = ""
    playtime_2weeks: IntOrString = 0
    playtime_forever: IntOrString = 0
    img_icon_url: str = ""
    img_logo_url: str = ""
    has_community_visible_stats: bool = False
    has_leaderboards: bool = False
    rtime_last_played: IntOrString = 0


class RecentlyPlayedGame(SteamModel):
    """A game played in the last two weeks."""

    appid: IntOrString = 0
    name: str = ""
    playtime_2weeks: IntOrString = 0
    playtime_forever: IntOrString = 0
    img_icon_url: str = ""
    img_logo_url: str = ""
