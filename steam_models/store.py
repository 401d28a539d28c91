"""
Steam Store ``appdetails`` entities.

The store surface is the least consistent part of Steam: platform
requirements arrive as ``[]`` when an app does not ship on that platform,
``required_age`` arrives as either ``17`` or ``"17"``, and whole sections
may be ``null``.
"""

from typing import Dict, List

from pydantic import Field

from .decoding import IntOrString, ObjectOrEmpty, SteamModel


class StoreRequirements(SteamModel):
    minimum: str = ""
    recommended: str = ""


class StoreSubscription(SteamModel):
    packageid: IntOrString = 0
    percent_savings_text: str = ""
    percent_savings: IntOrString = 0
    option_text: str = ""
    option_description: str = ""
    can_get_free_license: str = ""
    is_free_license: bool = False
    price_in_cents_with_discount: IntOrString = 0


class StorePackageGroup(SteamModel):
    name: str = ""
    title: str = ""
    description: str = ""
    selection_text: str = ""
    save_text: str = ""
    display_type: IntOrString = 0
    is_recurring_subscription: str = ""
    subs: List[StoreSubscription] = Field(default_factory=list)


class StorePlatforms(SteamModel):
    windows: bool = False
    mac: bool = False
    linux: bool = False


class StoreMetacritic(SteamModel):
    score: IntOrString = 0
    url: str = ""


class StoreCategory(SteamModel):
    id: IntOrString = 0
    description: str = ""


class StoreGenre(SteamModel):
    id: str = ""
    description: str = ""


class StoreScreenshot(SteamModel):
    id: IntOrString = 0
    path_thumbnail: str = ""
    path_full: str = ""


class StoreMovieFormats(SteamModel):
    format_480: str = Field("", alias="480")
    max: str = ""


class StoreMovie(SteamModel):
    id: IntOrString = 0
    name: str = ""
    thumbnail: str = ""
    webm: ObjectOrEmpty[StoreMovieFormats] = None
    mp4: ObjectOrEmpty[StoreMovieFormats] = None
    highlight: bool = False


class StoreRecommendations(SteamModel):
    total: IntOrString = 0


class StoreAchievement(SteamModel):
    name: str = ""
    path: str = ""


class StoreAchievements(SteamModel):
    total: IntOrString = 0
    highlighted: List[StoreAchievement] = Field(default_factory=list)


class StoreReleaseDate(SteamModel):
    coming_soon: bool = False
    date: str = ""


class StoreSupportInfo(SteamModel):
    url: str = ""
    email: str = ""


class StoreContentDescriptors(SteamModel):
    ids: List[IntOrString] = Field(default_factory=list)
    notes: str = ""


class StoreRating(SteamModel):
    rating_generated: str = ""
    rating: str = ""
    required_age: str = ""
    banned: str = ""
    use_age_gate: str = ""
    descriptors: str = ""


class StoreAppDetails(SteamModel):
    """Store listing for one app."""

    type: str = ""
    name: str = ""
    steam_appid: IntOrString = 0
    required_age: IntOrString = 0
    is_free: bool = False
    controller_support: str = ""
    dlc: List[IntOrString] = Field(default_factory=list)
    detailed_description: str = ""
    about_the_game: str = ""
    short_description: str = ""
    supported_languages: str = ""
    reviews: str = ""
    header_image: str = ""
    capsule_image: str = ""
    capsule_imagev5: str = ""
    website: str = ""
    pc_requirements: ObjectOrEmpty[StoreRequirements] = None
    mac_requirements: ObjectOrEmpty[StoreRequirements] = None
    linux_requirements: ObjectOrEmpty[StoreRequirements] = None
    legal_notice: str = ""
    developers: List[str] = Field(default_factory=list)
    publishers: List[str] = Field(default_factory=list)
    packages: List[IntOrString] = Field(default_factory=list)
    package_groups: List[StorePackageGroup] = Field(default_factory=list)
    platforms: ObjectOrEmpty[StorePlatforms] = None
    metacritic: ObjectOrEmpty[StoreMetacritic] = None
    categories: List[StoreCategory] = Field(default_factory=list)
    genres: List[StoreGenre] = Field(default_factory=list)
    screenshots: List[StoreScreenshot] = Field(default_factory=list)
    movies: List[StoreMovie] = Field(default_factory=list)
    recommendations: ObjectOrEmpty[StoreRecommendations] = None
    achievements: ObjectOrEmpty[StoreAchievements] = None
    release_date: ObjectOrEmpty[StoreReleaseDate] = None
    support_info: ObjectOrEmpty[StoreSupportInfo] = None
    background: str = ""
    background_raw: str = ""
    content_descriptors: ObjectOrEmpty[StoreContentDescriptors] = None
    ratings: ObjectOrEmpty[Dict[str, StoreRating]] = None


class StoreAppDetailsResponse(SteamModel):
    """Per-app entry of an ``appdetails`` reply, keyed by app id."""

    success: bool = False
    data: ObjectOrEmpty[StoreAppDetails] = None


StoreAppDetailsMap = Dict[str, StoreAppDetailsResponse]
