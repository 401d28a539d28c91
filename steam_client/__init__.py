"""
Async client for the Steam API gateway.
"""

from .client import SteamApiClient
from .vanity import extract_vanity_token

__all__ = [
    "SteamApiClient",
    "extract_vanity_token",
]
