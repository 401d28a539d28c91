"""
Adapters package for the Gateway Service.

Contains the Steam-facing pieces:

- upstream_request: URL shapes and the request translator
- steam_api_client: the HTTP transport that issues translated requests
  and decodes replies, mapping failures to shared errors

Keep adapters thin and side-effect free outside of explicit calls.
"""

from .steam_api_client import SteamApiService
from .upstream_request import (
    InterfaceRequest,
    RequestTranslator,
    StoreRequest,
    UpstreamRequest,
    UpstreamTargets,
    encode_query,
)

__all__ = [
    "InterfaceRequest",
    "RequestTranslator",
    "SteamApiService",
    "StoreRequest",
    "UpstreamRequest",
    "UpstreamTargets",
    "encode_query",
]
