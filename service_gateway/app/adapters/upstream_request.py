"""
Steam request translation.

Steam exposes two URL shapes. The versioned Web API addresses an operation
as ``{base}/{interface}/{method}/{version}/`` and needs the shared key plus
``format=json`` on every call. The store surface is a flat
``{store_base}/{endpoint}`` with no credential. Each shape is its own
request class that knows how to render itself, so supporting another
shape means adding a class.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote

QueryParams = Tuple[Tuple[str, str], ...]
ParamsInput = Union[Mapping[str, Any], Iterable[Tuple[str, Any]], None]


def format_param_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def normalize_params(params: ParamsInput) -> QueryParams:
    """Freeze caller parameters in their given order, dropping ``None`` values."""
    if params is None:
        return ()
    items = params.items() if isinstance(params, Mapping) else params
    return tuple(
        (str(key), format_param_value(value))
        for key, value in items
        if value is not None
    )


def encode_query(pairs: Iterable[Tuple[str, str]]) -> str:
    """Percent-encode each key and value on its own and join with ``&``."""
    return "&".join(f"{quote(key, safe='')}={quote(value, safe='')}" for key, value in pairs)


@dataclass(frozen=True)
class UpstreamTargets:
    """Injected upstream locations and the shared Steam credential."""

    base_url: str
    store_base_url: str
    api_key: str = ""

    def __post_init__(self):
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        object.__setattr__(self, "store_base_url", self.store_base_url.rstrip("/"))


class UpstreamRequest(ABC):
    """A normalized call against one of Steam's URL shapes."""

    surface: str = "upstream"

    @abstractmethod
    def build_url(self, targets: UpstreamTargets) -> str:
        """Render the full request URL."""

    @property
    @abstractmethod
    def operation(self) -> str:
        """Short operation name for logs and metrics."""


@dataclass(frozen=True)
class InterfaceRequest(UpstreamRequest):
    """Versioned Web API call, e.g. ``ISteamUser/GetFriendList/v0001``."""

    interface: str
    method: str
    version: str
    params: QueryParams = field(default=())

    surface = "web_api"

    def __post_init__(self):
        object.__setattr__(self, "params", normalize_params(self.params))

    @property
    def operation(self) -> str:
        return f"{self.interface}/{self.method}/{self.version}"

    def build_url(self, targets: UpstreamTargets) -> str:
        pairs: List[Tuple[str, str]] = [("key", targets.api_key), ("format", "json")]
        pairs.extend(self.params)
        return f"{targets.base_url}/{self.operation}/?{encode_query(pairs)}"


@dataclass(frozen=True)
class StoreRequest(UpstreamRequest):
    """Flat store call, e.g. ``appdetails?appids=440``."""

    endpoint: str
    params: QueryParams = field(default=())

    surface = "store"

    def __post_init__(self):
        object.__setattr__(self, "endpoint", self.endpoint.lstrip("/"))
        object.__setattr__(self, "params", normalize_params(self.params))

    @property
    def operation(self) -> str:
        return self.endpoint

    def build_url(self, targets: UpstreamTargets) -> str:
        url = f"{targets.store_base_url}/{self.endpoint}"
        if not self.params:
            return url
        return f"{url}?{encode_query(self.params)}"


class RequestTranslator:
    """Turns normalized requests into upstream URLs."""

    def __init__(self, targets: UpstreamTargets):
        self.targets = targets

    def build(self, request: UpstreamRequest) -> str:
        return request.build_url(self.targets)

    def redacted(self, request: UpstreamRequest) -> str:
        """URL as it may appear in logs, with the shared credential hidden."""
        if not self.targets.api_key:
            return self.build(request)
        hidden = UpstreamTargets(self.targets.base_url, self.targets.store_base_url, "***")
        return request.build_url(hidden)

    @classmethod
    def for_base_url(cls, base_url: str, api_key: Optional[str] = None) -> "RequestTranslator":
        """Translator whose two surfaces share a single base URL."""
        return cls(UpstreamTargets(base_url, base_url, api_key or ""))
