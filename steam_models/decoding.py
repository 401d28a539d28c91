"""
Tolerant decoding of Steam API bodies into typed models.

Steam is inconsistent about field shapes. Two rules recur often enough to be
written once and attached to fields through ``typing.Annotated``:

- ``ObjectOrEmpty[T]``: a nested object that is sometimes sent as ``[]``
  (store requirements for a platform the app does not ship on). Any
  sequence, ``null`` or scalar is treated as absent.
- ``IntOrString``: an integer that is sometimes sent as its string form
  (``required_age``). Unparseable strings become ``0``.

Every model derives from ``SteamModel``, which matches wire names
case-insensitively, ignores unknown fields, and lets missing or ``null``
fields fall back to their declared defaults.
"""

import json
from typing import Annotated, Any, Dict, Optional, Type, TypeVar, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, TypeAdapter, ValidationError, model_validator

from shared.errors import DecodeError

T = TypeVar("T")


def object_or_absent(value: Any) -> Optional[Any]:
    """Keep mappings for normal decoding; everything else means absent."""
    if isinstance(value, (dict, BaseModel)):
        return value
    return None


def int_or_zero(value: Any) -> int:
    """Accept a number or its string form; fall back to zero."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return 0


ObjectOrEmpty = Annotated[Optional[T], BeforeValidator(object_or_absent)]
IntOrString = Annotated[int, BeforeValidator(int_or_zero)]


class SteamModel(BaseModel):
    """Base for every decoded Steam entity."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _normalize_wire_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        lookup: Dict[str, str] = {}
        for name, field in cls.model_fields.items():
            lookup[name.lower()] = name
            if field.alias:
                lookup[field.alias.lower()] = field.alias

        normalized: Dict[str, Any] = {}
        for key, value in data.items():
            # null means "take the default"
            if value is None:
                continue
            target = lookup.get(str(key).lower())
            if target is not None:
                normalized[target] = value
        return normalized


_adapters: Dict[Any, TypeAdapter] = {}


def _adapter_for(target: Any) -> TypeAdapter:
    adapter = _adapters.get(target)
    if adapter is None:
        adapter = TypeAdapter(target)
        _adapters[target] = adapter
    return adapter


def decode(raw_body: Union[str, bytes], target: Type[T]) -> T:
    """Decode a raw JSON body into ``target``.

    Raises ``DecodeError`` when the body is not valid JSON, or when it is
    JSON of a shape that cannot become ``target`` at all.
    """
    try:
        payload = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(
            "Failed to decode Steam API response",
            details={"body_size": len(raw_body), "error": str(exc)}
        ) from exc

    if payload is None:
        raise DecodeError(
            "Steam API response was empty",
            details={"body_size": len(raw_body)}
        )

    try:
        return _adapter_for(target).validate_python(payload)
    except ValidationError as exc:
        raise DecodeError(
            "Steam API response has an unexpected shape",
            details={"body_size": len(raw_body), "error_count": exc.error_count()}
        ) from exc
