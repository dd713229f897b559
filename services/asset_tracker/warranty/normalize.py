"""
Asset and user shape normalization.

Asset rows reach the warranty integration in several shapes: related
records may be joined objects, bare strings or missing entirely, and a few
optional fields exist under two spellings. These helpers reduce every such
field to a plain string (or None) before a registration request is built.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any, Union

from pydantic import BaseModel


# {"name": ...} | "name" | None
NameRef = Union[Mapping[str, Any], str, None]

DEFAULT_USER_NAME = "User"

_FLOAT_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def as_mapping(record: Any) -> Mapping[str, Any]:
    """Return a read-only mapping view of a row, profile or pydantic model."""
    if record is None:
        return {}
    if isinstance(record, BaseModel):
        return record.model_dump()
    if isinstance(record, Mapping):
        return record
    raise TypeError(f"Expected a mapping or model, got {type(record).__name__}")


def resolve_name_ref(ref: NameRef) -> str:
    """
    Resolve a name reference to a plain string.

    Args:
        ref: A related record carrying ``name``, a bare string, or nothing.

    Returns:
        The name, or an empty string when the reference is absent.
    """
    if isinstance(ref, Mapping):
        name = ref.get("name")
        return name if isinstance(name, str) else ""
    if isinstance(ref, str):
        return ref
    return ""


def resolve_related_name(asset: Mapping[str, Any], field: str, joined_field: str) -> str:
    """
    Resolve a related record name from an asset row.

    The singular field wins; the joined relation (``categories``,
    ``departments``) is consulted only when the singular one yields nothing.
    """
    return resolve_name_ref(asset.get(field)) or resolve_name_ref(asset.get(joined_field))


def resolve_creator_name(asset: Mapping[str, Any]) -> str:
    """
    Resolve the display name of the user who created an asset.

    Priority: a joined ``profiles`` relation (``full_name`` then ``name``),
    then ``created_by`` as an object (``name`` then ``full_name``), then
    ``created_by`` as a bare string.
    """
    profiles = asset.get("profiles")
    if isinstance(profiles, Mapping):
        return profiles.get("full_name") or profiles.get("name") or ""

    created_by = asset.get("created_by")
    if isinstance(created_by, Mapping):
        return created_by.get("name") or created_by.get("full_name") or ""
    if isinstance(created_by, str):
        return created_by
    return ""


def resolve_user_display_name(user: Mapping[str, Any]) -> str:
    """Resolve the acting user's display name, falling back to ``"User"``."""
    if user.get("name"):
        return user["name"]
    if user.get("full_name"):
        return user["full_name"]

    first_name = user.get("firstName")
    last_name = user.get("lastName")
    if first_name and last_name:
        return f"{first_name} {last_name}"
    return DEFAULT_USER_NAME


def first_present(record: Mapping[str, Any], *keys: str) -> Any | None:
    """Return the first truthy value among ``keys``, or None."""
    for key in keys:
        value = record.get(key)
        if value:
            return value
    return None


def parse_cost(value: Any) -> float:
    """
    Parse a cost to a float.

    Numeric strings are parsed by their leading numeric prefix
    (``"12.50 USD"`` gives 12.5). Anything unparseable yields NaN; the remote
    service decides whether that is acceptable.
    """
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    if value is None:
        return math.nan

    text = str(value).strip()
    try:
        return float(text)
    except ValueError:
        pass

    match = _FLOAT_PREFIX.match(text)
    if match is None:
        return math.nan
    return float(match.group(0))
