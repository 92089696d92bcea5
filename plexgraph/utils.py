"""Utility helpers shared by the plexgraph object model."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping


SEARCHTYPES: dict[str, int] = {
    "movie": 1,
    "show": 2,
    "season": 3,
    "episode": 4,
    "trailer": 5,
    "comic": 6,
    "person": 7,
    "artist": 8,
    "album": 9,
    "track": 10,
    "picture": 11,
    "clip": 12,
    "photo": 13,
    "photoalbum": 14,
    "playlist": 15,
    "playlistFolder": 16,
    "collection": 18,
    "userPlaylistItem": 1001,
}


def search_type(libtype: str | int | None) -> int | None:
    """Return the numeric search type for a library type name."""

    if libtype is None:
        return None
    if isinstance(libtype, int):
        return libtype
    text = str(libtype).strip()
    if text.isdigit():
        return int(text)
    try:
        return SEARCHTYPES[text]
    except KeyError:
        raise ValueError(f"Unknown libtype: {libtype}") from None


def unwrap_container(data: Any) -> Any:
    """Return the inner ``MediaContainer`` payload when the envelope carries one."""

    if isinstance(data, Mapping) and "MediaContainer" in data:
        return data["MediaContainer"]
    return data


def first_metadata(data: Any) -> Mapping[str, Any]:
    """Return the first ``Metadata`` entry of a detail payload, or the payload itself."""

    if not isinstance(data, Mapping):
        return {}
    items = data.get("Metadata")
    if isinstance(items, list) and items and isinstance(items[0], Mapping):
        return items[0]
    if isinstance(items, Mapping):
        return items
    return data


def cast_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        try:
            return int(float(value))
        except (TypeError, ValueError):
            return None


def cast_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def cast_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes"}
    return bool(value)


def to_datetime(value: Any) -> datetime | None:
    """Convert an epoch timestamp or ISO date string into a ``datetime``."""

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    timestamp = cast_int(value)
    if timestamp is not None:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def ltrim(value: str, chars: str = "/") -> str:
    return value.lstrip(chars)


def tag_helper(
    tag: str,
    items: list[str],
    *,
    locked: bool = True,
    remove: bool = False,
) -> dict[str, str | int]:
    """Build the edit arguments used to add or remove tags on an item."""

    data: dict[str, str | int] = {}
    if remove:
        data[f"{tag}[].tag.tag-"] = ",".join(items)
    else:
        for index, item in enumerate(items):
            data[f"{tag}[{index}].tag.tag"] = item
    data[f"{tag}.locked"] = 1 if locked else 0
    return data
