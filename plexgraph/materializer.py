"""Select, filter and construct objects from Plex API responses."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Mapping, TypeVar, overload

from .exceptions import NotFound
from .filters import FilterRecord, check_attrs
from .utils import unwrap_container

if TYPE_CHECKING:
    from .base import PlexObject

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="PlexObject")

DEFAULT_CONTAINER_KEY = "Metadata"


def metadata_key(ekey: str | int) -> str:
    """Translate a numeric rating key into its ``/library/metadata`` path."""

    if isinstance(ekey, int) and not isinstance(ekey, bool):
        return f"/library/metadata/{ekey}"
    return ekey


def select_elements(response: Any, cls: type[PlexObject] | None = None) -> list[Any]:
    """Return the sub-collection of ``response`` holding payloads for ``cls``.

    The collection named by ``cls.TAG`` is used when present, falling back to
    ``Metadata``; a missing collection is an empty list.
    """

    container = unwrap_container(response)
    if not isinstance(container, Mapping):
        return []

    elems: Any = None
    tag = getattr(cls, "TAG", None)
    if tag:
        elems = container.get(tag)
    if elems is None:
        elems = container.get(DEFAULT_CONTAINER_KEY)
    if elems is None:
        return []
    if isinstance(elems, Mapping):
        return [elems]
    return list(elems)


@overload
async def fetch_item(
    server: Any,
    ekey: str | int,
    filters: FilterRecord | None = ...,
    cls: None = ...,
    parent: Any = ...,
) -> dict[str, Any]: ...


@overload
async def fetch_item(
    server: Any,
    ekey: str | int,
    filters: FilterRecord | None = ...,
    cls: type[T] = ...,
    parent: Any = ...,
) -> T: ...


async def fetch_item(
    server: Any,
    ekey: str | int,
    filters: FilterRecord | None = None,
    cls: type[PlexObject] | None = None,
    parent: Any = None,
) -> Any:
    """Load ``ekey`` and return the first item matching ``filters``.

    A numeric ``ekey`` is treated as a rating key. When ``cls`` is given the
    match is built as that class, otherwise the raw payload is returned.

    Raises:
        NotFound: when no element passes the filters.
    """

    key = metadata_key(ekey)
    response = await server.query(key)
    for elem in select_elements(response, cls):
        if check_attrs(elem, filters):
            if cls is None:
                return elem
            return cls(server, elem, key, parent)

    logger.debug("No item under %s matched %s", key, dict(filters or {}))
    raise NotFound(f"Unable to find item at {key}")


async def fetch_items(
    server: Any,
    ekey: str,
    filters: FilterRecord | None = None,
    cls: type[PlexObject] | None = None,
    parent: Any = None,
) -> list[Any]:
    """Load ``ekey`` and return every item matching ``filters``, in server order."""

    response = await server.query(ekey)
    return find_items(select_elements(response, cls), filters, cls, server, parent)


def find_items(
    data: Iterable[Any] | None,
    filters: FilterRecord | None = None,
    cls: type[PlexObject] | None = None,
    server: Any = None,
    parent: Any = None,
) -> list[Any]:
    """Filter already-loaded payloads and build them as ``cls`` when given."""

    items: list[Any] = []
    for elem in data or ():
        if check_attrs(elem, filters):
            items.append(elem if cls is None else cls(server, elem, None, parent))
    return items
