"""Library root and library sections."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, ClassVar, Mapping
from urllib.parse import urlencode

from .base import PlexObject, build_item, build_item_or_none, register_object
from .exceptions import NotFound
from .materializer import fetch_item, fetch_items, find_items, select_elements
from .utils import search_type, to_datetime

logger = logging.getLogger(__name__)

LIBRARY_KEY = "/library"


class Library(PlexObject):
    """Entry point for browsing library sections."""

    title1: str | None
    title2: str | None

    async def sections(self) -> list["LibrarySection"]:
        """Return every library section, built as its section type."""

        response = await self._server.query("/library/sections")
        sections: list[LibrarySection] = []
        for elem in select_elements(response, LibrarySection):
            section = build_item(self._server, elem, parent=self, tag=LibrarySection.TAG)
            sections.append(section)  # type: ignore[arg-type]
        return sections

    async def section(self, title: str) -> "LibrarySection":
        """Return the section with the given title."""

        matches = find_items(await self.sections(), {"title": title})
        if not matches:
            raise NotFound(f"Invalid library section: {title}")
        return matches[0]

    async def section_by_id(self, section_id: int | str | None) -> "LibrarySection":
        matches = find_items(await self.sections(), {"key": str(section_id)})
        if not matches:
            raise NotFound(f"Invalid library section id: {section_id}")
        return matches[0]

    async def all(self, **filters: Any) -> list[PlexObject]:
        """Return every item in every section."""

        items: list[PlexObject] = []
        for section in await self.sections():
            items.extend(await section.all(**filters))
        return items

    async def search(
        self,
        title: str | None = None,
        libtype: str | None = None,
        **filters: Any,
    ) -> list[PlexObject]:
        """Search across all sections, filtering the results client-side."""

        params: dict[str, Any] = {}
        if title:
            params["title"] = title
        if libtype:
            params["type"] = search_type(libtype)
        key = "/library/all"
        if params:
            key = f"{key}?{urlencode(params)}"
        return await _build_items(self, key, filters)

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        if not self.key:
            self.key = LIBRARY_KEY
        self.title1 = data.get("title1")
        self.title2 = data.get("title2")


@register_object
class LibrarySection(PlexObject):
    """A single library section (Movies, TV Shows, Music...)."""

    TAG = "Directory"
    # Search type used when the caller does not pass ``libtype``.
    DEFAULT_LIBTYPE: ClassVar[str | None] = None

    uuid: str | None
    title: str | None
    type: str | None
    agent: str | None
    scanner: str | None
    language: str | None
    locations: list[str]
    updated_at: datetime | None
    scanned_at: datetime | None

    async def all(self, libtype: str | None = None, **filters: Any) -> list[PlexObject]:
        """Return every item in this section matching ``filters``."""

        resolved = libtype or self.DEFAULT_LIBTYPE
        key = f"/library/sections/{self.key}/all"
        if resolved:
            key = f"{key}?{urlencode({'type': search_type(resolved)})}"
        return await _build_items(self, key, filters)

    async def search(
        self,
        title: str | None = None,
        sort: str | None = None,
        limit: int | None = None,
        libtype: str | None = None,
        unwatched: bool | None = None,
        **filters: Any,
    ) -> list[PlexObject]:
        """Search this section.

        ``title``, ``sort``, ``limit``, ``libtype`` and ``unwatched`` are sent to
        the server; any remaining ``field__operator`` filters are applied to
        the returned payloads before objects are built.
        """

        params: dict[str, Any] = {}
        resolved = libtype or self.DEFAULT_LIBTYPE
        if resolved:
            params["type"] = search_type(resolved)
        if title:
            params["title"] = title
        if sort:
            params["sort"] = sort
        if unwatched:
            params["unwatched"] = 1
        if limit is not None:
            params["X-Plex-Container-Start"] = 0
            params["X-Plex-Container-Size"] = limit
        key = f"/library/sections/{self.key}/all"
        if params:
            key = f"{key}?{urlencode(params)}"
        return await _build_items(self, key, filters)

    async def get(self, title: str) -> PlexObject:
        """Return the item whose title matches ``title`` (case-insensitive)."""

        key = f"/library/sections/{self.key}/all?{urlencode({'title': title})}"
        data = await fetch_item(self._server, key, {"title__iexact": title})
        return build_item(self._server, data, parent=self)

    async def refresh(self) -> None:
        await self._server.query(f"/library/sections/{self.key}/refresh")

    async def analyze(self) -> None:
        await self._server.query(f"/library/sections/{self.key}/analyze", "put")

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        self.uuid = data.get("uuid")
        self.title = data.get("title")
        self.type = data.get("type")
        self.agent = data.get("agent")
        self.scanner = data.get("scanner")
        self.language = data.get("language")
        self.locations = [
            location.get("path")
            for location in data.get("Location") or ()
            if location.get("path")
        ]
        self.updated_at = to_datetime(data.get("updatedAt"))
        self.scanned_at = to_datetime(data.get("scannedAt"))


@register_object
class MovieSection(LibrarySection):
    TYPE = "movie"
    DEFAULT_LIBTYPE = "movie"


@register_object
class ShowSection(LibrarySection):
    TYPE = "show"
    DEFAULT_LIBTYPE = "show"


@register_object
class MusicSection(LibrarySection):
    TYPE = "artist"
    DEFAULT_LIBTYPE = "artist"


@register_object
class PhotoSection(LibrarySection):
    TYPE = "photo"
    DEFAULT_LIBTYPE = "photoalbum"


async def _build_items(
    parent: PlexObject, key: str, filters: Mapping[str, Any] | None
) -> list[PlexObject]:
    items: list[PlexObject] = []
    for elem in await fetch_items(parent.server, key, filters):
        item = build_item_or_none(parent.server, elem, parent=parent)
        if item is not None:
            items.append(item)
    logger.debug("Built %d items from %s", len(items), key)
    return items
