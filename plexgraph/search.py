"""Hubs returned by search and related-item endpoints."""

from __future__ import annotations

from typing import Any, Mapping

from .base import PlexObject, build_item_or_none, register_object
from .materializer import select_elements
from .utils import cast_bool, cast_int


@register_object
class Hub(PlexObject):
    """A titled group of results, e.g. "Movies" in a search response."""

    TAG = "Hub"

    hub_identifier: str | None
    hub_key: str | None
    title: str | None
    type: str | None
    context: str | None
    size: int | None
    more: bool
    items: list[PlexObject]

    def __len__(self) -> int:
        return len(self.items)

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        self.hub_identifier = data.get("hubIdentifier")
        self.hub_key = data.get("hubKey")
        self.title = data.get("title")
        self.type = data.get("type")
        self.context = data.get("context")
        self.size = cast_int(data.get("size"))
        self.more = cast_bool(data.get("more"))
        self.items = self._build_items(data)

    def _build_items(self, data: Mapping[str, Any]) -> list[PlexObject]:
        items: list[PlexObject] = []
        for elem in data.get("Metadata") or ():
            item = build_item_or_none(self._server, elem, parent=self)
            if item is not None:
                items.append(item)
        return items

    async def fetch_all(self) -> list[PlexObject]:
        """Load every item of the hub when the search response was truncated."""

        if not self.more or not self.key:
            return self.items
        response = await self._server.query(self.key)
        items: list[PlexObject] = []
        for elem in select_elements(response):
            item = build_item_or_none(self._server, elem, parent=self)
            if item is not None:
                items.append(item)
        self.items = items
        self.more = False
        return items
