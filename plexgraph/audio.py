"""Artists, albums and tracks."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping
from urllib.parse import urlencode

from .base import PartialPlexObject, register_object
from .exceptions import BadRequest, Unsupported
from .materializer import fetch_item, fetch_items
from .media import Collection, Genre, Guid, Label, Media, Similar
from .utils import cast_float, cast_int, to_datetime


class Audio(PartialPlexObject):
    """Base class for every audio item."""

    TAG = "Metadata"

    summary: str | None
    thumb: str | None
    art: str | None
    guid: str | None
    index: int | None
    distance: float | None
    title_sort: str | None
    user_rating: float | None
    view_count: int
    last_viewed_at: datetime | None
    last_rated_at: datetime | None
    library_section_key: str | None
    library_section_title: str | None
    music_analysis_version: int | None
    collections: list[Collection]
    genres: list[Genre]
    guids: list[Guid]
    labels: list[Label]

    @property
    def has_sonic_analysis(self) -> bool:
        return self.music_analysis_version == 1

    async def sonically_similar(
        self,
        limit: int | None = None,
        max_distance: float | None = None,
        **filters: Any,
    ) -> list["Audio"]:
        """Return items of the same kind that sound like this one."""

        if not self.key:
            raise Unsupported("Cannot fetch similar items for an object without a key")
        params: dict[str, Any] = {}
        if limit is not None:
            params["limit"] = limit
        if max_distance is not None:
            params["maxDistance"] = max_distance
        key = f"{self.key}/nearest"
        if params:
            key = f"{key}?{urlencode(params)}"
        return await fetch_items(self._server, key, filters, type(self), self)

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        self.summary = data.get("summary")
        self.thumb = data.get("thumb")
        self.art = data.get("art")
        self.guid = data.get("guid")
        self.index = cast_int(data.get("index"))
        self.distance = cast_float(data.get("distance"))
        self.title_sort = data.get("titleSort") or self.title
        self.user_rating = cast_float(data.get("userRating"))
        self.view_count = cast_int(data.get("viewCount")) or 0
        self.last_viewed_at = to_datetime(data.get("lastViewedAt"))
        self.last_rated_at = to_datetime(data.get("lastRatedAt"))
        self.library_section_key = data.get("librarySectionKey")
        self.library_section_title = data.get("librarySectionTitle")
        self.music_analysis_version = cast_int(data.get("musicAnalysisVersion"))
        self.collections = self._children(data, Collection)
        self.genres = self._children(data, Genre)
        self.guids = self._children(data, Guid)
        self.labels = self._children(data, Label)


@register_object
class Artist(Audio):
    """A music artist."""

    TYPE = "artist"

    country: str | None
    similar: list[Similar]

    async def albums(self, **filters: Any) -> list["Album"]:
        key = f"/library/metadata/{self.rating_key}/children"
        return await fetch_items(self._server, key, filters, Album, self)

    async def album(self, title: str) -> "Album":
        key = f"/library/metadata/{self.rating_key}/children"
        return await fetch_item(self._server, key, {"title__iexact": title}, Album, self)

    async def tracks(self, **filters: Any) -> list["Track"]:
        key = f"/library/metadata/{self.rating_key}/allLeaves"
        return await fetch_items(self._server, key, filters, Track, self)

    async def track(
        self,
        title: str | None = None,
        album: str | None = None,
        track: int | None = None,
    ) -> "Track":
        """Return a track by title, or by album title and track number."""

        key = f"/library/metadata/{self.rating_key}/allLeaves"
        if title is not None:
            return await fetch_item(self._server, key, {"title__iexact": title}, Track, self)
        if album is not None and track is not None:
            return await fetch_item(
                self._server,
                key,
                {"parentTitle__iexact": album, "index": track},
                Track,
                self,
            )
        raise BadRequest("Missing argument: title or album and track are required")

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        self.key = self.key.replace("/children", "")
        self.country = data.get("country")
        self.similar = self._children(data, Similar)


@register_object
class Album(Audio):
    """A music album."""

    TYPE = "album"

    leaf_count: int | None
    viewed_leaf_count: int | None
    parent_key: str | None
    parent_rating_key: str | None
    parent_title: str | None
    studio: str | None
    originally_available_at: datetime | None

    async def tracks(self, **filters: Any) -> list["Track"]:
        key = f"/library/metadata/{self.rating_key}/children"
        return await fetch_items(self._server, key, filters, Track, self)

    async def track(self, title: str | None = None, track: int | None = None) -> "Track":
        key = f"/library/metadata/{self.rating_key}/children"
        if title is not None:
            return await fetch_item(self._server, key, {"title__iexact": title}, Track, self)
        if track is not None:
            return await fetch_item(self._server, key, {"index": track}, Track, self)
        raise BadRequest("Missing argument: title or track is required")

    async def artist(self) -> Artist:
        if not self.parent_key:
            raise BadRequest("Album has no parent key")
        return await fetch_item(self._server, self.parent_key, cls=Artist, parent=self)

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        self.key = self.key.replace("/children", "")
        self.leaf_count = cast_int(data.get("leafCount"))
        self.viewed_leaf_count = cast_int(data.get("viewedLeafCount"))
        self.parent_key = data.get("parentKey")
        self.parent_rating_key = data.get("parentRatingKey")
        self.parent_title = data.get("parentTitle")
        self.studio = data.get("studio")
        self.originally_available_at = to_datetime(data.get("originallyAvailableAt"))


@register_object
class Track(Audio):
    """A single music track."""

    TYPE = "track"

    duration: int | None
    parent_index: int | None
    parent_key: str | None
    parent_title: str | None
    grandparent_key: str | None
    grandparent_title: str | None
    original_title: str | None
    media: list[Media]

    async def album(self) -> Album:
        if not self.parent_key:
            raise BadRequest("Track has no parent key")
        return await fetch_item(self._server, self.parent_key, cls=Album, parent=self)

    async def artist(self) -> Artist:
        if not self.grandparent_key:
            raise BadRequest("Track has no grandparent key")
        return await fetch_item(self._server, self.grandparent_key, cls=Artist, parent=self)

    async def locations(self) -> list[str]:
        """Return the file paths of this track, loading full details if needed."""

        await self.ensure_full_object()
        return [part.file for media in self.media for part in media.parts if part.file]

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        self.duration = cast_int(data.get("duration"))
        self.parent_index = cast_int(data.get("parentIndex"))
        self.parent_key = data.get("parentKey")
        self.parent_title = data.get("parentTitle")
        self.grandparent_key = data.get("grandparentKey")
        self.grandparent_title = data.get("grandparentTitle")
        self.original_title = data.get("originalTitle")
        self.media = self._children(data, Media)
