"""Movies, shows, seasons, episodes and clips."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping
from urllib.parse import quote_plus

from .base import PartialPlexObject, register_object
from .exceptions import BadRequest
from .materializer import fetch_item, fetch_items, find_items
from .media import (
    Chapter,
    Collection,
    Country,
    Director,
    Genre,
    Guid,
    Label,
    Marker,
    Media,
    Poster,
    Producer,
    Rating,
    Role,
    Similar,
    Writer,
)
from .search import Hub
from .utils import cast_float, cast_int, first_metadata, to_datetime, unwrap_container

_LIBRARY_IDENTIFIER = "com.plexapp.plugins.library"


class Video(PartialPlexObject):
    """Base class for every video item."""

    TAG = "Metadata"

    summary: str | None
    thumb: str | None
    art: str | None
    grandparent_art: str | None
    title_sort: str | None
    guid: str | None
    view_count: int
    view_offset: int
    last_viewed_at: datetime | None
    art_blur_hash: str | None
    thumb_blur_hash: str | None
    playlist_item_id: int | None

    @property
    def is_watched(self) -> bool:
        return self.view_count > 0

    @property
    def thumb_url(self) -> str | None:
        """Return the most specific thumbnail URL, including the auth token."""

        thumb = self.thumb or self._data.get("parentThumb") or self._data.get("grandparentThumb")
        if not thumb:
            return None
        return self._server.url(thumb, include_token=True)

    @property
    def art_url(self) -> str | None:
        art = self.art or self.grandparent_art
        if not art:
            return None
        return self._server.url(art, include_token=True)

    async def mark_watched(self) -> None:
        await self._server.query(
            f"/:/scrobble?key={self.rating_key}&identifier={_LIBRARY_IDENTIFIER}"
        )
        await self.reload()

    async def mark_unwatched(self) -> None:
        await self._server.query(
            f"/:/unscrobble?key={self.rating_key}&identifier={_LIBRARY_IDENTIFIER}"
        )
        await self.reload()

    async def rate(self, rating: float) -> None:
        await self._server.query(
            f"/:/rate?key={self.rating_key}&identifier={_LIBRARY_IDENTIFIER}&rating={rating}"
        )
        await self.reload()

    async def extras(self) -> list["Extra"]:
        """Return trailers, featurettes and other extras for this item."""

        data = await self._server.query(self.build_details_key(includeExtras=True))
        metadata = first_metadata(unwrap_container(data))
        extras = metadata.get("Extras") or {}
        return find_items(extras.get("Metadata"), cls=Extra, server=self._server, parent=self)

    async def related(self) -> list[Hub]:
        """Return hubs of items related to this one."""

        return await fetch_items(
            self._server,
            f"/library/metadata/{self.rating_key}/related",
            cls=Hub,
            parent=self,
        )

    async def posters(self) -> list[Poster]:
        return await fetch_items(
            self._server,
            f"/library/metadata/{self.rating_key}/posters",
            cls=Poster,
            parent=self,
        )

    async def upload_poster(self, url: str) -> None:
        await self._server.query(
            f"/library/metadata/{self.rating_key}/posters?url={quote_plus(url)}", "post"
        )

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        self.summary = data.get("summary")
        self.thumb = data.get("thumb")
        self.art = data.get("art")
        self.grandparent_art = data.get("grandparentArt")
        self.title_sort = data.get("titleSort") or self.title
        self.guid = data.get("guid")
        self.view_count = cast_int(data.get("viewCount")) or 0
        self.view_offset = cast_int(data.get("viewOffset")) or 0
        self.last_viewed_at = to_datetime(data.get("lastViewedAt"))
        self.art_blur_hash = data.get("artBlurHash")
        self.thumb_blur_hash = data.get("thumbBlurHash")
        self.playlist_item_id = cast_int(data.get("playlistItemID"))


class Playable(Video):
    """A video with media files, markers and chapters.

    Markers and chapters are only returned by the details endpoint, so their
    accessors upgrade a partial object before reading them.
    """

    duration: int | None
    content_rating: str | None
    chapter_source: str | None
    originally_available_at: datetime | None
    media: list[Media]
    markers: list[Marker]
    chapters: list[Chapter]

    async def locations(self) -> list[str]:
        """Return the file paths of every media part, loading full details if needed."""

        await self.ensure_full_object()
        return [part.file for media in self.media for part in media.parts if part.file]

    async def load_markers(self) -> list[Marker]:
        await self.ensure_full_object()
        return self.markers

    async def load_chapters(self) -> list[Chapter]:
        await self.ensure_full_object()
        return self.chapters

    async def has_intro_marker(self) -> bool:
        markers = await self.load_markers()
        return any(marker.type == "intro" for marker in markers)

    async def has_credits_marker(self) -> bool:
        markers = await self.load_markers()
        return any(marker.type == "credits" for marker in markers)

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        self.duration = cast_int(data.get("duration"))
        self.content_rating = data.get("contentRating")
        self.chapter_source = data.get("chapterSource")
        self.originally_available_at = to_datetime(data.get("originallyAvailableAt"))
        self.media = self._children(data, Media)
        self.markers = self._children(data, Marker)
        self.chapters = self._children(data, Chapter)


@register_object
class Movie(Playable):
    """A single movie."""

    TYPE = "movie"

    audience_rating: float | None
    audience_rating_image: str | None
    original_title: str | None
    primary_extra_key: str | None
    rating: float | None
    rating_image: str | None
    studio: str | None
    tagline: str | None
    user_rating: float | None
    collections: list[Collection]
    countries: list[Country]
    directors: list[Director]
    genres: list[Genre]
    guids: list[Guid]
    labels: list[Label]
    producers: list[Producer]
    ratings: list[Rating]
    roles: list[Role]
    similar: list[Similar]
    writers: list[Writer]

    @property
    def actors(self) -> list[Role]:
        return self.roles

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        self.audience_rating = cast_float(data.get("audienceRating"))
        self.audience_rating_image = data.get("audienceRatingImage")
        self.original_title = data.get("originalTitle")
        self.primary_extra_key = data.get("primaryExtraKey")
        self.rating = cast_float(data.get("rating"))
        self.rating_image = data.get("ratingImage")
        self.studio = data.get("studio")
        self.tagline = data.get("tagline")
        self.user_rating = cast_float(data.get("userRating"))
        self.collections = self._children(data, Collection)
        self.countries = self._children(data, Country)
        self.directors = self._children(data, Director)
        self.genres = self._children(data, Genre)
        self.guids = self._children(data, Guid)
        self.labels = self._children(data, Label)
        self.producers = self._children(data, Producer)
        self.ratings = self._children(data, Rating)
        self.roles = self._children(data, Role)
        self.similar = self._children(data, Similar)
        self.writers = self._children(data, Writer)


@register_object
class Show(Video):
    """A TV show, including all of its seasons and episodes."""

    TYPE = "show"

    banner: str | None
    child_count: int | None
    content_rating: str | None
    duration: int | None
    index: int | None
    leaf_count: int | None
    viewed_leaf_count: int | None
    originally_available_at: datetime | None
    rating: float | None
    studio: str | None
    theme: str | None
    collections: list[Collection]
    genres: list[Genre]
    labels: list[Label]
    roles: list[Role]

    @property
    def actors(self) -> list[Role]:
        return self.roles

    @property
    def is_watched(self) -> bool:
        return bool(self.leaf_count) and self.viewed_leaf_count == self.leaf_count

    async def seasons(self, **filters: Any) -> list["Season"]:
        key = f"/library/metadata/{self.rating_key}/children?excludeAllLeaves=1"
        return await fetch_items(self._server, key, filters, Season, self)

    async def season(self, title: str | None = None, season: int | None = None) -> "Season":
        """Return a season by title or by season number."""

        key = f"/library/metadata/{self.rating_key}/children?excludeAllLeaves=1"
        if title is not None:
            return await fetch_item(self._server, key, {"title__iexact": title}, Season, self)
        if season is not None:
            return await fetch_item(self._server, key, {"index": season}, Season, self)
        raise BadRequest("Missing argument: title or season is required")

    async def episodes(self, **filters: Any) -> list["Episode"]:
        key = f"/library/metadata/{self.rating_key}/allLeaves"
        return await fetch_items(self._server, key, filters, Episode, self)

    async def episode(
        self,
        title: str | None = None,
        season: int | None = None,
        episode: int | None = None,
    ) -> "Episode":
        """Return an episode by title, or by season and episode number."""

        key = f"/library/metadata/{self.rating_key}/allLeaves"
        if title is not None:
            return await fetch_item(self._server, key, {"title__iexact": title}, Episode, self)
        if season is not None and episode is not None:
            return await fetch_item(
                self._server, key, {"parentIndex": season, "index": episode}, Episode, self
            )
        raise BadRequest("Missing argument: title or season and episode are required")

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        self.key = self.key.replace("/children", "")
        self.banner = data.get("banner")
        self.child_count = cast_int(data.get("childCount"))
        self.content_rating = data.get("contentRating")
        self.duration = cast_int(data.get("duration"))
        self.index = cast_int(data.get("index"))
        self.leaf_count = cast_int(data.get("leafCount"))
        self.viewed_leaf_count = cast_int(data.get("viewedLeafCount"))
        self.originally_available_at = to_datetime(data.get("originallyAvailableAt"))
        self.rating = cast_float(data.get("rating"))
        self.studio = data.get("studio")
        self.theme = data.get("theme")
        self.collections = self._children(data, Collection)
        self.genres = self._children(data, Genre)
        self.labels = self._children(data, Label)
        self.roles = self._children(data, Role)


@register_object
class Season(Video):
    """A single season of a show."""

    TYPE = "season"

    index: int | None
    leaf_count: int | None
    viewed_leaf_count: int | None
    parent_key: str | None
    parent_rating_key: str | None
    parent_title: str | None
    parent_thumb: str | None

    @property
    def season_number(self) -> int | None:
        return self.index

    @property
    def is_watched(self) -> bool:
        return bool(self.leaf_count) and self.viewed_leaf_count == self.leaf_count

    async def episodes(self, **filters: Any) -> list["Episode"]:
        key = f"/library/metadata/{self.rating_key}/children"
        return await fetch_items(self._server, key, filters, Episode, self)

    async def episode(self, title: str | None = None, episode: int | None = None) -> "Episode":
        key = f"/library/metadata/{self.rating_key}/children"
        if title is not None:
            return await fetch_item(self._server, key, {"title__iexact": title}, Episode, self)
        if episode is not None:
            return await fetch_item(self._server, key, {"index": episode}, Episode, self)
        raise BadRequest("Missing argument: title or episode is required")

    async def show(self) -> Show:
        if not self.parent_key:
            raise BadRequest("Season has no parent key")
        return await fetch_item(self._server, self.parent_key, cls=Show, parent=self)

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        self.key = self.key.replace("/children", "")
        self.index = cast_int(data.get("index"))
        self.leaf_count = cast_int(data.get("leafCount"))
        self.viewed_leaf_count = cast_int(data.get("viewedLeafCount"))
        self.parent_key = data.get("parentKey")
        self.parent_rating_key = data.get("parentRatingKey")
        self.parent_title = data.get("parentTitle")
        self.parent_thumb = data.get("parentThumb")


@register_object
class Episode(Playable):
    """A single episode of a show."""

    TYPE = "episode"

    index: int | None
    parent_index: int | None
    parent_key: str | None
    parent_rating_key: str | None
    parent_title: str | None
    parent_thumb: str | None
    grandparent_key: str | None
    grandparent_rating_key: str | None
    grandparent_title: str | None
    grandparent_theme: str | None
    grandparent_thumb: str | None
    rating: float | None
    collections: list[Collection]
    directors: list[Director]
    writers: list[Writer]

    async def season_number(self) -> int | None:
        """Return this episode's season number, asking the server if needed."""

        if self.parent_index is not None:
            return self.parent_index
        season = await self.season()
        return season.season_number

    async def season_episode(self) -> str:
        """Return the ``s01e02`` style code for this episode."""

        season_number = await self.season_number()
        return f"s{season_number or 0:02d}e{self.index or 0:02d}"

    async def season(self) -> Season:
        if not self.parent_key:
            raise BadRequest("Episode has no parent key")
        return await fetch_item(self._server, self.parent_key, cls=Season, parent=self)

    async def show(self) -> Show:
        if not self.grandparent_key:
            raise BadRequest("Episode has no grandparent key")
        return await fetch_item(self._server, self.grandparent_key, cls=Show, parent=self)

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        self.key = self.key.replace("/children", "")
        self.index = cast_int(data.get("index"))
        self.parent_index = cast_int(data.get("parentIndex"))
        self.parent_key = data.get("parentKey")
        self.parent_rating_key = data.get("parentRatingKey")
        self.parent_title = data.get("parentTitle")
        self.parent_thumb = data.get("parentThumb")
        self.grandparent_key = data.get("grandparentKey")
        self.grandparent_rating_key = data.get("grandparentRatingKey")
        self.grandparent_title = data.get("grandparentTitle")
        self.grandparent_theme = data.get("grandparentTheme")
        self.grandparent_thumb = data.get("grandparentThumb")
        self.rating = cast_float(data.get("rating"))
        self.collections = self._children(data, Collection)
        self.directors = self._children(data, Director)
        self.writers = self._children(data, Writer)


@register_object
class Clip(Playable):
    """A standalone video clip."""

    TYPE = "clip"

    extra_type: int | None
    subtype: str | None

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        self.extra_type = cast_int(data.get("extraType"))
        self.subtype = data.get("subtype")


class Extra(Clip):
    """A trailer, featurette or other extra attached to a movie or show."""
