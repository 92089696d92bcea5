"""Media tags, markers, chapters, streams and posters attached to library items."""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import quote_plus

from .base import PlexObject, register_object
from .exceptions import Unsupported
from .utils import cast_bool, cast_float, cast_int


class MediaTag(PlexObject):
    """Base class for tags such as genres, roles and directors.

    ``tag`` holds the display name (``Animation``, ``Stephen Graham``).
    """

    id: int | None
    tag: str | None
    role: str | None
    thumb: str | None

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        self.id = cast_int(data.get("id"))
        self.tag = data.get("tag")
        self.role = data.get("role")
        self.thumb = data.get("thumb")


@register_object
class Role(MediaTag):
    TAG = "Role"


@register_object
class Genre(MediaTag):
    TAG = "Genre"


@register_object
class Country(MediaTag):
    TAG = "Country"


@register_object
class Writer(MediaTag):
    TAG = "Writer"


@register_object
class Director(MediaTag):
    TAG = "Director"


@register_object
class Producer(MediaTag):
    TAG = "Producer"


@register_object
class Collection(MediaTag):
    TAG = "Collection"


@register_object
class Label(MediaTag):
    TAG = "Label"


@register_object
class Similar(MediaTag):
    TAG = "Similar"


@register_object
class Guid(PlexObject):
    """External identifier such as ``imdb://tt0111161``."""

    TAG = "Guid"

    id: str | None

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        self.id = data.get("id")


@register_object
class Rating(PlexObject):
    TAG = "Rating"

    image: str | None
    type: str | None
    value: float | None

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        self.image = data.get("image")
        self.type = data.get("type")
        self.value = cast_float(data.get("value"))


@register_object
class Chapter(PlexObject):
    TAG = "Chapter"

    id: int | None
    index: int | None
    tag: str | None
    thumb: str | None
    start_time_offset: int | None
    end_time_offset: int | None

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        self.id = cast_int(data.get("id"))
        self.index = cast_int(data.get("index"))
        self.tag = data.get("tag")
        self.thumb = data.get("thumb")
        self.start_time_offset = cast_int(data.get("startTimeOffset"))
        self.end_time_offset = cast_int(data.get("endTimeOffset"))


@register_object
class Marker(PlexObject):
    """Intro, credits or commercial marker on a video."""

    TAG = "Marker"

    id: int | None
    type: str | None
    start_time_offset: int | None
    end_time_offset: int | None
    final: bool

    def __repr__(self) -> str:
        return f"<Marker:{self.type}:{self.start_time_offset}-{self.end_time_offset}>"

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        self.id = cast_int(data.get("id"))
        self.type = data.get("type")
        self.start_time_offset = cast_int(data.get("startTimeOffset"))
        self.end_time_offset = cast_int(data.get("endTimeOffset"))
        self.final = cast_bool(data.get("final"))


@register_object
class MediaPart(PlexObject):
    """A single file backing a :class:`Media` entry."""

    TAG = "Part"

    id: int | None
    file: str | None
    size: int | None
    duration: int | None
    container: str | None

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        self.id = cast_int(data.get("id"))
        self.file = data.get("file")
        self.size = cast_int(data.get("size"))
        self.duration = cast_int(data.get("duration"))
        self.container = data.get("container")


@register_object
class Media(PlexObject):
    """One version of an item (resolution, codec, files)."""

    TAG = "Media"

    id: int | None
    duration: int | None
    bitrate: int | None
    width: int | None
    height: int | None
    container: str | None
    video_resolution: str | None
    audio_codec: str | None
    video_codec: str | None
    parts: list[MediaPart]

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        self.id = cast_int(data.get("id"))
        self.duration = cast_int(data.get("duration"))
        self.bitrate = cast_int(data.get("bitrate"))
        self.width = cast_int(data.get("width"))
        self.height = cast_int(data.get("height"))
        self.container = data.get("container")
        self.video_resolution = data.get("videoResolution")
        self.audio_codec = data.get("audioCodec")
        self.video_codec = data.get("videoCodec")
        self.parts = self._children(data, MediaPart)


@register_object
class Poster(PlexObject):
    """A poster choice returned by ``/library/metadata/<id>/posters``."""

    TAG = "Photo"

    rating_key: str | None
    provider: str | None
    selected: bool
    thumb: str | None

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        self.rating_key = data.get("ratingKey")
        self.provider = data.get("provider")
        self.selected = cast_bool(data.get("selected"))
        self.thumb = data.get("thumb")

    async def select(self) -> None:
        """Make this poster the active poster of the item it was listed for."""

        owner = self.parent
        owner_key = getattr(owner, "rating_key", None)
        if not owner_key:
            raise Unsupported("Cannot select a poster whose item is no longer available")
        await self._server.query(
            f"/library/metadata/{owner_key}/poster?url={quote_plus(self.rating_key or '')}",
            "put",
        )
