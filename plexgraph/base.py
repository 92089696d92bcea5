"""Base classes for objects materialised from Plex API payloads."""

from __future__ import annotations

import logging
import weakref
from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar, Mapping
from urllib.parse import urlencode

from .exceptions import BadRequest, UnknownType, Unsupported
from .materializer import find_items
from .utils import (
    cast_int,
    first_metadata,
    ltrim,
    search_type,
    tag_helper,
    to_datetime,
    unwrap_container,
)

if TYPE_CHECKING:
    from .library import LibrarySection
    from .services.server import PlexServer

logger = logging.getLogger(__name__)

# Values that drop an inclusion flag from the details query string.
_OMITTED_FLAG_VALUES: tuple[Any, ...] = (False, 0, "0")

PLEXOBJECTS: dict[tuple[str | None, str | None], type["PlexObject"]] = {}


def register_object(cls: type["PlexObject"]) -> type["PlexObject"]:
    """Register a class so :func:`build_item` can construct it by tag and type."""

    key = (cls.TAG, cls.TYPE)
    existing = PLEXOBJECTS.get(key)
    if existing is not None and existing is not cls:
        raise ValueError(
            f"{cls.__name__} conflicts with {existing.__name__} for tag={cls.TAG!r} type={cls.TYPE!r}"
        )
    PLEXOBJECTS[key] = cls
    return cls


def build_item(
    server: "PlexServer",
    data: Mapping[str, Any],
    initpath: str | None = None,
    parent: Any = None,
    *,
    tag: str = "Metadata",
) -> "PlexObject":
    """Construct the registered class matching the payload's ``type``."""

    item_type = data.get("type")
    cls = PLEXOBJECTS.get((tag, item_type)) or PLEXOBJECTS.get((tag, None))
    if cls is None:
        raise UnknownType(f"Unknown type <{tag} type={item_type!r}>")
    return cls(server, data, initpath, parent)


def build_item_or_none(
    server: "PlexServer",
    data: Mapping[str, Any],
    initpath: str | None = None,
    parent: Any = None,
    *,
    tag: str = "Metadata",
) -> "PlexObject | None":
    try:
        return build_item(server, data, initpath, parent, tag=tag)
    except UnknownType:
        logger.debug("Skipping unknown item type %r under %s", data.get("type"), tag)
        return None


class PlexObject:
    """Base class for every object built from a Plex API payload.

    The object keeps a weak reference to the object it was built from, so a
    child never keeps its parent alive. Reloading mutates this instance in
    place; callers should not reload the same instance concurrently.
    """

    # Name of the sub-collection holding payloads of this class.
    TAG: ClassVar[str | None] = None
    # Value of the payload ``type`` attribute for this class.
    TYPE: ClassVar[str | None] = None
    # Ordered inclusion flags appended to the details key.
    INCLUDES: ClassVar[dict[str, Any] | None] = None

    key: str

    def __init__(
        self,
        server: "PlexServer",
        data: Mapping[str, Any] | None,
        initpath: str | None = None,
        parent: Any = None,
    ) -> None:
        self._server = server
        self._parent = weakref.ref(parent) if parent is not None else None
        self._data: Mapping[str, Any] = {}
        self._include_overrides: dict[str, Any] = {}
        self.key = ""
        self._load_data(data or {})
        self._initpath = initpath or self.key

    def __repr__(self) -> str:
        label = getattr(self, "title", None) or getattr(self, "tag", None) or self.key
        return f"<{type(self).__name__}:{label}>"

    @property
    def server(self) -> "PlexServer":
        return self._server

    @property
    def parent(self) -> Any:
        """Return the parent object, or ``None`` once it has been collected."""

        if self._parent is None:
            return None
        return self._parent()

    @property
    def initpath(self) -> str:
        return self._initpath

    @property
    def details_key(self) -> str:
        return self.build_details_key(**self._include_overrides)

    def is_child_of(self, cls: type) -> bool:
        """Return ``True`` if this object was built from a live instance of ``cls``."""

        parent = self.parent
        return parent is not None and isinstance(parent, cls)

    def build_details_key(self, **overrides: Any) -> str:
        """Return ``key`` with the configured inclusion flags appended."""

        details_key = self.key
        if not details_key or self.INCLUDES is None:
            return details_key

        params: list[tuple[str, str]] = []
        for name, default in self.INCLUDES.items():
            value = overrides.get(name)
            if value is None:
                value = default
            if value in _OMITTED_FLAG_VALUES:
                continue
            params.append((name, "1" if value is True else str(value)))

        if params:
            details_key = f"{details_key}?{urlencode(params)}"
        return details_key

    async def reload(self, ekey: str | None = None, **includes: Any) -> None:
        """Reload the data for this object from ``ekey`` or its own key."""

        self._include_overrides = dict(includes)
        key = ekey or self.details_key or self.key
        if not key:
            raise Unsupported("Cannot reload an object not built from a URL")

        logger.debug("Reloading %s from %s", type(self).__name__, key)
        data = await self._server.query(key)
        self._load_data(unwrap_container(data))

    async def refresh(self) -> None:
        """Ask the server to refresh metadata for this object."""

        await self._server.query(f"{self.key}/refresh", "put")

    def _children(self, data: Mapping[str, Any], cls: type[PlexObject]) -> list[Any]:
        """Build the nested ``cls.TAG`` payloads of ``data`` with this object as parent."""

        return find_items(data.get(cls.TAG or ""), cls=cls, server=self._server, parent=self)

    def _load_data(self, data: Mapping[str, Any]) -> None:
        """Populate fields from ``data``. Subclasses extend this."""

        self._data = data
        key = data.get("key")
        if key:
            self.key = str(key)


class PartialPlexObject(PlexObject):
    """An object that may have been built from an abbreviated listing payload.

    Listing and search endpoints return only some attributes; the details key
    returns everything, including chapters and markers. Accessors that need
    detail-only fields call :meth:`ensure_full_object` first.
    """

    INCLUDES: ClassVar[dict[str, Any] | None] = {
        "checkFiles": 0,
        "includeAllConcerts": 0,
        "includeBandwidths": 1,
        "includeChapters": 1,
        "includeChildren": 0,
        "includeConcerts": 0,
        "includeExternalMedia": 0,
        "includeExtras": 0,
        "includeFields": "thumbBlurHash,artBlurHash",
        "includeGeolocation": 1,
        "includeLoudnessRamps": 1,
        "includeMarkers": 1,
        "includeOnDeck": 0,
        "includePopularLeaves": 0,
        "includePreferences": 0,
        "includeRelated": 0,
        "includeRelatedCount": 0,
        "includeReviews": 0,
        "includeStations": 0,
    }

    rating_key: str | None
    title: str | None
    type: str | None
    year: int | None
    library_section_id: int | None
    added_at: datetime | None
    updated_at: datetime | None

    @property
    def is_full_object(self) -> bool:
        """Return ``True`` if all attributes came from this item's details key."""

        return not self.key or (self.details_key or self.key) == self._initpath

    async def reload(self, ekey: str | None = None, **includes: Any) -> None:
        """Load the full data for this object, in place."""

        self._include_overrides = dict(includes)
        key = ekey or self.details_key or self.key
        if not key:
            raise Unsupported("Cannot reload an object not built from a URL")

        logger.debug("Loading full %s from %s", type(self).__name__, key)
        data = await self._server.query(key)
        self._initpath = key
        self._load_full_data(unwrap_container(data))

    async def ensure_full_object(self) -> None:
        if not self.is_full_object:
            await self.reload()

    async def analyze(self) -> None:
        """Ask the server to analyze this item's media."""

        await self._server.query(f"/{ltrim(self.key)}/analyze", "put")

    async def delete(self) -> Any:
        return await self._server.query(self.key, "delete")

    async def section(self) -> "LibrarySection":
        """Return the library section this item belongs to."""

        library = await self._server.library()
        return await library.section_by_id(self.library_section_id)

    async def edit(self, **changes: Any) -> None:
        """Edit fields of this item, e.g. ``edit(**{"title.value": "New"})``."""

        if self.library_section_id is None:
            await self.reload()
            if self.library_section_id is None:
                raise BadRequest("Missing library section id")

        if "id" not in changes:
            if not self.rating_key:
                raise BadRequest("Missing rating key")
            changes["id"] = self.rating_key
        if "type" not in changes and self.type:
            changes["type"] = search_type(self.type)

        params = urlencode({key: str(value) for key, value in changes.items()})
        await self._server.query(
            f"/library/sections/{self.library_section_id}/all?{params}", "put"
        )

    async def edit_title(self, title: str) -> None:
        await self.edit(**{"title.value": title, "title.locked": 1})

    async def edit_sort_title(self, sort_title: str) -> None:
        await self.edit(**{"titleSort.value": sort_title, "titleSort.locked": 1})

    async def edit_summary(self, summary: str) -> None:
        await self.edit(**{"summary.value": summary, "summary.locked": 1})

    async def edit_content_rating(self, content_rating: str) -> None:
        await self.edit(
            **{"contentRating.value": content_rating, "contentRating.locked": 1}
        )

    async def edit_studio(self, studio: str) -> None:
        await self.edit(**{"studio.value": studio, "studio.locked": 1})

    async def edit_originally_available_at(self, date: str) -> None:
        await self.edit(
            **{"originallyAvailableAt.value": date, "originallyAvailableAt.locked": 1}
        )

    async def add_collection(self, collections: list[str]) -> None:
        await self._edit_tags("collection", collections)

    async def remove_collection(self, collections: list[str]) -> None:
        await self._edit_tags("collection", collections, remove=True)

    async def add_label(self, labels: list[str]) -> None:
        await self._edit_tags("label", labels)

    async def remove_label(self, labels: list[str]) -> None:
        await self._edit_tags("label", labels, remove=True)

    async def add_genre(self, genres: list[str]) -> None:
        await self._edit_tags("genre", genres)

    async def remove_genre(self, genres: list[str]) -> None:
        await self._edit_tags("genre", genres, remove=True)

    async def _edit_tags(
        self,
        tag: str,
        items: list[str],
        *,
        locked: bool = True,
        remove: bool = False,
    ) -> None:
        existing = [] if remove else [
            getattr(entry, "tag", None) for entry in getattr(self, f"{tag}s", None) or []
        ]
        combined = [name for name in existing if name] + [
            item for item in items if item not in existing
        ]
        await self.edit(**tag_helper(tag, combined, locked=locked, remove=remove))
        await self.reload()

    def _load_data(self, data: Mapping[str, Any]) -> None:
        super()._load_data(data)
        rating_key = data.get("ratingKey")
        self.rating_key = str(rating_key) if rating_key is not None else None
        self.title = data.get("title")
        self.type = data.get("type")
        self.year = cast_int(data.get("year"))
        self.library_section_id = cast_int(data.get("librarySectionID"))
        self.added_at = to_datetime(data.get("addedAt"))
        self.updated_at = to_datetime(data.get("updatedAt"))

    def _load_full_data(self, data: Mapping[str, Any]) -> None:
        self._load_data(first_metadata(data))
