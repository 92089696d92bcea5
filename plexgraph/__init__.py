"""Typed, filterable object graph over the Plex Media Server API."""

from __future__ import annotations

__version__ = "0.1.0"

# Importing the variant modules registers their classes with ``build_item``.
from .audio import Album, Artist, Audio, Track
from .base import PartialPlexObject, PlexObject, build_item, register_object
from .config import Settings, get_settings
from .exceptions import BadRequest, NotFound, PlexGraphError, UnknownType, Unsupported
from .filters import Predicate, check_attrs
from .library import Library, LibrarySection, MovieSection, MusicSection, PhotoSection, ShowSection
from .materializer import fetch_item, fetch_items, find_items
from .operators import OPERATORS
from .search import Hub
from .services.server import PlexServer
from .video import Clip, Episode, Extra, Movie, Season, Show, Video

__all__ = [
    "Album",
    "Artist",
    "Audio",
    "BadRequest",
    "Clip",
    "Episode",
    "Extra",
    "Hub",
    "Library",
    "LibrarySection",
    "Movie",
    "MovieSection",
    "MusicSection",
    "NotFound",
    "OPERATORS",
    "PartialPlexObject",
    "PhotoSection",
    "PlexGraphError",
    "PlexObject",
    "PlexServer",
    "Predicate",
    "Season",
    "Settings",
    "Show",
    "ShowSection",
    "Track",
    "UnknownType",
    "Unsupported",
    "Video",
    "__version__",
    "build_item",
    "check_attrs",
    "fetch_item",
    "fetch_items",
    "find_items",
    "get_settings",
    "register_object",
]
