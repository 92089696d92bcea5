"""Exception types raised by plexgraph."""

from __future__ import annotations


class PlexGraphError(Exception):
    """Base class for all plexgraph errors."""


class BadRequest(PlexGraphError, ValueError):
    """An invalid request, generally a user error."""


class NotFound(PlexGraphError, LookupError):
    """Requested media item or section was not found."""


class UnknownType(PlexGraphError, ValueError):
    """No registered object class matches the payload type."""


class Unsupported(PlexGraphError):
    """The requested operation is not supported for this object."""
