"""Network-facing services."""

from __future__ import annotations

from .server import PlexServer

__all__ = ["PlexServer"]
