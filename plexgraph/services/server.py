"""Async HTTP client for a Plex Media Server."""

from __future__ import annotations

import logging
from typing import Any, TypeVar
from urllib.parse import urlencode

import httpx

from .. import materializer
from ..base import PlexObject, build_item, build_item_or_none
from ..config import Settings
from ..filters import check_attrs
from ..library import Library
from ..models import ServerInfo
from ..search import Hub
from ..utils import unwrap_container

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=PlexObject)


class PlexServer:
    """Thin wrapper around the Plex HTTP API.

    ``query`` is the only method that talks to the network; every object built
    by this package calls back into it. HTTP errors are raised unchanged and
    are never retried here.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=settings.plex_baseurl,
            timeout=settings.plex_timeout,
        )
        self._library: Library | None = None
        self.info: ServerInfo | None = None

    async def __aenter__(self) -> "PlexServer":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this server created it."""

        if self._owns_client:
            await self._client.aclose()

    @property
    def baseurl(self) -> str:
        return self._settings.plex_baseurl

    @property
    def friendly_name(self) -> str | None:
        return self.info.friendly_name if self.info else None

    @property
    def machine_identifier(self) -> str | None:
        return self.info.machine_identifier if self.info else None

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {"Accept": "application/json", **self._settings.base_headers}
        if self._settings.plex_token:
            headers["X-Plex-Token"] = self._settings.plex_token
        if extra:
            headers.update(extra)
        return headers

    def url(self, path: str, *, include_token: bool = False) -> str:
        """Return an absolute URL for ``path`` on this server."""

        url = f"{self.baseurl}/{path.lstrip('/')}"
        if include_token and self._settings.plex_token:
            delimiter = "&" if "?" in url else "?"
            url = f"{url}{delimiter}{urlencode({'X-Plex-Token': self._settings.plex_token})}"
        return url

    async def query(
        self,
        path: str,
        method: str = "get",
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON envelope.

        An empty body (as sent by most PUT and DELETE endpoints) is returned
        as ``{}``; a body that is not JSON raises ``ValueError``.
        """

        verb = method.upper()
        logger.debug("%s %s", verb, path)
        response = await self._client.request(verb, path, headers=self._headers(headers))
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError:
            logger.warning(
                "Plex request %s %s failed with status %s", verb, path, response.status_code
            )
            raise

        if not response.content:
            return {}
        return response.json()

    async def connect(self) -> ServerInfo:
        """Load the server identity from the root endpoint."""

        data = await self.query("/")
        self.info = ServerInfo.model_validate(unwrap_container(data))
        logger.info(
            "Connected to %s (%s)", self.info.friendly_name, self.info.version
        )
        return self.info

    async def library(self) -> Library:
        """Return the library browser, loading it on first use."""

        if self._library is not None:
            return self._library
        try:
            data = await self.query("/library")
        except httpx.HTTPStatusError:
            logger.info("Falling back to /library/sections/ for the library root")
            data = await self.query("/library/sections/")
        self._library = Library(self, unwrap_container(data))
        return self._library

    async def search(
        self,
        query: str,
        mediatype: str | None = None,
        limit: int | None = None,
    ) -> list[Hub]:
        """Return the hubs matching ``query`` across the whole library."""

        params: dict[str, Any] = {"query": query}
        if limit:
            params["limit"] = limit
        hubs = await materializer.fetch_items(
            self, f"/hubs/search?{urlencode(params)}", cls=Hub, parent=self
        )
        if mediatype:
            hubs = [hub for hub in hubs if check_attrs(hub, {"type": mediatype})]
        return hubs

    async def fetch_item(
        self,
        ekey: str | int,
        cls: type[T] | None = None,
        **filters: Any,
    ) -> Any:
        """Return one item, built as ``cls`` or dispatched on its payload type."""

        if cls is not None:
            return await materializer.fetch_item(self, ekey, filters, cls)
        data = await materializer.fetch_item(self, ekey, filters)
        return build_item(self, data, materializer.metadata_key(ekey))

    async def fetch_items(
        self,
        ekey: str,
        cls: type[T] | None = None,
        **filters: Any,
    ) -> list[Any]:
        if cls is not None:
            return await materializer.fetch_items(self, ekey, filters, cls)
        items = []
        for elem in await materializer.fetch_items(self, ekey, filters):
            item = build_item_or_none(self, elem)
            if item is not None:
                items.append(item)
        return items
