"""Tests for the HTTP-facing server wrapper and library browsing."""

from __future__ import annotations

import httpx
import pytest

from plexgraph.exceptions import NotFound
from plexgraph.library import Library, MovieSection, ShowSection
from plexgraph.services.server import PlexServer
from plexgraph.video import Episode, Movie, Show


SECTIONS = {
    "MediaContainer": {
        "Directory": [
            {"key": "1", "type": "movie", "title": "Movies", "uuid": "abc", "Location": [{"id": 1, "path": "/media/movies"}]},
            {"key": "2", "type": "show", "title": "TV Shows", "uuid": "def"},
            {"key": "3", "type": "hologram", "title": "Future"},
        ]
    }
}

LIBRARY = {"MediaContainer": {"title1": "Plex Library", "Directory": [{"key": "sections", "title": "Library Sections"}]}}


@pytest.mark.anyio("asyncio")
async def test_query_sends_plex_headers(settings, router) -> None:
    router.routes["/"] = {"MediaContainer": {"friendlyName": "Basement", "machineIdentifier": "m-1", "version": "1.40.0", "ownerFeatures": "hwtranscode, sync", "myPlex": True}}

    async with router.client() as client:
        server = PlexServer(settings, client)
        info = await server.connect()

    request = router.requests[0]
    assert request.headers["X-Plex-Token"] == "secret-token"
    assert request.headers["Accept"] == "application/json"
    assert request.headers["X-Plex-Client-Identifier"] == "test-client"
    assert request.headers["X-Plex-Platform"] == "Linux"
    assert info.friendly_name == "Basement"
    assert info.owner_features == ["hwtranscode", "sync"]
    assert info.has_feature("sync") is True
    assert info.my_plex is True
    assert server.friendly_name == "Basement"
    assert server.machine_identifier == "m-1"


@pytest.mark.anyio("asyncio")
async def test_query_propagates_http_errors(settings, router) -> None:
    router.routes["/library/metadata/1"] = httpx.Response(401, json={"error": "unauthorized"})

    async with router.client() as client:
        server = PlexServer(settings, client)
        with pytest.raises(httpx.HTTPStatusError) as excinfo:
            await server.query("/library/metadata/1")

    assert excinfo.value.response.status_code == 401
    assert len(router.requests) == 1


@pytest.mark.anyio("asyncio")
async def test_query_returns_empty_dict_for_empty_body(settings, router) -> None:
    router.routes["/empty"] = httpx.Response(200)

    async with router.client() as client:
        server = PlexServer(settings, client)
        assert await server.query("/empty", "put") == {}

    assert router.requests[0].method == "PUT"


@pytest.mark.anyio("asyncio")
async def test_query_raises_on_non_json_body(settings, router) -> None:
    router.routes["/text"] = httpx.Response(200, text="<html>proxy error</html>")

    async with router.client() as client:
        server = PlexServer(settings, client)
        with pytest.raises(ValueError):
            await server.query("/text")


@pytest.mark.anyio("asyncio")
async def test_library_sections_dispatch_on_type(settings, router) -> None:
    router.routes["/library"] = LIBRARY
    router.routes["/library/sections"] = SECTIONS

    async with router.client() as client:
        server = PlexServer(settings, client)
        library = await server.library()
        sections = await library.sections()

        assert isinstance(library, Library)
        assert library.key == "/library"
        assert library.title1 == "Plex Library"
        assert await server.library() is library
        assert [type(section) for section in sections[:2]] == [MovieSection, ShowSection]
        assert type(sections[2]).__name__ == "LibrarySection"
        assert sections[0].locations == ["/media/movies"]

        movies = await library.section("Movies")
        assert movies.key == "1"
        assert (await library.section_by_id(2)).title == "TV Shows"
        with pytest.raises(NotFound):
            await library.section("Anime")

    assert router.paths().count("/library") == 1


@pytest.mark.anyio("asyncio")
async def test_library_falls_back_to_sections_root(settings, router) -> None:
    router.routes["/library/sections/"] = SECTIONS

    async with router.client() as client:
        server = PlexServer(settings, client)
        library = await server.library()

    assert library.key == "/library"
    assert router.paths() == ["/library", "/library/sections/"]


@pytest.mark.anyio("asyncio")
async def test_section_search_sends_server_params(settings, router) -> None:
    router.routes["/library/sections/1/all"] = {
        "MediaContainer": {
            "Metadata": [
                {"ratingKey": "1", "key": "/library/metadata/1", "type": "movie", "title": "Big Buck Bunny", "year": 2008},
                {"ratingKey": "2", "key": "/library/metadata/2", "type": "movie", "title": "Sintel", "year": 2010},
            ]
        }
    }

    async with router.client() as client:
        server = PlexServer(settings, client)
        section = MovieSection(server, SECTIONS["MediaContainer"]["Directory"][0])
        results = await section.search(sort="titleSort:asc", limit=10, unwatched=True, year__gte=2009)
        everything = await section.all()
        bunny = await section.get("big buck bunny")

    params = router.requests[0].url.params
    assert params["type"] == "1"
    assert params["sort"] == "titleSort:asc"
    assert params["unwatched"] == "1"
    assert params["X-Plex-Container-Start"] == "0"
    assert params["X-Plex-Container-Size"] == "10"
    assert [item.title for item in results] == ["Sintel"]
    assert all(isinstance(item, Movie) and item.is_child_of(MovieSection) for item in everything)
    assert len(everything) == 2
    assert bunny.title == "Big Buck Bunny"
    assert router.requests[2].url.params["title"] == "big buck bunny"


@pytest.mark.anyio("asyncio")
async def test_search_filters_hubs_by_media_type(settings, router) -> None:
    router.routes["/hubs/search"] = {
        "MediaContainer": {
            "Hub": [
                {"title": "Movies", "type": "movie", "Metadata": [{"ratingKey": "1", "key": "/library/metadata/1", "type": "movie", "title": "Big Buck Bunny"}]},
                {"title": "Shows", "type": "show", "Metadata": [{"ratingKey": "10", "key": "/library/metadata/10/children", "type": "show", "title": "Caminandes"}]},
                {"title": "Episodes", "type": "episode", "Metadata": [{"ratingKey": "21", "key": "/library/metadata/21", "type": "episode", "title": "Llama Drama"}]},
            ]
        }
    }

    async with router.client() as client:
        server = PlexServer(settings, client)
        hubs = await server.search("llama", mediatype="show", limit=3)
        everything = await server.search("llama")

    assert [hub.title for hub in hubs] == ["Shows"]
    assert isinstance(hubs[0].items[0], Show)
    assert isinstance(everything[2].items[0], Episode)
    assert router.requests[0].url.params["query"] == "llama"
    assert router.requests[0].url.params["limit"] == "3"


@pytest.mark.anyio("asyncio")
async def test_fetch_items_dispatches_and_skips_unknown(settings, router) -> None:
    router.routes["/library/recentlyAdded"] = {
        "MediaContainer": {
            "Metadata": [
                {"ratingKey": "1", "key": "/library/metadata/1", "type": "movie", "title": "Big Buck Bunny"},
                {"ratingKey": "9", "key": "/library/metadata/9", "type": "hologram", "title": "Unknown"},
                {"ratingKey": "21", "key": "/library/metadata/21", "type": "episode", "title": "Llama Drama"},
            ]
        }
    }
    router.routes["/library/metadata/21"] = {"MediaContainer": {"Metadata": [{"ratingKey": "21", "key": "/library/metadata/21", "type": "episode", "title": "Llama Drama"}]}}

    async with router.client() as client:
        server = PlexServer(settings, client)
        items = await server.fetch_items("/library/recentlyAdded")
        episode = await server.fetch_item(21)

    assert [type(item) for item in items] == [Movie, Episode]
    assert isinstance(episode, Episode)
    assert episode.initpath == "/library/metadata/21"


def test_url_helper(settings) -> None:
    server = PlexServer(settings, httpx.AsyncClient())

    assert server.url("/library/metadata/1/thumb") == "http://plex.test:32400/library/metadata/1/thumb"
    assert server.url("photo/:/transcode?width=100", include_token=True) == (
        "http://plex.test:32400/photo/:/transcode?width=100&X-Plex-Token=secret-token"
    )
