"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from plexgraph import __version__
from plexgraph.config import Settings


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PLEX_BASEURL", "plex.lan:32400/")
    monkeypatch.setenv("PLEX_TOKEN", "env-token")
    monkeypatch.setenv("PLEX_TIMEOUT", "5")

    settings = Settings(_env_file=None)  # type: ignore[call-arg]

    assert settings.plex_baseurl == "http://plex.lan:32400"
    assert settings.plex_token == "env-token"
    assert settings.plex_timeout == 5.0


def test_settings_keep_https_urls() -> None:
    settings = Settings(_env_file=None, PLEX_BASEURL=" https://plex.example.com/ ")  # type: ignore[call-arg]

    assert settings.plex_baseurl == "https://plex.example.com"


def test_settings_reject_blank_url_and_bad_timeout() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, PLEX_BASEURL="  ")  # type: ignore[call-arg]
    with pytest.raises(ValidationError):
        Settings(_env_file=None, PLEX_TIMEOUT=0)  # type: ignore[call-arg]


def test_base_headers(settings: Settings) -> None:
    headers = settings.base_headers

    assert headers["X-Plex-Client-Identifier"] == "test-client"
    assert headers["X-Plex-Device-Name"] == "pytest"
    assert headers["X-Plex-Product"] == "plexgraph"
    assert headers["X-Plex-Version"] == __version__
    assert headers["X-Plex-Platform-Version"] == "6.0"
    assert "X-Plex-Token" not in headers
