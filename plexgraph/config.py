"""Application configuration models."""

from __future__ import annotations

import platform
import socket
import uuid
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from . import __version__


def _default_identifier() -> str:
    return f"{uuid.getnode():#x}"


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="plexgraph", alias="APP_NAME")

    plex_baseurl: str = Field(default="http://127.0.0.1:32400", alias="PLEX_BASEURL")
    plex_token: str | None = Field(default=None, alias="PLEX_TOKEN")
    plex_timeout: float = Field(default=30.0, alias="PLEX_TIMEOUT", gt=0)

    client_identifier: str = Field(
        default_factory=_default_identifier, alias="PLEX_CLIENT_IDENTIFIER"
    )
    device_name: str = Field(
        default_factory=socket.gethostname, alias="PLEX_DEVICE_NAME"
    )
    plex_platform: str = Field(default_factory=platform.system, alias="PLEX_PLATFORM")
    plex_platform_version: str = Field(
        default_factory=platform.release, alias="PLEX_PLATFORM_VERSION"
    )
    language: str = Field(default="en", alias="PLEX_LANGUAGE")

    @field_validator("plex_baseurl", mode="before")
    @classmethod
    def _normalise_baseurl(cls, value: object) -> str:
        """Strip whitespace and trailing slashes from the server URL."""

        text = str(value or "").strip().rstrip("/")
        if not text:
            raise ValueError("PLEX_BASEURL must not be empty")
        if not text.startswith(("http://", "https://")):
            text = f"http://{text}"
        return text

    @property
    def base_headers(self) -> dict[str, str]:
        """Return the ``X-Plex-*`` headers sent with every request."""

        return {
            "X-Plex-Platform": self.plex_platform,
            "X-Plex-Platform-Version": self.plex_platform_version,
            "X-Plex-Provides": "controller",
            "X-Plex-Product": self.app_name,
            "X-Plex-Version": __version__,
            "X-Plex-Device": self.plex_platform,
            "X-Plex-Device-Name": self.device_name,
            "X-Plex-Client-Identifier": self.client_identifier,
            "X-Plex-Sync-Version": "2",
            "X-Plex-Language": self.language,
        }

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", populate_by_name=True
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]
