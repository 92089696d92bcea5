"""Pydantic models describing server-level payloads."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class ServerInfo(BaseModel):
    """Identity and capabilities reported by the server root (``/``)."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    friendly_name: str | None = Field(default=None, alias="friendlyName")
    machine_identifier: str | None = Field(default=None, alias="machineIdentifier")
    version: str | None = None
    platform: str | None = None
    platform_version: str | None = Field(default=None, alias="platformVersion")
    my_plex: bool = Field(default=False, alias="myPlex")
    my_plex_username: str | None = Field(default=None, alias="myPlexUsername")
    allow_sync: bool = Field(default=False, alias="allowSync")
    allow_media_deletion: bool = Field(default=False, alias="allowMediaDeletion")
    transcoder_video: bool = Field(default=False, alias="transcoderVideo")
    updated_at: int | None = Field(default=None, alias="updatedAt")
    owner_features: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("ownerFeatures", "owner_features"),
    )

    @field_validator("owner_features", mode="before")
    @classmethod
    def _split_features(cls, value: object) -> list[str]:
        """The server reports features as a comma separated string."""

        if value is None:
            return []
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        if isinstance(value, (list, tuple)):
            return [str(part) for part in value]
        raise TypeError("ownerFeatures must be a string or list of strings")

    def has_feature(self, name: str) -> bool:
        return name in self.owner_features
