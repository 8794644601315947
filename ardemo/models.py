"""Data models shared by the cache, delivery client and demo models."""

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError


class CacheEntry(BaseModel):
    """A downloaded file tracked by the asset cache."""

    filename: str = Field(..., description="Filename inside the saved files directory")
    etag: str | None = Field(default=None, description="ETag returned with the download")


class DownloadResult(BaseModel):
    """Result of a conditional download."""

    path: Path = Field(..., description="Local path of the downloaded (or cached) file")
    status: Literal["downloaded", "cached"] = Field(
        ..., description="downloaded on 200, cached on 304"
    )


class Asset(BaseModel):
    """Content item or digital asset returned by the delivery API."""

    id: str = Field(..., description="Asset identifier")
    name: str = Field(default="", description="Asset name")
    type: str = Field(default="", description="Content type, e.g. CSM-Location")
    fields: dict[str, Any] = Field(default_factory=dict, description="Custom field values")

    def custom_field(self, name: str) -> Any | None:
        """Return a custom field value, or None if it is not set."""
        return self.fields.get(name)

    def custom_asset(self, name: str) -> "Asset | None":
        """Return a custom field that references another asset."""
        value = self.fields.get(name)
        if not isinstance(value, dict):
            return None
        return _asset_or_none(value)

    def custom_assets(self, name: str) -> list["Asset"] | None:
        """Return a custom field holding a list of asset references."""
        value = self.fields.get(name)
        if not isinstance(value, list):
            return None
        assets = (_asset_or_none(item) for item in value if isinstance(item, dict))
        return [asset for asset in assets if asset is not None]


def _asset_or_none(data: dict[str, Any]) -> Asset | None:
    # Malformed references are treated like missing ones
    if not data.get("id"):
        return None
    try:
        return Asset.model_validate(data)
    except ValidationError:
        return None


class MugMaterials(BaseModel):
    """Everything a renderer needs to customize the mug model."""

    main_mesh: str = Field(..., description="Name of the primary mesh (mug body)")
    image_meshes: list[str] = Field(..., min_length=1, description="Meshes receiving the decal")
    text_meshes: list[str] = Field(default_factory=list, description="Meshes receiving custom text")
    price: float | None = Field(default=None, description="Price shown next to the model")
    model_path: Path = Field(..., description="Local path of the USDZ rendition")
    decal_path: Path = Field(..., description="Local path of the decal image")


class PanoramaExperienceItem(BaseModel):
    """A single 360 degree image of a location."""

    identifier: str = Field(..., description="Asset identifier of the image")
    title: str | None = Field(default=None, description="Display title")
    horizontal_angle: float = Field(default=0.0, description="Initial horizontal angle")
    field_of_view: int = Field(default=0, description="Initial field of view")
    path: Path | None = Field(default=None, description="Local path once downloaded")


class PanoramaExperience(BaseModel):
    """The collection of 360 degree images associated with a location."""

    location: str = Field(..., description="Location name")
    items: list[PanoramaExperienceItem] = Field(default_factory=list)
