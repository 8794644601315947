"""Configuration management using pydantic-settings."""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ardemo.deeplink import MugURLParameters, PanoramaURLParameters

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    data_dir: Path = Field(
        default=Path.home() / ".ardemo",
        description="Root directory for the cache listing, downloads and URL lists"
    )
    cache_listing_name: str = Field(
        default="ARDemoCache.json",
        description="Filename of the JSON index of downloaded assets"
    )
    saved_files_dir_name: str = Field(
        default="savedFiles",
        description="Directory (under data_dir) holding downloaded files"
    )
    mug_url_cache_name: str = Field(
        default="ARDemoMugURLCache.json",
        description="Filename of the recent mug deep links list"
    )
    panorama_url_cache_name: str = Field(
        default="ARDemoPanoramaURLCache.json",
        description="Filename of the recent panorama deep links list"
    )

    # Deep links
    deep_link_scheme: str = Field(
        default="com.oracle.ios.ardemo",
        description="Custom URL scheme used when rebuilding deep links"
    )
    demo_parameters_path: Path = Field(
        default=Path("config/demo_parameters.yaml"),
        description="Path to the sample server/asset parameters file"
    )

    # Timeouts
    http_timeout: float = Field(default=30.0, description="HTTP request timeout in seconds")

    # Logging
    log_to_file: bool = Field(
        default=False,
        description="Enable logging to file with rotation"
    )
    log_dir: Path = Field(
        default=Path("output/logs"),
        description="Directory for log files"
    )
    log_max_age_days: int = Field(
        default=7,
        ge=1,
        le=30,
        description="Maximum age of log files to keep (days)"
    )

    @property
    def cache_listing_path(self) -> Path:
        return self.data_dir / self.cache_listing_name

    @property
    def saved_files_dir(self) -> Path:
        return self.data_dir / self.saved_files_dir_name


class DemoParameters(BaseModel):
    """Server and asset values used to build sample deep links."""

    scheme: str = "https"
    host: str = ""
    channel_token: str = ""
    mug_asset_id: str = ""
    mug_decal_id: str = ""
    panorama_asset_id: str = ""

    @classmethod
    def load(cls, path: Path) -> "DemoParameters":
        """
        Load demo parameters from a YAML file.

        Missing or invalid files fall back to empty defaults.

        Args:
            path: Path to the YAML file

        Returns:
            DemoParameters instance
        """
        if not path.exists():
            logger.debug(f"Demo parameters file not found: {path}")
            return cls()

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return cls(**data)
        except (yaml.YAMLError, ValidationError, TypeError) as e:
            logger.warning(f"Invalid demo parameters in {path}: {e}")
            return cls()

    @property
    def server_url(self) -> str:
        return f"{self.scheme}://{self.host}"

    def mug_url(self, deep_link_scheme: str) -> str:
        """Deep link equivalent to scanning the web client's mug QR code."""
        return MugURLParameters(
            ocm_url=self.server_url,
            token=self.channel_token,
            asset_id=self.mug_asset_id,
            image_id=self.mug_decal_id,
            mug_color=0x84AFD9,
            text="You can twist perception",
            text_color=0x050505,
            mug_color_hex="0x84AFD9",
            text_color_hex="0x050505",
        ).to_url(deep_link_scheme)

    def panorama_url(self, deep_link_scheme: str) -> str:
        """Deep link equivalent to scanning the web client's panorama QR code."""
        return PanoramaURLParameters(
            ocm_url=self.server_url,
            token=self.channel_token,
            asset_id=self.panorama_asset_id,
        ).to_url(deep_link_scheme)


# Global settings instance
settings = Settings()
