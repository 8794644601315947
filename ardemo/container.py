"""Composition root: builds the caches shared by the whole process."""

import logging

from ardemo.config import DemoParameters, Settings
from ardemo.router import LinkRouter
from ardemo.services.cache import AssetCache, RecentURLCache

logger = logging.getLogger(__name__)


class AppContainer:
    """
    Owns the process-wide asset cache and recent URL lists.

    Components receive these objects explicitly; nothing else constructs
    them.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        settings.data_dir.mkdir(parents=True, exist_ok=True)

        self.asset_cache = AssetCache(
            listing_path=settings.cache_listing_path,
            saved_files_dir=settings.saved_files_dir,
        )
        self.mug_urls = RecentURLCache(settings.data_dir / settings.mug_url_cache_name)
        self.panorama_urls = RecentURLCache(settings.data_dir / settings.panorama_url_cache_name)
        self.router = LinkRouter(self.mug_urls, self.panorama_urls)

        logger.debug(f"Data directory: {settings.data_dir}")

    def demo_parameters(self) -> DemoParameters:
        return DemoParameters.load(self.settings.demo_parameters_path)
