"""360 degree panorama demo: locations, their images, and navigation."""

import logging

from ardemo.constants import (
    FIELD_FIELD_OF_VIEW,
    FIELD_HORIZONTAL_ANGLE,
    FIELD_SCENES,
    FIELD_TITLE,
    LOCATION_ASSET_TYPE,
)
from ardemo.deeplink import PanoramaURLParameters
from ardemo.exceptions import InvalidIndexError, NoImagesAvailableError
from ardemo.models import Asset, PanoramaExperience, PanoramaExperienceItem
from ardemo.services.cache import CacheProvider
from ardemo.services.content import ContentClient

logger = logging.getLogger(__name__)


def build_experience(asset: Asset) -> PanoramaExperience:
    """
    Turn a location content item into a list of 360 degree images.

    Raises:
        NoImagesAvailableError: If ``360Scenes`` is missing or empty
    """
    scenes = asset.custom_assets(FIELD_SCENES)
    if not scenes:
        raise NoImagesAvailableError()

    items = []
    for scene in scenes:
        title = scene.custom_field(FIELD_TITLE)
        horizontal_angle = scene.custom_field(FIELD_HORIZONTAL_ANGLE)
        field_of_view = scene.custom_field(FIELD_FIELD_OF_VIEW)
        items.append(
            PanoramaExperienceItem(
                identifier=scene.id,
                title=title if isinstance(title, str) else None,
                horizontal_angle=float(horizontal_angle)
                if isinstance(horizontal_angle, (int, float)) else 0.0,
                field_of_view=int(field_of_view)
                if isinstance(field_of_view, (int, float)) else 0,
            )
        )

    return PanoramaExperience(location=asset.name, items=items)


class PanoramaModel:
    """
    Navigates the 360 degree images of a location.

    Images are downloaded lazily, the first time they are shown, and
    remembered on the experience item afterwards.
    """

    def __init__(
        self,
        parameters: PanoramaURLParameters,
        cache: CacheProvider,
        client: ContentClient | None = None,
    ):
        self.parameters = parameters
        self.cache = cache
        self.client = client or ContentClient(parameters.ocm_url, parameters.token)

        self.experience: PanoramaExperience | None = None
        self.current_index = -1
        self.locations: list[Asset] = []

    @property
    def current_item(self) -> PanoramaExperienceItem:
        if self.experience is None:
            raise InvalidIndexError()
        if not 0 <= self.current_index < len(self.experience.items):
            raise InvalidIndexError()
        return self.experience.items[self.current_index]

    def load(self) -> PanoramaExperienceItem:
        """
        Read the location and show its first image.

        Returns:
            The current (first) experience item, downloaded
        """
        asset = self.client.read_asset(self.parameters.asset_id, expand_all=True)
        self.experience = build_experience(asset)
        self.current_index = -1
        logger.info(
            f"Location '{self.experience.location}' has {len(self.experience.items)} images"
        )
        return self.show_next()

    def show_next(self) -> PanoramaExperienceItem:
        count = self._item_count()
        self.current_index = (self.current_index + 1) % count
        return self.fetch_current()

    def show_previous(self) -> PanoramaExperienceItem:
        count = self._item_count()
        self.current_index = (self.current_index + count - 1) % count
        return self.fetch_current()

    def fetch_current(self) -> PanoramaExperienceItem:
        """
        Download the current image unless it already has a local path.

        Raises:
            InvalidIndexError: If the current index is out of range
        """
        item = self.current_item
        if item.path is not None:
            return item

        result = self.client.download_native(item.identifier, self.cache)
        item.path = result.path
        logger.debug(f"Image {item.identifier}: {result.status}")
        return item

    def list_locations(self) -> list[Asset]:
        """List the locations available on the channel."""
        self.locations = self.client.list_assets(LOCATION_ASSET_TYPE)
        return self.locations

    def select_location(self, asset_id: str) -> PanoramaExperienceItem:
        """Switch to another location and show its first image."""
        self.parameters = self.parameters.with_asset(asset_id)
        return self.load()

    def _item_count(self) -> int:
        if self.experience is None or not self.experience.items:
            raise InvalidIndexError()
        return len(self.experience.items)
