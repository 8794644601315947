"""Mug customization demo: fetches the mug content item and its files."""

import logging

from ardemo.constants import (
    FIELD_IMAGE_MESHES,
    FIELD_MODEL,
    FIELD_PRICE,
    FIELD_PRIMARY_MESH,
    FIELD_TEXT_MESHES,
    FIELD_USDZ,
)
from ardemo.deeplink import MugURLParameters
from ardemo.exceptions import ImageMeshesMissingError, ModelMissingError, PrimaryMeshMissingError
from ardemo.models import Asset, DownloadResult, MugMaterials
from ardemo.services.cache import CacheProvider
from ardemo.services.content import ContentClient

logger = logging.getLogger(__name__)


def hex_to_rgb(value: int) -> tuple[float, float, float]:
    """Convert 0xRRGGBB to (r, g, b) floats in 0..1."""
    return (
        ((value & 0xFF0000) >> 16) / 255.0,
        ((value & 0x00FF00) >> 8) / 255.0,
        (value & 0x0000FF) / 255.0,
    )


def model_rendition(asset: Asset) -> Asset:
    """
    Find the USDZ digital asset referenced by a mug content item.

    The content item's ``model`` field references a digital asset whose
    ``usdz`` field references the file to download.

    Raises:
        ModelMissingError: If either reference is missing
    """
    model = asset.custom_asset(FIELD_MODEL)
    usdz = model.custom_asset(FIELD_USDZ) if model else None
    if usdz is None:
        raise ModelMissingError()
    return usdz


def build_materials(
    asset: Asset, rendition: DownloadResult, decal: DownloadResult
) -> MugMaterials:
    """
    Collect mesh names and file locations needed to customize the mug.

    Raises:
        ModelMissingError: No ``model`` field
        PrimaryMeshMissingError: No ``primarymeshname`` on the model
        ImageMeshesMissingError: ``imagemeshnames`` missing or empty
    """
    model = asset.custom_asset(FIELD_MODEL)
    if model is None:
        raise ModelMissingError()

    main_mesh = model.custom_field(FIELD_PRIMARY_MESH)
    if not isinstance(main_mesh, str):
        raise PrimaryMeshMissingError()

    image_meshes = model.custom_field(FIELD_IMAGE_MESHES)
    if not isinstance(image_meshes, list) or not image_meshes:
        raise ImageMeshesMissingError()

    text_meshes = model.custom_field(FIELD_TEXT_MESHES)
    if not isinstance(text_meshes, list):
        text_meshes = []

    price = asset.custom_field(FIELD_PRICE)
    if not isinstance(price, (int, float)):
        price = None

    return MugMaterials(
        main_mesh=main_mesh,
        image_meshes=[str(name) for name in image_meshes],
        text_meshes=[str(name) for name in text_meshes],
        price=price,
        model_path=rendition.path,
        decal_path=decal.path,
    )


class MugModel:
    """Loads everything the mug demo renders."""

    def __init__(
        self,
        parameters: MugURLParameters,
        cache: CacheProvider,
        client: ContentClient | None = None,
    ):
        """
        Initialize the mug model.

        Args:
            parameters: Parsed mug deep link
            cache: Cache provider used for downloads
            client: Optional delivery client (defaults to one built from parameters)
        """
        self.parameters = parameters
        self.cache = cache
        self.client = client or ContentClient(parameters.ocm_url, parameters.token)

    def fetch(self) -> MugMaterials:
        """
        Fetch the mug content item, its decal and its USDZ rendition.

        Returns:
            MugMaterials describing meshes and local files
        """
        logger.info(f"Fetching mug asset {self.parameters.asset_id}")
        asset = self.client.read_asset(self.parameters.asset_id)

        decal = self.client.download_native(self.parameters.image_id, self.cache)
        logger.info(f"Decal {self.parameters.image_id}: {decal.status}")

        usdz = model_rendition(asset)
        rendition = self.client.download_native(usdz.id, self.cache)
        logger.info(f"Model rendition {usdz.id}: {rendition.status}")

        return build_materials(asset, rendition, decal)

    @property
    def mug_color_rgb(self) -> tuple[float, float, float]:
        return hex_to_rgb(self.parameters.mug_color)

    @property
    def text_color_rgb(self) -> tuple[float, float, float] | None:
        if self.parameters.text_color is None:
            return None
        return hex_to_rgb(self.parameters.text_color)
