"""Deep link parsing and validation.

A deep link launches a demo directly, typically after scanning a QR code
produced by the web client:

    com.oracle.ios.ardemo://mug?url=<server>&token=<channel token>&assetID=<id>
        &imageID=<id>&mugColor=0x84AFD9&customText=<text>&textColor=0x050505
    com.oracle.ios.ardemo://panorama?url=<server>&token=<channel token>&assetID=<id>

The host selects the demo; the query carries everything needed to talk to the
content server.
"""

import re
from enum import Enum
from urllib.parse import quote, unquote, urlencode, urlsplit

from pydantic import BaseModel, Field

from ardemo.exceptions import (
    AssetIdParameterMissingError,
    ImageIdParameterMissingError,
    InvalidColorError,
    InvalidURLParameterError,
    MugColorParameterMissingError,
    QueryItemsMissingError,
    TokenParameterMissingError,
    UrlParameterMissingError,
)

_HEX_DIGITS_RE = re.compile(r"[0-9A-Fa-f]+")


class SupportedDemo(str, Enum):
    """Demos reachable through a deep link."""

    UNKNOWN = "unknown"
    MUG = "mug"
    PANORAMA = "panorama"

    @classmethod
    def from_host(cls, host: str | None) -> "SupportedDemo":
        if not host:
            return cls.UNKNOWN
        try:
            return cls(host.lower())
        except ValueError:
            return cls.UNKNOWN


def query_items(query: str | None) -> list[tuple[str, str]]:
    """
    Split a raw query string into percent-decoded (name, value) pairs.

    Order and duplicates are preserved. ``+`` is left as is.
    """
    if not query:
        return []

    items = []
    for part in query.split("&"):
        if not part:
            continue
        name, _, value = part.partition("=")
        items.append((unquote(name), unquote(value)))
    return items


def _first(items: list[tuple[str, str]], name: str) -> str | None:
    return next((value for key, value in items if key == name), None)


def _validated_url(value: str) -> str:
    parts = urlsplit(value)
    if not parts.scheme or not parts.netloc:
        raise InvalidURLParameterError()
    return value


def _hex_or_none(value: str | None) -> int | None:
    if value is None or not value.startswith("0x"):
        return None
    digits = value[2:]
    # int(..., 16) alone would also take signs and underscores
    if not _HEX_DIGITS_RE.fullmatch(digits):
        return None
    return int(digits, 16)


def color_from(value: str) -> int:
    """
    Parse a ``0x``-prefixed hex color entered by the user.

    Raises:
        InvalidColorError: If the value is not of the form 0x<hex>
    """
    color = _hex_or_none(value)
    if color is None:
        raise InvalidColorError()
    return color


def _deep_link(scheme: str, demo: SupportedDemo, params: dict[str, str]) -> str:
    return f"{scheme}://{demo.value}?{urlencode(params, quote_via=quote, safe='')}"


class MugURLParameters(BaseModel):
    """Parameters of the mug customization demo."""

    ocm_url: str = Field(..., description="Content server URL")
    token: str = Field(..., description="Channel token")
    asset_id: str = Field(..., description="Content item describing the mug")
    image_id: str = Field(..., description="Digital asset used as the decal")
    mug_color: int = Field(default=0, description="Mug body color (0xRRGGBB)")
    text: str | None = Field(default=None, description="Custom text printed on the mug")
    text_color: int | None = Field(default=None, description="Custom text color (0xRRGGBB)")
    mug_color_hex: str = Field(default="", description="Mug color as received")
    text_color_hex: str = Field(default="", description="Text color as received")

    @property
    def demo_type(self) -> SupportedDemo:
        return SupportedDemo.MUG

    @classmethod
    def from_query(cls, query: str | None) -> "MugURLParameters":
        """
        Parse the query of a scanned mug deep link.

        Raises:
            ParameterError: The first missing or invalid required parameter
        """
        items = query_items(query)
        if not items:
            raise QueryItemsMissingError()

        url = _first(items, "url")
        if not url:
            raise UrlParameterMissingError()
        url = _validated_url(url)

        token = _first(items, "token")
        if not token:
            raise TokenParameterMissingError()

        asset_id = _first(items, "assetID")
        if not asset_id:
            raise AssetIdParameterMissingError()

        image_id = _first(items, "imageID")
        if not image_id:
            raise ImageIdParameterMissingError()

        mug_color_hex = _first(items, "mugColor")
        if not mug_color_hex:
            raise MugColorParameterMissingError()

        text_color_hex = _first(items, "textColor")
        text_color = _hex_or_none(text_color_hex)

        return cls(
            ocm_url=url,
            token=token,
            asset_id=asset_id,
            image_id=image_id,
            mug_color=_hex_or_none(mug_color_hex) or 0,
            text=_first(items, "customText") or None,
            text_color=text_color,
            mug_color_hex=mug_color_hex,
            text_color_hex=text_color_hex if text_color is not None else "",
        )

    @classmethod
    def from_form(
        cls,
        ocm_url: str,
        token: str,
        asset_id: str,
        image_id: str,
        mug_color: str,
        text: str | None = None,
        text_color: str | None = None,
    ) -> "MugURLParameters":
        """
        Build parameters from manually entered values.

        Values are trimmed; colors must be written as ``0x<hex>``.

        Raises:
            ParameterError: The first missing or invalid parameter
        """
        ocm_url = ocm_url.strip()
        token = token.strip()
        asset_id = asset_id.strip()
        image_id = image_id.strip()
        mug_color = mug_color.strip()
        text = text.strip() if text is not None else None
        text_color = text_color.strip() if text_color is not None else None

        if not ocm_url:
            raise UrlParameterMissingError()
        ocm_url = _validated_url(ocm_url)

        if not token:
            raise TokenParameterMissingError()
        if not asset_id:
            raise AssetIdParameterMissingError()
        if not image_id:
            raise ImageIdParameterMissingError()
        if not mug_color:
            raise MugColorParameterMissingError()

        return cls(
            ocm_url=ocm_url,
            token=token,
            asset_id=asset_id,
            image_id=image_id,
            mug_color=color_from(mug_color),
            text=text or None,
            text_color=color_from(text_color) if text_color else None,
            mug_color_hex=mug_color,
            text_color_hex=text_color or "",
        )

    def to_url(self, scheme: str) -> str:
        """Rebuild the deep link that produces these parameters."""
        return _deep_link(
            scheme,
            SupportedDemo.MUG,
            {
                "url": self.ocm_url,
                "token": self.token,
                "assetID": self.asset_id,
                "imageID": self.image_id,
                "mugColor": self.mug_color_hex,
                "customText": self.text or "",
                "textColor": self.text_color_hex,
            },
        )


class PanoramaURLParameters(BaseModel):
    """Parameters of the 360 degree panorama demo."""

    ocm_url: str = Field(..., description="Content server URL")
    token: str = Field(..., description="Channel token")
    asset_id: str = Field(..., description="Location content item to display")

    @property
    def demo_type(self) -> SupportedDemo:
        return SupportedDemo.PANORAMA

    @classmethod
    def from_query(cls, query: str | None) -> "PanoramaURLParameters":
        """
        Parse the query of a scanned panorama deep link.

        Raises:
            ParameterError: The first missing or invalid required parameter
        """
        items = query_items(query)
        if not items:
            raise QueryItemsMissingError()

        url = _first(items, "url")
        if not url:
            raise UrlParameterMissingError()
        url = _validated_url(url)

        token = _first(items, "token")
        if not token:
            raise TokenParameterMissingError()

        asset_id = _first(items, "assetID")
        if not asset_id:
            raise AssetIdParameterMissingError()

        return cls(ocm_url=url, token=token, asset_id=asset_id)

    @classmethod
    def from_form(cls, ocm_url: str, token: str, asset_id: str) -> "PanoramaURLParameters":
        """Build parameters from manually entered values."""
        ocm_url = ocm_url.strip()
        token = token.strip()
        asset_id = asset_id.strip()

        if not ocm_url:
            raise UrlParameterMissingError()
        ocm_url = _validated_url(ocm_url)
        if not token:
            raise TokenParameterMissingError()
        if not asset_id:
            raise AssetIdParameterMissingError()

        return cls(ocm_url=ocm_url, token=token, asset_id=asset_id)

    def with_asset(self, asset_id: str) -> "PanoramaURLParameters":
        """Same server and token, different location."""
        return self.model_copy(update={"asset_id": asset_id})

    def to_url(self, scheme: str) -> str:
        """Rebuild the deep link that produces these parameters."""
        return _deep_link(
            scheme,
            SupportedDemo.PANORAMA,
            {"url": self.ocm_url, "token": self.token, "assetID": self.asset_id},
        )


LinkParameters = MugURLParameters | PanoramaURLParameters


def parse_deep_link(url: str) -> tuple[SupportedDemo, LinkParameters | None]:
    """
    Parse a deep link into its demo type and validated parameters.

    Args:
        url: The full deep link

    Returns:
        (demo, parameters); parameters is None for unknown demos

    Raises:
        ParameterError: If the demo is known but its parameters are invalid
    """
    parts = urlsplit(url.strip())
    demo = SupportedDemo.from_host(parts.netloc)

    if demo is SupportedDemo.MUG:
        return demo, MugURLParameters.from_query(parts.query)
    if demo is SupportedDemo.PANORAMA:
        return demo, PanoramaURLParameters.from_query(parts.query)
    return demo, None
