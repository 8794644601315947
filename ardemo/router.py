"""Routes incoming deep links to a demo."""

import logging
from urllib.parse import urlsplit

from pydantic import BaseModel

from ardemo.deeplink import LinkParameters, SupportedDemo, parse_deep_link
from ardemo.exceptions import ParameterError
from ardemo.services.cache import RecentURLCache

logger = logging.getLogger(__name__)


class RouteResult(BaseModel):
    """Outcome of opening a deep link."""

    demo: SupportedDemo
    parameters: LinkParameters | None = None
    error_message: str | None = None

    @property
    def ok(self) -> bool:
        return self.parameters is not None and self.error_message is None


class LinkRouter:
    """
    Classifies deep links and remembers them per demo.

    Known demo links are recorded in the matching recent list before their
    parameters are validated, so a malformed link can still be edited later.
    """

    def __init__(self, mug_urls: RecentURLCache, panorama_urls: RecentURLCache):
        self.recent = {
            SupportedDemo.MUG: mug_urls,
            SupportedDemo.PANORAMA: panorama_urls,
        }

    def open_url(self, url: str) -> RouteResult:
        url = url.strip()
        parts = urlsplit(url)
        if not parts.scheme or not parts.netloc:
            logger.warning(f"Invalid URL received: {url}")
            return RouteResult(
                demo=SupportedDemo.UNKNOWN,
                error_message=f"Invalid URL received. {url}",
            )

        demo = SupportedDemo.from_host(parts.netloc)
        if demo is SupportedDemo.UNKNOWN:
            return RouteResult(
                demo=demo,
                error_message=f'Unable to open URL for demo type "{parts.netloc}"',
            )

        self.recent[demo].store(url)

        try:
            _, parameters = parse_deep_link(url)
        except ParameterError as e:
            logger.warning(f"Rejected {demo.value} link: {e}")
            return RouteResult(demo=demo, error_message=str(e))

        logger.info(f"Opening {demo.value} demo")
        return RouteResult(demo=demo, parameters=parameters)
