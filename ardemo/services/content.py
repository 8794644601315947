"""Delivery API client for the content management server."""

import logging
import re
import shutil
import tempfile
from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError

from ardemo.constants import DELIVERY_API_PATH, LIST_ASSETS_LIMIT, TIMEOUT_HTTP_DEFAULT
from ardemo.exceptions import InvalidResponseError
from ardemo.models import Asset, DownloadResult
from ardemo.services.cache import CacheProvider
from ardemo.services.logger_service import log_api_call
from ardemo.utils.retry import default_retry

logger = logging.getLogger(__name__)

_FILENAME_RE = re.compile(r'filename\*?=(?:UTF-8\'\')?"?([^";]+)"?', re.IGNORECASE)


def filename_from_disposition(disposition: str | None) -> str | None:
    """Extract the filename from a Content-Disposition header."""
    if not disposition:
        return None
    match = _FILENAME_RE.search(disposition)
    if not match:
        return None
    # Never let a server-supplied name escape the download directory
    name = Path(match.group(1).strip()).name
    return name or None


def _validate_asset(data: Any) -> Asset:
    try:
        return Asset.model_validate(data)
    except ValidationError as e:
        raise InvalidResponseError(
            f"The content server returned an item without {_missing_fields(e)}"
        ) from e


def _missing_fields(error: ValidationError) -> str:
    names = {".".join(str(part) for part in err["loc"]) for err in error.errors()}
    return ", ".join(sorted(names)) or "the expected fields"


class ContentClient:
    """
    Client for the published content delivery API.

    Every request carries the channel token. Binary downloads go through a
    ``CacheProvider``: the cache supplies the ``If-None-Match`` header, a 304
    response is served from the cache and a 200 response is handed to the
    cache to store.
    """

    def __init__(
        self,
        base_url: str,
        channel_token: str,
        timeout: float = TIMEOUT_HTTP_DEFAULT,
        client: httpx.Client | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Content server URL (scheme and host)
            channel_token: Publishing channel token
            timeout: HTTP request timeout in seconds
            client: Optional preconfigured httpx client (used in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.channel_token = channel_token
        self.client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self) -> "ContentClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{DELIVERY_API_PATH}{path}"

    @default_retry
    def _get_json(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        params = {**params, "channelToken": self.channel_token}
        response = self.client.get(self._url(path), params=params)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError:
            log_api_call(path, "error", f"HTTP {response.status_code}", logger)
            raise
        log_api_call(path, logger=logger)

        try:
            data = response.json()
        except ValueError as e:
            content_type = response.headers.get("content-type", "unknown")
            raise InvalidResponseError(
                f"The content server returned {content_type} instead of JSON for {path}"
            ) from e
        if not isinstance(data, dict):
            raise InvalidResponseError()
        return data

    def read_asset(self, asset_id: str, expand_all: bool = False) -> Asset:
        """
        Read a content item or digital asset.

        Args:
            asset_id: Asset identifier
            expand_all: Expand referenced assets inline

        Returns:
            Asset
        """
        params = {"expand": "all"} if expand_all else {}
        data = self._get_json(f"/items/{asset_id}", params)
        return _validate_asset(data)

    def list_assets(self, asset_type: str, limit: int = LIST_ASSETS_LIMIT) -> list[Asset]:
        """
        List assets of a given type.

        Args:
            asset_type: Content type to filter on
            limit: Maximum number of items to return

        Returns:
            List of Asset objects
        """
        params = {"q": f'(type eq "{asset_type}")', "limit": limit}
        data = self._get_json("/items", params)
        items = data.get("items", [])
        if not isinstance(items, list):
            raise InvalidResponseError()
        return [_validate_asset(item) for item in items]

    @default_retry
    def _download(
        self, identifier: str, headers: dict[str, str], target_dir: Path
    ) -> tuple[int, dict[str, str], Path | None]:
        path = f"/assets/{identifier}/native"
        params = {"channelToken": self.channel_token}

        with self.client.stream("GET", self._url(path), params=params, headers=headers) as response:
            if response.status_code == httpx.codes.NOT_MODIFIED:
                log_api_call(path, "success", "304 Not Modified", logger)
                return response.status_code, {}, None

            if response.is_error:
                response.read()
                log_api_call(path, "error", f"HTTP {response.status_code}", logger)
                response.raise_for_status()

            filename = filename_from_disposition(
                response.headers.get("content-disposition")
            ) or identifier
            target = target_dir / filename
            with open(target, "wb") as f:
                for chunk in response.iter_bytes():
                    f.write(chunk)

            # Canonical header names, e.g. "etag" -> "Etag"
            response_headers = {name.title(): value for name, value in response.headers.items()}
            log_api_call(path, "success", f"downloaded {filename}", logger)
            return response.status_code, response_headers, target

    def download_native(
        self,
        identifier: str,
        cache: CacheProvider,
        cache_key: str | None = None,
    ) -> DownloadResult:
        """
        Download the native rendition of an asset through the cache.

        Args:
            identifier: Asset identifier
            cache: Cache provider to revalidate against and store into
            cache_key: Cache key (defaults to the identifier)

        Returns:
            DownloadResult with the local path

        Raises:
            CachedItemNotFoundError: Server answered 304 for an unknown key
            UnableToStoreError: Server answered 200 without an Etag
            httpx.HTTPStatusError: Any other error status
        """
        key = cache_key or identifier
        tmp_dir = Path(tempfile.mkdtemp(prefix="ardemo-download-"))
        try:
            status, headers, downloaded = self._download(
                identifier, cache.header_values(key), tmp_dir
            )
            if status == httpx.codes.NOT_MODIFIED:
                logger.info(f"Not modified, serving {key} from cache")
                return DownloadResult(path=cache.cached_item(key), status="cached")

            path = cache.store(downloaded, key, headers)
            return DownloadResult(path=path, status="downloaded")
        finally:
            shutil.rmtree(tmp_dir, ignore_errors=True)
