"""
Asset cache implementation with ETag-based revalidation.
"""

import logging
import shutil
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ardemo.constants import IF_NONE_MATCH_HEADER
from ardemo.exceptions import (
    CachedItemNotFoundError,
    CacheInitializationError,
    UnableToStoreError,
)
from ardemo.models import CacheEntry

from .base import CacheProvider, blob_name, find_etag
from .storage import IndexStorage

logger = logging.getLogger(__name__)


class AssetCache(CacheProvider):
    """
    File-backed cache for downloaded assets.

    Files live in ``saved_files_dir`` under their downloaded filename,
    prefixed with the asset identifier, and a JSON listing associates each asset identifier with that filename and the
    ETag returned by the server. Every download is re-requested with
    ``If-None-Match``; a 304 response is served from the cache and a 200
    response replaces the cached file. There is no local expiry.
    """

    def __init__(self, listing_path: Path, saved_files_dir: Path):
        """
        Initialize asset cache.

        Args:
            listing_path: Path to the JSON listing file
            saved_files_dir: Directory for downloaded files

        Raises:
            CacheInitializationError: If the files directory cannot be created
        """
        self.saved_files_dir = Path(saved_files_dir)
        self._prepare_directory()

        self.storage = IndexStorage(listing_path)
        self.items: dict[str, CacheEntry] = self.storage.read()

        # Stats
        self.stats = {"hits": 0, "misses": 0, "stored": 0}

        logger.debug(
            f"Asset cache ready: {len(self.items)} entries in {self.saved_files_dir}"
        )

    def _prepare_directory(self) -> None:
        """Create the files directory, replacing a stray file of the same name."""
        try:
            if self.saved_files_dir.exists() and not self.saved_files_dir.is_dir():
                logger.warning(
                    f"Replacing file found at cache directory path: {self.saved_files_dir}"
                )
                self.saved_files_dir.unlink()
            self.saved_files_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheInitializationError(
                f"Unexpected error initializing the device cache location. Error: {e}"
            ) from e

    def __len__(self) -> int:
        return len(self.items)

    def __contains__(self, key: object) -> bool:
        return key in self.items

    def entries(self) -> dict[str, CacheEntry]:
        """Return a copy of the current index."""
        return dict(self.items)

    def header_values(self, key: str) -> dict[str, str]:
        """
        Get conditional request headers for an asset.

        Args:
            key: Asset identifier

        Returns:
            ``{"If-None-Match": etag}``, with an empty value for unknown keys
        """
        entry = self.items.get(key)
        etag = entry.etag if entry and entry.etag else ""
        return {IF_NONE_MATCH_HEADER: etag}

    def cached_item(self, key: str) -> Path:
        """
        Get the cached file for an asset.

        Called after the server answered 304 Not Modified.

        Args:
            key: Asset identifier

        Returns:
            Path to the cached file

        Raises:
            CachedItemNotFoundError: If the key is not in the index
        """
        entry = self.items.get(key)
        if entry is None:
            self.stats["misses"] += 1
            raise CachedItemNotFoundError(key)

        self.stats["hits"] += 1
        return self.saved_files_dir / entry.filename

    def store(self, downloaded_file: Path, key: str, headers: Mapping[str, str]) -> Path:
        """
        Move a downloaded file into the cache.

        Args:
            downloaded_file: Temporary file produced by the download
            key: Asset identifier
            headers: Response headers (canonical names, e.g. ``Etag``)

        Returns:
            Path to the cached file

        Raises:
            UnableToStoreError: If the response carried no ``Etag`` header
        """
        etag = find_etag(headers)
        if etag is None:
            logger.warning(f"No Etag header in response for {key}; not caching")
            raise UnableToStoreError()

        downloaded_file = Path(downloaded_file)
        filename = blob_name(key, downloaded_file.name)
        new_path = self.saved_files_dir / filename

        if new_path.exists():
            new_path.unlink()
        shutil.move(str(downloaded_file), new_path)

        self.items[key] = CacheEntry(filename=filename, etag=etag)
        self.storage.write(self.items)
        self.stats["stored"] += 1

        logger.info(f"Cached {key} as {filename} (etag {etag})")
        return new_path

    def clear(self) -> bool:
        """
        Remove all cached files and empty the listing.

        The listing is emptied first. If deleting the files then fails, the
        leftover files are unreferenced and the next clear removes them.

        Returns:
            True if both the listing and the files were cleared
        """
        try:
            self.storage.reset()
        except OSError as e:
            logger.error(f"Error while attempting to clear the cache listing: {e}")
            return False

        self.items = {}

        try:
            if self.saved_files_dir.exists():
                shutil.rmtree(self.saved_files_dir)
            self.saved_files_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Error while attempting to clear the cache directory: {e}")
            return False

        logger.info("Asset cache cleared")
        return True

    def get_stats(self) -> dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dict with cache stats
        """
        size_bytes = sum(
            path.stat().st_size
            for path in self.saved_files_dir.iterdir()
            if path.is_file()
        )
        return {
            "session": self.stats,
            "total_entries": len(self.items),
            "size_bytes": size_bytes,
        }
