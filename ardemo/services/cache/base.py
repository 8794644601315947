"""
Cache provider interface used by conditional downloads.

The delivery client only talks to a ``CacheProvider``. The file-backed
``AssetCache`` is the production implementation; ``InMemoryCacheProvider``
keeps entries in a dict and is meant for tests and dry runs.
"""

import re
import shutil
import tempfile
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path

from ardemo.constants import ETAG_HEADER, IF_NONE_MATCH_HEADER
from ardemo.exceptions import CachedItemNotFoundError, UnableToStoreError
from ardemo.models import CacheEntry


def find_etag(headers: Mapping[str, str]) -> str | None:
    """
    Return the value of the first header named exactly ``Etag``.

    Header names are compared case-sensitively; callers are expected to
    canonicalize names before handing response headers to the cache.
    """
    etag_key = next((name for name in headers if name == ETAG_HEADER), None)
    if etag_key is None:
        return None
    return headers[etag_key]


def blob_name(key: str, filename: str) -> str:
    """
    Name under which the file downloaded for ``key`` is stored.

    Servers often hand out the same filename for different assets, so the
    key is prefixed to keep every key in its own file.
    """
    safe_key = re.sub(r"[^A-Za-z0-9._-]", "_", key)
    return f"{safe_key}_{filename}"


class CacheProvider(ABC):
    """Abstract interface for ETag-validated download caches."""

    @abstractmethod
    def header_values(self, key: str) -> dict[str, str]:
        """Conditional request headers to send when downloading ``key``."""
        ...

    @abstractmethod
    def cached_item(self, key: str) -> Path:
        """Path of the previously downloaded file for ``key``."""
        ...

    @abstractmethod
    def store(self, downloaded_file: Path, key: str, headers: Mapping[str, str]) -> Path:
        """Take ownership of a freshly downloaded file and return its new path."""
        ...

    @abstractmethod
    def clear(self) -> bool:
        """
        Forget every entry and delete every stored file.

        Returns:
            True if the cache was fully cleared
        """
        ...


class InMemoryCacheProvider(CacheProvider):
    """Dict-backed cache that still moves files into a private directory."""

    def __init__(self, blob_dir: Path | None = None):
        self.blob_dir = Path(blob_dir or tempfile.mkdtemp(prefix="ardemo-cache-"))
        self.blob_dir.mkdir(parents=True, exist_ok=True)
        self.items: dict[str, CacheEntry] = {}

    def header_values(self, key: str) -> dict[str, str]:
        entry = self.items.get(key)
        etag = entry.etag if entry and entry.etag else ""
        return {IF_NONE_MATCH_HEADER: etag}

    def cached_item(self, key: str) -> Path:
        entry = self.items.get(key)
        if entry is None:
            raise CachedItemNotFoundError(key)
        return self.blob_dir / entry.filename

    def store(self, downloaded_file: Path, key: str, headers: Mapping[str, str]) -> Path:
        etag = find_etag(headers)
        if etag is None:
            raise UnableToStoreError()

        filename = blob_name(key, Path(downloaded_file).name)
        new_path = self.blob_dir / filename
        if new_path.exists():
            new_path.unlink()
        shutil.move(str(downloaded_file), new_path)

        self.items[key] = CacheEntry(filename=filename, etag=etag)
        return new_path

    def clear(self) -> bool:
        self.items = {}
        shutil.rmtree(self.blob_dir, ignore_errors=True)
        self.blob_dir.mkdir(parents=True, exist_ok=True)
        return True
