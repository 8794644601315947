"""
Recently used deep links, persisted per demo type.

Each distinct deep link the application receives is remembered so it can be
listed and replayed later without going back to the web client. This list is
unrelated to the asset cache.
"""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class RecentURLCache:
    """Append-only, de-duplicated list of URLs backed by a JSON array."""

    def __init__(self, file_location: Path):
        """
        Initialize the URL list.

        Args:
            file_location: Path to the JSON array file
        """
        self.file_location = Path(file_location)
        self.file_location.parent.mkdir(parents=True, exist_ok=True)
        self._items: list[str] = self.read()

    @property
    def items(self) -> list[str]:
        """URLs in insertion order."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def read(self) -> list[str]:
        """
        Read the persisted list.

        Returns:
            List of URLs, empty if the file is absent or invalid
        """
        if not self.file_location.exists():
            return []

        try:
            data = json.loads(self.file_location.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Error reading URL list {self.file_location}: {e}")
            return []

        if not isinstance(data, list):
            logger.error(f"URL list {self.file_location} is not a JSON array")
            return []
        return [str(url) for url in data]

    def write(self) -> None:
        """Persist the in-memory list."""
        try:
            self.file_location.write_text(json.dumps(self._items, indent=2), encoding="utf-8")
        except OSError as e:
            logger.error(f"Error writing URL list {self.file_location}: {e}")

    def store(self, url: str | None) -> bool:
        """
        Add a URL unless an equal one is already present.

        Args:
            url: URL to remember (None or empty is ignored)

        Returns:
            True if the list changed
        """
        if not url:
            return False

        if url in self._items:
            return False

        self._items.append(url)
        self.write()
        logger.debug(f"Remembered URL: {url}")
        return True

    def clear(self) -> None:
        """Remove all URLs."""
        self._items = []
        self.write()
