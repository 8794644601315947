"""
JSON index storage backend for the asset cache.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from ardemo.models import CacheEntry

logger = logging.getLogger(__name__)


class IndexStorage:
    """JSON file mapping asset identifiers to cached filenames and ETags."""

    def __init__(self, listing_path: Path):
        """
        Initialize index storage.

        Args:
            listing_path: Path to the JSON listing file
        """
        self.listing_path = Path(listing_path)
        self.listing_path.parent.mkdir(parents=True, exist_ok=True)

    def read(self) -> dict[str, CacheEntry]:
        """
        Read the persisted listing.

        An absent or unparsable listing is treated as an empty index.

        Returns:
            Dict of identifier -> CacheEntry
        """
        if not self.listing_path.exists():
            return {}

        try:
            raw = json.loads(self.listing_path.read_text(encoding="utf-8"))
            return {key: CacheEntry.model_validate(value) for key, value in raw.items()}
        except (OSError, ValueError, AttributeError, ValidationError) as e:
            logger.error(f"Error reading the cache listing {self.listing_path}: {e}")
            return {}

    def write(self, items: dict[str, CacheEntry]) -> None:
        """
        Persist the whole listing.

        Args:
            items: Dict of identifier -> CacheEntry
        """
        data = {key: entry.model_dump() for key, entry in items.items()}
        try:
            self.listing_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            logger.error(f"Error writing the cache listing to {self.listing_path}: {e}")

    def reset(self) -> None:
        """
        Replace the listing with an empty JSON object.

        Raises:
            OSError: If the listing cannot be written
        """
        self.listing_path.write_text("{}", encoding="utf-8")
