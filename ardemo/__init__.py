"""AR demo companion: deep links, ETag asset cache and content delivery."""

__version__ = "0.1.0"
