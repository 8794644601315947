"""Utility modules for common functionality."""

from ardemo.utils.retry import default_retry

__all__ = ["default_retry"]
