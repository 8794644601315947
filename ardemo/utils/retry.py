"""Common retry decorators for delivery API calls.

Only transport failures (connection errors, timeouts) are retried. HTTP error
statuses and cache errors propagate immediately.
"""

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ardemo.constants import DEFAULT_MAX_RETRIES, DEFAULT_RETRY_MAX_WAIT, DEFAULT_RETRY_MIN_WAIT
from ardemo.services.logger_service import log_retry

# Default retry configuration used for every delivery API request
# - 3 attempts maximum
# - Exponential backoff: 2s, 4s, 8s (multiplier=1, min=2, max=10)
# - Each retry is logged as a warning before sleeping
# - Re-raises the exception after all attempts fail
default_retry = retry(
    stop=stop_after_attempt(DEFAULT_MAX_RETRIES),
    wait=wait_exponential(multiplier=1, min=DEFAULT_RETRY_MIN_WAIT, max=DEFAULT_RETRY_MAX_WAIT),
    retry=retry_if_exception_type(httpx.TransportError),
    before_sleep=log_retry,
    reraise=True,
)

__all__ = ["default_retry"]
