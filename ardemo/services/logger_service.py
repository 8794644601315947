"""Logging configuration and utilities."""

import logging
import time
from contextlib import contextmanager
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Generator

from rich.console import Console
from rich.logging import RichHandler
from tenacity import RetryCallState

from ardemo.config import Settings
from ardemo.constants import LOG_BACKUP_COUNT, LOG_FILE_PREFIX, LOG_ROTATION_BYTES

# Logs go to stderr so command output (deep links, tables) stays pipeable
console = Console(stderr=True)

DELIVERY_SERVICE = "Delivery"


def setup_logging(settings: Settings, verbose: bool = False) -> Path | None:
    """
    Configure logging for the application.

    Args:
        settings: Application settings (file logging switch and directory)
        verbose: Enable verbose (DEBUG) logging

    Returns:
        Path of the log file, or None when logging to the console only
    """
    log_level = logging.DEBUG if verbose else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []

    console_handler = RichHandler(
        rich_tracebacks=True,
        console=console,
        show_time=verbose,
        show_path=verbose,
        markup=False,
    )
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    log_file = None
    if settings.log_to_file:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_dir / f"{LOG_FILE_PREFIX}{timestamp}.log"

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=LOG_ROTATION_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)  # Always DEBUG in file
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)

    # httpx logs every request at INFO; delivery calls are logged by log_api_call
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    if log_file:
        logging.getLogger(__name__).debug(f"Logging to file: {log_file}")
    return log_file


@contextmanager
def log_performance(operation: str, logger: logging.Logger | None = None) -> Generator[None, None, None]:
    """
    Log how long an operation took, and whether it failed.

    Usage:
        with log_performance("Fetch mug assets", logger):
            ...
    """
    logger = logger or logging.getLogger(__name__)
    start_time = time.perf_counter()
    logger.debug(f"[{operation}] Starting...")

    try:
        yield
    except Exception:
        logger.warning(f"[{operation}] Failed after {time.perf_counter() - start_time:.2f}s")
        raise

    logger.info(f"[{operation}] Completed in {time.perf_counter() - start_time:.2f}s")


def log_api_call(
    endpoint: str,
    status: str = "success",
    details: str | None = None,
    logger: logging.Logger | None = None,
    service: str = DELIVERY_SERVICE,
) -> None:
    """
    Log a content server call.

    Args:
        endpoint: API path called
        status: Call status (success, error, retry)
        details: Additional details, e.g. the HTTP status
        logger: Logger instance (uses module logger if None)
        service: Service name shown in the log line
    """
    logger = logger or logging.getLogger(__name__)

    log_msg = f"[API] {service} | {endpoint} | {status.upper()}"
    if details:
        log_msg += f" | {details}"

    if status == "error":
        logger.error(log_msg)
    elif status == "retry":
        logger.warning(log_msg)
    else:
        logger.debug(log_msg)


def log_retry(retry_state: RetryCallState) -> None:
    """tenacity ``before_sleep`` hook reporting a retried delivery call."""
    error = retry_state.outcome.exception() if retry_state.outcome else None
    try:
        endpoint = error.request.url.path
    except (AttributeError, RuntimeError):
        # Transport errors raised before a request was attached
        endpoint = getattr(retry_state.fn, "__name__", "request")

    wait = retry_state.next_action.sleep if retry_state.next_action else 0.0
    log_api_call(
        endpoint,
        "retry",
        f"attempt {retry_state.attempt_number} failed ({type(error).__name__}: {error}), "
        f"retrying in {wait:.1f}s",
        logging.getLogger("ardemo.utils.retry"),
    )


def cleanup_old_logs(log_dir: Path, max_age_days: int = 7) -> int:
    """
    Delete log files older than max_age_days.

    Returns:
        Number of files deleted
    """
    logger = logging.getLogger(__name__)
    log_dir = Path(log_dir)
    if not log_dir.exists():
        return 0

    cutoff_time = time.time() - (max_age_days * 24 * 60 * 60)
    deleted_count = 0

    for log_file in log_dir.glob(f"{LOG_FILE_PREFIX}*.log*"):
        try:
            if log_file.stat().st_mtime < cutoff_time:
                log_file.unlink()
                deleted_count += 1
        except OSError as e:
            logger.warning(f"Could not remove old log file {log_file}: {e}")

    if deleted_count:
        logger.debug(f"Cleaned up {deleted_count} old log files (>{max_age_days} days)")
    return deleted_count
