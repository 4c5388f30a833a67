"""Centralized logging configuration for the workbench server."""

import logging
import os
import sys
import time
from contextlib import contextmanager
from functools import wraps
from typing import Callable, Generator, Optional, TypeVar

SIMPLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"
)

LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"

# Third-party loggers capped at WARNING unless LOG_LEVEL is DEBUG
NOISY_LOGGERS = (
    "httpx",
    "httpcore",
    "uvicorn.access",
    "google.auth",
    "google.cloud",
    "urllib3",
    "sse_starlette",
)

T = TypeVar("T")


def setup_logging(level: Optional[str] = None) -> None:
    """Configure logging for the entire application.

    Args:
        level: Log level override. If not provided, uses LOG_LEVEL env var or INFO.
    """
    level_name = (level or os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)).upper()
    log_level = getattr(logging, level_name, logging.INFO)
    debug = log_level == logging.DEBUG

    logging.basicConfig(
        level=log_level,
        format=DETAILED_FORMAT if debug else SIMPLE_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)


@contextmanager
def log_timing(
    logger: logging.Logger, operation: str, level: int = logging.DEBUG
) -> Generator[None, None, None]:
    """Log how long the enclosed block took.

    Example:
        with log_timing(logger, "Export 12 conversations"):
            evalset = await export_conversations(storage, ids)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        duration_ms = (time.perf_counter() - start) * 1000
        logger.log(level, "%s completed in %.1fms", operation, duration_ms)


def timed(
    operation: Optional[str] = None, level: int = logging.DEBUG
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator that logs the latency of an async function."""

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        op_name = operation or func.__name__

        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            logger = logging.getLogger(func.__module__)
            start = time.perf_counter()
            try:
                return await func(*args, **kwargs)
            finally:
                duration_ms = (time.perf_counter() - start) * 1000
                logger.log(level, "%s completed in %.1fms", op_name, duration_ms)

        return wrapper

    return decorator
