"""Utility modules for shared functionality."""

from .constants import (
    DEFAULT_LISTING_TIMEOUT,
    DEFAULT_REPOSITORY_TIMEOUT,
    DEFAULT_RUN_TIMEOUT,
    MAX_PAGE_SIZE,
)
from .retry import NO_RETRY, RetryPolicy

__all__ = [
    "MAX_PAGE_SIZE",
    "DEFAULT_RUN_TIMEOUT",
    "DEFAULT_REPOSITORY_TIMEOUT",
    "DEFAULT_LISTING_TIMEOUT",
    "NO_RETRY",
    "RetryPolicy",
]
