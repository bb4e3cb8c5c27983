"""Utility modules for shared functionality."""

from .constants import ADDON_MANIFEST_FILENAME, DEFAULT_MAX_PAGES, DEFAULT_ORGANIZATION, DEFAULT_PAGE_SIZE, DEFAULT_WINCCOA_VERSION
from .retry import retry_on_rate_limit

__all__ = [
    "ADDON_MANIFEST_FILENAME",
    "DEFAULT_MAX_PAGES",
    "DEFAULT_ORGANIZATION",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_WINCCOA_VERSION",
    "retry_on_rate_limit",
]
