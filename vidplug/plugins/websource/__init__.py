"""
Web Source Plugin - Reference source for HTML-listing video sites.

This plugin scrapes home, search and playlist listings, reads channels from a
JSON API, and extracts video details from OpenGraph tags.
"""

from .plugin import WebVideoSource
from .config import WebSourceConfig, validate_config
from .parser import WebSourceParser

__all__ = [
    "WebVideoSource",
    "WebSourceConfig",
    "validate_config",
    "WebSourceParser",
]
