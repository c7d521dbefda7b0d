"""
Plugin Layer - Content source implementations.

This module contains the source contract the host drives, the shared pager
and mappers, and the reference web video source.
"""

from vidplug.plugins.base import BaseSource, SourceMetadata
from vidplug.plugins.pagers import Page, Pager, empty_pager
from vidplug.plugins.common import (
    HTMLParser,
    asset_to_video,
    channel_to_channel,
    scraped_item_to_video,
)

__all__ = [
    # Base Source Architecture
    "BaseSource",
    "SourceMetadata",
    "Page",
    "Pager",
    "empty_pager",
    # Plugin Development Utilities
    "HTMLParser",
    "asset_to_video",
    "channel_to_channel",
    "scraped_item_to_video",
]
