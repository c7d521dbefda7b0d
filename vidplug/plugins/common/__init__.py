"""
Common utilities for plugin development.

This package contains mappers from platform payloads to the host data model,
shared by every source plugin.
"""

from vidplug.network.html import HTMLParser
from .mappers import (
    asset_to_video,
    channel_to_channel,
    scraped_item_to_video,
    parse_timestamp,
)

__all__ = [
    "HTMLParser",
    "asset_to_video",
    "channel_to_channel",
    "scraped_item_to_video",
    "parse_timestamp",
]
