"""
Mappers - Convert platform payloads into the host data model.

Platform APIs disagree on field names (``title`` vs ``name``, ``views`` vs
``viewCount``), so each mapper tries the common spellings in order and falls
back to a safe default.
"""

import logging
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Optional

from vidplug.core.config_schemas import PluginConfig
from vidplug.core.models import (
    AuthorLink,
    PlatformChannel,
    PlatformID,
    PlatformVideo,
    Thumbnail,
    Thumbnails,
)


logger = logging.getLogger(__name__)


ISO_FRACTION_PATTERN = re.compile(r"(?<=\d{2}:\d{2}:\d{2})\.(\d+)")


def _pad_fraction(match: "re.Match") -> str:
    # fromisoformat before 3.11 only takes 3 or 6 digits
    return "." + match.group(1)[:6].ljust(6, "0")


def first_of(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """First truthy value among ``keys``."""
    for key in keys:
        value = data.get(key)
        if value:
            return value
    return default


def parse_timestamp(value: Any) -> int:
    """
    Convert an upload date to epoch seconds.

    Accepts epoch numbers, ISO 8601 strings (any number of fractional
    second digits) and RFC 2822 dates; naive datetimes are UTC.
    Unparseable values give 0.
    """
    if not value:
        return 0
    if isinstance(value, (int, float)):
        return int(value)

    text = str(value).strip()
    try:
        iso = ISO_FRACTION_PATTERN.sub(_pad_fraction, text.replace("Z", "+00:00"))
        parsed = datetime.fromisoformat(iso)
    except ValueError:
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError):
            logger.debug(f"Unparseable date: {value!r}")
            return 0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp())


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def safe_int(value: Any) -> int:
    """Non-negative int from a loosely typed count; bad input gives 0."""
    try:
        return max(int(value or 0), 0)
    except (TypeError, ValueError):
        return 0


def _platform_id(config: PluginConfig, value: str, plugin_id: str) -> PlatformID:
    return PlatformID(platform=config.name, value=str(value), plugin_id=plugin_id)


def author_link(plugin_id: str, asset: Dict[str, Any], config: PluginConfig) -> AuthorLink:
    """Author link from an asset's ``channel``/``author``, or the platform itself."""
    owner = asset.get("channel") or asset.get("author")
    if isinstance(owner, dict):
        return AuthorLink(
            id=_platform_id(config, _text(owner.get("id")), plugin_id),
            name=owner.get("name") or "",
            url=owner.get("url") or "",
            thumbnail=owner.get("avatar") or "",
            subscribers=safe_int(owner.get("subscribers")),
        )

    return AuthorLink(
        id=_platform_id(config, "unknown", plugin_id),
        name=config.name,
        url=config.platform_url,
    )


def asset_to_video(plugin_id: str, asset: Dict[str, Any], config: PluginConfig) -> PlatformVideo:
    """
    Map an API video asset to a ``PlatformVideo``.

    Args:
        plugin_id: ID of the plugin producing the item
        asset: Raw platform video object
        config: Plugin configuration (platform name and URL)

    Returns:
        Mapped video
    """
    video_id = _text(asset.get("id"))
    url = asset.get("url") or f"{config.platform_url}/video/{video_id}"
    thumbnail = first_of(asset, "image", "thumbnail", default="")

    return PlatformVideo(
        id=_platform_id(config, video_id, plugin_id),
        name=first_of(asset, "title", "name", default="Untitled"),
        thumbnails=Thumbnails(sources=[Thumbnail(url=thumbnail, quality=0)]),
        author=author_link(plugin_id, asset, config),
        upload_date=parse_timestamp(first_of(asset, "publishedAt", "createdAt", "uploadDate")),
        duration=safe_int(asset.get("duration")),
        view_count=safe_int(first_of(asset, "views", "viewCount")),
        url=url,
        is_live=bool(asset.get("isLive", False)),
    )


def channel_to_channel(
    plugin_id: str,
    channel: Dict[str, Any],
    config: PluginConfig,
    url: Optional[str] = None,
) -> PlatformChannel:
    """
    Map an API channel object to a ``PlatformChannel``.

    Args:
        plugin_id: ID of the plugin producing the item
        channel: Raw platform channel object
        config: Plugin configuration (platform name and URL)
        url: Canonical channel URL, when the caller already knows it

    Returns:
        Mapped channel
    """
    channel_id = _text(channel.get("id"))
    channel_url = url or channel.get("url") or f"{config.platform_url}/channel/{channel_id}"

    return PlatformChannel(
        id=_platform_id(config, channel_id, plugin_id),
        name=first_of(channel, "name", "displayName", default="Unknown Channel"),
        thumbnail=first_of(channel, "avatar", "thumbnail", "image", default=""),
        banner=first_of(channel, "banner", "cover", default=""),
        subscribers=safe_int(first_of(channel, "subscribers", "followerCount")),
        description=channel.get("description") or "",
        url=channel_url,
        url_alternatives=[channel_url],
        links=channel.get("links") or {},
    )


def scraped_item_to_video(plugin_id: str, item: Dict[str, Any], config: PluginConfig) -> PlatformVideo:
    """Map a scraped listing item (``title``, ``url``, ``thumbnail``) to a ``PlatformVideo``."""
    url = item.get("url") or ""
    video_id = url.rstrip("/").rsplit("/", 1)[-1] if url else ""

    return PlatformVideo(
        id=_platform_id(config, video_id, plugin_id),
        name=item.get("title") or "No title",
        thumbnails=Thumbnails(sources=[Thumbnail(url=item.get("thumbnail") or "")]),
        author=author_link(plugin_id, {}, config),
        duration=safe_int(item.get("duration")),
        url=url,
    )


__all__ = [
    "asset_to_video",
    "channel_to_channel",
    "scraped_item_to_video",
    "author_link",
    "parse_timestamp",
    "first_of",
    "safe_int",
]
