"""
Web Source Configuration

This module holds the page paths and CSS selectors the reference web source
scrapes with. Values can be overridden from the plugin's ``constants`` block
under the ``webSource`` key.
"""

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator


logger = logging.getLogger(__name__)


WEB_SOURCE_CONSTANT = "webSource"


class WebSourceConfig(BaseModel):
    """Configuration model for the web video source."""

    # Listing pages
    videos_path: str = Field(default="/videos", description="Home feed listing path")
    search_path: str = Field(default="/search", description="Search listing path")
    page_param: str = Field(default="page", description="Query parameter carrying the page number")

    # Listing selectors
    item_selector: str = Field(default=".thumb a", description="Anchor of each listed video")
    title_selector: str = Field(default="img", description="Element inside the item carrying the title")
    title_attr: str = Field(default="alt", description="Attribute holding the title")
    thumbnail_selector: str = Field(default="img", description="Element inside the item carrying the thumbnail")
    thumbnail_attr: str = Field(default="src", description="Attribute holding the thumbnail URL")

    # Detail page
    video_source_selector: str = Field(default="video source", description="Playable source elements")
    video_element_selector: str = Field(default="video[src]", description="Video elements carrying their own src")
    poster_selector: str = Field(default="video[poster]", description="Video element carrying a poster image")
    description_selector: str = Field(default=".description p", description="Description paragraphs")
    data_script_selector: str = Field(default="script", description="Scripts embedding video stats as JSON")

    # JSON API
    channel_endpoint: str = Field(default="/channels/{id}", description="Channel API endpoint")
    channel_videos_endpoint: str = Field(default="/channels/{id}/videos", description="Channel videos API endpoint")

    # URL patterns
    channel_path_prefix: str = Field(default="/channel/", description="Path prefix of channel URLs")
    video_path_prefix: str = Field(default="/video/", description="Path prefix of video URLs")

    @field_validator('videos_path', 'search_path', 'channel_path_prefix', 'video_path_prefix')
    @classmethod
    def validate_path(cls, v: str) -> str:
        if not v.startswith("/"):
            return f"/{v}"
        return v


def validate_config(config: Optional[Dict[str, Any]] = None) -> WebSourceConfig:
    """
    Validate and create WebSourceConfig from a dictionary.

    Args:
        config: Overrides keyed by field name

    Returns:
        Validated WebSourceConfig instance

    Raises:
        ValueError: If configuration is invalid
    """
    try:
        return WebSourceConfig(**(config or {}))
    except ValidationError as e:
        logger.error(f"Invalid web source configuration: {e}")
        raise ValueError(f"Invalid web source configuration: {e}")


__all__ = ["WebSourceConfig", "validate_config", "WEB_SOURCE_CONSTANT"]
