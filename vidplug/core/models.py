"""
Core Data Models - Pydantic models for the host's content data model.

Plugins map platform payloads into these shapes: videos, video details,
channels, author links and comments, each identified by a ``PlatformID``.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


# Claim type used by the host for platform-native IDs
DEFAULT_CLAIM_TYPE = 3


class PlatformID(BaseModel):
    """Identifies an item on a platform for a given plugin."""

    platform: str = Field(..., description="Platform name")
    value: str = Field(default="", description="Platform-native ID")
    plugin_id: str = Field(default="", description="ID of the plugin that produced the item")
    claim_type: int = Field(default=DEFAULT_CLAIM_TYPE, ge=0, description="Host claim type")

    def __str__(self) -> str:
        return f"{self.platform}:{self.value}"


class Thumbnail(BaseModel):
    """A single thumbnail image."""

    url: str = Field(default="", description="Image URL")
    quality: int = Field(default=0, ge=0, description="Image height, 0 when unknown")


class Thumbnails(BaseModel):
    """Set of thumbnails ordered from lowest to highest quality."""

    sources: List[Thumbnail] = Field(default_factory=list)

    @field_validator('sources')
    @classmethod
    def sort_by_quality(cls, v: List[Thumbnail]) -> List[Thumbnail]:
        return sorted(v, key=lambda t: t.quality)

    @property
    def best(self) -> Optional[Thumbnail]:
        """Highest quality thumbnail."""
        return self.sources[-1] if self.sources else None


class AuthorLink(BaseModel):
    """Link to the channel that published an item."""

    id: PlatformID
    name: str = ""
    url: str = ""
    thumbnail: str = ""
    subscribers: int = Field(default=0, ge=0)


class PlatformVideo(BaseModel):
    """A video as shown in feeds, search results and channel listings."""

    id: PlatformID
    name: str = Field(..., description="Video title")
    thumbnails: Thumbnails = Field(default_factory=Thumbnails)
    author: AuthorLink
    upload_date: int = Field(default=0, ge=0, description="Upload date as epoch seconds")
    duration: int = Field(default=0, ge=0, description="Duration in seconds")
    view_count: int = Field(default=0, ge=0)
    url: str = ""
    is_live: bool = False

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return v.strip()

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"


class VideoSource(BaseModel):
    """A playable stream of a video."""

    url: str
    container: str = Field(default="video/mp4", description="MIME type")
    name: str = ""
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)
    duration: int = Field(default=0, ge=0)


class PlatformVideoDetails(PlatformVideo):
    """Full video details, including description and playable sources."""

    description: str = ""
    video_sources: List[VideoSource] = Field(default_factory=list)
    rating: Optional[int] = Field(default=None, description="Like count when known")


class PlatformChannel(BaseModel):
    """A channel page."""

    id: PlatformID
    name: str
    thumbnail: str = ""
    banner: str = ""
    subscribers: int = Field(default=0, ge=0)
    description: str = ""
    url: str = ""
    url_alternatives: List[str] = Field(default_factory=list)
    links: Dict[str, str] = Field(default_factory=dict)

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"


class Comment(BaseModel):
    """A comment on a video."""

    context_url: str = Field(..., description="URL of the commented content")
    author: AuthorLink
    message: str = ""
    rating: int = Field(default=0, description="Like count")
    date: int = Field(default=0, ge=0, description="Epoch seconds")
    reply_count: int = Field(default=0, ge=0)
    context: Dict[str, str] = Field(default_factory=dict, description="Plugin data for fetching replies")


# Export all models
__all__ = [
    "DEFAULT_CLAIM_TYPE",
    "PlatformID",
    "Thumbnail",
    "Thumbnails",
    "AuthorLink",
    "PlatformVideo",
    "VideoSource",
    "PlatformVideoDetails",
    "PlatformChannel",
    "Comment",
]
