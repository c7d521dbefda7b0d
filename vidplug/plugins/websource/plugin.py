"""
Web Video Source - Reference source for sites with HTML listings and a JSON API.

Home feed, search and playlists are scraped from HTML listing pages; channel
pages come from the platform's JSON API; video details are read from the
video page's OpenGraph tags and ``<video>`` element.
"""

import logging
from typing import Any, Dict, List, Optional, Set, Union
from urllib.parse import urlencode, urlparse

from vidplug.core.config_schemas import PluginConfig
from vidplug.core.exceptions import InvalidDataError, NetworkError, NotFoundError, PluginError, VidPlugError
from vidplug.core.models import (
    PlatformChannel,
    PlatformID,
    PlatformVideoDetails,
    Thumbnail,
    Thumbnails,
    VideoSource,
)
from vidplug.plugins.base import BaseSource
from vidplug.plugins.common.mappers import (
    asset_to_video,
    author_link,
    channel_to_channel,
    safe_int,
    scraped_item_to_video,
)
from vidplug.plugins.pagers import Page, Pager
from vidplug.plugins.websource.config import WEB_SOURCE_CONSTANT, WebSourceConfig, validate_config
from vidplug.plugins.websource.parser import WebSourceParser


logger = logging.getLogger(__name__)


class WebVideoSource(BaseSource):
    """
    Source plugin for a video site with HTML listings and a JSON channel API.

    Selectors and paths come from ``WebSourceConfig``; a plugin config can
    override them under ``constants.webSource``.
    """

    def __init__(self, *args: Any, web_config: Optional[WebSourceConfig] = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.web_config = web_config or WebSourceConfig()

    async def enable(
        self,
        config: Union[PluginConfig, Dict[str, Any]],
        settings: Optional[Dict[str, str]] = None,
        saved_state: Optional[str] = None,
    ) -> None:
        await super().enable(config, settings, saved_state)

        overrides = self.settings.get_constant(WEB_SOURCE_CONSTANT)
        if overrides:
            self.web_config = validate_config(overrides)

    def _known_hosts(self) -> Set[str]:
        hosts = set()
        if self.config is not None:
            urls = [self.config.platform_url]
            setting = self.config.get_setting("baseUrl")
            if setting:
                urls.extend(setting.options)
            hosts = {urlparse(u).netloc for u in urls if u}
        return hosts

    def _path_of(self, url: str) -> Optional[str]:
        """Path of ``url`` when it points at this platform."""
        parsed = urlparse(url)
        if parsed.netloc not in self._known_hosts():
            return None
        return parsed.path

    def _channel_id(self, url: str) -> str:
        path = self._path_of(url) or ""
        prefix = self.web_config.channel_path_prefix
        if not path.startswith(prefix):
            raise PluginError(f"Not a channel URL: {url}", plugin_name=self.metadata.name)
        return path[len(prefix):].strip("/").split("/")[0]

    async def _fetch_listing(self, url: str) -> List[Any]:
        """Scrape a listing page into ``PlatformVideo`` items."""
        document = await self.require_client().get_html(url)
        items = WebSourceParser(document, self.web_config, page_url=url).parse_listing()
        return [scraped_item_to_video(self.plugin_id, item, self.config) for item in items]

    async def _listing_pager(self, path: str, params: Optional[Dict[str, str]] = None) -> Pager:
        """Pager over ``path`` with the page number in the query string."""
        self.require_client()

        async def fetch(page: int) -> Page:
            query = urlencode({**(params or {}), self.web_config.page_param: page})
            url = self.api.get_url(f"{path}?{query}")
            videos = await self._fetch_listing(url)
            return Page(videos, page + 1 if videos else None)

        return await Pager.start(fetch, cursor=1, context={"path": path, **(params or {})})

    async def get_home(self) -> Pager:
        return await self._listing_pager(self.web_config.videos_path)

    async def search(self, query: str, type: Optional[str] = None, order: Optional[str] = None,
                     filters: Optional[Dict[str, List[str]]] = None) -> Pager:
        self.logger.debug(f"Searching for '{query}'")
        return await self._listing_pager(self.web_config.search_path, {"q": query})

    async def get_playlist_contents(self, url: str) -> Pager:
        """Videos listed on a playlist page; a single page."""
        async def fetch(cursor: Any) -> Page:
            return Page(await self._fetch_listing(url), None)

        return await Pager.start(fetch, context={"url": url})

    def is_channel_url(self, url: str) -> bool:
        path = self._path_of(url)
        return path is not None and path.startswith(self.web_config.channel_path_prefix)

    def is_content_details_url(self, url: str) -> bool:
        path = self._path_of(url)
        return path is not None and path.startswith(self.web_config.video_path_prefix)

    async def get_channel(self, url: str) -> PlatformChannel:
        self.require_client()
        channel_id = self._channel_id(url)
        endpoint = self.web_config.channel_endpoint.format(id=channel_id)

        try:
            data = await self.api.get_json(endpoint)
        except NetworkError as e:
            if e.status_code == 404:
                raise NotFoundError(f"Channel not found: {url}")
            raise PluginError(f"Failed to load channel {url}: {e}", plugin_name=self.metadata.name)

        if not isinstance(data, dict):
            raise InvalidDataError(f"Unexpected channel payload for {url}", details=data)

        return channel_to_channel(self.plugin_id, data, self.config, url=url)

    async def get_channel_contents(self, url: str, type: Optional[str] = None, order: Optional[str] = None,
                                   filters: Optional[Dict[str, List[str]]] = None) -> Pager:
        self.require_client()
        channel_id = self._channel_id(url)
        endpoint = self.web_config.channel_videos_endpoint.format(id=channel_id)

        async def fetch(page: int) -> Page:
            data = await self.api.get_json(f"{endpoint}?{urlencode({self.web_config.page_param: page})}")
            if isinstance(data, dict):
                data = data.get("videos") or data.get("items") or data.get("results") or []
            if not isinstance(data, list):
                raise InvalidDataError(f"Unexpected channel videos payload for {url}", details=data)

            videos = [asset_to_video(self.plugin_id, asset, self.config) for asset in data]
            return Page(videos, page + 1 if videos else None)

        return await Pager.start(fetch, cursor=1, context={"url": url})

    async def get_content_details(self, url: str) -> PlatformVideoDetails:
        try:
            document = await self.require_client().get_html(url)
        except VidPlugError as e:
            raise PluginError(f"Failed to load video page {url}: {e}", plugin_name=self.metadata.name)

        details = WebSourceParser(document, self.web_config, page_url=url).parse_details()
        video_id = urlparse(url).path.rstrip("/").rsplit("/", 1)[-1]

        return PlatformVideoDetails(
            id=PlatformID(platform=self.config.name, value=video_id, plugin_id=self.plugin_id),
            name=details["title"] or "Untitled",
            thumbnails=Thumbnails(sources=[Thumbnail(url=details["thumbnail"])]),
            author=author_link(self.plugin_id, {}, self.config),
            url=url,
            duration=safe_int(details["duration"]),
            view_count=safe_int(details["view_count"]),
            description=details["description"],
            video_sources=[
                VideoSource(url=source["url"], container=source["type"])
                for source in details["sources"]
            ],
        )


__all__ = ["WebVideoSource"]
