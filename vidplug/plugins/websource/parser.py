"""
Web Source Parser - HTML parsing for listing and video pages.

Listing pages hold one anchor per video with an image carrying the title and
thumbnail; video pages describe themselves with OpenGraph tags and a
``<video>`` element.
"""

import logging
from typing import Any, Dict, List

from vidplug.network.html import HTMLParser, attr_value
from vidplug.plugins.websource.config import WebSourceConfig


logger = logging.getLogger(__name__)


class WebSourceParser:
    """Extracts listing items and video details from parsed pages."""

    def __init__(self, document: HTMLParser, config: WebSourceConfig, page_url: str = ""):
        """
        Initialize the parser.

        Args:
            document: Parsed page
            config: Selectors to scrape with
            page_url: URL the page was loaded from, for resolving links
        """
        self.document = document
        self.config = config
        if page_url:
            self.document.base_url = page_url

    def parse_listing(self) -> List[Dict[str, Any]]:
        """
        Parse the video items of a listing page.

        Returns:
            List of ``{title, url, thumbnail}`` dictionaries
        """
        results = []

        for item in self.document.select(self.config.item_selector):
            try:
                title_elem = item.select_one(self.config.title_selector)
                thumb_elem = item.select_one(self.config.thumbnail_selector)

                title = (attr_value(title_elem, self.config.title_attr) if title_elem else None) or "No title"
                thumbnail = (attr_value(thumb_elem, self.config.thumbnail_attr) if thumb_elem else None) or ""
                href = attr_value(item, "href") or ""

                results.append({
                    "title": title.strip(),
                    "url": self.document.resolve(href),
                    "thumbnail": self.document.resolve(thumbnail),
                })

            except Exception as e:
                logger.warning(f"Failed to parse listing item: {e}")
                continue

        logger.debug(f"Parsed {len(results)} listing items")
        return results

    def parse_details(self) -> Dict[str, Any]:
        """
        Parse a video page.

        Returns:
            Dictionary with ``title``, ``thumbnail``, ``description``,
            ``sources`` (list of ``{url, type}``), ``duration`` and
            ``view_count``
        """
        document = self.document
        config = self.config

        sources = []
        for element in document.select(config.video_source_selector):
            src = attr_value(element, "src")
            if not src:
                continue
            sources.append({
                "url": document.resolve(src),
                "type": attr_value(element, "type") or "video/mp4",
            })

        if not sources:
            sources = [
                {"url": src, "type": "video/mp4"}
                for src in document.find_all_attrs(config.video_element_selector, "src")
            ]

        thumbnail = document.meta("og:image") or document.resolve(document.find_attr(config.poster_selector, "poster"))
        description = document.meta("og:description") or "\n".join(document.find_all_text(config.description_selector))

        stats = document.extract_json_data(config.data_script_selector)

        return {
            "title": document.meta("og:title") or document.find_text("title", "Untitled"),
            "thumbnail": thumbnail,
            "description": description,
            "sources": sources,
            "duration": stats.get("duration"),
            "view_count": stats.get("views") or stats.get("viewCount"),
        }


__all__ = ["WebSourceParser"]
