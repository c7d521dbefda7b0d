"""
HTML Parsing - Document handle returned for ``parse_html`` requests.

Wraps BeautifulSoup with the selector helpers plugin code reaches for when
scraping listing and detail pages.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag


logger = logging.getLogger(__name__)


class HTMLParser:
    """Parsed HTML document with CSS selector helpers."""

    def __init__(self, html_content: str, base_url: str = ""):
        """
        Initialize HTML parser.

        Args:
            html_content: HTML content to parse
            base_url: Base URL for resolving relative links
        """
        self.soup = BeautifulSoup(html_content, 'html.parser')
        self.base_url = base_url

    def select(self, selector: str) -> List[Tag]:
        """All elements matching a CSS selector."""
        return self.soup.select(selector)

    def select_one(self, selector: str) -> Optional[Tag]:
        """First element matching a CSS selector, or None."""
        return self.soup.select_one(selector)

    def resolve(self, value: str) -> str:
        """Resolve a possibly relative URL against ``base_url``."""
        if self.base_url and value:
            return urljoin(self.base_url, value)
        return value

    def find_text(self, selector: str, default: str = "") -> str:
        """
        Find text content using CSS selector.

        Args:
            selector: CSS selector string
            default: Default value if element not found

        Returns:
            Text content or default value
        """
        element = self.soup.select_one(selector)
        if element:
            return element.get_text(strip=True)
        return default

    def find_attr(self, selector: str, attr: str, default: str = "") -> str:
        """
        Find attribute value using CSS selector.

        ``href`` and ``src`` values are resolved against ``base_url``.

        Args:
            selector: CSS selector string
            attr: Attribute name
            default: Default value if element/attribute not found

        Returns:
            Attribute value or default value
        """
        element = self.soup.select_one(selector)
        if element is None:
            return default
        value = attr_value(element, attr)
        if value is None:
            return default
        if attr in ('href', 'src'):
            return self.resolve(value)
        return value

    def find_all_text(self, selector: str) -> List[str]:
        """Text content of every element matching a CSS selector."""
        return [elem.get_text(strip=True) for elem in self.soup.select(selector)]

    def find_all_attrs(self, selector: str, attr: str) -> List[str]:
        """Attribute values of every element matching a CSS selector."""
        values = []
        for elem in self.soup.select(selector):
            value = attr_value(elem, attr)
            if value is None:
                continue
            if attr in ('href', 'src'):
                value = self.resolve(value)
            values.append(value)
        return values

    def meta(self, prop: str, default: str = "") -> str:
        """Content of a ``<meta property=...>`` or ``<meta name=...>`` tag."""
        element = self.soup.find("meta", attrs={"property": prop}) or self.soup.find("meta", attrs={"name": prop})
        if isinstance(element, Tag):
            return attr_value(element, "content") or default
        return default

    def extract_json_data(self, script_selector: str = "script") -> Dict[str, Any]:
        """
        Extract flat JSON objects embedded in script tags.

        Args:
            script_selector: CSS selector for script tags

        Returns:
            Merged dictionary of every JSON object found
        """
        json_data: Dict[str, Any] = {}

        for script in self.soup.select(script_selector):
            if not script.string:
                continue

            for match in re.findall(r'(\{[^{}]*\})', script.string):
                try:
                    data = json.loads(match)
                except json.JSONDecodeError:
                    continue
                if isinstance(data, dict):
                    json_data.update(data)

        return json_data


def attr_value(element: Tag, attr: str) -> Optional[str]:
    """Attribute value as a string; BeautifulSoup returns lists for some attributes."""
    if not element.has_attr(attr):
        return None
    value = element[attr]
    if isinstance(value, list):
        return value[0] if value else ""
    return value


def parse_html(html_content: str) -> HTMLParser:
    """Default HTML parsing capability for the request executor."""
    return HTMLParser(html_content)


__all__ = ["HTMLParser", "attr_value", "parse_html"]
