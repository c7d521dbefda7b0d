"""
Pagers - Cursor-driven result paging for the host.

One ``Pager`` covers every listing the host pages through (videos, channels,
comments). A pager owns a fetch coroutine that turns a cursor into a
``Page``; paging stops once a page comes back without a next cursor.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Generic, List, NamedTuple, Optional, TypeVar


logger = logging.getLogger(__name__)


T = TypeVar("T")


class Page(NamedTuple):
    """One page of results and the cursor for the next, or None when exhausted."""

    results: List[Any]
    next_cursor: Any = None


FetchPage = Callable[[Any], Awaitable[Page]]


class Pager(Generic[T]):
    """
    Pages through results produced by an async fetch function.

    Example:
        >>> pager = await Pager.start(fetch_videos, cursor=1)
        >>> while pager.has_more():
        ...     await pager.next_page()
    """

    def __init__(self, fetch: FetchPage, cursor: Any = None, context: Optional[Dict[str, Any]] = None):
        """
        Initialize the pager.

        Args:
            fetch: Coroutine function mapping a cursor to a ``Page``
            cursor: Cursor of the first page
            context: Free-form data describing what is paged
        """
        self.fetch = fetch
        self.cursor = cursor
        self.context = dict(context or {})
        self.results: List[T] = []
        self.pages_loaded = 0
        self._has_more = True

    @classmethod
    async def start(cls, fetch: FetchPage, cursor: Any = None, context: Optional[Dict[str, Any]] = None) -> "Pager[T]":
        """Create a pager with its first page already loaded."""
        pager = cls(fetch, cursor, context)
        await pager.next_page()
        return pager

    def has_more(self) -> bool:
        return self._has_more

    async def next_page(self) -> "Pager[T]":
        """
        Load the next page into ``results``.

        Once the pager is exhausted this is a no-op that leaves ``results``
        empty.

        Returns:
            The pager itself
        """
        if not self._has_more:
            self.results = []
            return self

        page = await self.fetch(self.cursor)
        self.pages_loaded += 1
        self.results = list(page.results)
        self.cursor = page.next_cursor
        self._has_more = page.next_cursor is not None

        logger.debug(f"Loaded page {self.pages_loaded} with {len(self.results)} results (has_more={self._has_more})")
        return self

    def __repr__(self) -> str:
        return f"Pager(cursor={self.cursor!r}, results={len(self.results)}, has_more={self._has_more})"


def empty_pager(kind: str, context: Optional[Dict[str, Any]] = None) -> Pager:
    """
    A pager with no results, for listings the platform does not support.

    The call is logged so plugin authors can see which listings the host
    asked for.

    Args:
        kind: Listing name, e.g. ``comments``
        context: The request that produced the pager (query, URL, ...)
    """
    async def fetch(cursor: Any) -> Page:
        logger.info(f"{kind} pager requested (not supported): {context or {}}")
        return Page([], None)

    pager: Pager = Pager(fetch, cursor=1, context=context)
    pager.context["kind"] = kind
    return pager


__all__ = ["Page", "Pager", "empty_pager"]
