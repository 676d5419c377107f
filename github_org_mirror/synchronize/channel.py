"""Bounded channel carrying repository pages from the lister to the coordinator."""

import asyncio
from typing import AsyncIterator

from github_org_mirror.schemas.repository import RepositoryPage
from github_org_mirror.synchronize.exceptions import PageChannelClosedError
from github_org_mirror.utils.constants import DEFAULT_PAGE_CHANNEL_SIZE


class PageChannel:
    """A FIFO of repository pages with explicit, single closure.

    ``publish`` blocks once ``maxsize`` pages are buffered, which is how a
    slow consumer applies backpressure to the lister. ``close`` never blocks,
    so a producer can always close the channel from a ``finally`` block, even
    while it is being cancelled.
    """

    def __init__(self, maxsize: int = DEFAULT_PAGE_CHANNEL_SIZE) -> None:
        """Initialize an open channel buffering at most ``maxsize`` pages."""
        if maxsize < 1:
            raise ValueError(f"maxsize must be at least 1, got {maxsize}")
        self._queue: asyncio.Queue[RepositoryPage | None] = asyncio.Queue()
        self._slots = asyncio.Semaphore(maxsize)
        self._closed = False
        self._drained = False
        self.published_count = 0

    @property
    def closed(self) -> bool:
        """Whether the producer has closed the channel."""
        return self._closed

    @property
    def drained(self) -> bool:
        """Whether the consumer has received every page and observed the closure."""
        return self._drained

    async def publish(self, page: RepositoryPage) -> None:
        """Append a page, waiting for buffer space if the channel is full.

        Raises:
            PageChannelClosedError: If the channel has already been closed.
        """
        if self._closed:
            raise PageChannelClosedError(f"Cannot publish page {page.page_number} to a closed channel")
        await self._slots.acquire()
        if self._closed:
            self._slots.release()
            raise PageChannelClosedError(f"Cannot publish page {page.page_number} to a closed channel")
        self._queue.put_nowait(page)
        self.published_count += 1

    def close(self) -> None:
        """Close the channel. Pages already published remain receivable.

        Raises:
            PageChannelClosedError: If the channel has already been closed.
        """
        if self._closed:
            raise PageChannelClosedError("Channel is already closed")
        self._closed = True
        self._queue.put_nowait(None)

    async def receive(self) -> RepositoryPage | None:
        """Wait for the next page; returns None once the channel is closed and drained."""
        if self._drained:
            return None
        page = await self._queue.get()
        if page is None:
            self._drained = True
            return None
        self._slots.release()
        return page

    def __aiter__(self) -> AsyncIterator[RepositoryPage]:
        """Iterate over pages until the channel is closed and drained."""
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[RepositoryPage]:
        while (page := await self.receive()) is not None:
            yield page
