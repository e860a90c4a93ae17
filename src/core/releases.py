"""Release detection against a persisted cursor.

The cursor is the guid of the newest release already handled. The feed lists
releases newest first, so everything above the cursor is new. Polling is
restart-safe because the cursor lives in storage and is only written after a
whole feed snapshot has been processed.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List

from core.errors import FeedParseError, SourceUnavailable, StorageError
from core.feed import parse_feed
from core.models import Feed, FeedItem
from core.notify import NotificationDispatcher
from core.ports import FeedSourcePort, StoragePort

LOGGER = logging.getLogger(__name__)


def new_items(feed: Feed, cursor: str) -> List[FeedItem]:
    """Return the items listed before the cursor item, newest first."""

    fresh: List[FeedItem] = []
    for item in feed.items:
        if item.guid == cursor:
            break
        fresh.append(item)
    return fresh


async def process_feed(feed: Feed, cursor: str, dispatcher: NotificationDispatcher) -> str:
    """Notify for every new item and return the advanced cursor.

    The cursor always moves to the newest item, even when an older new item
    failed. Such a release is logged once and not retried.
    """

    if not feed.items:
        return cursor

    for item in new_items(feed, cursor):
        try:
            await dispatcher.dispatch(item)
        except Exception:
            LOGGER.exception("Error notifying for %s", item.title)

    return feed.items[0].guid


class ReleasePoller:
    """Runs one poll cycle at a time against the feed and stored cursor."""

    def __init__(
        self,
        source: FeedSourcePort,
        storage: StoragePort,
        dispatcher: NotificationDispatcher,
    ) -> None:
        self._source = source
        self._storage = storage
        self._dispatcher = dispatcher
        self._lock = asyncio.Lock()

    async def poll(self) -> int:
        """Fetch, detect and notify; return the number of new items seen."""

        if self._lock.locked():
            LOGGER.warning("Previous feed poll still running, skipping this trigger")
            return 0

        async with self._lock:
            try:
                document = await self._source.fetch_feed()
                feed = parse_feed(document)
            except (SourceUnavailable, FeedParseError) as exc:
                LOGGER.warning("Skipping feed poll: %s", exc)
                return 0

            if not feed.items:
                LOGGER.info("Feed has no items")
                return 0

            try:
                cursor = self._storage.get_cursor()
            except StorageError:
                LOGGER.exception("Could not read release cursor")
                return 0

            if feed.items[0].guid == cursor:
                return 0

            fresh = new_items(feed, cursor)
            new_cursor = await process_feed(feed, cursor, self._dispatcher)
            try:
                self._storage.set_cursor(new_cursor)
            except StorageError:
                LOGGER.exception("Could not persist release cursor %s", new_cursor)
            LOGGER.info("Processed %s new releases", len(fresh))
            return len(fresh)
