from __future__ import annotations

import asyncio

from core.config import SiteConfig
from core.errors import MappingShowIdError
from core.models import Feed, FeedItem
from core.notify import NotificationDispatcher
from core.releases import ReleasePoller, new_items, process_feed
from fakes import FakeFeedSource, FakeNotifier, FakeStorage, make_show, rss_document, rss_item


def _item(guid: str, category: str = "One Piece - 1080") -> FeedItem:
    return FeedItem(
        title=f"release {guid}",
        link=f"magnet:?xt={guid}",
        guid=guid,
        pub_date="Sun, 06 Aug 2023 02:02:32 +0000",
        category=category,
        size="1.4 GiB",
    )


class RecordingDispatcher:
    def __init__(self, failing: set[str] = frozenset()) -> None:
        self.dispatched: list[str] = []
        self._failing = failing

    async def dispatch(self, item: FeedItem) -> int:
        self.dispatched.append(item.guid)
        if item.guid in self._failing:
            raise MappingShowIdError(item.category)
        return 1


def test_new_items_stop_at_cursor() -> None:
    feed = Feed(title="t", description="d", items=[_item("A"), _item("B"), _item("C"), _item("D")])
    assert [item.guid for item in new_items(feed, "C")] == ["A", "B"]


def test_all_items_are_new_when_cursor_is_unknown() -> None:
    feed = Feed(title="t", description="d", items=[_item("A"), _item("B")])
    assert [item.guid for item in new_items(feed, "")] == ["A", "B"]


def test_cursor_advances_to_newest_even_if_an_item_fails() -> None:
    feed = Feed(title="t", description="d", items=[_item("A"), _item("B"), _item("C")])
    dispatcher = RecordingDispatcher(failing={"B"})

    cursor = asyncio.run(process_feed(feed, "C", dispatcher))

    assert dispatcher.dispatched == ["A", "B"]
    assert cursor == "A"


def test_empty_feed_keeps_cursor() -> None:
    dispatcher = RecordingDispatcher()
    cursor = asyncio.run(process_feed(Feed(title="t", description="d"), "C", dispatcher))
    assert cursor == "C"
    assert dispatcher.dispatched == []


def _poller(document, storage: FakeStorage, notifier: FakeNotifier) -> ReleasePoller:
    dispatcher = NotificationDispatcher(storage, notifier, SiteConfig())
    return ReleasePoller(FakeFeedSource(document), storage, dispatcher)


def test_poll_notifies_new_releases_and_persists_cursor() -> None:
    storage = FakeStorage()
    storage.put_show(make_show("one-piece", "One Piece"))
    storage.link(1, "one-piece")
    storage.cursor = "OLD"
    notifier = FakeNotifier()
    document = rss_document(
        rss_item("NEW2", "One Piece - 1080"),
        rss_item("NEW1", "No dash here"),
        rss_item("OLD", "One Piece - 1080"),
    )

    count = asyncio.run(_poller(document, storage, notifier).poll())

    assert count == 2
    assert [user for user, _ in notifier.sent] == [1]
    assert storage.cursor == "NEW2"


def test_poll_is_idempotent_for_same_snapshot() -> None:
    storage = FakeStorage()
    storage.put_show(make_show("one-piece", "One Piece"))
    storage.link(1, "one-piece")
    notifier = FakeNotifier()
    poller = _poller(rss_document(rss_item("A", "One Piece - 1080")), storage, notifier)

    asyncio.run(poller.poll())
    asyncio.run(poller.poll())

    assert len(notifier.sent) == 1
    assert storage.cursor_writes == ["A"]


def test_unreachable_feed_leaves_cursor_untouched() -> None:
    storage = FakeStorage()
    storage.cursor = "OLD"

    count = asyncio.run(_poller(None, storage, FakeNotifier()).poll())

    assert count == 0
    assert storage.cursor_writes == []


def test_unparseable_feed_leaves_cursor_untouched() -> None:
    storage = FakeStorage()
    storage.cursor = "OLD"

    asyncio.run(_poller("not available", storage, FakeNotifier()).poll())

    assert storage.cursor == "OLD"
    assert storage.cursor_writes == []


def test_overlapping_poll_is_skipped() -> None:
    storage = FakeStorage()
    notifier = FakeNotifier()
    poller = _poller(rss_document(rss_item("A", "One Piece - 1080")), storage, notifier)

    async def _overlap() -> int:
        async with poller._lock:
            return await poller.poll()

    assert asyncio.run(_overlap()) == 0
    assert storage.cursor_writes == []
