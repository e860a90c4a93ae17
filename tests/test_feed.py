from __future__ import annotations

import pytest

from core.errors import (
    FeedParseError,
    InvalidFeedDocument,
    MissingFeedDescription,
    MissingFeedField,
    MissingFeedTitle,
    MissingItemCategory,
    MissingItemGuid,
    MissingItemLink,
    MissingItemPubDate,
    MissingItemSize,
    MissingItemTitle,
)
from core.feed import parse_feed
from fakes import rss_document, rss_item


def test_parses_channel_and_items_in_document_order() -> None:
    document = rss_document(
        rss_item("AAA", "One Piece - 1080", title="[SubsPlease] One Piece - 1071 (1080p)"),
        rss_item("BBB", "Megami-ryou no Ryoubo-kun. - 1080"),
    )

    feed = parse_feed(document)

    assert feed.title == "SubsPlease RSS"
    assert feed.description == "RSS feed for SubsPlease releases (1080p)"
    assert len(feed.items) == 2
    first, second = feed.items
    assert first.title == "[SubsPlease] One Piece - 1071 (1080p)"
    assert first.link == "magnet:?xt=urn:btih:AAA"
    assert first.guid == "AAA"
    assert first.pub_date == "Sun, 06 Aug 2023 02:02:32 +0000"
    assert first.category == "One Piece - 1080"
    assert first.size == "1.4 GiB"
    assert second.guid == "BBB"


def test_feed_without_items_is_valid() -> None:
    feed = parse_feed(rss_document())
    assert feed.items == []


def test_missing_channel_title() -> None:
    with pytest.raises(MissingFeedTitle):
        parse_feed(rss_document(rss_item("AAA", "One Piece - 1080"), title=""))


def test_missing_channel_description() -> None:
    document = (
        "<rss><channel><title>t</title>"
        + rss_item("AAA", "One Piece - 1080").replace("subsplease:size", "size")
        + "</channel></rss>"
    )
    with pytest.raises(MissingFeedDescription):
        parse_feed(document)


def test_missing_item_link_aborts_whole_parse() -> None:
    document = rss_document(
        rss_item("AAA", "One Piece - 1080"),
        rss_item("BBB", "Bleach - 1080", omit="link"),
    )
    with pytest.raises(MissingItemLink) as excinfo:
        parse_feed(document)
    assert excinfo.value.field == "item/link"


@pytest.mark.parametrize(
    ("omit", "error"),
    [
        ("title", MissingItemTitle),
        ("guid", MissingItemGuid),
        ("pubDate", MissingItemPubDate),
        ("category", MissingItemCategory),
        ("size", MissingItemSize),
    ],
)
def test_each_missing_item_field_has_its_own_error(omit: str, error: type) -> None:
    with pytest.raises(error):
        parse_feed(rss_document(rss_item("AAA", "One Piece - 1080", omit=omit)))


def test_missing_field_errors_are_distinct_from_invalid_document() -> None:
    assert issubclass(MissingItemLink, MissingFeedField)
    assert not issubclass(MissingItemLink, InvalidFeedDocument)
    assert issubclass(InvalidFeedDocument, FeedParseError)


def test_malformed_document() -> None:
    with pytest.raises(InvalidFeedDocument):
        parse_feed("<rss><channel><title>broken")
    with pytest.raises(InvalidFeedDocument):
        parse_feed("not available")


def test_document_without_channel() -> None:
    with pytest.raises(InvalidFeedDocument):
        parse_feed("<rss version='2.0'></rss>")
