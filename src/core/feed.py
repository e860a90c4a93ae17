"""Release feed parsing (core domain).

The feed is a plain RSS 2.0 document. SubsPlease adds a namespaced
``<subsplease:size>`` element per item, which is matched on its local name so
the namespace URI is not load-bearing.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import List, Optional, Type

from core.errors import (
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
from core.models import Feed, FeedItem


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child_text(element: ET.Element, name: str) -> Optional[str]:
    """Return the text of the first direct child with this local name."""

    for child in element:
        if isinstance(child.tag, str) and _local_name(child.tag) == name:
            return (child.text or "").strip()
    return None


def _required(element: ET.Element, name: str, error: Type[MissingFeedField]) -> str:
    value = _child_text(element, name)
    if value is None:
        raise error()
    return value


def _parse_item(element: ET.Element) -> FeedItem:
    # Field order matters: the first missing field decides the error.
    return FeedItem(
        title=_required(element, "title", MissingItemTitle),
        link=_required(element, "link", MissingItemLink),
        guid=_required(element, "guid", MissingItemGuid),
        pub_date=_required(element, "pubDate", MissingItemPubDate),
        category=_required(element, "category", MissingItemCategory),
        size=_required(element, "size", MissingItemSize),
    )


def parse_feed(document: str) -> Feed:
    """Parse an RSS document into a Feed.

    Raises InvalidFeedDocument for malformed markup and a MissingFeedField
    subclass for the first required field that is absent. No partial results
    are returned.
    """

    try:
        root = ET.fromstring(document)
    except ET.ParseError as exc:
        raise InvalidFeedDocument(f"Feed is not well-formed: {exc}") from exc

    channel = root if _local_name(root.tag) == "channel" else root.find("channel")
    if channel is None:
        raise InvalidFeedDocument("Feed has no <channel> element")

    title = _required(channel, "title", MissingFeedTitle)
    description = _required(channel, "description", MissingFeedDescription)
    items: List[FeedItem] = [_parse_item(element) for element in channel.findall("item")]
    return Feed(title=title, description=description, items=items)
