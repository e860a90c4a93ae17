"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# Stored for every numeric AirTime field when a show is not airing.
NOT_AIRING = -1


@dataclass(frozen=True)
class AirTime:
    """Estimated weekly broadcast slot of a show."""

    is_airing: bool
    week_day: int = NOT_AIRING
    hour: int = NOT_AIRING
    minute: int = NOT_AIRING

    @classmethod
    def not_airing(cls) -> "AirTime":
        return cls(is_airing=False)

    def clock_stamp(self) -> str:
        if not self.is_airing:
            return ""
        return f"{self.hour:02d}:{self.minute:02d}"

    def weekday_name(self) -> str:
        if not self.is_airing:
            return ""
        return WEEKDAYS[self.week_day]

    def __str__(self) -> str:
        if not self.is_airing:
            return ""
        return f"{self.weekday_name()}, {self.clock_stamp()}"


@dataclass(frozen=True)
class Show:
    """A catalogued show, keyed by its slug."""

    id: str
    name: str
    image_url: str
    synopsis: str
    air_time: AirTime


@dataclass(frozen=True)
class FeedItem:
    """A single release as published in the feed."""

    title: str
    link: str
    guid: str
    pub_date: str
    category: str
    size: str


@dataclass(frozen=True)
class Feed:
    """Parsed feed channel. Items keep document order (newest first)."""

    title: str
    description: str
    items: List[FeedItem] = field(default_factory=list)


@dataclass(frozen=True)
class Notification:
    """Channel-agnostic release notification for a single user."""

    title: str
    image_url: str
    synopsis: str
    download_label: str
    download_url: str
    show_page_url: str
    lookup_url: str
