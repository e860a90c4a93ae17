"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for storage, upstream sources and
notification adapters so that the core can be reused with different backends.
Storage returns None for absent records and raises StorageError on backend
failures; sources raise SourceUnavailable.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from core.models import Notification, Show


class StoragePort(Protocol):
    """Storage operations required by the core pipeline."""

    def is_show_stored(self, show_id: str) -> bool:
        ...

    def put_show(self, show: Show) -> None:
        ...

    def update_show(self, show: Show) -> None:
        ...

    def get_show(self, show_id: str) -> Optional[Show]:
        ...

    def get_show_by_name(self, name: str) -> Optional[Show]:
        ...

    def all_show_ids(self) -> List[str]:
        ...

    def subscriber_ids(self, show_id: str) -> List[int]:
        ...

    def link_exists(self, user_id: int, show_id: str) -> bool:
        ...

    def link(self, user_id: int, show_id: str) -> bool:
        """Insert the link atomically; return False if it already existed."""
        ...

    def unlink(self, user_id: int, show_id: str) -> None:
        ...

    def shows_for_user(self, user_id: int) -> List[Show]:
        ...

    def is_registered(self, user_id: int) -> bool:
        ...

    def register(self, user_id: int) -> None:
        ...

    def unregister(self, user_id: int) -> None:
        ...

    def get_cursor(self) -> str:
        ...

    def set_cursor(self, guid: str) -> None:
        ...


class FeedSourcePort(Protocol):
    """Fetches the raw release feed document."""

    async def fetch_feed(self) -> str:
        ...


class ShowSourcePort(Protocol):
    """Fetches show detail pages and the weekly schedule document."""

    async def fetch_show_page(self, show_id: str) -> str:
        ...

    async def fetch_schedule(self) -> str:
        ...


class NotifierPort(Protocol):
    """Notification operations required by the core pipeline."""

    async def send(self, user_id: int, notification: Notification) -> None:
        ...
