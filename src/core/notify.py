"""Release notification fan-out (core domain)."""

from __future__ import annotations

import logging
from urllib.parse import quote, quote_plus

from core.config import SiteConfig
from core.errors import DBShowError, DBUsersError, MappingShowIdError, StorageError
from core.models import FeedItem, Notification, Show
from core.ports import NotifierPort, StoragePort
from core.show_ids import category_to_show_id, show_page_url

LOGGER = logging.getLogger(__name__)

LOOKUP_SEARCH_URL = "https://myanimelist.net/search/all?q={query}&cat=all"


def build_notification(item: FeedItem, show: Show, site: SiteConfig) -> Notification:
    """Combine a release with its catalogued show into a notification."""

    return Notification(
        title=item.title,
        image_url=show.image_url,
        synopsis=show.synopsis,
        download_label=f"Download - {item.size}",
        download_url=f"{site.magnet_redirect}{quote(item.link, safe='')}",
        show_page_url=show_page_url(show.id, site.host),
        lookup_url=LOOKUP_SEARCH_URL.format(query=quote_plus(show.id)),
    )


class NotificationDispatcher:
    """Maps a release to its subscribers and notifies each of them."""

    def __init__(self, storage: StoragePort, notifier: NotifierPort, site: SiteConfig) -> None:
        self._storage = storage
        self._notifier = notifier
        self._site = site

    async def dispatch(self, item: FeedItem) -> int:
        """Notify every subscriber of the item's show; return deliveries made.

        A release for a show nobody tracks yields zero deliveries. Delivery
        failures are logged per user and do not stop the others.
        """

        show_id = category_to_show_id(item.category)
        if show_id is None:
            raise MappingShowIdError(f"Cannot map category {item.category!r} to a show id")

        try:
            user_ids = self._storage.subscriber_ids(show_id)
        except StorageError as exc:
            raise DBUsersError(f"Could not fetch subscribers of {show_id}") from exc
        if not user_ids:
            return 0

        try:
            show = self._storage.get_show(show_id)
        except StorageError as exc:
            raise DBShowError(f"Could not fetch show {show_id}") from exc
        if show is None:
            raise DBShowError(f"Show {show_id} is not catalogued")

        notification = build_notification(item, show, self._site)
        delivered = 0
        for user_id in user_ids:
            try:
                await self._notifier.send(user_id, notification)
            except Exception:
                LOGGER.exception("Couldn't notify user %s for %s", user_id, show.name)
                continue
            delivered += 1

        LOGGER.info("Notified %s/%s users about %s", delivered, len(user_ids), item.title)
        return delivered
