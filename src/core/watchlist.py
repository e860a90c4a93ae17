"""User watchlist operations.

These back the chat commands. Failures are WatchlistError subclasses, plus
ShowNotAvailable from the catalog when a new show cannot be scraped.
"""

from __future__ import annotations

import logging
from typing import List

from core.catalog import ShowCatalog
from core.config import SiteConfig
from core.errors import (
    AlreadyAdded,
    DatabaseError,
    InvalidIdentifier,
    InvalidUrl,
    NameNotFound,
    ShowNotFound,
    StorageError,
)
from core.models import Show
from core.ports import StoragePort
from core.schedule import ShowTable, build_show_table
from core.show_ids import show_id_from_url

LOGGER = logging.getLogger(__name__)


def _looks_like_url(identifier: str) -> bool:
    return "http" in identifier


class Watchlist:
    """Register users and manage the shows they track."""

    def __init__(self, storage: StoragePort, catalog: ShowCatalog, site: SiteConfig) -> None:
        self._storage = storage
        self._catalog = catalog
        self._site = site

    def is_registered(self, user_id: int) -> bool:
        try:
            return self._storage.is_registered(user_id)
        except StorageError as exc:
            LOGGER.error("Error checking user registration: %s", exc)
            raise DatabaseError() from exc

    def register(self, user_id: int) -> None:
        try:
            self._storage.register(user_id)
        except StorageError as exc:
            LOGGER.error("Error inserting user: %s", exc)
            raise DatabaseError() from exc

    def unregister(self, user_id: int) -> None:
        """Forget the user and every show link they had."""

        try:
            self._storage.unregister(user_id)
        except StorageError as exc:
            LOGGER.error("Error removing user: %s", exc)
            raise DatabaseError() from exc

    async def add_show(self, user_id: int, identifier: str) -> Show:
        """Track the show behind a show page URL.

        Raises AlreadyAdded when the user already tracks it, InvalidUrl for
        foreign URLs, NameNotFound for plain names and ShowNotAvailable when the
        page cannot be scraped.
        """

        show_id = show_id_from_url(identifier, self._site.host)
        if show_id is None:
            if _looks_like_url(identifier):
                raise InvalidUrl(identifier)
            # TODO: look shows up by fuzzy name once the catalog has a search index.
            raise NameNotFound(identifier)

        try:
            show = await self._catalog.resolve_or_create(show_id)
            inserted = self._storage.link(user_id, show_id)
        except StorageError as exc:
            raise DatabaseError() from exc
        if not inserted:
            raise AlreadyAdded(show_id)
        LOGGER.info("User %s added %s", user_id, show_id)
        return show

    def remove_show(self, user_id: int, identifier: str) -> None:
        """Stop tracking a show given its page URL or exact display name."""

        try:
            show_id = show_id_from_url(identifier, self._site.host)
            if show_id is not None:
                if not self._storage.link_exists(user_id, show_id):
                    raise ShowNotFound(show_id)
            elif _looks_like_url(identifier):
                raise InvalidIdentifier(identifier)
            else:
                show = self._storage.get_show_by_name(identifier)
                if show is None:
                    raise ShowNotFound(identifier)
                show_id = show.id
            self._storage.unlink(user_id, show_id)
        except StorageError as exc:
            raise DatabaseError() from exc
        LOGGER.info("User %s removed %s", user_id, show_id)

    def remove_non_airing(self, user_id: int) -> List[Show]:
        """Drop every tracked show without a current air time."""

        removed: List[Show] = []
        try:
            for show in self._storage.shows_for_user(user_id):
                if show.air_time.is_airing:
                    continue
                self._storage.unlink(user_id, show.id)
                removed.append(show)
        except StorageError as exc:
            raise DatabaseError() from exc
        return removed

    def schedule(self, user_id: int) -> ShowTable:
        try:
            shows = self._storage.shows_for_user(user_id)
        except StorageError as exc:
            raise DatabaseError() from exc
        return build_show_table(shows)
