"""Show catalog: a read-through cache of scraped show metadata.

Shows are scraped the first time they are seen and persisted forever. A
periodic refresh re-scrapes every stored show because air times move between
seasons.
"""

from __future__ import annotations

import asyncio
import logging

from core.config import CatalogConfig, SiteConfig
from core.errors import ShowNotAvailable, SourceUnavailable, StorageError
from core.models import Show
from core.ports import ShowSourcePort, StoragePort
from core.scrape import find_air_time, parse_show_page

LOGGER = logging.getLogger(__name__)


class ShowCatalog:
    """Resolves show ids to stored shows, scraping on first sight."""

    def __init__(
        self,
        storage: StoragePort,
        source: ShowSourcePort,
        site: SiteConfig,
        catalog_config: CatalogConfig,
    ) -> None:
        self._storage = storage
        self._source = source
        self._site = site
        self._config = catalog_config
        self._refresh_lock = asyncio.Lock()

    async def scrape(self, show_id: str) -> Show:
        """Scrape one show from its page and the weekly schedule."""

        try:
            page = await self._source.fetch_show_page(show_id)
            image_url, synopsis, name = parse_show_page(page, self._site.base_url)
            schedule = await self._source.fetch_schedule()
        except SourceUnavailable as exc:
            raise ShowNotAvailable(f"{show_id}: {exc}") from exc
        air_time = find_air_time(schedule, show_id)
        return Show(
            id=show_id,
            name=name,
            image_url=image_url,
            synopsis=synopsis,
            air_time=air_time,
        )

    async def resolve_or_create(self, show_id: str) -> Show:
        """Return the stored show, scraping and storing it if unknown.

        Two concurrent first sights may both scrape; the store upserts so the
        last write wins.
        """

        stored = self._storage.get_show(show_id)
        if stored is not None:
            return stored

        show = await self.scrape(show_id)
        self._storage.put_show(show)
        LOGGER.info("Catalogued new show %s (%s)", show.id, show.name)
        return show

    async def refresh_all(self) -> int:
        """Re-scrape every stored show and return how many were updated.

        The first scrape failure aborts the rest of the batch so a sustained
        upstream outage is not hammered show by show.
        """

        if self._refresh_lock.locked():
            LOGGER.warning("Catalog refresh already running, skipping this trigger")
            return 0

        async with self._refresh_lock:
            try:
                show_ids = self._storage.all_show_ids()
            except StorageError:
                LOGGER.exception("Could not list shows for refresh")
                return 0

            updated = 0
            for index, show_id in enumerate(show_ids):
                if index and self._config.scrape_delay_seconds > 0:
                    await asyncio.sleep(self._config.scrape_delay_seconds)
                try:
                    show = await self.scrape(show_id)
                except ShowNotAvailable as exc:
                    LOGGER.error("Error updating show %s, aborting refresh: %s", show_id, exc)
                    break
                try:
                    self._storage.update_show(show)
                except StorageError:
                    LOGGER.exception("Error storing refreshed show %s", show_id)
                    continue
                updated += 1

            LOGGER.info("Catalog refresh complete: %s/%s shows updated", updated, len(show_ids))
            return updated
