"""HTTP adapter for the upstream release site.

Implements FeedSourcePort and ShowSourcePort with urllib. Calls are blocking,
so each one runs in a worker thread to keep the bot's event loop responsive.
"""

from __future__ import annotations

import asyncio
import http.client
import logging
import urllib.error
import urllib.request

from core.config import SiteConfig
from core.errors import SourceUnavailable
from core.show_ids import show_page_url

LOGGER = logging.getLogger(__name__)

USER_AGENT = "showbell/1.0 (+https://github.com/showbell/showbell)"


class HttpSource:
    """Fetches the release feed, show pages and the weekly schedule."""

    def __init__(self, feed_url: str, site: SiteConfig) -> None:
        self._feed_url = feed_url
        self._site = site

    def _get(self, url: str) -> str:
        request = urllib.request.Request(url, method="GET")
        request.add_header("User-Agent", USER_AGENT)
        try:
            with urllib.request.urlopen(request, timeout=self._site.timeout_seconds) as response:
                charset = response.headers.get_content_charset() or "utf-8"
                body = response.read()
        except urllib.error.HTTPError as e:
            raise SourceUnavailable(f"GET {url} returned {e.code}") from e
        except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
            raise SourceUnavailable(f"GET {url} failed: {e}") from e

        try:
            return body.decode(charset, errors="replace")
        except LookupError:
            LOGGER.warning("Unknown charset %r from %s, decoding as utf-8", charset, url)
            return body.decode("utf-8", errors="replace")

    async def _fetch(self, url: str) -> str:
        LOGGER.debug("Fetching %s", url)
        return await asyncio.to_thread(self._get, url)

    async def fetch_feed(self) -> str:
        return await self._fetch(self._feed_url)

    async def fetch_show_page(self, show_id: str) -> str:
        return await self._fetch(show_page_url(show_id, self._site.host))

    async def fetch_schedule(self) -> str:
        return await self._fetch(self._site.schedule_url)
