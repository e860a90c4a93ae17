"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SiteConfig:
    """Where shows, the schedule, and download links live upstream."""

    base_url: str = "https://subsplease.org"
    schedule_url: str = "https://subsplease.org/api/?f=schedule&tz=Europe/Berlin"
    timeout_seconds: float = 20.0
    magnet_redirect: str = "https://yukino.static.app/?r="

    @property
    def host(self) -> str:
        return self.base_url.split("://", 1)[-1].rstrip("/")


@dataclass(frozen=True)
class FeedConfig:
    """Release feed location and polling interval."""

    url: str
    poll_seconds: int = 60


@dataclass(frozen=True)
class CatalogConfig:
    """Periodic catalog refresh settings."""

    refresh_hours: int = 24
    scrape_delay_seconds: float = 10.0
