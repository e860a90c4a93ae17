"""Static configuration for showbell.

All user-editable settings (feed, site, catalog refresh, storage,
notifications, logging) live in a single JSON file for quick edits without
touching Python. Secrets stay in .env and are read by client.py and app.py.
"""

import json
import os

from core.config import CatalogConfig, FeedConfig, SiteConfig

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# config.json sits in the project root unless SHOWBELL_CONFIG points elsewhere.
CONFIG_PATH = os.getenv("SHOWBELL_CONFIG") or os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _resolve_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Upstream site: show pages, schedule JSON and the download redirect.
_site = _CONFIG.get("site", {})
SITE = SiteConfig(
    base_url=_site.get("base_url", SiteConfig.base_url).rstrip("/"),
    schedule_url=_site.get("schedule_url", SiteConfig.schedule_url),
    timeout_seconds=float(_site.get("timeout_seconds", SiteConfig.timeout_seconds)),
    magnet_redirect=_site.get("magnet_redirect", SiteConfig.magnet_redirect),
)

# Release feed polled on a short interval.
_feed = _CONFIG.get("feed", {})
FEED = FeedConfig(
    url=_feed.get("url", "https://subsplease.org/rss/?r=1080"),
    poll_seconds=int(_feed.get("poll_seconds", 60)),
)

# Daily catalog refresh; the delay keeps us polite towards the upstream site.
_catalog = _CONFIG.get("catalog", {})
CATALOG = CatalogConfig(
    refresh_hours=int(_catalog.get("refresh_hours", 24)),
    scrape_delay_seconds=float(_catalog.get("scrape_delay_seconds", 10)),
)

# Where to store the SQLite database.
DB_PATH = _resolve_path(_CONFIG.get("storage", {}).get("db_path", "showbell.db"))

# Notification method switches adapters without changing core logic.
# - "client": DM through the running Telethon bot client
# - "bot_api": plain HTTPS calls to the Bot API
_notifications = _CONFIG.get("notifications", {})
NOTIFICATION_METHOD = _notifications.get("notification_method", "client")

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
