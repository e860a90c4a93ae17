"""Application entry point for the showbell bot."""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from art import tprint
from dotenv import load_dotenv
from telethon import events

import settings
from adapters.http_sources import HttpSource
from adapters.sqlite_storage import SQLiteStorage
from adapters.telegram_bot_notifier import TelegramBotNotifier
from adapters.telegram_commands import CommandRouter
from adapters.telegram_notifier import TelegramClientNotifier
from client import bot_token, build_client
from core.catalog import ShowCatalog
from core.notify import NotificationDispatcher
from core.releases import ReleasePoller
from core.watchlist import Watchlist

NAME = "SHOWBELL"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/showbell.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)
    # APScheduler logs every job execution at INFO.
    logging.getLogger("apscheduler").setLevel(max(level, logging.WARNING))


@dataclass
class _Services:
    storage: SQLiteStorage
    catalog: ShowCatalog
    poller: ReleasePoller
    router: CommandRouter


def _build_notifier(client):
    if settings.NOTIFICATION_METHOD == "bot_api":
        return TelegramBotNotifier(bot_token(), timeout_seconds=settings.SITE.timeout_seconds)
    if settings.NOTIFICATION_METHOD == "client":
        return TelegramClientNotifier(client)
    raise RuntimeError("notification_method must be 'client' or 'bot_api'")


def _build_services(client) -> _Services:
    storage = SQLiteStorage(settings.DB_PATH)
    storage.init_db()

    source = HttpSource(settings.FEED.url, settings.SITE)
    catalog = ShowCatalog(storage, source, settings.SITE, settings.CATALOG)
    dispatcher = NotificationDispatcher(storage, _build_notifier(client), settings.SITE)
    poller = ReleasePoller(source, storage, dispatcher)
    router = CommandRouter(Watchlist(storage, catalog, settings.SITE), settings.SITE.host)
    return _Services(storage=storage, catalog=catalog, poller=poller, router=router)


def _start_client():
    client = build_client()
    client.start(bot_token=bot_token())
    return client


def _schedule_jobs(client, services: _Services) -> AsyncIOScheduler:
    scheduler = AsyncIOScheduler(event_loop=client.loop)

    scheduler.add_job(
        services.poller.poll,
        trigger=IntervalTrigger(seconds=settings.FEED.poll_seconds),
        id="poll_release_feed",
        name="Poll release feed",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        # Run once immediately on startup
        next_run_time=datetime.now(),
    )

    scheduler.add_job(
        services.catalog.refresh_all,
        trigger=IntervalTrigger(hours=settings.CATALOG.refresh_hours),
        id="refresh_catalog",
        name="Refresh show catalog",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    scheduler.start()
    return scheduler


def _run() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting showbell")

    client = _start_client()
    services = _build_services(client)
    logger.info("Selected notification method - %s", settings.NOTIFICATION_METHOD)

    # Private messages only; everything else is ignored.
    @client.on(events.NewMessage(incoming=True, func=lambda e: e.is_private))
    async def handler(event) -> None:
        try:
            sender = await event.get_sender()
            if sender is None or getattr(sender, "bot", False):
                return
            async with client.action(event.chat_id, "typing"):
                reply = await services.router.handle(event.sender_id, event.raw_text or "")
            await event.reply(reply, parse_mode="html")
        except Exception:
            logger.exception("Error while handling command")
            await event.reply("Something went wrong, try again later.")

    scheduler = _schedule_jobs(client, services)
    logger.info(
        "Bot connected. Polling every %ss, refreshing catalog every %sh",
        settings.FEED.poll_seconds,
        settings.CATALOG.refresh_hours,
    )
    try:
        client.run_until_disconnected()
    finally:
        scheduler.shutdown(wait=False)


def _run_once(job: str) -> None:
    _configure_logging()
    logger = logging.getLogger(__name__)

    client = _start_client()
    services = _build_services(client)
    try:
        if job == "poll":
            count = client.loop.run_until_complete(services.poller.poll())
            logger.info("Poll finished with %s new releases", count)
        else:
            count = client.loop.run_until_complete(services.catalog.refresh_all())
            logger.info("Refresh finished with %s shows updated", count)
    finally:
        client.loop.run_until_complete(client.disconnect())


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="showbell")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the bot with feed polling and catalog refresh")
    subparsers.add_parser("poll", help="Poll the release feed once and exit")
    subparsers.add_parser("refresh", help="Re-scrape every catalogued show once and exit")

    args = parser.parse_args(argv)
    if args.command in {"poll", "refresh"}:
        _run_once(args.command)
        return
    _run()


if __name__ == "__main__":
    main()
