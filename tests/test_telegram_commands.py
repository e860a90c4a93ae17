from __future__ import annotations

import asyncio
import json

from adapters.telegram_commands import TRY_LATER, UNKNOWN_COMMAND, CommandRouter, split_command
from core.catalog import ShowCatalog
from core.config import CatalogConfig, SiteConfig
from core.watchlist import Watchlist
from fakes import FakeShowSource, FakeStorage, make_show, show_page

SCHEDULE = json.dumps({"tz": "Europe/Berlin", "schedule": {}})
ONE_PIECE_URL = "https://subsplease.org/shows/one-piece/"


def _router(storage: FakeStorage) -> CommandRouter:
    source = FakeShowSource({"one-piece": show_page("One Piece")}, SCHEDULE)
    catalog = ShowCatalog(storage, source, SiteConfig(), CatalogConfig(scrape_delay_seconds=0))
    return CommandRouter(Watchlist(storage, catalog, SiteConfig()), "subsplease.org")


def _send(router: CommandRouter, text: str, user_id: int = 7) -> str:
    return asyncio.run(router.handle(user_id, text))


def test_split_command() -> None:
    assert split_command("add link") == ("add", "link")
    assert split_command("addlink") == ("addlink", "")
    assert split_command("add link and so on") == ("add", "link and so on")


def test_unregistered_users_can_only_register_or_get_help() -> None:
    storage = FakeStorage()
    router = _router(storage)

    assert _send(router, "schedule") == UNKNOWN_COMMAND
    assert "register" in _send(router, "help")
    assert _send(router, "register") == "Successfully registered!"
    assert 7 in storage.users


def test_add_twice_and_remove() -> None:
    storage = FakeStorage()
    storage.users.add(7)
    router = _router(storage)

    assert "Show successfully added!" in _send(router, f"add {ONE_PIECE_URL}")
    assert _send(router, f"add {ONE_PIECE_URL}") == "Show already added."
    assert _send(router, "add One Piece") == "Adding by name is not supported (yet)."
    assert _send(router, "add https://google.com/") == "Invalid url. Use the url of a show page."
    assert "doesn't exist" in _send(router, "add https://subsplease.org/shows/nope/")
    assert _send(router, f"remove {ONE_PIECE_URL}") == "Show removed from watchlist."
    assert "couldn't find" in _send(router, f"remove {ONE_PIECE_URL}")


def test_schedule_and_remove_non_airing() -> None:
    storage = FakeStorage()
    storage.users.add(7)
    storage.put_show(make_show("one-piece", "One Piece", week_day=0, hour=9))
    storage.put_show(make_show("conan", "Conan"))
    storage.link(7, "one-piece")
    storage.link(7, "conan")
    router = _router(storage)

    schedule = _send(router, "schedule")
    assert "<b>Monday</b>" in schedule
    assert "09:00 - One Piece" in schedule
    assert "Not currently airing:" in schedule
    assert "Tuesday" not in schedule

    removed = _send(router, "remove non-airing")
    assert "Conan" in removed
    assert "aren't airing" in _send(router, "remove non-airing")


def test_unregister() -> None:
    storage = FakeStorage()
    storage.users.add(7)
    router = _router(storage)

    assert _send(router, "unregister") == "Successfully unregistered! Good bye!"
    assert 7 not in storage.users


def test_backend_trouble_asks_to_try_later() -> None:
    storage = FakeStorage()
    storage.fail_on.add("is_registered")
    assert _send(_router(storage), "help") == TRY_LATER


def test_examples_use_configured_host() -> None:
    storage = FakeStorage()
    storage.users.add(7)
    assert ONE_PIECE_URL in _send(_router(storage), "examples")
