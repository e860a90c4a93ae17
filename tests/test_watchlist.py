from __future__ import annotations

import asyncio
import json

import pytest

from core.catalog import ShowCatalog
from core.config import CatalogConfig, SiteConfig
from core.errors import (
    AlreadyAdded,
    DatabaseError,
    InvalidIdentifier,
    InvalidUrl,
    NameNotFound,
    ShowNotAvailable,
    ShowNotFound,
)
from core.watchlist import Watchlist
from fakes import FakeShowSource, FakeStorage, make_show, show_page

SCHEDULE = json.dumps({"tz": "Europe/Berlin", "schedule": {"Friday": [
    {"title": "One Piece", "page": "one-piece", "image_url": "/b.jpg", "time": "18:00"}
]}})

ONE_PIECE_URL = "https://subsplease.org/shows/one-piece/"


def _watchlist(storage: FakeStorage) -> Watchlist:
    source = FakeShowSource({"one-piece": show_page("One Piece")}, SCHEDULE)
    catalog = ShowCatalog(storage, source, SiteConfig(), CatalogConfig(scrape_delay_seconds=0))
    return Watchlist(storage, catalog, SiteConfig())


def test_add_same_show_twice_reports_already_added() -> None:
    storage = FakeStorage()
    watchlist = _watchlist(storage)

    show = asyncio.run(watchlist.add_show(7, ONE_PIECE_URL))
    with pytest.raises(AlreadyAdded):
        asyncio.run(watchlist.add_show(7, ONE_PIECE_URL))

    assert show.name == "One Piece"
    assert str(show.air_time) == "Friday, 18:00"
    assert storage.links == {(7, "one-piece")}


def test_add_rejects_foreign_urls_and_names() -> None:
    watchlist = _watchlist(FakeStorage())
    with pytest.raises(InvalidUrl):
        asyncio.run(watchlist.add_show(7, "http://subsplease.org/shows/one-piece/"))
    with pytest.raises(NameNotFound):
        asyncio.run(watchlist.add_show(7, "One Piece"))


def test_add_unknown_show_is_not_available() -> None:
    storage = FakeStorage()
    with pytest.raises(ShowNotAvailable):
        asyncio.run(_watchlist(storage).add_show(7, "https://subsplease.org/shows/nope/"))
    assert storage.links == set()


def test_add_with_broken_store_is_database_error() -> None:
    storage = FakeStorage()
    storage.fail_on.add("link")
    with pytest.raises(DatabaseError):
        asyncio.run(_watchlist(storage).add_show(7, ONE_PIECE_URL))


def test_remove_by_url_and_by_name() -> None:
    storage = FakeStorage()
    storage.put_show(make_show("one-piece", "One Piece"))
    storage.put_show(make_show("bleach", "Bleach"))
    storage.link(7, "one-piece")
    storage.link(7, "bleach")
    watchlist = _watchlist(storage)

    watchlist.remove_show(7, ONE_PIECE_URL)
    watchlist.remove_show(7, "Bleach")

    assert storage.links == set()


def test_remove_failures() -> None:
    storage = FakeStorage()
    watchlist = _watchlist(storage)
    with pytest.raises(ShowNotFound):
        watchlist.remove_show(7, ONE_PIECE_URL)
    with pytest.raises(ShowNotFound):
        watchlist.remove_show(7, "Unknown Show")
    with pytest.raises(InvalidIdentifier):
        watchlist.remove_show(7, "https://example.org/shows/one-piece/")


def test_remove_non_airing_keeps_airing_shows() -> None:
    storage = FakeStorage()
    storage.put_show(make_show("one-piece", "One Piece", week_day=4, hour=18))
    storage.put_show(make_show("conan", "Conan"))
    storage.link(7, "one-piece")
    storage.link(7, "conan")

    removed = _watchlist(storage).remove_non_airing(7)

    assert [show.id for show in removed] == ["conan"]
    assert storage.links == {(7, "one-piece")}


def test_register_unregister_cascades_links() -> None:
    storage = FakeStorage()
    storage.put_show(make_show("one-piece", "One Piece"))
    watchlist = _watchlist(storage)

    watchlist.register(7)
    storage.link(7, "one-piece")
    storage.link(8, "one-piece")
    assert watchlist.is_registered(7)

    watchlist.unregister(7)

    assert not watchlist.is_registered(7)
    assert storage.links == {(8, "one-piece")}


def test_schedule_for_user() -> None:
    storage = FakeStorage()
    storage.put_show(make_show("one-piece", "One Piece", week_day=0, hour=9))
    storage.link(7, "one-piece")

    rows = _watchlist(storage).schedule(7).printable_rows()

    assert rows[0] == ("Monday", "09:00 - One Piece")


def test_storage_failures_become_database_errors() -> None:
    storage = FakeStorage()
    storage.fail_on.update({"is_registered", "shows_for_user"})
    watchlist = _watchlist(storage)
    with pytest.raises(DatabaseError):
        watchlist.is_registered(7)
    with pytest.raises(DatabaseError):
        watchlist.schedule(7)
