"""SQLite storage adapter.

Implements the core StoragePort using a simple SQLite database.
"""

from __future__ import annotations

import sqlite3
from typing import List, Optional

from core.errors import StorageError
from core.models import AirTime, Show

CURSOR_KEY = "last_rss_guid"

_SHOW_COLUMNS = "id, name, image_url, synopsis, is_airing, week_day, hour, minute"


def _row_to_show(row: sqlite3.Row) -> Show:
    return Show(
        id=row["id"],
        name=row["name"],
        image_url=row["image_url"],
        synopsis=row["synopsis"],
        air_time=AirTime(
            is_airing=bool(row["is_airing"]),
            week_day=int(row["week_day"]),
            hour=int(row["hour"]),
            minute=int(row["minute"]),
        ),
    )


def _show_params(show: Show) -> tuple:
    return (
        show.id,
        show.name,
        show.image_url,
        show.synopsis,
        int(show.air_time.is_airing),
        show.air_time.week_day,
        show.air_time.hour,
        show.air_time.minute,
    )


class SQLiteStorage:
    """Thin SQLite wrapper that satisfies the StoragePort contract.

    Every call opens its own connection, so the adapter is safe to share
    between the poll job, the refresh job and chat commands. sqlite3 errors
    surface as StorageError.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(self._db_path, timeout=10)
            conn.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as exc:
            raise StorageError(str(exc)) from exc
        conn.row_factory = sqlite3.Row
        return conn

    def _execute(self, query: str, params: tuple = ()) -> sqlite3.Cursor:
        conn = self._connect()
        try:
            with conn:
                return conn.execute(query, params)
        except sqlite3.Error as exc:
            raise StorageError(str(exc)) from exc
        finally:
            conn.close()

    def _fetchall(self, query: str, params: tuple = ()) -> List[sqlite3.Row]:
        conn = self._connect()
        try:
            return conn.execute(query, params).fetchall()
        except sqlite3.Error as exc:
            raise StorageError(str(exc)) from exc
        finally:
            conn.close()

    def _fetchone(self, query: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        rows = self._fetchall(query, params)
        return rows[0] if rows else None

    def init_db(self) -> None:
        """Create tables if they do not exist.

        Tables:
        - shows: catalogued show metadata, never pruned
        - users: registered chat users
        - user_shows: which user tracks which show
        - program_state: key/value state such as the release cursor
        """

        conn = self._connect()
        try:
            with conn:
                # Non-airing shows store -1 in week_day/hour/minute.
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS shows (
                        id TEXT PRIMARY KEY,
                        name TEXT NOT NULL,
                        image_url TEXT NOT NULL,
                        synopsis TEXT NOT NULL,
                        is_airing INTEGER NOT NULL,
                        week_day INTEGER NOT NULL,
                        hour INTEGER NOT NULL,
                        minute INTEGER NOT NULL
                    )
                    """
                )
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS users (
                        id INTEGER PRIMARY KEY
                    )
                    """
                )
                # The composite key makes link insertion atomic per pair.
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS user_shows (
                        user_id INTEGER NOT NULL,
                        show_id TEXT NOT NULL REFERENCES shows(id),
                        PRIMARY KEY (user_id, show_id)
                    )
                    """
                )
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS program_state (
                        id TEXT PRIMARY KEY,
                        value TEXT NOT NULL
                    )
                    """
                )
        except sqlite3.Error as exc:
            raise StorageError(str(exc)) from exc
        finally:
            conn.close()

    # Shows

    def is_show_stored(self, show_id: str) -> bool:
        return self._fetchone("SELECT 1 FROM shows WHERE id = ?", (show_id,)) is not None

    def put_show(self, show: Show) -> None:
        """Insert a show, overwriting a concurrent first insert."""

        self._execute(
            f"""
            INSERT INTO shows ({_SHOW_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                name = excluded.name,
                image_url = excluded.image_url,
                synopsis = excluded.synopsis,
                is_airing = excluded.is_airing,
                week_day = excluded.week_day,
                hour = excluded.hour,
                minute = excluded.minute
            """,
            _show_params(show),
        )

    def update_show(self, show: Show) -> None:
        """Overwrite the refreshable fields of an existing show."""

        self._execute(
            """
            UPDATE shows SET image_url = ?, synopsis = ?, is_airing = ?,
                week_day = ?, hour = ?, minute = ?
            WHERE id = ?
            """,
            _show_params(show)[2:] + (show.id,),
        )

    def get_show(self, show_id: str) -> Optional[Show]:
        row = self._fetchone(f"SELECT {_SHOW_COLUMNS} FROM shows WHERE id = ?", (show_id,))
        return _row_to_show(row) if row else None

    def get_show_by_name(self, name: str) -> Optional[Show]:
        row = self._fetchone(f"SELECT {_SHOW_COLUMNS} FROM shows WHERE name = ?", (name,))
        return _row_to_show(row) if row else None

    def all_show_ids(self) -> List[str]:
        return [row["id"] for row in self._fetchall("SELECT id FROM shows ORDER BY id")]

    # Links

    def subscriber_ids(self, show_id: str) -> List[int]:
        rows = self._fetchall(
            "SELECT user_id FROM user_shows WHERE show_id = ? ORDER BY user_id",
            (show_id,),
        )
        return [int(row["user_id"]) for row in rows]

    def link_exists(self, user_id: int, show_id: str) -> bool:
        row = self._fetchone(
            "SELECT 1 FROM user_shows WHERE user_id = ? AND show_id = ?",
            (user_id, show_id),
        )
        return row is not None

    def link(self, user_id: int, show_id: str) -> bool:
        """Insert the link; return False if the pair already existed."""

        cur = self._execute(
            "INSERT OR IGNORE INTO user_shows (user_id, show_id) VALUES (?, ?)",
            (user_id, show_id),
        )
        return cur.rowcount == 1

    def unlink(self, user_id: int, show_id: str) -> None:
        self._execute(
            "DELETE FROM user_shows WHERE user_id = ? AND show_id = ?",
            (user_id, show_id),
        )

    def shows_for_user(self, user_id: int) -> List[Show]:
        rows = self._fetchall(
            """
            SELECT s.id, s.name, s.image_url, s.synopsis, s.is_airing,
                   s.week_day, s.hour, s.minute
            FROM shows s
            INNER JOIN user_shows us ON s.id = us.show_id
            WHERE us.user_id = ?
            ORDER BY s.name
            """,
            (user_id,),
        )
        return [_row_to_show(row) for row in rows]

    # Users

    def is_registered(self, user_id: int) -> bool:
        return self._fetchone("SELECT 1 FROM users WHERE id = ?", (user_id,)) is not None

    def register(self, user_id: int) -> None:
        self._execute("INSERT OR IGNORE INTO users (id) VALUES (?)", (user_id,))

    def unregister(self, user_id: int) -> None:
        """Delete the user together with all of their show links."""

        conn = self._connect()
        try:
            with conn:
                conn.execute("DELETE FROM user_shows WHERE user_id = ?", (user_id,))
                conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
        except sqlite3.Error as exc:
            raise StorageError(str(exc)) from exc
        finally:
            conn.close()

    # Release cursor

    def get_cursor(self) -> str:
        """Return the last processed release guid, or "" if none yet."""

        row = self._fetchone("SELECT value FROM program_state WHERE id = ?", (CURSOR_KEY,))
        return row["value"] if row else ""

    def set_cursor(self, guid: str) -> None:
        self._execute(
            """
            INSERT INTO program_state (id, value) VALUES (?, ?)
            ON CONFLICT(id) DO UPDATE SET value = excluded.value
            """,
            (CURSOR_KEY, guid),
        )
