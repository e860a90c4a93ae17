"""Telegram command routing for the bot's private chats.

Commands are plain text: the first word is the command, the rest is the
argument. Replies are returned as Telegram HTML so the router stays free of
Telethon types and can be exercised directly in tests.
"""

from __future__ import annotations

import logging
from typing import Tuple

from adapters.notification_formatting import (
    format_help,
    format_removed_shows,
    format_schedule,
    format_show_added,
)
from core.errors import (
    AlreadyAdded,
    DatabaseError,
    InvalidIdentifier,
    InvalidUrl,
    NameNotFound,
    ScheduleTableError,
    ShowNotAvailable,
    ShowNotFound,
)
from core.watchlist import Watchlist

LOGGER = logging.getLogger(__name__)

UNKNOWN_COMMAND = "Command not recognized. Use the help command for a list of actions."
TRY_LATER = "Error communicating with database. Try again later."

REGISTERED_HELP = (
    ("help", "Shows this message"),
    ("unregister", "This will remove everything about you & your saved shows from the database."),
    ("add", "With add you can extend your watchlist. Pass a valid link of the show's overview page."),
    (
        "remove",
        "Remove lets you scrap shows from your watchlist. Use a link, the exact show name "
        "or the \"non-airing\" keyword to remove all non-airing shows.",
    ),
    ("schedule", "Prints a personal release schedule."),
    ("examples", "Couple of examples on how to use this bot."),
)

UNREGISTERED_HELP = (
    ("register", "Type this to unlock the functionality of the bot. Your user id will be saved."),
    ("help", "Shows this message"),
)

EXAMPLES = """<pre>
# add show
add https://{host}/shows/one-piece/
# remove show
remove https://{host}/shows/one-piece/
# also possible
remove One Piece
# remove every show that is not airing
remove non-airing
# delete everything about me
unregister
# display schedule
schedule
</pre>"""


def split_command(text: str) -> Tuple[str, str]:
    """Split at the first space into (command, argument)."""

    command, _, argument = text.partition(" ")
    return command, argument


class CommandRouter:
    """Turns one private message into one reply."""

    def __init__(self, watchlist: Watchlist, host: str) -> None:
        self._watchlist = watchlist
        self._host = host

    async def handle(self, user_id: int, text: str) -> str:
        try:
            registered = self._watchlist.is_registered(user_id)
        except DatabaseError:
            return TRY_LATER

        command, argument = split_command(text.strip())
        if registered:
            return await self._registered(user_id, command, argument)
        return self._unregistered(user_id, command)

    def _unregistered(self, user_id: int, command: str) -> str:
        if command == "register":
            try:
                self._watchlist.register(user_id)
            except DatabaseError:
                return "An error has occurred while registering. Please try again later."
            return "Successfully registered!"
        if command == "help":
            return format_help(UNREGISTERED_HELP)
        return UNKNOWN_COMMAND

    async def _registered(self, user_id: int, command: str, argument: str) -> str:
        if command == "help":
            return format_help(REGISTERED_HELP)
        if command == "examples":
            return EXAMPLES.format(host=self._host)
        if command == "unregister":
            return self._unregister(user_id)
        if command == "add":
            return await self._add(user_id, argument)
        if command == "remove" and argument == "non-airing":
            return self._remove_non_airing(user_id)
        if command == "remove":
            return self._remove(user_id, argument)
        if command == "schedule" and not argument:
            return self._schedule(user_id)
        return UNKNOWN_COMMAND

    def _unregister(self, user_id: int) -> str:
        try:
            self._watchlist.unregister(user_id)
        except DatabaseError:
            return "An error has occurred while unregistering. Please try again later."
        return "Successfully unregistered! Good bye!"

    async def _add(self, user_id: int, identifier: str) -> str:
        try:
            show = await self._watchlist.add_show(user_id, identifier)
        except AlreadyAdded:
            return "Show already added."
        except InvalidUrl:
            return "Invalid url. Use the url of a show page."
        except ShowNotAvailable:
            return "This show doesn't exist. Please check the identifier in the url."
        except NameNotFound:
            return "Adding by name is not supported (yet)."
        except DatabaseError:
            return TRY_LATER
        return format_show_added(show)

    def _remove(self, user_id: int, identifier: str) -> str:
        try:
            self._watchlist.remove_show(user_id, identifier)
        except InvalidIdentifier:
            return "Invalid url."
        except ShowNotFound:
            return (
                "I couldn't find a matching show in your watchlist. "
                "Give me the correct url of the show with this command."
            )
        except DatabaseError:
            return TRY_LATER
        return "Show removed from watchlist."

    def _remove_non_airing(self, user_id: int) -> str:
        try:
            removed = self._watchlist.remove_non_airing(user_id)
        except DatabaseError:
            return (
                "Something went wrong and only some or no shows at all have been removed. "
                "Try again later or remove the rest manually."
            )
        if not removed:
            return "I haven't found any shows on your watchlist that aren't airing."
        return format_removed_shows(removed)

    def _schedule(self, user_id: int) -> str:
        try:
            table = self._watchlist.schedule(user_id)
        except DatabaseError:
            return "Something went wrong, try again later."
        try:
            rows = table.printable_rows()
        except ScheduleTableError:
            LOGGER.exception("Inconsistent schedule table for user %s", user_id)
            return "Error generating table."
        return format_schedule(rows)
