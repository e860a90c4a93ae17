"""Failure taxonomy for the core.

Each failure kind gets its own exception class so callers can branch on the
exact outcome instead of inspecting messages.
"""

from __future__ import annotations


class ShowbellError(Exception):
    """Base class for all showbell failures."""


# Parse errors


class FeedParseError(ShowbellError):
    """The feed document could not be turned into a Feed."""


class InvalidFeedDocument(FeedParseError):
    """The document is not well-formed or has no channel."""


class MissingFeedField(FeedParseError):
    """A required channel or item field is absent."""

    field = ""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or f"Missing required feed field: {self.field}")


class MissingFeedTitle(MissingFeedField):
    field = "channel/title"


class MissingFeedDescription(MissingFeedField):
    field = "channel/description"


class MissingItemTitle(MissingFeedField):
    field = "item/title"


class MissingItemLink(MissingFeedField):
    field = "item/link"


class MissingItemGuid(MissingFeedField):
    field = "item/guid"


class MissingItemPubDate(MissingFeedField):
    field = "item/pubDate"


class MissingItemCategory(MissingFeedField):
    field = "item/category"


class MissingItemSize(MissingFeedField):
    field = "item/size"


# Collaborator failures


class StorageError(ShowbellError):
    """The persistence store could not complete an operation."""


class SourceUnavailable(ShowbellError):
    """An upstream document (feed, page, schedule) could not be fetched."""


class ShowNotAvailable(ShowbellError):
    """A show could not be scraped: unreachable page or missing fields."""


# Notification path


class NotificationError(ShowbellError):
    """A release could not be turned into notifications."""


class MappingShowIdError(NotificationError):
    """The release category does not map to a show id."""


class DBUsersError(NotificationError):
    """Subscribers for the show could not be looked up."""


class DBShowError(NotificationError):
    """The show record could not be looked up. Probably never added."""


# Watchlist operations


class WatchlistError(ShowbellError):
    """Base class for user-facing watchlist failures."""


class AlreadyAdded(WatchlistError):
    pass


class InvalidUrl(WatchlistError):
    pass


class NameNotFound(WatchlistError):
    """Adding shows by name is not supported."""


class InvalidIdentifier(WatchlistError):
    pass


class ShowNotFound(WatchlistError):
    pass


class DatabaseError(WatchlistError):
    """Backend trouble; the user should try again later."""


class ScheduleTableError(ShowbellError):
    """Schedule grid dimensions are inconsistent."""
