"""Shared notification formatting helpers.

Keeping formatting here prevents drift between adapters and keeps messages
consistent regardless of delivery channel.
"""

from __future__ import annotations

import html
from typing import Iterable, List, Tuple

from core.models import Notification, Show

DIVIDER = "──────────────"


def _escape_md(value: str) -> str:
    for ch in r"*[`_":
        value = value.replace(ch, f"\\{ch}")
    return value


def _format_markdown(notification: Notification) -> str:
    """Create the Markdown notification body used by the Telethon client."""

    # Telethon's Markdown is used by passing parse_mode="md".
    title = _escape_md(notification.title)
    synopsis = _escape_md(notification.synopsis)
    label = _escape_md(notification.download_label)

    lines = [
        f"**{title}**",
        DIVIDER,
        "",
        synopsis,
        "",
        f"**{label}:** [🧲]({notification.download_url})",
        f"**Show Information:** [🌐]({notification.show_page_url}) [Ⓜ]({notification.lookup_url})",
        DIVIDER,
    ]
    if notification.image_url:
        # Zero-width link so the client renders the cover as the preview.
        lines.insert(0, f"[\u200b]({notification.image_url})")
    return "\n".join(lines)


def _link(url: str, label: str) -> str:
    return f"<a href=\"{html.escape(url)}\">{html.escape(label)}</a>"


def _format_html(notification: Notification) -> str:
    """Create the HTML notification body used by the Bot API adapter."""

    parts = [
        f"<b>{html.escape(notification.title)}</b>",
        DIVIDER,
        "",
        html.escape(notification.synopsis),
        "",
        f"<b>{html.escape(notification.download_label)}:</b> {_link(notification.download_url, '🧲')}",
        "<b>Show Information:</b> "
        f"{_link(notification.show_page_url, '🌐')} {_link(notification.lookup_url, 'Ⓜ')}",
        DIVIDER,
    ]
    if notification.image_url:
        parts.insert(0, _link(notification.image_url, "\u200b"))
    return "\n".join(parts)


def format_notification(notification: Notification, mode: str) -> str:
    """Return the notification formatted for the requested mode."""

    if mode == "markdown":
        return _format_markdown(notification)
    if mode == "html":
        return _format_html(notification)
    raise ValueError(f"Unsupported notification format: {mode}")


def format_show_added(show: Show) -> str:
    """HTML reply confirming a show was added to the watchlist."""

    parts = [
        "<b>Show successfully added!</b>",
        "",
        f"<b>{html.escape(show.name)}</b>",
        html.escape(show.synopsis),
        "",
    ]
    if show.air_time.is_airing:
        parts.append(f"Is airing currently. Estimated release: {html.escape(str(show.air_time))}")
    else:
        parts.append("Currently not airing. Check the website for further information.")
    if show.image_url:
        parts.insert(0, _link(show.image_url, "\u200b"))
    return "\n".join(parts)


def format_removed_shows(shows: Iterable[Show]) -> str:
    lines = ["<b>The following shows have been removed from your watchlist:</b>"]
    lines.extend(f"• {html.escape(show.name)}" for show in shows)
    return "\n".join(lines)


def format_schedule(rows: List[Tuple[str, str]]) -> str:
    """HTML schedule reply; days without shows are left out."""

    parts = ["<b>Currently Watching:</b>"]
    for day, text in rows:
        if not text:
            continue
        parts.extend(["", f"<b>{html.escape(day)}</b>", html.escape(text)])
    if len(parts) == 1:
        parts.append("Your watchlist is empty.")
    return "\n".join(parts)


def format_help(entries: Iterable[Tuple[str, str]]) -> str:
    return "\n\n".join(f"<b>{html.escape(name)}</b>\n{html.escape(text)}" for name, text in entries)
