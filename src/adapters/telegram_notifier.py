"""Telegram notification adapter for direct messages.

Formats a human-readable Markdown message and sends it to the subscriber
through the bot's Telethon client.
"""

from __future__ import annotations

from adapters.notification_formatting import format_notification
from core.models import Notification


class TelegramClientNotifier:
    """Notifier adapter that DMs users through the running Telethon client."""

    def __init__(self, client) -> None:
        self._client = client

    async def send(self, user_id: int, notification: Notification) -> None:
        """Send the formatted notification to one user."""

        message = format_notification(notification, mode="markdown")
        await self._client.send_message(user_id, message, parse_mode="md", link_preview=True)
