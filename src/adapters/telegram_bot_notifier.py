"""Telegram Bot API notification adapter.

Uses the Bot API over plain HTTPS so notifications can be delivered without
a connected MTProto client, e.g. from a one-shot poll run.
"""

from __future__ import annotations

import asyncio
import json
import urllib.error
import urllib.request

from adapters.notification_formatting import format_notification
from core.models import Notification


class TelegramBotNotifier:
    """Notifier adapter that sends messages via the Telegram Bot API."""

    def __init__(self, bot_token: str, timeout_seconds: float = 10) -> None:
        self._bot_token = bot_token
        self._timeout = timeout_seconds

    def _endpoint(self) -> str:
        # The Bot API endpoint is deterministic and derived from the token.
        return f"https://api.telegram.org/bot{self._bot_token}/sendMessage"

    def _post(self, payload: dict) -> None:
        data = json.dumps(payload).encode("utf-8")
        request = urllib.request.Request(self._endpoint(), data=data, method="POST")
        request.add_header("Content-Type", "application/json")
        try:
            with urllib.request.urlopen(request, timeout=self._timeout):
                pass
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="replace")
            raise RuntimeError(f"Bot API error {e.code}: {body}") from e

    async def send(self, user_id: int, notification: Notification) -> None:
        """Send the formatted notification via the Bot API."""

        payload = {
            "chat_id": user_id,
            "text": format_notification(notification, mode="html"),
            "parse_mode": "HTML",
            "disable_web_page_preview": not notification.image_url,
        }
        await asyncio.to_thread(self._post, payload)
