"""Telegram client factory for showbell. The bot logs in with BOT_TOKEN."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from telethon import TelegramClient


def bot_token() -> str:
    """Return BOT_TOKEN from the environment, failing fast when missing."""

    load_dotenv()
    token = os.getenv("BOT_TOKEN")
    if not token:
        raise RuntimeError("Missing BOT_TOKEN in environment")
    return token


def build_client() -> TelegramClient:
    """Create a Telethon client from API_ID, API_HASH and SESSION_NAME (.env)."""

    load_dotenv()

    api_id = os.getenv("API_ID")
    api_hash = os.getenv("API_HASH")
    session_name = os.getenv("SESSION_NAME", "showbell")

    if not api_id or not api_hash:
        raise RuntimeError("Missing API_ID or API_HASH in environment")

    logging.getLogger(__name__).info("Initializing Telegram client")

    return TelegramClient(session_name, int(api_id), api_hash)
