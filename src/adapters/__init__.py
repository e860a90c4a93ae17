"""Adapters connecting the core to SQLite, HTTP sources and Telegram."""
