"""Core domain package for showbell.

Core contains release detection, show cataloguing, scheduling, and
notification fan-out without any Telegram, HTTP, or storage-specific code,
keeping the business logic portable.
"""
