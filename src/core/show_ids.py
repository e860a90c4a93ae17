"""Helpers for working with show identifiers (slugs).

A show id is the join key between feed releases and catalogued shows. It is
derived either from a release category or from a show page URL.
"""

from __future__ import annotations

import re
from typing import Optional

DEFAULT_HOST = "subsplease.org"

_SKIP_CHARS = str.maketrans("", "", ",'()")
_NON_WORD_RUN = re.compile(r"[^A-Za-z0-9_]+")
_SPACE_RUN = re.compile(r" +")
_SLUG = r"[A-Za-z0-9_-]+"


def category_to_show_id(category: str) -> Optional[str]:
    """Turn a release category like "Title - 1080" into a show slug.

    The segment after the last dash encodes resolution or episode, not
    identity, and is dropped. Returns None when there is no dash at all.
    """

    name_end = category.rfind("-")
    if name_end == -1:
        return None

    name = category[:name_end].lower().translate(_SKIP_CHARS)
    spaced = _NON_WORD_RUN.sub(" ", name)
    slug = _SPACE_RUN.sub("-", spaced)
    if slug.startswith("-"):
        slug = slug[1:]
    if slug.endswith("-"):
        slug = slug[:-1]
    return slug


def _url_pattern(host: str) -> re.Pattern:
    return re.compile(rf"https://{re.escape(host)}/shows/({_SLUG})/")


def show_id_from_url(url: str, host: str = DEFAULT_HOST) -> Optional[str]:
    """Return the slug of a show page URL, or None if the URL is not one."""

    match = _url_pattern(host).fullmatch(url)
    if not match:
        return None
    return match.group(1)


def is_valid_show_url(url: str, host: str = DEFAULT_HOST) -> bool:
    """Check that url is exactly https://<host>/shows/<slug>/."""

    return show_id_from_url(url, host) is not None


def show_page_url(show_id: str, host: str = DEFAULT_HOST) -> str:
    return f"https://{host}/shows/{show_id}/"
