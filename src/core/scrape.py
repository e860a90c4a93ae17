"""Extraction of show metadata from the show page and the schedule JSON."""

from __future__ import annotations

import json
from typing import Optional, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from core.errors import ShowNotAvailable
from core.models import WEEKDAYS, AirTime


def parse_show_page(html: str, base_url: str) -> Tuple[str, str, str]:
    """Return (image_url, synopsis, name) from a show detail page.

    Relative image paths are resolved against base_url.
    """

    soup = BeautifulSoup(html, "html.parser")

    image = soup.select_one("img.img-responsive.img-center")
    image_src = image.get("src") if image is not None else None
    if not image_src:
        raise ShowNotAvailable("show page has no cover image")

    synopsis_el = soup.select_one("div.series-syn p")
    if synopsis_el is None:
        raise ShowNotAvailable("show page has no synopsis")

    name_el = soup.find("h1", class_="entry-title")
    name = name_el.get_text(strip=True) if name_el is not None else ""
    if not name:
        raise ShowNotAvailable("show page has no title")

    image_url = urljoin(base_url.rstrip("/") + "/", image_src)
    return image_url, synopsis_el.get_text(strip=True), name


def _parse_clock(value: str) -> Tuple[int, int]:
    parts = value.split(":")

    def _to_int(part: Optional[str]) -> int:
        try:
            return int(part) if part is not None else 0
        except ValueError:
            return 0

    hour = _to_int(parts[0] if parts else None)
    minute = _to_int(parts[1] if len(parts) > 1 else None)
    return hour, minute


def find_air_time(schedule_document: str, show_id: str) -> AirTime:
    """Locate show_id in the weekly schedule JSON, Monday first.

    Weekdays missing from the document are skipped. A show that appears on no
    day is not airing.
    """

    try:
        container = json.loads(schedule_document)
        schedule = container["schedule"]
    except (ValueError, KeyError, TypeError) as exc:
        raise ShowNotAvailable(f"schedule document is unusable: {exc}") from exc
    if not isinstance(schedule, dict):
        raise ShowNotAvailable("schedule document has no weekday mapping")

    for week_day, day_name in enumerate(WEEKDAYS):
        for entry in schedule.get(day_name) or []:
            if not isinstance(entry, dict) or entry.get("page") != show_id:
                continue
            hour, minute = _parse_clock(str(entry.get("time", "")))
            return AirTime(is_airing=True, week_day=week_day, hour=hour, minute=minute)
    return AirTime.not_airing()
