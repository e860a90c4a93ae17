"""Weekly schedule table built from a user's tracked shows (core domain)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from core.errors import ScheduleTableError
from core.models import WEEKDAYS, Show

NOT_AIRING_LABEL = "Not currently airing:"


@dataclass(frozen=True)
class ShowTable:
    """Sparse day x time-slot grid of show names.

    shows[day][slot] holds the comma-joined names airing on that weekday at
    release_times[slot], or an empty string.
    """

    days: List[str]
    release_times: List[str]
    shows: List[List[str]]
    non_airing: List[str]

    def printable_rows(self) -> List[Tuple[str, str]]:
        """Return one (day, text) pair per weekday plus a non-airing row.

        Empty slots are skipped, so a day without shows has empty text.
        """

        if len(self.shows) != len(self.days):
            raise ScheduleTableError(
                f"grid has {len(self.shows)} rows for {len(self.days)} days"
            )

        rows: List[Tuple[str, str]] = []
        for day, names_by_slot in zip(self.days, self.shows):
            if len(names_by_slot) != len(self.release_times):
                raise ScheduleTableError(
                    f"{day} has {len(names_by_slot)} cells for {len(self.release_times)} slots"
                )
            lines = [
                f"{time} - {names}"
                for names, time in zip(names_by_slot, self.release_times)
                if names
            ]
            rows.append((day, "\n".join(lines)))

        if self.non_airing:
            rows.append((NOT_AIRING_LABEL, ", ".join(self.non_airing)))
        return rows


def build_show_table(shows: Iterable[Show]) -> ShowTable:
    """Group airing shows by weekday and exact hour:minute.

    Time slots are ordered chronologically.
    """

    shows = list(shows)
    airing = [show for show in shows if show.air_time.is_airing]
    non_airing = [show.name for show in shows if not show.air_time.is_airing]

    slots = sorted({(show.air_time.hour, show.air_time.minute) for show in airing})

    grid: List[List[str]] = []
    for week_day in range(len(WEEKDAYS)):
        row = []
        for hour, minute in slots:
            names = [
                show.name
                for show in airing
                if show.air_time.week_day == week_day
                and show.air_time.hour == hour
                and show.air_time.minute == minute
            ]
            row.append(", ".join(names))
        grid.append(row)

    return ShowTable(
        days=list(WEEKDAYS),
        release_times=[f"{hour:02d}:{minute:02d}" for hour, minute in slots],
        shows=grid,
        non_airing=non_airing,
    )
