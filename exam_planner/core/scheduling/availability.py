"""Calendar availability derived from a weekly hour budget."""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Mapping

from exam_planner.core.scheduling.types import SATURDAY, SUNDAY


@dataclass(frozen=True, slots=True)
class DateSlot:
    """A study date and the number of sessions it can hold."""

    date: date
    weekday: int
    max_sessions: int


def normalize_hours(study_hours_per_day: Mapping[int | str, float | int | None]) -> dict[int, float]:
    """Return a complete weekday -> hours map (Monday = 0), missing days as zero."""

    hours = {weekday: 0.0 for weekday in range(7)}
    for key, value in study_hours_per_day.items():
        weekday = int(key)
        if weekday not in hours:
            raise ValueError(f"Invalid weekday index: {key!r}")
        hours[weekday] = float(value or 0)
    return hours


class AvailabilityIndex:
    """Enumerates study dates with capacity for one planning run.

    Results are memoized per ``(start, end, weekday_only)`` on the instance,
    so each run owns its own cache.
    """

    def __init__(
        self, study_hours_per_day: Mapping[int | str, float | int | None], session_duration_minutes: int
    ) -> None:
        if session_duration_minutes <= 0:
            raise ValueError("session_duration_minutes must be positive")
        self.hours = normalize_hours(study_hours_per_day)
        self.session_duration_minutes = session_duration_minutes
        self._cache: dict[tuple[date, date, bool], tuple[DateSlot, ...]] = {}

    @property
    def total_weekly_hours(self) -> float:
        return sum(self.hours.values())

    def hours_for(self, day: date) -> float:
        return self.hours[day.weekday()]

    def max_sessions(self, day: date) -> int:
        return math.floor(self.hours_for(day) * 60 / self.session_duration_minutes)

    def available_dates(self, start: date, end: date, weekday_only: bool = False) -> tuple[DateSlot, ...]:
        """Return dates in ``[start, end]`` with nonzero hours, ascending."""

        key = (start, end, weekday_only)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        slots: list[DateSlot] = []
        current = start
        while current <= end:
            weekday = current.weekday()
            skip = weekday_only and weekday in (SATURDAY, SUNDAY)
            if not skip and self.hours[weekday] > 0:
                slots.append(DateSlot(date=current, weekday=weekday, max_sessions=self.max_sessions(current)))
            current += timedelta(days=1)

        result = tuple(slots)
        self._cache[key] = result
        return result
