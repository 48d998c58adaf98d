"""In-memory accumulator of provisional sessions for one planning run."""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import date
from typing import Iterator

from exam_planner.core.scheduling.availability import AvailabilityIndex
from exam_planner.core.scheduling.types import SATURDAY, SessionDraft


class Agenda:
    """Per-date buckets of session drafts keyed by ISO date.

    ``add_session`` does not check capacity; callers look up a slot with
    spare room first.
    """

    def __init__(self) -> None:
        self._buckets: dict[str, list[SessionDraft]] = {}

    def add_session(self, day: date, draft: SessionDraft) -> None:
        self._buckets.setdefault(day.isoformat(), []).append(draft)

    def count(self, day: date) -> int:
        return len(self._buckets.get(day.isoformat(), ()))

    def items(self) -> Iterator[tuple[date, SessionDraft]]:
        """Yield ``(date, draft)`` pairs in insertion order of dates."""

        for iso_day, drafts in self._buckets.items():
            day = date.fromisoformat(iso_day)
            for draft in drafts:
                yield day, draft

    def __len__(self) -> int:
        return sum(len(drafts) for drafts in self._buckets.values())


@dataclass
class PlanningRun:
    """State owned by a single generate call."""

    today: date
    exam_date: date
    availability: AvailabilityIndex
    rng: random.Random = field(default_factory=random.Random)
    agenda: Agenda = field(default_factory=Agenda)

    def has_room(self, day: date) -> bool:
        return self.agenda.count(day) < self.availability.max_sessions(day)

    def find_next_slot(self, start: date, weekday_only: bool = False) -> date | None:
        """First date on/after ``start`` up to the exam with spare capacity."""

        for slot in self.availability.available_dates(start, self.exam_date, weekday_only):
            if self.agenda.count(slot.date) < slot.max_sessions:
                return slot.date
        return None

    def next_review_day(self, start: date) -> date | None:
        """First Saturday on/after ``start`` up to the exam with spare capacity."""

        for slot in self.availability.available_dates(start, self.exam_date):
            if slot.weekday != SATURDAY:
                continue
            if self.agenda.count(slot.date) < slot.max_sessions:
                return slot.date
        return None
