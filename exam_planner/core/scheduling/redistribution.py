"""Moving overdue pending sessions onto dates with spare minutes."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Literal, Mapping, Sequence

from exam_planner.core.scheduling.availability import AvailabilityIndex


@dataclass(frozen=True, slots=True)
class OverdueSession:
    id: int
    session_date: date


@dataclass(frozen=True, slots=True)
class RedistributionMove:
    session_id: int
    original_date: date
    new_date: date


def plan_redistribution(
    overdue: Sequence[OverdueSession],
    scheduled_counts: Mapping[date, int],
    availability: AvailabilityIndex,
    *,
    today: date,
    exam_date: date,
) -> list[RedistributionMove]:
    """Compute new dates for overdue sessions without touching storage.

    Sessions are taken in the given order. Each one goes to the first date on
    or after the cursor whose minute budget still fits one more session; the
    cursor then stays on that date. Zero-hour days are skipped. Once nothing
    fits before the exam the remaining sessions are left out of the result.
    """

    duration = availability.session_duration_minutes
    counts = dict(scheduled_counts)
    cursor = today
    moves: list[RedistributionMove] = []

    for session in overdue:
        placed_on: date | None = None
        while cursor <= exam_date:
            budget = availability.hours_for(cursor) * 60
            if budget > 0:
                used = counts.get(cursor, 0) * duration
                if used + duration <= budget:
                    placed_on = cursor
                    break
            cursor += timedelta(days=1)
        if placed_on is None:
            break
        counts[placed_on] = counts.get(placed_on, 0) + 1
        moves.append(RedistributionMove(session.id, session.session_date, placed_on))

    return moves


def find_postpone_date(
    session_date: date,
    days: int | Literal["next"],
    availability: AvailabilityIndex,
    *,
    exam_date: date,
) -> date | None:
    """First date with nonzero hours on/after ``session_date + days``."""

    shift = 1 if days == "next" else int(days)
    candidate = session_date + timedelta(days=shift)
    while candidate <= exam_date:
        if availability.hours_for(candidate) > 0:
            return candidate
        candidate += timedelta(days=1)
    return None


def find_open_date(
    start: date,
    scheduled_counts: Mapping[date, int],
    availability: AvailabilityIndex,
    *,
    exam_date: date,
) -> date | None:
    """First date in ``[start, exam_date]`` holding fewer sessions than it can."""

    for slot in availability.available_dates(start, exam_date):
        if scheduled_counts.get(slot.date, 0) < slot.max_sessions:
            return slot.date
    return None
