"""Mock-exam injection once every topic has been covered."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from loguru import logger

from exam_planner.core.scheduling.agenda import PlanningRun
from exam_planner.core.scheduling.types import SessionDraft, SessionType, TopicSnapshot


DIRECTED_MOCK_GROUP_SIZE = 4
DIRECTED_MOCK_SPACING_DAYS = 3
DIRECTED_MOCK_MIN_COMPLETED = 2
BASIC_FULL_MOCK_MIN_COMPLETED = 3
BASIC_FULL_MOCK_OFFSET_DAYS = 7
RECURRING_FULL_MOCK_OFFSET_DAYS = 5
RECURRING_FULL_MOCK_SPACING_DAYS = 3

FULL_MOCK_SUBJECT = "Full mock exam"
BASIC_FULL_MOCK_DESCRIPTION = (
    "General mock exam covering every subject, in a format close to the real exam."
)
RECURRING_FULL_MOCK_DESCRIPTION = (
    "Full mock exam covering the whole syllabus. Focus on timing, strategy and stamina."
)


@dataclass(slots=True)
class SimulationResult:
    directed_mocks: int = 0
    basic_full_mocks: int = 0
    recurring_full_mocks: int = 0

    @property
    def total(self) -> int:
        return self.directed_mocks + self.basic_full_mocks + self.recurring_full_mocks


def _directed_mock_description(subject_name: str, group: list[str], block: int | None) -> str:
    heading = f"Directed mock exam on {subject_name}"
    if block is not None:
        heading += f" - block {block}"
    bullets = "\n".join(f"- {description}" for description in group)
    return f"{heading}:\n\n{bullets}\n\nCovers only topics already studied."


def _completed_by_subject(topics: list[TopicSnapshot]) -> list[tuple[str, list[str]]]:
    completed: dict[str, list[str]] = {}
    for topic in topics:
        bucket = completed.setdefault(topic.subject_name, [])
        if topic.is_done:
            bucket.append(topic.description)
    ready = [(name, items) for name, items in completed.items() if len(items) >= DIRECTED_MOCK_MIN_COMPLETED]
    # stable: ties keep subject order of the input
    ready.sort(key=lambda entry: len(entry[1]), reverse=True)
    return ready


def schedule_directed_mocks(run: PlanningRun, topics: list[TopicSnapshot], start: date) -> int:
    placed = 0
    cursor = start
    for subject_name, descriptions in _completed_by_subject(topics):
        groups = [
            descriptions[i : i + DIRECTED_MOCK_GROUP_SIZE]
            for i in range(0, len(descriptions), DIRECTED_MOCK_GROUP_SIZE)
        ]
        for index, group in enumerate(groups, start=1):
            day = run.find_next_slot(cursor)
            if day is None:
                break
            block = index if len(groups) > 1 else None
            run.agenda.add_session(
                day,
                SessionDraft(
                    session_type=SessionType.DIRECTED_MOCK,
                    subject_name=f"Directed mock - {subject_name}",
                    topic_description=_directed_mock_description(subject_name, group, block),
                ),
            )
            placed += 1
            cursor = day + timedelta(days=DIRECTED_MOCK_SPACING_DAYS)
    return placed


def schedule_basic_full_mock(run: PlanningRun, start: date) -> int:
    day = run.find_next_slot(start + timedelta(days=BASIC_FULL_MOCK_OFFSET_DAYS))
    if day is None:
        return 0
    run.agenda.add_session(
        day,
        SessionDraft(
            session_type=SessionType.FULL_MOCK,
            subject_name=FULL_MOCK_SUBJECT,
            topic_description=BASIC_FULL_MOCK_DESCRIPTION,
        ),
    )
    return 1


def schedule_recurring_full_mocks(run: PlanningRun, start: date, limit: int) -> int:
    placed = 0
    cursor = start + timedelta(days=RECURRING_FULL_MOCK_OFFSET_DAYS)
    while placed < limit:
        day = run.find_next_slot(cursor)
        if day is None:
            break
        run.agenda.add_session(
            day,
            SessionDraft(
                session_type=SessionType.FULL_MOCK,
                subject_name=FULL_MOCK_SUBJECT,
                topic_description=RECURRING_FULL_MOCK_DESCRIPTION,
            ),
        )
        placed += 1
        cursor = day + timedelta(days=RECURRING_FULL_MOCK_SPACING_DAYS)
    return placed


def inject_mock_exams(
    run: PlanningRun,
    topics: list[TopicSnapshot],
    maintenance_start: date,
    *,
    max_recurring: int = 20,
) -> SimulationResult:
    """Fill remaining capacity with mock exams.

    Does nothing while any topic is still pending, so past the guard every
    topic is covered and only the basic full mock has a further gate. The
    phases share the agenda, so none of them overbooks a date.
    """

    result = SimulationResult()
    if not topics or any(not topic.is_done for topic in topics):
        return result

    completed = len(topics)
    logger.debug("Entering maintenance mode", maintenance_start=maintenance_start.isoformat(), completed=completed)

    result.directed_mocks = schedule_directed_mocks(run, topics, maintenance_start)
    if completed >= BASIC_FULL_MOCK_MIN_COMPLETED:
        result.basic_full_mocks = schedule_basic_full_mock(run, maintenance_start)
    result.recurring_full_mocks = schedule_recurring_full_mocks(run, maintenance_start, max_recurring)
    return result
