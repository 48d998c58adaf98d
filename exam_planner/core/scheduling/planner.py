"""Full calendar generation for one study plan."""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Mapping

from loguru import logger

from exam_planner.core.scheduling.agenda import Agenda, PlanningRun
from exam_planner.core.scheduling.availability import AvailabilityIndex
from exam_planner.core.scheduling.distribution import DistributionResult, distribute_new_topics
from exam_planner.core.scheduling.simulation import SimulationResult, inject_mock_exams
from exam_planner.core.scheduling.spaced_repetition import schedule_completed_topic_reviews
from exam_planner.core.scheduling.types import SUNDAY, SessionDraft, SessionType, TopicSnapshot


ESSAY_SUBJECT = "Essay"
ESSAY_DESCRIPTION = "Argumentative essay practice: structure, cohesion and argumentation."


class NoStudyHoursError(ValueError):
    """Raised when the weekly hour budget is zero."""


@dataclass(frozen=True, slots=True)
class PlanConstraints:
    exam_date: date
    study_hours_per_day: Mapping[int | str, float | int | None]
    session_duration_minutes: int
    has_essay: bool = False


@dataclass(slots=True)
class PlanningResult:
    agenda: Agenda
    topics_processed: int
    essays_placed: int = 0
    completed_reviews_placed: int = 0
    distribution: DistributionResult | None = None
    simulation: SimulationResult = field(default_factory=SimulationResult)

    @property
    def sessions_created(self) -> int:
        return len(self.agenda)


def schedule_essays(run: PlanningRun) -> int:
    placed = 0
    for slot in run.availability.available_dates(run.today, run.exam_date):
        if slot.weekday != SUNDAY or not run.has_room(slot.date):
            continue
        run.agenda.add_session(
            slot.date,
            SessionDraft(
                session_type=SessionType.ESSAY,
                subject_name=ESSAY_SUBJECT,
                topic_description=ESSAY_DESCRIPTION,
            ),
        )
        placed += 1
    return placed


def build_schedule(
    constraints: PlanConstraints,
    topics: list[TopicSnapshot],
    *,
    today: date,
    rng: random.Random | None = None,
    max_recurring_mocks: int = 20,
) -> PlanningResult:
    """Compute a fresh calendar in memory.

    Order matters: essays, reviews of already completed topics, new topics
    with their review cascades, then mock exams when nothing is pending.
    """

    availability = AvailabilityIndex(constraints.study_hours_per_day, constraints.session_duration_minutes)
    if availability.total_weekly_hours <= 0:
        raise NoStudyHoursError("The schedule cannot be generated without weekly study hours.")

    run = PlanningRun(
        today=today,
        exam_date=constraints.exam_date,
        availability=availability,
        rng=rng or random.Random(),
    )
    result = PlanningResult(agenda=run.agenda, topics_processed=len(topics))
    if not topics:
        return result

    if constraints.has_essay:
        result.essays_placed = schedule_essays(run)

    completed = sorted(
        (topic for topic in topics if topic.is_done and topic.completion_date is not None),
        key=lambda topic: topic.completion_date,
        reverse=True,
    )
    result.completed_reviews_placed = schedule_completed_topic_reviews(run, completed)

    pending = [topic for topic in topics if not topic.is_done]
    result.distribution = distribute_new_topics(run, pending)

    last_new = result.distribution.last_new_topic_date
    maintenance_start = last_new + timedelta(days=1) if last_new else today
    if not pending:
        result.simulation = inject_mock_exams(
            run, topics, maintenance_start, max_recurring=max_recurring_mocks
        )

    logger.debug(
        "Schedule built",
        sessions=result.sessions_created,
        new_topics=len(result.distribution.scheduled_topic_ids),
        unscheduled=len(result.distribution.unscheduled_topic_ids),
        mocks=result.simulation.total,
    )
    return result
