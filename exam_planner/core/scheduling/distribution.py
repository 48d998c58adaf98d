"""Introduction of not-yet-mastered topics across weekday slots."""
from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import date

from exam_planner.core.scheduling.agenda import PlanningRun
from exam_planner.core.scheduling.spaced_repetition import schedule_review_cascade
from exam_planner.core.scheduling.types import SessionDraft, SessionType, TopicSnapshot


@dataclass(slots=True)
class DistributionResult:
    scheduled_topic_ids: list[int]
    unscheduled_topic_ids: list[int]
    last_new_topic_date: date | None
    reviews_placed: int = 0


def order_pending_topics(topics: list[TopicSnapshot], rng: random.Random) -> list[TopicSnapshot]:
    """Priority-weighted random ordering of pending topics.

    Each topic is repeated ``priority`` times, the list is shuffled, and the
    first occurrence of every topic wins. Higher priority subjects tend to
    come first.
    """

    weighted = [topic for topic in topics for _ in range(max(1, topic.priority))]
    rng.shuffle(weighted)
    seen: set[int] = set()
    ordered: list[TopicSnapshot] = []
    for topic in weighted:
        if topic.id in seen:
            continue
        seen.add(topic.id)
        ordered.append(topic)
    return ordered


def distribute_new_topics(run: PlanningRun, pending_topics: list[TopicSnapshot]) -> DistributionResult:
    """Place one new-topic session per pending topic, followed by its reviews.

    Topics walk forward through weekday slots from ``run.today``. When no
    weekday slot remains before the exam the rest stay unscheduled.
    """

    ordered = order_pending_topics(pending_topics, run.rng)
    cursor = run.today
    last_new_topic_date: date | None = None
    scheduled: list[int] = []
    reviews_placed = 0

    for index, topic in enumerate(ordered):
        study_day = run.find_next_slot(cursor, weekday_only=True)
        if study_day is None:
            return DistributionResult(
                scheduled_topic_ids=scheduled,
                unscheduled_topic_ids=[remaining.id for remaining in ordered[index:]],
                last_new_topic_date=last_new_topic_date,
                reviews_placed=reviews_placed,
            )
        run.agenda.add_session(
            study_day,
            SessionDraft(
                session_type=SessionType.NEW_TOPIC,
                subject_name=topic.subject_name,
                topic_description=topic.description,
                topic_id=topic.id,
            ),
        )
        scheduled.append(topic.id)
        last_new_topic_date = study_day
        cursor = study_day
        reviews_placed += schedule_review_cascade(run, topic, study_day)

    return DistributionResult(
        scheduled_topic_ids=scheduled,
        unscheduled_topic_ids=[],
        last_new_topic_date=last_new_topic_date,
        reviews_placed=reviews_placed,
    )
