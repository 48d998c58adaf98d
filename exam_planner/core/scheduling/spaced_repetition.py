"""Follow-up reviews at fixed offsets, snapped to Saturday review slots."""
from __future__ import annotations

from datetime import date, timedelta

from loguru import logger

from exam_planner.core.scheduling.agenda import PlanningRun
from exam_planner.core.scheduling.types import REVIEW_OFFSETS, SessionDraft, SessionType, TopicSnapshot


def schedule_review_cascade(run: PlanningRun, topic: TopicSnapshot, anchor: date) -> int:
    """Place the 7/14/28-day reviews for ``topic`` anchored at ``anchor``.

    Targets outside ``[today, exam_date]`` are dropped, as are targets with no
    Saturday left that still has room. Returns the number of reviews placed.
    """

    placed = 0
    for offset in REVIEW_OFFSETS:
        target = anchor + timedelta(days=offset)
        if target < run.today or target > run.exam_date:
            continue
        review_day = run.next_review_day(target)
        if review_day is None:
            logger.debug("No review slot left", topic_id=topic.id, offset=offset, target=target.isoformat())
            continue
        run.agenda.add_session(
            review_day,
            SessionDraft(
                session_type=SessionType.review_for_offset(offset),
                subject_name=topic.subject_name,
                topic_description=topic.description,
                topic_id=topic.id,
            ),
        )
        placed += 1
    return placed


def schedule_completed_topic_reviews(run: PlanningRun, completed_topics: list[TopicSnapshot]) -> int:
    """Schedule review cascades for topics already marked done."""

    placed = 0
    for topic in completed_topics:
        if not topic.is_done or topic.completion_date is None:
            continue
        placed += schedule_review_cascade(run, topic, topic.completion_date)
    return placed
