from __future__ import annotations

import random
from collections import Counter
from datetime import date, timedelta

import pytest

from exam_planner.core.scheduling import (
    NoStudyHoursError,
    PlanConstraints,
    SessionType,
    TopicSnapshot,
    TopicStatus,
    build_schedule,
)


MONDAY = date(2026, 3, 2)
EXAM_DATE = date(2026, 5, 29)
HOURS = {0: 2, 1: 2, 2: 2, 3: 2, 4: 2, 5: 8, 6: 1}
REVIEW_OFFSET = {SessionType.REVIEW_7: 7, SessionType.REVIEW_14: 14, SessionType.REVIEW_28: 28}


def _topic(topic_id: int, subject: str, priority: int, completed: date | None = None) -> TopicSnapshot:
    return TopicSnapshot(
        id=topic_id,
        subject_name=subject,
        description=f"{subject} #{topic_id}",
        priority=priority,
        status=TopicStatus.DONE if completed else TopicStatus.PENDING,
        completion_date=completed,
    )


def _ten_pending_topics() -> list[TopicSnapshot]:
    subjects = [("Administrative law", 5), ("Portuguese", 3), ("Statistics", 1)]
    return [_topic(index + 1, *subjects[index % 3]) for index in range(10)]


def _constraints(**overrides) -> PlanConstraints:
    values = dict(exam_date=EXAM_DATE, study_hours_per_day=HOURS, session_duration_minutes=60, has_essay=False)
    values.update(overrides)
    return PlanConstraints(**values)


def test_zero_weekly_hours_is_rejected():
    with pytest.raises(NoStudyHoursError):
        build_schedule(
            _constraints(study_hours_per_day={day: 0 for day in range(7)}),
            _ten_pending_topics(),
            today=MONDAY,
        )


def test_no_topics_gives_empty_schedule():
    result = build_schedule(_constraints(has_essay=True), [], today=MONDAY)

    assert result.sessions_created == 0
    assert result.topics_processed == 0


def test_generated_schedule_respects_capacity_and_dates():
    result = build_schedule(_constraints(has_essay=True), _ten_pending_topics(), today=MONDAY, rng=random.Random(42))

    per_day = Counter(day for day, _ in result.agenda.items())
    for day, count in per_day.items():
        assert MONDAY <= day <= EXAM_DATE
        assert count <= int(HOURS[day.weekday()] * 60 / 60)
    assert result.topics_processed == 10
    assert result.simulation.total == 0


def test_session_kinds_land_on_their_weekdays():
    result = build_schedule(_constraints(has_essay=True), _ten_pending_topics(), today=MONDAY, rng=random.Random(42))

    for day, draft in result.agenda.items():
        if draft.session_type == SessionType.NEW_TOPIC:
            assert day.weekday() < 5
        elif draft.session_type in REVIEW_OFFSET:
            assert day.weekday() == 5
        elif draft.session_type == SessionType.ESSAY:
            assert day.weekday() == 6


def test_every_new_topic_gets_its_review_cascade():
    result = build_schedule(_constraints(), _ten_pending_topics(), today=MONDAY, rng=random.Random(42))

    study_days = {}
    reviews = []
    for day, draft in result.agenda.items():
        if draft.session_type == SessionType.NEW_TOPIC:
            study_days[draft.topic_id] = day
        elif draft.session_type in REVIEW_OFFSET:
            reviews.append((day, draft))

    assert len(study_days) == 10
    assert len(reviews) == 30
    for day, draft in reviews:
        assert day >= study_days[draft.topic_id] + timedelta(days=REVIEW_OFFSET[draft.session_type])


def test_essays_fill_sundays_only_when_enabled():
    with_essay = build_schedule(_constraints(has_essay=True), _ten_pending_topics(), today=MONDAY, rng=random.Random(1))
    without_essay = build_schedule(_constraints(), _ten_pending_topics(), today=MONDAY, rng=random.Random(1))

    sundays = sum(1 for offset in range((EXAM_DATE - MONDAY).days + 1) if (MONDAY + timedelta(days=offset)).weekday() == 6)
    assert with_essay.essays_placed == sundays
    assert without_essay.essays_placed == 0
    assert all(draft.session_type != SessionType.ESSAY for _, draft in without_essay.agenda.items())


def test_same_seed_gives_same_schedule():
    first = build_schedule(_constraints(), _ten_pending_topics(), today=MONDAY, rng=random.Random(9))
    second = build_schedule(_constraints(), _ten_pending_topics(), today=MONDAY, rng=random.Random(9))

    assert list(first.agenda.items()) == list(second.agenda.items())


def test_completed_topics_get_reviews_but_no_new_session():
    topics = [_topic(1, "Portuguese", 3, completed=MONDAY - timedelta(days=3)), _topic(2, "Portuguese", 3)]

    result = build_schedule(_constraints(), topics, today=MONDAY, rng=random.Random(2))

    completed_sessions = [draft for _, draft in result.agenda.items() if draft.topic_id == 1]
    assert result.completed_reviews_placed == 3
    assert {draft.session_type for draft in completed_sessions} == set(REVIEW_OFFSET)


def test_mock_exams_only_when_everything_is_done():
    topics = [_topic(index, "Portuguese", 3, completed=date(2026, 2, 1)) for index in range(1, 5)]

    result = build_schedule(_constraints(), topics, today=MONDAY, rng=random.Random(2))

    assert result.distribution.last_new_topic_date is None
    assert result.simulation.directed_mocks == 1
    assert result.simulation.basic_full_mocks == 1
    assert result.simulation.recurring_full_mocks > 0
    directed_days = [day for day, draft in result.agenda.items() if draft.session_type == SessionType.DIRECTED_MOCK]
    assert directed_days == [MONDAY]


def test_unscheduled_topics_when_exam_is_close():
    result = build_schedule(
        _constraints(exam_date=MONDAY + timedelta(days=1), study_hours_per_day={0: 1, 1: 1}),
        _ten_pending_topics(),
        today=MONDAY,
        rng=random.Random(4),
    )

    assert len(result.distribution.scheduled_topic_ids) == 2
    assert len(result.distribution.unscheduled_topic_ids) == 8
    assert result.simulation.total == 0


def test_single_subject_topics_are_each_introduced_once():
    topics = [_topic(index, "Mathematics", 1) for index in range(1, 11)]
    constraints = _constraints(
        exam_date=MONDAY + timedelta(days=30),
        study_hours_per_day={0: 4, 1: 4, 2: 4, 3: 4, 4: 4, 5: 4, 6: 0},
        session_duration_minutes=50,
    )

    result = build_schedule(constraints, topics, today=MONDAY, rng=random.Random(8))

    introduced = Counter(
        draft.topic_id for _, draft in result.agenda.items() if draft.session_type == SessionType.NEW_TOPIC
    )
    assert introduced == Counter(range(1, 11))
    per_topic_reviews = Counter(draft.topic_id for _, draft in result.agenda.items() if draft.session_type in REVIEW_OFFSET)
    assert all(count <= 3 for count in per_topic_reviews.values())
    per_day = Counter(day for day, _ in result.agenda.items())
    assert all(count <= 4 for count in per_day.values())
