from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy import select

from exam_planner.core.scheduling import SessionStatus
from exam_planner.db.models import StudySession, Topic
from exam_planner.schemas import BatchStatusItem, StudySessionUpdate
from exam_planner.services import StudySessionService
from exam_planner.utils.exceptions import InvalidOperationError, ResourceNotFoundError


TODAY = date(2026, 3, 2)


@pytest.fixture()
def plan_with_topic(make_plan):
    return make_plan(subjects=[("Portuguese", 3, ["Syntax", "Punctuation"])])


def _topic(db_session, description: str) -> Topic:
    return db_session.scalars(select(Topic).where(Topic.description == description)).one()


def _session(db_session, plan, *, topic: Topic | None = None, session_type: str = "new_topic", session_date: date = date(2026, 3, 4)) -> StudySession:
    session = StudySession(
        study_plan_id=plan.id,
        topic_id=topic.id if topic else None,
        subject_name="Portuguese",
        topic_description=topic.description if topic else "Full mock exam",
        session_date=session_date,
        session_type=session_type,
    )
    db_session.add(session)
    db_session.commit()
    return session


def test_done_new_topic_completes_topic(db_session, user, plan_with_topic, study_session_service):
    topic = _topic(db_session, "Syntax")
    session = _session(db_session, plan_with_topic, topic=topic)

    updated = study_session_service.update_session(session.id, user, StudySessionUpdate(status=SessionStatus.DONE))

    db_session.refresh(topic)
    assert updated.status == "done"
    assert topic.status == "done"
    assert topic.completion_date == date(2026, 3, 4)


def test_reverting_new_topic_clears_completion(db_session, user, plan_with_topic, study_session_service):
    topic = _topic(db_session, "Syntax")
    session = _session(db_session, plan_with_topic, topic=topic)
    study_session_service.update_session(session.id, user, StudySessionUpdate(status=SessionStatus.DONE))

    study_session_service.update_session(session.id, user, StudySessionUpdate(status=SessionStatus.PENDING))

    db_session.refresh(topic)
    assert topic.status == "pending"
    assert topic.completion_date is None


def test_review_status_does_not_touch_topic(db_session, user, plan_with_topic, study_session_service):
    topic = _topic(db_session, "Syntax")
    review = _session(db_session, plan_with_topic, topic=topic, session_type="review_7")

    study_session_service.update_session(review.id, user, StudySessionUpdate(status=SessionStatus.DONE))

    db_session.refresh(topic)
    assert topic.status == "pending"


def test_notes_and_questions_update(db_session, user, plan_with_topic, study_session_service):
    session = _session(db_session, plan_with_topic)

    updated = study_session_service.update_session(
        session.id, user, StudySessionUpdate(notes="Revise clause types", questions_solved=25)
    )

    assert updated.notes == "Revise clause types"
    assert updated.questions_solved == 25
    assert updated.status == "pending"


def test_empty_update_is_rejected(db_session, user, plan_with_topic, study_session_service):
    session = _session(db_session, plan_with_topic)

    with pytest.raises(InvalidOperationError):
        study_session_service.update_session(session.id, user, StudySessionUpdate())


def test_session_of_other_user_is_not_found(db_session, other_user, make_plan, study_session_service, user):
    foreign_plan = make_plan(owner=other_user)
    session = _session(db_session, foreign_plan)

    with pytest.raises(ResourceNotFoundError):
        study_session_service.add_study_time(session.id, user, 60)


def test_batch_skips_foreign_sessions(db_session, user, other_user, make_plan, plan_with_topic, study_session_service):
    topic = _topic(db_session, "Punctuation")
    own = _session(db_session, plan_with_topic, topic=topic)
    foreign = _session(db_session, make_plan(owner=other_user))

    updated, skipped = study_session_service.batch_update_status(
        user,
        [BatchStatusItem(id=own.id, status=SessionStatus.DONE), BatchStatusItem(id=foreign.id, status=SessionStatus.DONE)],
    )

    db_session.refresh(foreign)
    db_session.refresh(topic)
    assert (updated, skipped) == (1, 1)
    assert foreign.status == "pending"
    assert topic.status == "done"


def test_reinforce_schedules_extra_session(db_session, user, plan_with_topic, study_session_service):
    topic = _topic(db_session, "Syntax")
    session = _session(db_session, plan_with_topic, topic=topic)

    reinforcement = study_session_service.reinforce(session.id, user)

    assert reinforcement.id != session.id
    assert reinforcement.session_date == date(2026, 3, 5)
    assert reinforcement.session_type == "reinforcement_extra"
    assert reinforcement.topic_id == topic.id
    assert reinforcement.subject_name == "Portuguese"


def test_reinforce_requires_topic(db_session, user, plan_with_topic, study_session_service):
    mock = _session(db_session, plan_with_topic, session_type="full_mock")

    with pytest.raises(InvalidOperationError):
        study_session_service.reinforce(mock.id, user)


def test_reinforce_after_exam_is_refused(db_session, user, make_plan, study_session_service):
    plan = make_plan(subjects=[("Portuguese", 3, ["Syntax"])], exam_date=date(2026, 3, 4))
    session = _session(db_session, plan, topic=_topic(db_session, "Syntax"), session_date=date(2026, 3, 3))

    with pytest.raises(InvalidOperationError):
        study_session_service.reinforce(session.id, user)


def test_postpone_to_next_study_day(db_session, user, make_plan, study_session_service):
    plan = make_plan(hours={0: 2, 1: 2, 2: 2, 3: 2, 4: 2})
    friday = _session(db_session, plan, session_date=date(2026, 3, 6))

    new_date = study_session_service.postpone(friday.id, user, "next")

    db_session.refresh(friday)
    assert new_date == date(2026, 3, 9)
    assert friday.session_date == new_date


@pytest.mark.parametrize("days", [0, -2, 31])
def test_postpone_rejects_out_of_range_days(db_session, user, plan_with_topic, study_session_service, days):
    session = _session(db_session, plan_with_topic)

    with pytest.raises(InvalidOperationError):
        study_session_service.postpone(session.id, user, days)


def test_postpone_past_exam_is_refused(db_session, user, make_plan, study_session_service):
    plan = make_plan(exam_date=date(2026, 3, 5))
    session = _session(db_session, plan, session_date=date(2026, 3, 4))

    with pytest.raises(InvalidOperationError):
        study_session_service.postpone(session.id, user, 3)


def test_study_time_accumulates(db_session, user, plan_with_topic, study_session_service):
    session = _session(db_session, plan_with_topic)

    study_session_service.add_study_time(session.id, user, 600)
    total = study_session_service.add_study_time(session.id, user, 120)

    assert total == 720


def test_reinforce_skips_zero_hour_days(db_session, user, make_plan):
    plan = make_plan(subjects=[("Portuguese", 3, ["Syntax"])], hours={0: 2, 1: 2, 2: 2, 3: 2, 4: 2})
    session = _session(db_session, plan, topic=_topic(db_session, "Syntax"), session_date=date(2026, 3, 5))
    thursday_service = StudySessionService(db_session, clock=lambda: date(2026, 3, 5))

    reinforcement = thursday_service.reinforce(session.id, user)

    # three days after Thursday is a Sunday without study hours
    assert reinforcement.session_date == date(2026, 3, 9)


def test_reinforce_skips_full_days(db_session, user, make_plan, study_session_service):
    plan = make_plan(subjects=[("Portuguese", 3, ["Syntax"])], hours={0: 1, 1: 1, 2: 1, 3: 1, 4: 1})
    session = _session(db_session, plan, topic=_topic(db_session, "Syntax"), session_date=date(2026, 3, 5))

    reinforcement = study_session_service.reinforce(session.id, user)

    assert reinforcement.session_date == date(2026, 3, 6)
