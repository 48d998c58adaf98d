"""Pytest fixtures for engine, service and API tests."""

import os
import random
from collections.abc import Generator
from datetime import date

os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from exam_planner.api import deps
from exam_planner.core.security import create_access_token
from exam_planner.db.base import Base
from exam_planner.db.models import StudyPlan, Subject, Topic, User
from exam_planner.main import create_app
from exam_planner.services import ScheduleService, StudySessionService

# Monday
TODAY = date(2026, 3, 2)
EXAM_DATE = date(2026, 5, 29)
DEFAULT_HOURS = {0: 2, 1: 2, 2: 2, 3: 2, 4: 2, 5: 2, 6: 1}


@pytest.fixture()
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(db_engine) -> Generator[Session, None, None]:
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=db_engine, expire_on_commit=False
    )
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def user(db_session: Session) -> User:
    account = User(email="student@example.com", full_name="Test Student")
    db_session.add(account)
    db_session.commit()
    return account


@pytest.fixture()
def other_user(db_session: Session) -> User:
    account = User(email="someone-else@example.com")
    db_session.add(account)
    db_session.commit()
    return account


@pytest.fixture()
def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def make_plan(db_session: Session, user: User):
    """Build a plan with subjects given as ``(name, priority, topics)``.

    A topic is either a description or a ``(description, completion_date)``
    pair for topics that are already done.
    """

    def _make(
        *,
        subjects=(),
        exam_date: date = EXAM_DATE,
        hours: dict[int, float] | None = None,
        duration: int = 60,
        owner: User | None = None,
    ) -> StudyPlan:
        plan = StudyPlan(
            user_id=(owner or user).id,
            plan_name="Finals",
            exam_date=exam_date,
            study_hours_per_day={str(day): value for day, value in (hours or DEFAULT_HOURS).items()},
            session_duration_minutes=duration,
        )
        for name, priority, topics in subjects:
            subject = Subject(subject_name=name, priority_weight=priority)
            for entry in topics:
                if isinstance(entry, tuple):
                    description, completed_on = entry
                    topic = Topic(description=description, status="done", completion_date=completed_on)
                else:
                    topic = Topic(description=entry, status="pending")
                subject.topics.append(topic)
            plan.subjects.append(subject)
        db_session.add(plan)
        db_session.commit()
        return plan

    return _make


@pytest.fixture()
def schedule_service(db_session: Session) -> ScheduleService:
    return ScheduleService(db_session, rng=random.Random(7), clock=lambda: TODAY)


@pytest.fixture()
def study_session_service(db_session: Session) -> StudySessionService:
    return StudySessionService(db_session, clock=lambda: TODAY)


@pytest.fixture()
def client(
    db_session: Session,
    schedule_service: ScheduleService,
    study_session_service: StudySessionService,
) -> Generator[TestClient, None, None]:
    app = create_app()

    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[deps.get_db] = override_get_db
    app.dependency_overrides[deps.get_schedule_service] = lambda: schedule_service
    app.dependency_overrides[deps.get_study_session_service] = lambda: study_session_service
    with TestClient(app) as test_client:
        yield test_client
