"""Study plan, subject and topic models."""
from datetime import date
from typing import Any

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.types import JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from exam_planner.db.base import Base


class StudyPlan(Base):
    """One user's study campaign toward a fixed exam date."""

    __tablename__ = "study_plans"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    plan_name = Column(String(255), nullable=False)
    exam_date = Column(Date, nullable=False)

    # weekday index (Monday = 0) -> hours, stored with string keys
    study_hours_per_day = Column(JSONB().with_variant(JSON(), "sqlite"), nullable=False, default=dict)
    session_duration_minutes = Column(Integer, nullable=False, default=50)
    has_essay = Column(Boolean, nullable=False, default=False)
    review_mode = Column(String(20), nullable=False, default="full")
    daily_question_goal = Column(Integer, nullable=False, default=50)
    weekly_question_goal = Column(Integer, nullable=False, default=300)
    postponement_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", backref="study_plans")
    subjects = relationship(
        "Subject", back_populates="plan", cascade="all, delete-orphan", passive_deletes=True
    )
    sessions = relationship(
        "StudySession", back_populates="plan", cascade="all, delete-orphan", passive_deletes=True
    )

    def apply_settings(
        self,
        *,
        study_hours_per_day: dict[int, float],
        session_duration_minutes: int,
        has_essay: bool,
        review_mode: str | None = None,
        daily_question_goal: int | None = None,
        weekly_question_goal: int | None = None,
    ) -> None:
        """Overwrite the scheduling settings of the plan."""

        self.study_hours_per_day = {str(day): hours for day, hours in study_hours_per_day.items()}
        self.session_duration_minutes = session_duration_minutes
        self.has_essay = has_essay
        if review_mode is not None:
            self.review_mode = review_mode
        if daily_question_goal is not None:
            self.daily_question_goal = daily_question_goal
        if weekly_question_goal is not None:
            self.weekly_question_goal = weekly_question_goal

    def register_postponement(self) -> None:
        self.postponement_count = (self.postponement_count or 0) + 1

    def hours_map(self) -> dict[Any, Any]:
        return dict(self.study_hours_per_day or {})


class Subject(Base):
    """Group of topics with a sampling priority."""

    __tablename__ = "subjects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    study_plan_id = Column(
        Integer, ForeignKey("study_plans.id", ondelete="CASCADE"), nullable=False, index=True
    )
    subject_name = Column(String(255), nullable=False)
    priority_weight = Column(Integer, nullable=False, default=3)

    plan = relationship("StudyPlan", back_populates="subjects")
    topics = relationship(
        "Topic", back_populates="subject", cascade="all, delete-orphan", passive_deletes=True
    )


class Topic(Base):
    """Smallest unit of content, either pending or done."""

    __tablename__ = "topics"

    id = Column(Integer, primary_key=True, autoincrement=True)
    subject_id = Column(
        Integer, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    description = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    completion_date = Column(Date)

    subject = relationship("Subject", back_populates="topics")

    def mark_done(self, completed_on: date) -> None:
        self.status = "done"
        self.completion_date = completed_on

    def mark_pending(self) -> None:
        self.status = "pending"
        self.completion_date = None
