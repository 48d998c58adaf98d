"""Scheduled study session model."""
from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from exam_planner.db.base import Base


class StudySession(Base):
    """One calendar-dated study activity.

    ``subject_name`` and ``topic_description`` are copied when the session is
    created and are never refreshed from the subject or topic.
    """

    __tablename__ = "study_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    study_plan_id = Column(
        Integer, ForeignKey("study_plans.id", ondelete="CASCADE"), nullable=False, index=True
    )
    topic_id = Column(Integer, ForeignKey("topics.id", ondelete="CASCADE"), nullable=True, index=True)

    subject_name = Column(String(255), nullable=False)
    topic_description = Column(Text, nullable=False)
    session_date = Column(Date, nullable=False, index=True)
    session_type = Column(String(30), nullable=False)
    status = Column(String(20), nullable=False, default="pending")

    notes = Column(Text)
    questions_solved = Column(Integer)
    time_studied_seconds = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    plan = relationship("StudyPlan", back_populates="sessions")
    topic = relationship("Topic")

    def add_study_time(self, seconds: int) -> int:
        """Accumulate studied seconds and return the new total."""

        self.time_studied_seconds = (self.time_studied_seconds or 0) + seconds
        return self.time_studied_seconds
