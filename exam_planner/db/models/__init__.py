"""Database models package."""
from exam_planner.db.models.user import User
from exam_planner.db.models.plan import StudyPlan, Subject, Topic
from exam_planner.db.models.session import StudySession

__all__ = [
    "User",
    "StudyPlan",
    "Subject",
    "Topic",
    "StudySession",
]
