"""Service layer package."""

from exam_planner.services.schedule_service import ScheduleService
from exam_planner.services.study_session_service import StudySessionService

__all__ = [
    "ScheduleService",
    "StudySessionService",
]
