"""API endpoint modules for v1."""

from exam_planner.api.v1.endpoints import plans, study_sessions

__all__ = ["plans", "study_sessions"]
