"""Version 1 API package."""

from exam_planner.api.v1.api import api_router

__all__ = ["api_router"]
