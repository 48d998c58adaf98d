"""API router for version 1."""
from fastapi import APIRouter

from exam_planner.api.v1.endpoints import plans, study_sessions


api_router = APIRouter()
api_router.include_router(plans.router)
api_router.include_router(study_sessions.router)
