"""Pydantic schemas package."""

from exam_planner.schemas.auth import TokenPayload
from exam_planner.schemas.plan import (
    GenerateRequest,
    GenerateResponse,
    OverdueCountResponse,
    ReplanCommitResponse,
    ReplanPreviewEntry,
    ReplanPreviewResponse,
)
from exam_planner.schemas.session import (
    BatchStatusItem,
    BatchStatusResponse,
    BatchStatusUpdate,
    PostponeRequest,
    PostponeResponse,
    ReinforceResponse,
    StudySessionRead,
    StudySessionUpdate,
    StudyTimeRequest,
    StudyTimeResponse,
)

__all__ = [
    "TokenPayload",
    "GenerateRequest",
    "GenerateResponse",
    "OverdueCountResponse",
    "ReplanCommitResponse",
    "ReplanPreviewEntry",
    "ReplanPreviewResponse",
    "BatchStatusItem",
    "BatchStatusResponse",
    "BatchStatusUpdate",
    "PostponeRequest",
    "PostponeResponse",
    "ReinforceResponse",
    "StudySessionRead",
    "StudySessionUpdate",
    "StudyTimeRequest",
    "StudyTimeResponse",
]
