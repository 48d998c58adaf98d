"""Pydantic models for study session endpoints."""
from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from exam_planner.core.scheduling import SessionStatus
from exam_planner.schemas.base import CamelModel


class StudySessionRead(CamelModel):
    """Session as stored, including its denormalized snapshot."""

    id: int
    study_plan_id: int
    topic_id: int | None = None
    subject_name: str
    topic_description: str
    session_date: date
    session_type: str
    status: str
    notes: str | None = None
    questions_solved: int | None = None
    time_studied_seconds: int = 0

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class StudySessionUpdate(CamelModel):
    """Partial update; at least one field must be provided."""

    status: SessionStatus | None = None
    notes: str | None = Field(None, max_length=5000)
    questions_solved: int | None = Field(None, ge=0, le=999)


class BatchStatusItem(CamelModel):
    id: int
    status: SessionStatus


class BatchStatusUpdate(CamelModel):
    sessions: list[BatchStatusItem] = Field(..., min_length=1)


class BatchStatusResponse(CamelModel):
    updated: int
    skipped: int


class ReinforceResponse(CamelModel):
    new_session_id: int
    session_date: date


class PostponeRequest(CamelModel):
    days: int | Literal["next"] = Field(..., description="Positive day count or 'next'")


class PostponeResponse(CamelModel):
    session_id: int
    new_date: date


class StudyTimeRequest(CamelModel):
    seconds: int = Field(..., ge=0, le=86400)


class StudyTimeResponse(CamelModel):
    session_id: int
    total_seconds: int
