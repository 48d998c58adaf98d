"""Pydantic models for schedule generation and replanning."""
from __future__ import annotations

from datetime import date

from pydantic import Field, field_validator

from exam_planner.core.scheduling import ReviewMode
from exam_planner.schemas.base import CamelModel


class GenerateRequest(CamelModel):
    """Settings submitted with a generate request; persisted on the plan."""

    study_hours_per_day: dict[int, float] = Field(
        ..., description="Hours per weekday, keys 0-6 with Monday = 0"
    )
    session_duration_minutes: int = Field(..., ge=10, le=240)
    has_essay: bool = False
    review_mode: ReviewMode | None = None
    daily_question_goal: int | None = Field(None, ge=0, le=500)
    weekly_question_goal: int | None = Field(None, ge=0, le=3500)

    @field_validator("study_hours_per_day")
    @classmethod
    def validate_hours(cls, value: dict[int, float]) -> dict[int, float]:
        for weekday, hours in value.items():
            if weekday not in range(7):
                raise ValueError(f"Weekday index out of range: {weekday}")
            if hours < 0 or hours > 24:
                raise ValueError(f"Hours for weekday {weekday} must be between 0 and 24")
        return value


class GenerateResponse(CamelModel):
    sessions_created: int
    topics_processed: int
    message: str


class ReplanPreviewEntry(CamelModel):
    session_id: int
    subject_name: str
    topic_description: str
    session_type: str
    original_date: date
    new_date: date


class ReplanPreviewResponse(CamelModel):
    has_overdue: bool
    count: int
    preview: list[ReplanPreviewEntry] = Field(default_factory=list)
    total_to_replan: int = 0
    exam_date: date
    days_until_exam: int


class ReplanCommitResponse(CamelModel):
    count: int
    unplaced: int = 0
    message: str


class OverdueCountResponse(CamelModel):
    count: int
