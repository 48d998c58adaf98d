"""Schedule generation and replanning endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from exam_planner.api.deps import get_current_user, get_schedule_service
from exam_planner.db.models.user import User
from exam_planner.schemas import (
    GenerateRequest,
    GenerateResponse,
    OverdueCountResponse,
    ReplanCommitResponse,
    ReplanPreviewEntry,
    ReplanPreviewResponse,
    StudySessionRead,
)
from exam_planner.services.schedule_service import ScheduleService
from exam_planner.utils.exceptions import ExamPlannerException, to_http_exception


router = APIRouter(prefix="/plans", tags=["plans"])


@router.post("/{plan_id}/generate", response_model=GenerateResponse)
def generate_schedule(
    plan_id: int,
    payload: GenerateRequest,
    service: ScheduleService = Depends(get_schedule_service),
    current_user: User = Depends(get_current_user),
) -> GenerateResponse:
    """Rebuild the plan's calendar from its topics and the submitted settings."""

    try:
        result = service.generate(plan_id, current_user, payload)
    except ExamPlannerException as exc:
        raise to_http_exception(exc) from exc

    message = "Schedule generated." if result.topics_processed else "No topics found to schedule."
    return GenerateResponse(
        sessions_created=result.sessions_created,
        topics_processed=result.topics_processed,
        message=message,
    )


@router.get("/{plan_id}/schedule", response_model=dict[str, list[StudySessionRead]])
def read_schedule(
    plan_id: int,
    service: ScheduleService = Depends(get_schedule_service),
    current_user: User = Depends(get_current_user),
) -> dict[str, list[StudySessionRead]]:
    """Return the plan's sessions grouped by date."""

    try:
        grouped = service.get_schedule(plan_id, current_user)
    except ExamPlannerException as exc:
        raise to_http_exception(exc) from exc
    return {
        day: [StudySessionRead.model_validate(session) for session in sessions]
        for day, sessions in grouped.items()
    }


@router.get("/{plan_id}/overdue", response_model=OverdueCountResponse)
def read_overdue_count(
    plan_id: int,
    service: ScheduleService = Depends(get_schedule_service),
    current_user: User = Depends(get_current_user),
) -> OverdueCountResponse:
    try:
        count = service.count_overdue(plan_id, current_user)
    except ExamPlannerException as exc:
        raise to_http_exception(exc) from exc
    return OverdueCountResponse(count=count)


@router.get("/{plan_id}/replan-preview", response_model=ReplanPreviewResponse)
def preview_replan(
    plan_id: int,
    service: ScheduleService = Depends(get_schedule_service),
    current_user: User = Depends(get_current_user),
) -> ReplanPreviewResponse:
    """Show where overdue sessions would move without changing anything."""

    try:
        preview = service.replan_preview(plan_id, current_user)
    except ExamPlannerException as exc:
        raise to_http_exception(exc) from exc

    entries = []
    for move in preview.moves:
        session = preview.sessions_by_id[move.session_id]
        entries.append(
            ReplanPreviewEntry(
                session_id=move.session_id,
                subject_name=session.subject_name,
                topic_description=session.topic_description,
                session_type=session.session_type,
                original_date=move.original_date,
                new_date=move.new_date,
            )
        )
    return ReplanPreviewResponse(
        has_overdue=preview.has_overdue,
        count=len(preview.overdue),
        preview=entries,
        total_to_replan=len(entries),
        exam_date=preview.exam_date,
        days_until_exam=preview.days_until_exam,
    )


@router.post("/{plan_id}/replan", response_model=ReplanCommitResponse)
def commit_replan(
    plan_id: int,
    service: ScheduleService = Depends(get_schedule_service),
    current_user: User = Depends(get_current_user),
) -> ReplanCommitResponse:
    """Move overdue sessions forward and record one postponement."""

    try:
        outcome = service.replan_commit(plan_id, current_user)
    except ExamPlannerException as exc:
        raise to_http_exception(exc) from exc

    if outcome.moved == 0 and outcome.unplaced == 0:
        message = "No overdue sessions to replan."
    else:
        message = f"{outcome.moved} overdue sessions were replanned."
    return ReplanCommitResponse(count=outcome.moved, unplaced=outcome.unplaced, message=message)
