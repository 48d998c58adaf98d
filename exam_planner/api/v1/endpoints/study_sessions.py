"""Study session endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from exam_planner.api.deps import get_current_user, get_study_session_service
from exam_planner.db.models.user import User
from exam_planner.schemas import (
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
from exam_planner.services.study_session_service import StudySessionService
from exam_planner.utils.exceptions import ExamPlannerException, to_http_exception


router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.patch("/batch-status", response_model=BatchStatusResponse)
def batch_update_status(
    payload: BatchStatusUpdate,
    service: StudySessionService = Depends(get_study_session_service),
    current_user: User = Depends(get_current_user),
) -> BatchStatusResponse:
    """Update the status of several sessions at once."""

    try:
        updated, skipped = service.batch_update_status(current_user, payload.sessions)
    except ExamPlannerException as exc:
        raise to_http_exception(exc) from exc
    return BatchStatusResponse(updated=updated, skipped=skipped)


@router.patch("/{session_id}", response_model=StudySessionRead)
def update_session(
    session_id: int,
    payload: StudySessionUpdate,
    service: StudySessionService = Depends(get_study_session_service),
    current_user: User = Depends(get_current_user),
) -> StudySessionRead:
    """Update status, notes or solved questions of one session."""

    try:
        session = service.update_session(session_id, current_user, payload)
    except ExamPlannerException as exc:
        raise to_http_exception(exc) from exc
    return StudySessionRead.model_validate(session)


@router.post(
    "/{session_id}/reinforce",
    response_model=ReinforceResponse,
    status_code=status.HTTP_201_CREATED,
)
def reinforce_session(
    session_id: int,
    service: StudySessionService = Depends(get_study_session_service),
    current_user: User = Depends(get_current_user),
) -> ReinforceResponse:
    """Schedule an extra reinforcement session for the same topic."""

    try:
        reinforcement = service.reinforce(session_id, current_user)
    except ExamPlannerException as exc:
        raise to_http_exception(exc) from exc
    return ReinforceResponse(new_session_id=reinforcement.id, session_date=reinforcement.session_date)


@router.patch("/{session_id}/postpone", response_model=PostponeResponse)
def postpone_session(
    session_id: int,
    payload: PostponeRequest,
    service: StudySessionService = Depends(get_study_session_service),
    current_user: User = Depends(get_current_user),
) -> PostponeResponse:
    try:
        new_date = service.postpone(session_id, current_user, payload.days)
    except ExamPlannerException as exc:
        raise to_http_exception(exc) from exc
    return PostponeResponse(session_id=session_id, new_date=new_date)


@router.post("/{session_id}/time", response_model=StudyTimeResponse)
def record_study_time(
    session_id: int,
    payload: StudyTimeRequest,
    service: StudySessionService = Depends(get_study_session_service),
    current_user: User = Depends(get_current_user),
) -> StudyTimeResponse:
    """Add studied seconds to the session's running total."""

    try:
        total = service.add_study_time(session_id, current_user, payload.seconds)
    except ExamPlannerException as exc:
        raise to_http_exception(exc) from exc
    return StudyTimeResponse(session_id=session_id, total_seconds=total)
