"""Shared API dependencies."""
from __future__ import annotations

import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from pydantic import ValidationError
from sqlalchemy.orm import Session

from exam_planner.config import settings
from exam_planner.core.security import InvalidTokenError, decode_token
from exam_planner.db.models.user import User
from exam_planner.db.session import SessionLocal
from exam_planner.schemas import TokenPayload
from exam_planner.services.schedule_service import ScheduleService
from exam_planner.services.study_session_service import StudySessionService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")


def get_db() -> Session:
    """Yield a database session for request lifetime."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)
) -> User:
    """Resolve the authenticated user from the Authorization header."""

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    try:
        payload = decode_token(token)
        if payload.get("type") != "access":
            raise InvalidTokenError("Token must be an access token")
        token_data = TokenPayload.model_validate(payload)
    except (InvalidTokenError, ValidationError, ValueError, KeyError) as exc:
        raise credentials_exception from exc

    user = db.get(User, uuid.UUID(str(token_data.sub)))
    if not user or not user.is_active:
        raise credentials_exception
    return user


def get_schedule_service(db: Session = Depends(get_db)) -> ScheduleService:
    """Assemble the planning service with the request-scoped session."""

    return ScheduleService(db)


def get_study_session_service(db: Session = Depends(get_db)) -> StudySessionService:
    return StudySessionService(db)
