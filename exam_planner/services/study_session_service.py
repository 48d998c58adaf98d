"""Single-session actions: status updates, reinforcement, postponement, time tracking."""
from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, Literal

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from exam_planner.config import Settings, settings as default_settings
from exam_planner.core.scheduling import (
    AvailabilityIndex,
    SessionStatus,
    SessionType,
    find_open_date,
    find_postpone_date,
)
from exam_planner.db.models import StudyPlan, StudySession, Topic, User
from exam_planner.db.session import write_transaction
from exam_planner.schemas import BatchStatusItem, StudySessionUpdate
from exam_planner.utils.exceptions import InvalidOperationError, ResourceNotFoundError


class StudySessionService:
    """Mutations applied to individual sessions of a user's plans."""

    def __init__(
        self,
        db: Session,
        *,
        clock: Callable[[], date] = date.today,
        settings: Settings | None = None,
    ) -> None:
        self.db = db
        self.clock = clock
        self.settings = settings or default_settings

    def _owned_session_query(self, user: User):
        return (
            select(StudySession)
            .join(StudyPlan, StudyPlan.id == StudySession.study_plan_id)
            .where(StudyPlan.user_id == user.id)
        )

    def get_owned_session(self, session_id: int, user: User) -> StudySession:
        session = self.db.scalars(
            self._owned_session_query(user).where(StudySession.id == session_id)
        ).first()
        if session is None:
            raise ResourceNotFoundError("Session not found or not authorized.", {"session_id": session_id})
        return session

    def _apply_status(self, session: StudySession, status: SessionStatus) -> None:
        """Set the status and keep the topic in step for new-topic sessions."""

        session.status = status.value
        if session.session_type != SessionType.NEW_TOPIC.value or session.topic_id is None:
            return
        topic = self.db.get(Topic, session.topic_id)
        if topic is None:
            return
        if status == SessionStatus.DONE:
            topic.mark_done(session.session_date or self.clock())
        else:
            topic.mark_pending()

    def update_session(self, session_id: int, user: User, payload: StudySessionUpdate) -> StudySession:
        fields = payload.model_dump(exclude_unset=True)
        if not fields:
            raise InvalidOperationError("No fields to update.", {"session_id": session_id})

        with write_transaction(self.db, f"session {session_id}"):
            session = self.get_owned_session(session_id, user)
            if payload.status is not None:
                self._apply_status(session, payload.status)
            if "notes" in fields:
                session.notes = payload.notes
            if "questions_solved" in fields:
                session.questions_solved = payload.questions_solved
        return session

    def batch_update_status(self, user: User, items: list[BatchStatusItem]) -> tuple[int, int]:
        """Apply status changes; sessions the user does not own are skipped."""

        updated = 0
        skipped = 0
        with write_transaction(self.db, "session batch"):
            ids = [item.id for item in items]
            owned = {
                session.id: session
                for session in self.db.scalars(
                    self._owned_session_query(user).where(StudySession.id.in_(ids))
                )
            }
            for item in items:
                session = owned.get(item.id)
                if session is None:
                    logger.warning("Skipping session outside of user's plans", session_id=item.id)
                    skipped += 1
                    continue
                self._apply_status(session, item.status)
                updated += 1
        return updated, skipped

    def _availability(self, plan: StudyPlan) -> AvailabilityIndex:
        return AvailabilityIndex(
            plan.hours_map(),
            plan.session_duration_minutes or self.settings.DEFAULT_SESSION_DURATION_MINUTES,
        )

    def _scheduled_counts(self, plan_id: int, start: date, end: date) -> dict[date, int]:
        stmt = (
            select(StudySession.session_date, func.count(StudySession.id))
            .where(
                StudySession.study_plan_id == plan_id,
                StudySession.session_date >= start,
                StudySession.session_date <= end,
            )
            .group_by(StudySession.session_date)
        )
        return {session_date: count for session_date, count in self.db.execute(stmt).all()}

    def reinforce(self, session_id: int, user: User) -> StudySession:
        """Schedule an extra follow-up for the session's topic a few days out.

        The session goes on the first date from ``today + REINFORCEMENT_DELAY_DAYS``
        that still has a free slot.
        """

        with write_transaction(self.db, f"reinforcement of session {session_id}"):
            source = self.get_owned_session(session_id, user)
            if source.topic_id is None:
                raise InvalidOperationError(
                    "Only sessions tied to a topic can be reinforced.", {"session_id": session_id}
                )
            plan = source.plan
            earliest = self.clock() + timedelta(days=self.settings.REINFORCEMENT_DELAY_DAYS)
            target = find_open_date(
                earliest,
                self._scheduled_counts(plan.id, earliest, plan.exam_date),
                self._availability(plan),
                exam_date=plan.exam_date,
            )
            if target is None:
                raise InvalidOperationError(
                    "No free study slot is left before the exam for a reinforcement session.",
                    {"session_id": session_id, "earliest": earliest.isoformat()},
                )
            reinforcement = StudySession(
                study_plan_id=source.study_plan_id,
                topic_id=source.topic_id,
                subject_name=source.subject_name,
                topic_description=source.topic_description,
                session_date=target,
                session_type=SessionType.REINFORCEMENT_EXTRA.value,
                status=SessionStatus.PENDING.value,
            )
            self.db.add(reinforcement)
            self.db.flush()

        logger.info("Reinforcement scheduled", session_id=session_id, new_session_id=reinforcement.id)
        return reinforcement

    def postpone(self, session_id: int, user: User, days: int | Literal["next"]) -> date:
        """Move one session forward by ``days`` or to the next study day."""

        if days != "next" and not 1 <= int(days) <= self.settings.MAX_POSTPONE_DAYS:
            raise InvalidOperationError(
                f"Postponement must be between 1 and {self.settings.MAX_POSTPONE_DAYS} days.",
                {"days": days},
            )
        with write_transaction(self.db, f"postponement of session {session_id}"):
            session = self.get_owned_session(session_id, user)
            plan = session.plan
            new_date = find_postpone_date(
                session.session_date, days, self._availability(plan), exam_date=plan.exam_date
            )
            if new_date is None:
                raise InvalidOperationError(
                    "No study days left before the exam to postpone this session.",
                    {"session_id": session_id},
                )
            session.session_date = new_date
        return new_date

    def add_study_time(self, session_id: int, user: User, seconds: int) -> int:
        with write_transaction(self.db, f"study time of session {session_id}"):
            session = self.get_owned_session(session_id, user)
            total = session.add_study_time(seconds)
        return total
