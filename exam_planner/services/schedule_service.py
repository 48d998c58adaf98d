"""Generation and replanning of study calendars."""
from __future__ import annotations

import random
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Callable

from loguru import logger
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from exam_planner.config import Settings, settings as default_settings
from exam_planner.core.scheduling import (
    AvailabilityIndex,
    NoStudyHoursError,
    OverdueSession,
    PlanConstraints,
    PlanningResult,
    RedistributionMove,
    SessionStatus,
    TopicSnapshot,
    TopicStatus,
    build_schedule,
    plan_redistribution,
)
from exam_planner.db.models import StudyPlan, StudySession, Subject, Topic, User
from exam_planner.db.session import write_transaction
from exam_planner.schemas import GenerateRequest
from exam_planner.utils.exceptions import ConfigurationError, ResourceNotFoundError


@dataclass(slots=True)
class ReplanPreview:
    """Dry-run result of redistributing overdue sessions."""

    overdue: list[StudySession]
    moves: list[RedistributionMove]
    exam_date: date
    today: date
    sessions_by_id: dict[int, StudySession] = field(default_factory=dict)

    @property
    def has_overdue(self) -> bool:
        return bool(self.overdue)

    @property
    def days_until_exam(self) -> int:
        return (self.exam_date - self.today).days


@dataclass(slots=True)
class ReplanOutcome:
    moved: int
    unplaced: int


class ScheduleService:
    """Runs the planning engine against persisted plans.

    Each run reads plan state, computes in memory, then writes everything in a
    single transaction. The plan row is locked for update so two runs on the
    same plan cannot interleave their writes.
    """

    def __init__(
        self,
        db: Session,
        *,
        rng: random.Random | None = None,
        clock: Callable[[], date] = date.today,
        settings: Settings | None = None,
    ) -> None:
        self.db = db
        self.rng = rng
        self.clock = clock
        self.settings = settings or default_settings

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------
    def get_owned_plan(self, plan_id: int, user: User, *, for_update: bool = False) -> StudyPlan:
        """Return the plan if it belongs to ``user``."""

        stmt = select(StudyPlan).where(StudyPlan.id == plan_id, StudyPlan.user_id == user.id)
        if for_update:
            stmt = stmt.with_for_update()
        plan = self.db.scalars(stmt).first()
        if plan is None:
            raise ResourceNotFoundError("Plan not found or not authorized.", {"plan_id": plan_id})
        return plan

    def load_topics(self, plan_id: int) -> list[TopicSnapshot]:
        """All topics of the plan, highest subject priority first."""

        stmt = (
            select(Topic, Subject)
            .join(Subject, Subject.id == Topic.subject_id)
            .where(Subject.study_plan_id == plan_id)
            .order_by(Subject.priority_weight.desc(), Topic.id.asc())
        )
        return [
            TopicSnapshot(
                id=topic.id,
                subject_name=subject.subject_name,
                description=topic.description,
                priority=subject.priority_weight,
                status=TopicStatus(topic.status),
                completion_date=topic.completion_date,
            )
            for topic, subject in self.db.execute(stmt).all()
        ]

    def _availability(self, plan: StudyPlan) -> AvailabilityIndex:
        duration = plan.session_duration_minutes or self.settings.DEFAULT_SESSION_DURATION_MINUTES
        return AvailabilityIndex(plan.hours_map(), duration)

    def _overdue_sessions(self, plan_id: int, today: date) -> list[StudySession]:
        stmt = (
            select(StudySession)
            .where(
                StudySession.study_plan_id == plan_id,
                StudySession.status == SessionStatus.PENDING.value,
                StudySession.session_date < today,
            )
            .order_by(StudySession.session_date.asc(), StudySession.id.asc())
        )
        return list(self.db.scalars(stmt))

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

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    def generate(self, plan_id: int, user: User, payload: GenerateRequest) -> PlanningResult:
        """Replace the plan's calendar with a freshly computed one."""

        today = self.clock()
        with write_transaction(self.db, f"schedule for plan {plan_id}"):
            plan = self.get_owned_plan(plan_id, user, for_update=True)
            if sum(payload.study_hours_per_day.values()) <= 0:
                raise ConfigurationError(
                    "The schedule cannot be generated because no study hours are set.",
                    {"plan_id": plan_id},
                )

            plan.apply_settings(
                study_hours_per_day=payload.study_hours_per_day,
                session_duration_minutes=payload.session_duration_minutes,
                has_essay=payload.has_essay,
                review_mode=payload.review_mode.value if payload.review_mode else None,
                daily_question_goal=payload.daily_question_goal,
                weekly_question_goal=payload.weekly_question_goal,
            )
            self.db.execute(delete(StudySession).where(StudySession.study_plan_id == plan.id))

            topics = self.load_topics(plan.id)
            constraints = PlanConstraints(
                exam_date=plan.exam_date,
                study_hours_per_day=payload.study_hours_per_day,
                session_duration_minutes=payload.session_duration_minutes,
                has_essay=payload.has_essay,
            )
            try:
                result = build_schedule(
                    constraints,
                    topics,
                    today=today,
                    rng=self.rng,
                    max_recurring_mocks=self.settings.MAX_RECURRING_FULL_MOCKS,
                )
            except NoStudyHoursError as exc:
                raise ConfigurationError(str(exc), {"plan_id": plan_id}) from exc

            self.db.add_all(
                StudySession(
                    study_plan_id=plan.id,
                    topic_id=draft.topic_id,
                    subject_name=draft.subject_name,
                    topic_description=draft.topic_description,
                    session_date=session_date,
                    session_type=draft.session_type.value,
                    status=SessionStatus.PENDING.value,
                )
                for session_date, draft in result.agenda.items()
            )

        logger.info(
            "Schedule generated",
            plan_id=plan_id,
            sessions_created=result.sessions_created,
            topics_processed=result.topics_processed,
        )
        return result

    def get_schedule(self, plan_id: int, user: User) -> dict[str, list[StudySession]]:
        """Sessions grouped by ISO date, ordered by date then id."""

        plan = self.get_owned_plan(plan_id, user)
        stmt = (
            select(StudySession)
            .where(StudySession.study_plan_id == plan.id)
            .order_by(StudySession.session_date.asc(), StudySession.id.asc())
        )
        grouped: dict[str, list[StudySession]] = defaultdict(list)
        for session in self.db.scalars(stmt):
            grouped[session.session_date.isoformat()].append(session)
        return dict(grouped)

    # ------------------------------------------------------------------
    # Replanning
    # ------------------------------------------------------------------
    def count_overdue(self, plan_id: int, user: User) -> int:
        plan = self.get_owned_plan(plan_id, user)
        return len(self._overdue_sessions(plan.id, self.clock()))

    def _compute_replan(self, plan: StudyPlan, today: date) -> ReplanPreview:
        overdue = self._overdue_sessions(plan.id, today)
        preview = ReplanPreview(overdue=overdue, moves=[], exam_date=plan.exam_date, today=today)
        if not overdue:
            return preview
        preview.moves = plan_redistribution(
            [OverdueSession(session.id, session.session_date) for session in overdue],
            self._scheduled_counts(plan.id, today, plan.exam_date),
            self._availability(plan),
            today=today,
            exam_date=plan.exam_date,
        )
        preview.sessions_by_id = {session.id: session for session in overdue}
        return preview

    def replan_preview(self, plan_id: int, user: User) -> ReplanPreview:
        """Where each overdue session would move; nothing is written."""

        plan = self.get_owned_plan(plan_id, user)
        return self._compute_replan(plan, self.clock())

    def replan_commit(self, plan_id: int, user: User) -> ReplanOutcome:
        """Move overdue sessions to their previewed dates and count the postponement."""

        today = self.clock()
        with write_transaction(self.db, f"replan for plan {plan_id}"):
            plan = self.get_owned_plan(plan_id, user, for_update=True)
            preview = self._compute_replan(plan, today)
            if not preview.has_overdue:
                return ReplanOutcome(moved=0, unplaced=0)
            for move in preview.moves:
                preview.sessions_by_id[move.session_id].session_date = move.new_date
            plan.register_postponement()

        outcome = ReplanOutcome(
            moved=len(preview.moves), unplaced=len(preview.overdue) - len(preview.moves)
        )
        logger.info("Overdue sessions replanned", plan_id=plan_id, moved=outcome.moved, unplaced=outcome.unplaced)
        return outcome
