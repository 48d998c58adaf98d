"""Study schedule planning engine."""
from exam_planner.core.scheduling.agenda import Agenda, PlanningRun
from exam_planner.core.scheduling.availability import AvailabilityIndex, DateSlot
from exam_planner.core.scheduling.planner import (
    NoStudyHoursError,
    PlanConstraints,
    PlanningResult,
    build_schedule,
)
from exam_planner.core.scheduling.redistribution import (
    OverdueSession,
    RedistributionMove,
    find_open_date,
    find_postpone_date,
    plan_redistribution,
)
from exam_planner.core.scheduling.types import (
    REVIEW_OFFSETS,
    ReviewMode,
    SessionDraft,
    SessionStatus,
    SessionType,
    TopicSnapshot,
    TopicStatus,
)

__all__ = [
    "Agenda",
    "AvailabilityIndex",
    "DateSlot",
    "NoStudyHoursError",
    "OverdueSession",
    "PlanConstraints",
    "PlanningResult",
    "PlanningRun",
    "REVIEW_OFFSETS",
    "RedistributionMove",
    "ReviewMode",
    "SessionDraft",
    "SessionStatus",
    "SessionType",
    "TopicSnapshot",
    "TopicStatus",
    "build_schedule",
    "find_open_date",
    "find_postpone_date",
    "plan_redistribution",
]
