"""Value types shared by the planning engine."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


REVIEW_OFFSETS: tuple[int, ...] = (7, 14, 28)

SATURDAY = 5
SUNDAY = 6


class SessionType(str, Enum):
    """Kinds of calendar entries produced by the planner."""

    NEW_TOPIC = "new_topic"
    REVIEW_7 = "review_7"
    REVIEW_14 = "review_14"
    REVIEW_28 = "review_28"
    REINFORCEMENT_EXTRA = "reinforcement_extra"
    DIRECTED_MOCK = "directed_mock"
    FULL_MOCK = "full_mock"
    ESSAY = "essay"

    @classmethod
    def review_for_offset(cls, offset: int) -> "SessionType":
        return {7: cls.REVIEW_7, 14: cls.REVIEW_14, 28: cls.REVIEW_28}[offset]


class SessionStatus(str, Enum):
    PENDING = "pending"
    DONE = "done"


class TopicStatus(str, Enum):
    PENDING = "pending"
    DONE = "done"


class ReviewMode(str, Enum):
    FULL = "full"
    FOCUSED = "focused"


@dataclass(frozen=True, slots=True)
class SessionDraft:
    """Provisional session held in memory until the run is committed.

    ``subject_name`` and ``topic_description`` are copied values, so later
    renames never reach sessions created from this draft.
    """

    session_type: SessionType
    subject_name: str
    topic_description: str
    topic_id: int | None = None


@dataclass(frozen=True, slots=True)
class TopicSnapshot:
    """Read-only view of a topic as the engine needs it."""

    id: int
    subject_name: str
    description: str
    priority: int
    status: TopicStatus
    completion_date: date | None = None

    @property
    def is_done(self) -> bool:
        return self.status == TopicStatus.DONE
