"""Task domain entity and related value objects."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID

from domain.entities.reminder import Reminder


class TaskPriority(StrEnum):
    """Task urgency, ordered low to high."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    TaskPriority.LOW: 0,
    TaskPriority.MEDIUM: 1,
    TaskPriority.HIGH: 2,
}


class TaskType(StrEnum):
    """Clinic task categories."""

    GENERAL = "general"
    PATIENT_CARE = "patient_care"
    ADMINISTRATIVE = "administrative"
    EQUIPMENT = "equipment"
    TRAINING = "training"


class TaskBucket(StrEnum):
    """Temporal classification of a task relative to a reference day."""

    OVERDUE = "overdue"
    TODAY = "today"
    TOMORROW = "tomorrow"
    UPCOMING = "upcoming"


@dataclass
class Task:
    """Domain entity for a clinic task."""

    id: UUID
    title: str
    due_date: datetime
    created_at: datetime
    updated_at: datetime
    description: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    task_type: TaskType = TaskType.GENERAL
    completed: bool = False
    completed_at: datetime | None = None
    reminder: Reminder | None = None
    reminder_at: datetime | None = None


@dataclass(frozen=True)
class TaskSpec:
    """Caller input for creating a task."""

    title: str
    due_date: date | datetime | None
    description: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    task_type: TaskType = TaskType.GENERAL
    reminder: Reminder | None = None


@dataclass(frozen=True, slots=True)
class BucketProgress:
    """Completed vs. total tasks within one bucket."""

    total: int = 0
    completed: int = 0

    @property
    def pending(self) -> int:
        return self.total - self.completed


@dataclass(frozen=True)
class TaskStats:
    """Aggregate counters for the task analytics panel."""

    total: int
    completed: int
    buckets: dict[TaskBucket, BucketProgress] = field(default_factory=dict)

    @property
    def pending(self) -> int:
        return self.total - self.completed
