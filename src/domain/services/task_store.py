"""Task store: the single owner of task state."""

from datetime import date, datetime, time, timedelta
from typing import cast
from uuid import UUID

import structlog

from core.clock import Clock, IdFactory, local_now, new_id
from core.exceptions import TaskNotFoundError, ValidationError
from domain.entities.reminder import OffsetReminder, Reminder
from domain.entities.task import (
    BucketProgress,
    Task,
    TaskBucket,
    TaskPriority,
    TaskSpec,
    TaskStats,
    TaskType,
)
from domain.repositories.task_repository import ITaskRepository
from domain.services.reminder_scheduler import fire_time

logger = structlog.get_logger()

DEFAULT_REMINDER_WINDOW = timedelta(minutes=5)


class TaskStore:
    """Create, mutate and query clinic tasks.

    All mutation goes through ``create``, ``update``, ``toggle_completion``
    and ``delete``. Returned tasks are copies. Bucket membership is computed
    on every read from the due date and a reference time.
    """

    def __init__(
        self,
        repository: ITaskRepository,
        clock: Clock = local_now,
        id_factory: IdFactory = new_id,
    ) -> None:
        self._repo = repository
        self._clock = clock
        self._new_id = id_factory

    # --- Commands ---

    def create(self, spec: TaskSpec) -> Task:
        """Validate and store a new task."""
        now = self._clock()
        title = self._validate_title(spec.title)
        if spec.due_date is None:
            raise ValidationError("Due date is required", field="due_date")
        due_date = _normalize(spec.due_date, now)

        task = Task(
            id=self._new_id(),
            title=title,
            description=spec.description,
            priority=TaskPriority(spec.priority),
            task_type=TaskType(spec.task_type),
            due_date=due_date,
            created_at=now,
            updated_at=now,
        )
        if spec.reminder is not None:
            task.reminder = spec.reminder
            task.reminder_at = _normalize(fire_time(due_date, spec.reminder, now), now)

        created = self._repo.add(task)
        logger.info(
            "task_created",
            task_id=str(created.id),
            priority=created.priority.value,
            due_date=created.due_date.isoformat(),
        )
        return created

    def update(
        self,
        task_id: UUID,
        title: str | None = None,
        description: object = ...,  # Sentinel to detect explicit None
        priority: TaskPriority | None = None,
        due_date: date | datetime | None = None,
        task_type: TaskType | None = None,
        reminder: object = ...,  # Sentinel to detect explicit None
    ) -> Task:
        """Patch the supplied fields of an existing task.

        ``id`` and ``created_at`` never change. Completion is only changed by
        :meth:`toggle_completion`.
        """
        task = self._require(task_id)
        now = self._clock()
        changed: list[str] = []

        if title is not None:
            task.title = self._validate_title(title)
            changed.append("title")
        if description is not ...:
            task.description = cast(str | None, description)
            changed.append("description")
        if priority is not None:
            task.priority = TaskPriority(priority)
            changed.append("priority")
        if task_type is not None:
            task.task_type = TaskType(task_type)
            changed.append("task_type")
        if due_date is not None:
            task.due_date = _normalize(due_date, now)
            changed.append("due_date")

        if reminder is not ...:
            task.reminder = cast(Reminder | None, reminder)
            task.reminder_at = (
                _normalize(fire_time(task.due_date, task.reminder, now), now)
                if task.reminder is not None
                else None
            )
            changed.append("reminder")
        elif "due_date" in changed and isinstance(task.reminder, OffsetReminder):
            # Custom reminders are absolute; offsets follow the due date.
            task.reminder_at = fire_time(task.due_date, task.reminder, now)

        task.updated_at = now
        updated = self._repo.update(task)
        logger.info("task_updated", task_id=str(task_id), fields=changed)
        return updated

    def toggle_completion(self, task_id: UUID) -> Task:
        """Flip the completion flag. Applying it twice restores the original state."""
        task = self._require(task_id)
        now = self._clock()

        task.completed = not task.completed
        task.completed_at = now if task.completed else None
        task.updated_at = now

        updated = self._repo.update(task)
        logger.info(
            "task_completion_toggled",
            task_id=str(task_id),
            completed=updated.completed,
        )
        return updated

    def delete(self, task_id: UUID) -> None:
        """Remove a task permanently."""
        if not self._repo.delete(task_id):
            raise TaskNotFoundError(str(task_id))
        logger.info("task_deleted", task_id=str(task_id))

    # --- Queries ---

    def get(self, task_id: UUID) -> Task:
        return self._require(task_id)

    def list_all(self) -> list[Task]:
        return sorted(self._repo.list(), key=_task_sort_key)

    def bucket_of(self, task: Task, reference_time: datetime | None = None) -> TaskBucket:
        return classify(task.due_date, self._reference(reference_time))

    def list_by_bucket(
        self, bucket: TaskBucket, reference_time: datetime | None = None
    ) -> list[Task]:
        """Tasks whose due day falls in ``bucket`` relative to ``reference_time``.

        Ordered by priority (high first), then due date, then creation time.
        Completed tasks stay in their bucket.
        """
        reference = self._reference(reference_time)
        bucket = TaskBucket(bucket)
        matching = [
            task
            for task in self._repo.list()
            if classify(task.due_date, reference) is bucket
        ]
        return sorted(matching, key=_task_sort_key)

    def bucket_progress(
        self, reference_time: datetime | None = None
    ) -> dict[TaskBucket, BucketProgress]:
        """Completed vs. total counters for every bucket."""
        reference = self._reference(reference_time)
        totals = {bucket: [0, 0] for bucket in TaskBucket}
        for task in self._repo.list():
            counter = totals[classify(task.due_date, reference)]
            counter[0] += 1
            if task.completed:
                counter[1] += 1
        return {
            bucket: BucketProgress(total=total, completed=completed)
            for bucket, (total, completed) in totals.items()
        }

    def stats(self, reference_time: datetime | None = None) -> TaskStats:
        progress = self.bucket_progress(reference_time)
        return TaskStats(
            total=sum(p.total for p in progress.values()),
            completed=sum(p.completed for p in progress.values()),
            buckets=progress,
        )

    def pending_count(self) -> int:
        """Number of tasks not yet completed."""
        return sum(1 for task in self._repo.list() if not task.completed)

    def reminders_due(
        self,
        reference_time: datetime | None = None,
        window: timedelta = DEFAULT_REMINDER_WINDOW,
    ) -> list[Task]:
        """Incomplete tasks whose reminder fell due within ``window`` before now."""
        reference = self._reference(reference_time)
        start = reference - window
        due = [
            task
            for task in self._repo.list()
            if not task.completed
            and task.reminder_at is not None
            and start < _align(task.reminder_at, reference) <= reference
        ]
        return sorted(due, key=lambda t: cast(datetime, t.reminder_at))

    # --- Helpers ---

    def _require(self, task_id: UUID) -> Task:
        task = self._repo.get(task_id)
        if task is None:
            raise TaskNotFoundError(str(task_id))
        return task

    def _reference(self, reference_time: datetime | None) -> datetime:
        """The clock's now, or ``reference_time`` read in the clock's timezone."""
        now = self._clock()
        if reference_time is None:
            return now
        return _normalize(reference_time, now)

    @staticmethod
    def _validate_title(title: str | None) -> str:
        cleaned = (title or "").strip()
        if not cleaned:
            raise ValidationError("Title is required", field="title")
        return cleaned


def classify(due_date: datetime, reference_time: datetime) -> TaskBucket:
    """Bucket a due date by calendar day relative to ``reference_time``."""
    today = reference_time.date()
    due_day = _align(due_date, reference_time).date()
    if due_day < today:
        return TaskBucket.OVERDUE
    if due_day == today:
        return TaskBucket.TODAY
    if due_day == today + timedelta(days=1):
        return TaskBucket.TOMORROW
    return TaskBucket.UPCOMING


def _task_sort_key(task: Task) -> tuple[int, datetime, datetime]:
    return (-task.priority.rank, task.due_date, task.created_at)


def _normalize(value: date | datetime, now: datetime) -> datetime:
    """Coerce a date or datetime to the clock's timezone awareness."""
    if not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=now.tzinfo)
    if value.tzinfo is None and now.tzinfo is not None:
        return value.replace(tzinfo=now.tzinfo)
    if value.tzinfo is not None and now.tzinfo is None:
        return value.astimezone().replace(tzinfo=None)
    return value


def _align(value: datetime, reference: datetime) -> datetime:
    """Express ``value`` in the reference's timezone for day comparison."""
    if value.tzinfo is not None and reference.tzinfo is not None:
        return value.astimezone(reference.tzinfo)
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    if reference.tzinfo is not None:
        return value.replace(tzinfo=reference.tzinfo)
    return value
