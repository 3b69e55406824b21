"""Task API routes."""

from datetime import timedelta
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from api.v1.dependencies import get_task_store
from api.v1.schemas.task import (
    BucketProgressResponse,
    TaskCreate,
    TaskDetailResponse,
    TaskListResponse,
    TaskResponse,
    TaskSummaryResponse,
    TaskUpdate,
)
from core.config import settings
from domain.entities.reminder import Reminder
from domain.entities.task import Task, TaskBucket, TaskSpec
from domain.services.reminder_scheduler import parse_reminder, reminder_label
from domain.services.task_store import TaskStore

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get(
    "",
    response_model=TaskListResponse,
    summary="List tasks",
    responses={
        200: {"description": "Tasks, optionally restricted to one bucket"},
    },
)
async def list_tasks(
    bucket: TaskBucket | None = Query(None, description="Restrict to one temporal bucket"),
    include_completed: bool = Query(True, description="Include completed tasks"),
    store: TaskStore = Depends(get_task_store),
) -> TaskListResponse:
    """
    Get tasks ordered by priority (high first), due date, then creation time.

    Bucket membership is computed against the current time on every request.
    """
    tasks = store.list_by_bucket(bucket) if bucket else store.list_all()
    if not include_completed:
        tasks = [t for t in tasks if not t.completed]

    return TaskListResponse(
        data=[_build_task_response(t, store) for t in tasks],
        meta={
            "total": len(tasks),
            "completed": sum(1 for t in tasks if t.completed),
            "bucket": bucket.value if bucket else None,
        },
    )


@router.get(
    "/summary",
    response_model=TaskSummaryResponse,
    summary="Task counters per bucket",
)
async def get_task_summary(
    store: TaskStore = Depends(get_task_store),
) -> TaskSummaryResponse:
    """Completed vs. total counters for each bucket and overall."""
    stats = store.stats()
    return TaskSummaryResponse(
        total=stats.total,
        completed=stats.completed,
        pending=stats.pending,
        buckets={
            bucket: BucketProgressResponse(total=p.total, completed=p.completed)
            for bucket, p in stats.buckets.items()
        },
    )


@router.get(
    "/reminders/due",
    response_model=TaskListResponse,
    summary="Tasks with a reminder due now",
)
async def list_due_reminders(
    store: TaskStore = Depends(get_task_store),
) -> TaskListResponse:
    """Incomplete tasks whose reminder fell due within the configured window."""
    tasks = store.reminders_due(window=timedelta(minutes=settings.reminder_window_minutes))
    return TaskListResponse(
        data=[_build_task_response(t, store) for t in tasks],
        meta={"total": len(tasks), "window_minutes": settings.reminder_window_minutes},
    )


@router.post(
    "",
    response_model=TaskDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new task",
    responses={
        201: {"description": "Task created successfully"},
        400: {"description": "Invalid reminder"},
        422: {"description": "Validation error"},
    },
)
async def create_task(
    body: TaskCreate,
    store: TaskStore = Depends(get_task_store),
) -> TaskDetailResponse:
    """Create a task. A custom reminder must not lie in the past."""
    task = store.create(
        TaskSpec(
            title=body.title,
            description=body.description,
            due_date=body.due_date,
            priority=body.priority,
            task_type=body.task_type,
            reminder=parse_reminder(body.reminder, body.reminder_at),
        )
    )
    return TaskDetailResponse(data=_build_task_response(task, store))


@router.get(
    "/{task_id}",
    response_model=TaskDetailResponse,
    summary="Get a task",
    responses={
        200: {"description": "Task details"},
        404: {"description": "Task not found"},
    },
)
async def get_task(
    task_id: UUID,
    store: TaskStore = Depends(get_task_store),
) -> TaskDetailResponse:
    return TaskDetailResponse(data=_build_task_response(store.get(task_id), store))


@router.patch(
    "/{task_id}",
    response_model=TaskDetailResponse,
    summary="Update a task",
    responses={
        200: {"description": "Task updated"},
        400: {"description": "Invalid reminder"},
        404: {"description": "Task not found"},
    },
)
async def update_task(
    task_id: UUID,
    body: TaskUpdate,
    store: TaskStore = Depends(get_task_store),
) -> TaskDetailResponse:
    """
    Patch a task. Only fields present in the body change.

    Send `"reminder": null` to clear a reminder or `"description": null` to
    clear the description. Completion is changed via the toggle endpoint.
    """
    provided = body.model_fields_set

    description: object = body.description if "description" in provided else ...
    reminder: Reminder | None | object = ...
    if provided & {"reminder", "reminder_at"}:
        label = body.reminder
        if label is None and body.reminder_at is not None:
            label = "custom"
        reminder = parse_reminder(label, body.reminder_at)

    task = store.update(
        task_id,
        title=body.title,
        description=description,
        priority=body.priority,
        due_date=body.due_date,
        task_type=body.task_type,
        reminder=reminder,
    )
    return TaskDetailResponse(data=_build_task_response(task, store))


@router.post(
    "/{task_id}/toggle",
    response_model=TaskDetailResponse,
    summary="Toggle task completion",
    responses={
        200: {"description": "Completion flipped"},
        404: {"description": "Task not found"},
    },
)
async def toggle_task(
    task_id: UUID,
    store: TaskStore = Depends(get_task_store),
) -> TaskDetailResponse:
    task = store.toggle_completion(task_id)
    return TaskDetailResponse(data=_build_task_response(task, store))


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a task",
    responses={
        204: {"description": "Task deleted"},
        404: {"description": "Task not found"},
    },
)
async def delete_task(
    task_id: UUID,
    store: TaskStore = Depends(get_task_store),
) -> None:
    store.delete(task_id)


def _build_task_response(task: Task, store: TaskStore) -> TaskResponse:
    """Build TaskResponse with the bucket computed against the current time."""
    return TaskResponse(
        id=task.id,
        title=task.title,
        description=task.description,
        priority=task.priority,
        task_type=task.task_type,
        due_date=task.due_date,
        bucket=store.bucket_of(task),
        completed=task.completed,
        completed_at=task.completed_at,
        reminder=reminder_label(task.reminder),
        reminder_at=task.reminder_at,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )
