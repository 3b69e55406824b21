"""Pydantic schemas for Task API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.task import TaskBucket, TaskPriority, TaskType


class TaskCreate(BaseModel):
    """Schema for creating a Task."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)
    due_date: datetime = Field(..., description="Due date, with or without time of day")
    priority: TaskPriority = TaskPriority.MEDIUM
    task_type: TaskType = TaskType.GENERAL
    reminder: str | None = Field(
        None,
        description='Reminder option, e.g. "15 minutes before", "1 day before" or "custom"',
    )
    reminder_at: datetime | None = Field(None, description="Required when reminder is custom")


class TaskUpdate(BaseModel):
    """Schema for updating a Task (all fields optional)."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)
    due_date: datetime | None = None
    priority: TaskPriority | None = None
    task_type: TaskType | None = None
    reminder: str | None = None
    reminder_at: datetime | None = None


class TaskResponse(BaseModel):
    """Schema for Task response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "title": "Review patient records",
                "description": "Update records for today's appointments",
                "priority": "high",
                "task_type": "patient_care",
                "due_date": "2026-01-28T10:00:00+05:30",
                "bucket": "today",
                "completed": False,
                "completed_at": None,
                "reminder": "15 minutes before",
                "reminder_at": "2026-01-28T09:45:00+05:30",
                "created_at": "2026-01-27T18:00:00+05:30",
                "updated_at": "2026-01-27T18:00:00+05:30",
            }
        },
    )

    id: UUID
    title: str
    description: str | None
    priority: TaskPriority
    task_type: TaskType
    due_date: datetime
    bucket: TaskBucket
    completed: bool
    completed_at: datetime | None
    reminder: str | None
    reminder_at: datetime | None
    created_at: datetime
    updated_at: datetime


class TaskListResponse(BaseModel):
    """Schema for list of Tasks response."""

    data: list[TaskResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class TaskDetailResponse(BaseModel):
    """Schema for single Task response."""

    data: TaskResponse


class BucketProgressResponse(BaseModel):
    """Completed vs. total counters for one bucket."""

    total: int
    completed: int


class TaskSummaryResponse(BaseModel):
    """Task analytics summary."""

    total: int
    completed: int
    pending: int
    buckets: dict[TaskBucket, BucketProgressResponse]
