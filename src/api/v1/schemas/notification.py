"""Pydantic schemas for Notification API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.notification import NotificationPriority, NotificationType


class NotificationResponse(BaseModel):
    """Single notification in the feed."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    type: NotificationType
    priority: NotificationPriority
    title: str
    message: str
    is_read: bool
    read_at: datetime | None = None
    is_action_required: bool
    action_url: str | None = None
    related_entity_type: str | None = None
    metadata: dict[str, Any]
    created_at: datetime


class NotificationListResponse(BaseModel):
    """Notification feed response."""

    data: list[NotificationResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class NotificationStatsResponse(BaseModel):
    """Feed summary counters."""

    total: int
    unread: int
    action_required: int
    by_priority: dict[NotificationPriority, int]
    by_type: dict[NotificationType, int]


class MarkAllReadResponse(BaseModel):
    """Response for mark-all-read operation."""

    count: int  # Number of notifications marked


class ClearNotificationsResponse(BaseModel):
    """Response for clearing the feed."""

    count: int  # Number of notifications dropped
