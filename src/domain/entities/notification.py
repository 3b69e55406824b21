"""Notification domain entities and the per-signal rule table."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID


class NotificationType(StrEnum):
    """Operational signals that can raise a notification."""

    PENDING_TASKS = "pending_tasks"
    LOW_STOCK = "low_stock"
    OVERDUE_PAYMENT = "overdue_payment"
    TODAYS_APPOINTMENTS = "todays_appointments"
    EXPIRED_ITEMS = "expired_items"
    NEW_PATIENT_REGISTRATION = "new_patient_registration"


class NotificationPriority(StrEnum):
    """Notification urgency, ordered low to high."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    NotificationPriority.LOW: 0,
    NotificationPriority.MEDIUM: 1,
    NotificationPriority.HIGH: 2,
}


@dataclass
class Notification:
    """Domain entity for a feed notification."""

    id: UUID
    type: NotificationType
    priority: NotificationPriority
    title: str
    message: str
    is_action_required: bool
    created_at: datetime
    is_read: bool = False
    read_at: datetime | None = None
    action_url: str | None = None
    related_entity_type: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class NotificationRule:
    """Fixed presentation and priority metadata for one signal type."""

    type: NotificationType
    priority: NotificationPriority
    is_action_required: bool
    title: str
    singular: str
    plural: str
    action_url: str
    related_entity_type: str
    metadata_key: str

    def render(self, count: int) -> str:
        template = self.singular if count == 1 else self.plural
        return template.format(n=count)


NOTIFICATION_RULES: dict[NotificationType, NotificationRule] = {
    rule.type: rule
    for rule in (
        NotificationRule(
            type=NotificationType.PENDING_TASKS,
            priority=NotificationPriority.HIGH,
            is_action_required=True,
            title="Pending Tasks",
            singular="You have {n} pending task requiring attention",
            plural="You have {n} pending tasks requiring attention",
            action_url="/dashboard",
            related_entity_type="task",
            metadata_key="task_count",
        ),
        NotificationRule(
            type=NotificationType.OVERDUE_PAYMENT,
            priority=NotificationPriority.HIGH,
            is_action_required=True,
            title="Overdue Payments",
            singular="{n} payment is overdue",
            plural="{n} payments are overdue",
            action_url="/billing/invoices",
            related_entity_type="invoice",
            metadata_key="overdue_count",
        ),
        NotificationRule(
            type=NotificationType.EXPIRED_ITEMS,
            priority=NotificationPriority.HIGH,
            is_action_required=True,
            title="Expired Items",
            singular="{n} inventory item has expired or is about to expire",
            plural="{n} inventory items have expired or are about to expire",
            action_url="/inventory",
            related_entity_type="inventory",
            metadata_key="expired_count",
        ),
        NotificationRule(
            type=NotificationType.LOW_STOCK,
            priority=NotificationPriority.MEDIUM,
            is_action_required=True,
            title="Low Stock Alert",
            singular="{n} inventory item is running low on stock",
            plural="{n} inventory items are running low on stock",
            action_url="/inventory",
            related_entity_type="inventory",
            metadata_key="item_count",
        ),
        NotificationRule(
            type=NotificationType.TODAYS_APPOINTMENTS,
            priority=NotificationPriority.MEDIUM,
            is_action_required=False,
            title="Today's Appointments",
            singular="You have {n} appointment scheduled for today",
            plural="You have {n} appointments scheduled for today",
            action_url="/appointments",
            related_entity_type="appointment",
            metadata_key="appointment_count",
        ),
        NotificationRule(
            type=NotificationType.NEW_PATIENT_REGISTRATION,
            priority=NotificationPriority.LOW,
            is_action_required=False,
            title="New Patient Registrations",
            singular="{n} new patient registered recently",
            plural="{n} new patients registered recently",
            action_url="/patients",
            related_entity_type="patient",
            metadata_key="patient_count",
        ),
    )
}


def feed_sort_key(notification: Notification) -> tuple[int, str]:
    """Priority descending, then type name for a stable tie-break."""
    return (-notification.priority.rank, notification.type.value)


@dataclass(frozen=True)
class FeedStats:
    """Summary counters folded over the current feed."""

    total: int
    unread: int
    action_required: int
    by_priority: dict[NotificationPriority, int] = field(default_factory=dict)
    by_type: dict[NotificationType, int] = field(default_factory=dict)
