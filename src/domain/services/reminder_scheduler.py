"""Reminder fire-time computation.

Pure functions: no clock access, no mutation. The caller passes the
scheduling instant explicitly so that custom times can be checked against it.
"""

from datetime import datetime

from core.exceptions import ReminderInPastError, ValidationError
from domain.entities.reminder import (
    CUSTOM_REMINDER_LABEL,
    CustomReminder,
    OffsetReminder,
    Reminder,
    ReminderOffset,
)


def fire_time(due_date: datetime, reminder: Reminder, now: datetime) -> datetime:
    """Return the absolute instant a reminder should fire.

    Args:
        due_date: When the task is due.
        reminder: An offset before ``due_date`` or an explicit instant.
        now: The scheduling instant.

    Raises:
        ReminderInPastError: If a custom reminder lies before ``now``.
    """
    if isinstance(reminder, OffsetReminder):
        return due_date - reminder.offset.duration

    if isinstance(reminder, CustomReminder):
        if _is_before(reminder.at, now):
            raise ReminderInPastError(reminder.at.isoformat())
        return reminder.at

    raise ValidationError(f"Unsupported reminder: {reminder!r}", field="reminder")


def parse_reminder(label: str | None, custom_at: datetime | None = None) -> Reminder | None:
    """Map a console reminder option onto a reminder variant.

    ``None`` or an empty label means no reminder. ``"custom"`` requires
    ``custom_at``.
    """
    if label is None or not label.strip():
        return None

    if label.strip().lower() == CUSTOM_REMINDER_LABEL:
        if custom_at is None:
            raise ValidationError("Custom reminder requires a time", field="reminder_at")
        return CustomReminder(at=custom_at)

    offset = ReminderOffset.from_label(label)
    if offset is None:
        raise ValidationError(f"Unknown reminder option: {label}", field="reminder")
    return OffsetReminder(offset=offset)


def reminder_label(reminder: Reminder | None) -> str | None:
    """Inverse of :func:`parse_reminder` for display."""
    if reminder is None:
        return None
    if isinstance(reminder, OffsetReminder):
        return reminder.offset.label
    return CUSTOM_REMINDER_LABEL


def _is_before(value: datetime, reference: datetime) -> bool:
    # Naive inputs are read in the reference's timezone.
    if (value.tzinfo is None) != (reference.tzinfo is None):
        if value.tzinfo is None:
            value = value.replace(tzinfo=reference.tzinfo)
        else:
            reference = reference.replace(tzinfo=value.tzinfo)
    return value < reference
