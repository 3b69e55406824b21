"""Reminder value objects."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum


class ReminderOffset(Enum):
    """Fixed lead times a reminder can fire before the due date.

    Each member carries the console label and the duration it stands for.
    """

    FIVE_MINUTES = ("5 minutes before", timedelta(minutes=5))
    FIFTEEN_MINUTES = ("15 minutes before", timedelta(minutes=15))
    THIRTY_MINUTES = ("30 minutes before", timedelta(minutes=30))
    ONE_HOUR = ("1 hour before", timedelta(hours=1))
    TWO_HOURS = ("2 hours before", timedelta(hours=2))
    ONE_DAY = ("1 day before", timedelta(days=1))

    def __init__(self, label: str, duration: timedelta) -> None:
        self.label = label
        self.duration = duration

    @classmethod
    def from_label(cls, label: str) -> "ReminderOffset | None":
        normalized = label.strip().lower()
        for offset in cls:
            if offset.label == normalized:
                return offset
        return None


@dataclass(frozen=True, slots=True)
class OffsetReminder:
    """Fire a fixed duration before the task is due."""

    offset: ReminderOffset


@dataclass(frozen=True, slots=True)
class CustomReminder:
    """Fire at an explicit, caller-chosen instant."""

    at: datetime


Reminder = OffsetReminder | CustomReminder

CUSTOM_REMINDER_LABEL = "custom"
