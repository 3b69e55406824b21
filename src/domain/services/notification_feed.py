"""Notification feed: the latest aggregation result plus read state."""

import dataclasses
from collections import Counter
from collections.abc import Iterable
from uuid import UUID

import structlog

from core.clock import Clock, local_now
from domain.entities.notification import (
    FeedStats,
    Notification,
    NotificationPriority,
    NotificationType,
    feed_sort_key,
)

logger = structlog.get_logger()


class NotificationFeed:
    """Holds at most one live notification per type.

    A notification whose signal persists across passes keeps its id,
    creation time and read state; only its message and metadata refresh.
    A type missing from a pass is dropped together with its read and
    dismissed state, so a re-emerging signal shows up unread.
    """

    def __init__(self, clock: Clock = local_now) -> None:
        self._clock = clock
        self._live: dict[NotificationType, Notification] = {}
        self._dismissed: set[NotificationType] = set()

    def replace(self, notifications: Iterable[Notification]) -> list[Notification]:
        """Merge a fresh aggregation pass into the feed."""
        incoming: dict[NotificationType, Notification] = {}
        for notification in notifications:
            # Later duplicates of a type within one pass win.
            incoming[notification.type] = notification

        merged: dict[NotificationType, Notification] = {}
        for signal_type, fresh in incoming.items():
            current = self._live.get(signal_type)
            if current is None:
                merged[signal_type] = dataclasses.replace(fresh, is_read=False, read_at=None)
                continue
            merged[signal_type] = dataclasses.replace(
                fresh,
                id=current.id,
                created_at=current.created_at,
                is_read=current.is_read,
                read_at=current.read_at,
            )

        cleared = set(self._live) - set(merged)
        self._live = merged
        self._dismissed &= set(merged)

        if cleared:
            logger.debug("notifications_cleared", types=sorted(t.value for t in cleared))
        return self.notifications

    def mark_read(self, notification_id: UUID) -> None:
        """Mark one notification read. Unknown or already-read ids are ignored."""
        current = self._find(notification_id)
        if current is None or current.is_read:
            return
        self._live[current.type] = dataclasses.replace(
            current, is_read=True, read_at=self._clock()
        )

    def mark_all_read(self) -> int:
        """Mark every visible notification read and return how many changed."""
        now = self._clock()
        changed = 0
        for signal_type, current in list(self._live.items()):
            if signal_type in self._dismissed or current.is_read:
                continue
            self._live[signal_type] = dataclasses.replace(current, is_read=True, read_at=now)
            changed += 1
        return changed

    def dismiss(self, notification_id: UUID) -> bool:
        """Hide a notification until its signal clears. Returns False if unknown."""
        current = self._find(notification_id)
        if current is None:
            return False
        self._dismissed.add(current.type)
        return True

    def clear(self) -> int:
        """Drop every visible notification and return how many were dropped.

        Unlike :meth:`dismiss` nothing is remembered: the next pass that
        still carries a signal re-creates its notification unread.
        """
        dropped = len(self.notifications)
        self._live.clear()
        self._dismissed.clear()
        logger.info("notification_feed_cleared", count=dropped)
        return dropped

    def get(self, notification_id: UUID) -> Notification | None:
        current = self._find(notification_id)
        return dataclasses.replace(current) if current else None

    @property
    def notifications(self) -> list[Notification]:
        """Visible notifications, highest priority first."""
        visible = [
            dataclasses.replace(n) for t, n in self._live.items() if t not in self._dismissed
        ]
        return sorted(visible, key=feed_sort_key)

    def unread(self) -> list[Notification]:
        return [n for n in self.notifications if not n.is_read]

    def action_required(self) -> list[Notification]:
        """Unread notifications that ask the user to act."""
        return [n for n in self.notifications if n.is_action_required and not n.is_read]

    def by_type(self, signal_type: NotificationType) -> list[Notification]:
        signal_type = NotificationType(signal_type)
        return [n for n in self.notifications if n.type is signal_type]

    def by_priority(self, priority: NotificationPriority) -> list[Notification]:
        priority = NotificationPriority(priority)
        return [n for n in self.notifications if n.priority is priority]

    def stats(self) -> FeedStats:
        current = self.notifications
        by_priority = Counter(n.priority for n in current)
        by_type = Counter(n.type for n in current)
        return FeedStats(
            total=len(current),
            unread=sum(1 for n in current if not n.is_read),
            action_required=sum(1 for n in current if n.is_action_required and not n.is_read),
            by_priority={p: by_priority.get(p, 0) for p in NotificationPriority},
            by_type={t: by_type.get(t, 0) for t in NotificationType},
        )

    def _find(self, notification_id: UUID) -> Notification | None:
        for signal_type, notification in self._live.items():
            if notification.id == notification_id and signal_type not in self._dismissed:
                return notification
        return None
