"""Notification aggregation: poll every signal source, emit one notification per live signal."""

import asyncio
from collections.abc import Mapping
from datetime import datetime

import structlog

from core.clock import Clock, IdFactory, local_now, new_id
from domain.entities.notification import (
    NOTIFICATION_RULES,
    Notification,
    NotificationType,
    feed_sort_key,
)
from domain.repositories.signal_source import ISignalSource

logger = structlog.get_logger()

DEFAULT_SIGNAL_TIMEOUT_SECONDS = 5.0


class NotificationAggregator:
    """Fan out to all signal sources and fan the counts back in.

    A source that raises, times out or returns a non-count is treated as
    reporting zero. The aggregation pass itself never fails; it can only
    return fewer notifications than the true state warrants.
    """

    def __init__(
        self,
        sources: Mapping[NotificationType, ISignalSource],
        timeout_seconds: float = DEFAULT_SIGNAL_TIMEOUT_SECONDS,
        clock: Clock = local_now,
        id_factory: IdFactory = new_id,
    ) -> None:
        self._sources = dict(sources)
        self._timeout = timeout_seconds
        self._clock = clock
        self._new_id = id_factory

    @property
    def signal_types(self) -> list[NotificationType]:
        return list(self._sources)

    async def aggregate(self) -> list[Notification]:
        """Run one aggregation pass.

        Cancelling the awaiting task cancels every in-flight source call.
        """
        counts = await self.collect_counts()

        now = self._clock()
        notifications = [
            self._build(signal_type, count, now)
            for signal_type, count in counts.items()
            if count > 0
        ]
        notifications.sort(key=feed_sort_key)

        logger.debug(
            "notifications_aggregated",
            counts={t.value: c for t, c in counts.items()},
            emitted=len(notifications),
        )
        return notifications

    async def collect_counts(self) -> dict[NotificationType, int]:
        """Raw per-source counts after failure isolation."""
        types = list(self._sources)
        counts = await asyncio.gather(*(self._poll(t, self._sources[t]) for t in types))
        return dict(zip(types, counts))

    async def _poll(self, signal_type: NotificationType, source: ISignalSource) -> int:
        try:
            count = await asyncio.wait_for(source.get_count(), timeout=self._timeout)
        except TimeoutError:
            logger.warning(
                "signal_source_timeout",
                signal=signal_type.value,
                timeout_seconds=self._timeout,
            )
            return 0
        except Exception as e:
            logger.warning(
                "signal_source_failed",
                signal=signal_type.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            return 0

        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            logger.warning(
                "signal_source_invalid_count",
                signal=signal_type.value,
                value=repr(count),
            )
            return 0
        return count

    def _build(self, signal_type: NotificationType, count: int, now: datetime) -> Notification:
        rule = NOTIFICATION_RULES[signal_type]
        return Notification(
            id=self._new_id(),
            type=signal_type,
            priority=rule.priority,
            title=rule.title,
            message=rule.render(count),
            is_action_required=rule.is_action_required,
            created_at=now,
            action_url=rule.action_url,
            related_entity_type=rule.related_entity_type,
            metadata={rule.metadata_key: count},
        )
