"""Periodic notification polling."""

import asyncio
import contextlib
import inspect
from collections.abc import Awaitable, Callable
from datetime import datetime

import structlog

from core.clock import Clock, local_now
from domain.entities.notification import Notification
from domain.services.notification_aggregator import NotificationAggregator
from domain.services.notification_feed import NotificationFeed

logger = structlog.get_logger()

FeedListener = Callable[[list[Notification]], Awaitable[None] | None]

DEFAULT_POLL_INTERVAL_SECONDS = 60.0


class NotificationPoller:
    """Owns the poll loop that keeps a :class:`NotificationFeed` current.

    Every pass runs as its own task. ``stop()`` cancels whatever pass is in
    flight, which cancels the outstanding source calls, so a torn-down
    poller never writes a stale result into the feed. Consumers subscribe
    to receive the visible notifications after each completed pass.
    """

    def __init__(
        self,
        aggregator: NotificationAggregator,
        feed: NotificationFeed,
        interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        clock: Clock = local_now,
    ) -> None:
        self._aggregator = aggregator
        self._feed = feed
        self._interval = interval_seconds
        self._clock = clock
        self._runner: asyncio.Task[None] | None = None
        self._cycles: set[asyncio.Task[list[Notification]]] = set()
        self._listeners: list[FeedListener] = []
        self.last_polled_at: datetime | None = None

    @property
    def is_running(self) -> bool:
        return self._runner is not None and not self._runner.done()

    def subscribe(self, listener: FeedListener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return unsubscribe

    async def poll_once(self) -> list[Notification] | None:
        """Run one aggregation pass and merge it into the feed.

        Returns the visible notifications, or ``None`` if the pass was
        cancelled by :meth:`stop`.
        """
        cycle = asyncio.create_task(self._aggregator.aggregate())
        self._cycles.add(cycle)
        try:
            fresh = await cycle
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if cycle.cancelled() and not (current and current.cancelling()):
                logger.info("notification_poll_cancelled")
                return None
            raise
        finally:
            self._cycles.discard(cycle)

        visible = self._feed.replace(fresh)
        self.last_polled_at = self._clock()
        logger.debug("notification_poll_completed", visible=len(visible))
        await self._publish(visible)
        return visible

    def start(self) -> None:
        """Start the background loop. Must be called from a running event loop."""
        if self.is_running:
            return
        self._runner = asyncio.create_task(self._run(), name="notification-poller")
        logger.info("notification_poller_started", interval_seconds=self._interval)

    async def stop(self) -> None:
        """Stop the loop and cancel any pass in flight."""
        for cycle in list(self._cycles):
            cycle.cancel()

        runner, self._runner = self._runner, None
        if runner is None:
            return
        runner.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await runner
        logger.info("notification_poller_stopped")

    async def _run(self) -> None:
        while True:
            try:
                await self.poll_once()
            except Exception:
                logger.exception("notification_poll_failed")
            await asyncio.sleep(self._interval)

    async def _publish(self, visible: list[Notification]) -> None:
        for listener in list(self._listeners):
            try:
                result = listener(visible)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("notification_listener_failed")
