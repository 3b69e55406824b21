"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from pathlib import Path

# The background poll loop is driven explicitly in tests
os.environ["NOTIFICATION_POLLING_ENABLED"] = "false"

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.entities.notification import NotificationType
from domain.services.notification_aggregator import NotificationAggregator
from domain.services.notification_feed import NotificationFeed
from domain.services.notification_poller import NotificationPoller
from domain.services.task_store import TaskStore
from infrastructure.memory.task_repository import InMemoryTaskRepository
from infrastructure.signals.task_source import PendingTaskSignal

# Friday morning in a fixed zone, so day buckets never straddle midnight
NOW = datetime(2025, 1, 10, 9, 0, tzinfo=timezone(timedelta(hours=5, minutes=30)))


class FixedClock:
    """Manually advanced clock."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class StubSignalSource:
    """Signal source returning a settable count, or raising a settable error."""

    def __init__(self, count: int = 0, error: Exception | None = None) -> None:
        self.count = count
        self.error = error
        self.calls = 0

    async def get_count(self) -> int:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.count


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def task_store(clock: FixedClock) -> TaskStore:
    return TaskStore(InMemoryTaskRepository(), clock=clock)


@pytest.fixture
def remote_sources() -> dict[NotificationType, StubSignalSource]:
    """Stub sources for every signal except pending tasks, all reporting zero."""
    return {
        t: StubSignalSource()
        for t in NotificationType
        if t is not NotificationType.PENDING_TASKS
    }


@pytest.fixture
def notification_feed(clock: FixedClock) -> NotificationFeed:
    return NotificationFeed(clock=clock)


@pytest.fixture
def notification_poller(
    task_store: TaskStore,
    remote_sources: dict[NotificationType, StubSignalSource],
    notification_feed: NotificationFeed,
    clock: FixedClock,
) -> NotificationPoller:
    sources = {**remote_sources, NotificationType.PENDING_TASKS: PendingTaskSignal(task_store)}
    aggregator = NotificationAggregator(sources, timeout_seconds=1.0, clock=clock)
    return NotificationPoller(aggregator, notification_feed, clock=clock)


@pytest.fixture
def app(
    task_store: TaskStore,
    notification_feed: NotificationFeed,
    notification_poller: NotificationPoller,
) -> FastAPI:
    """Application with fresh in-memory state and stubbed signal sources."""
    from api.v1.dependencies import (
        get_notification_feed,
        get_notification_poller,
        get_task_store,
    )
    from main import create_app

    app = create_app()
    app.dependency_overrides[get_task_store] = lambda: task_store
    app.dependency_overrides[get_notification_feed] = lambda: notification_feed
    app.dependency_overrides[get_notification_poller] = lambda: notification_poller
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
