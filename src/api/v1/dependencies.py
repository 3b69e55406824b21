"""Dependency injection factories for API v1."""

from functools import lru_cache

import httpx

from core.config import settings
from domain.services.notification_aggregator import NotificationAggregator
from domain.services.notification_feed import NotificationFeed
from domain.services.notification_poller import NotificationPoller
from domain.services.task_store import TaskStore
from infrastructure.memory.task_repository import InMemoryTaskRepository
from infrastructure.signals.factory import build_signal_sources
from infrastructure.signals.http_source import create_clinic_client


@lru_cache
def get_task_store() -> TaskStore:
    """Get the process-wide task store."""
    return TaskStore(InMemoryTaskRepository())


@lru_cache
def get_clinic_client() -> httpx.AsyncClient:
    """Get the shared HTTP client for the clinic REST API."""
    return create_clinic_client(settings)


@lru_cache
def get_notification_aggregator() -> NotificationAggregator:
    """Get Notification aggregator wired to all signal sources."""
    return NotificationAggregator(
        build_signal_sources(get_clinic_client(), settings, task_store=get_task_store()),
        timeout_seconds=settings.signal_timeout_seconds,
    )


@lru_cache
def get_notification_feed() -> NotificationFeed:
    """Get the process-wide notification feed."""
    return NotificationFeed()


@lru_cache
def get_notification_poller() -> NotificationPoller:
    """Get the poller that keeps the feed current."""
    return NotificationPoller(
        get_notification_aggregator(),
        get_notification_feed(),
        interval_seconds=settings.notification_poll_interval_seconds,
    )
