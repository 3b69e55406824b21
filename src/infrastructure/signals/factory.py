"""Wiring of the six operational signal sources."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta

import httpx

from core.clock import Clock, local_now
from core.config import Settings
from domain.entities.notification import NotificationType
from domain.repositories.signal_source import ISignalSource
from domain.services.task_store import TaskStore
from infrastructure.signals.http_source import HttpCountSource, QueryParams
from infrastructure.signals.task_source import PendingTaskSignal

PAGINATION_TOTAL = "data.pagination.total"
NEW_PATIENT_LOOKBACK = timedelta(days=7)
EXPIRY_HORIZON_DAYS = 30


@dataclass(frozen=True, slots=True)
class SignalEndpoint:
    """Where a signal count lives in the clinic REST API."""

    path: str
    params: Callable[[Clock], QueryParams]
    count_path: str = PAGINATION_TOTAL


SIGNAL_ENDPOINTS: dict[NotificationType, SignalEndpoint] = {
    NotificationType.TODAYS_APPOINTMENTS: SignalEndpoint(
        path="/appointments",
        params=lambda clock: {"date": clock().date().isoformat(), "limit": 1},
    ),
    NotificationType.PENDING_TASKS: SignalEndpoint(
        path="/appointments/tasks",
        params=lambda clock: {"status": "pending", "limit": 1},
    ),
    NotificationType.LOW_STOCK: SignalEndpoint(
        path="/inventory/v2",
        params=lambda clock: {"lowStock": "true", "limit": 1},
    ),
    NotificationType.OVERDUE_PAYMENT: SignalEndpoint(
        path="/invoices",
        params=lambda clock: {"status": "overdue", "limit": 1},
    ),
    NotificationType.EXPIRED_ITEMS: SignalEndpoint(
        path="/inventory/v2",
        params=lambda clock: {"expiringWithinDays": EXPIRY_HORIZON_DAYS, "limit": 1},
    ),
    NotificationType.NEW_PATIENT_REGISTRATION: SignalEndpoint(
        path="/patients",
        params=lambda clock: {
            "createdFrom": (clock().date() - NEW_PATIENT_LOOKBACK).isoformat(),
            "limit": 1,
        },
    ),
}


def build_signal_sources(
    client: httpx.AsyncClient,
    settings: Settings,
    task_store: TaskStore | None = None,
    clock: Clock = local_now,
) -> dict[NotificationType, ISignalSource]:
    """Create one source per notification type.

    Pending tasks come from ``task_store`` when ``settings.pending_tasks_signal``
    is ``"local"`` and a store is given; everything else polls the REST API.
    """
    sources: dict[NotificationType, ISignalSource] = {}
    for signal_type, endpoint in SIGNAL_ENDPOINTS.items():
        sources[signal_type] = HttpCountSource(
            client,
            endpoint.path,
            count_path=endpoint.count_path,
            params=_bind(endpoint, clock),
        )

    if settings.pending_tasks_signal == "local" and task_store is not None:
        sources[NotificationType.PENDING_TASKS] = PendingTaskSignal(task_store)
    return sources


def _bind(endpoint: SignalEndpoint, clock: Clock) -> Callable[[], QueryParams]:
    return lambda: endpoint.params(clock)
