"""Integration tests for Notification API endpoints."""

import pytest
from httpx import AsyncClient

from domain.entities.notification import NotificationType


async def _add_tasks(client: AsyncClient, count: int) -> None:
    for i in range(count):
        response = await client.post(
            "/api/v1/tasks",
            json={"title": f"Task {i}", "due_date": "2025-01-10T15:00:00+05:30"},
        )
        assert response.status_code == 201


class TestNotificationFeed:
    """Tests for the notification feed endpoints."""

    @pytest.mark.asyncio
    async def test_empty_before_first_poll(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/notifications")

        assert response.status_code == 200
        body = response.json()
        assert body["data"] == []
        assert body["meta"]["unread_count"] == 0
        assert body["meta"]["last_polled_at"] is None

    @pytest.mark.asyncio
    async def test_refresh_aggregates_signals(self, client: AsyncClient, remote_sources) -> None:
        await _add_tasks(client, 3)
        remote_sources[NotificationType.OVERDUE_PAYMENT].count = 2

        response = await client.post("/api/v1/notifications/refresh")

        assert response.status_code == 200
        body = response.json()
        assert [n["type"] for n in body["data"]] == ["overdue_payment", "pending_tasks"]
        assert [n["priority"] for n in body["data"]] == ["high", "high"]
        assert body["data"][0]["message"] == "2 payments are overdue"
        assert body["data"][1]["metadata"] == {"task_count": 3}
        assert body["meta"]["unread_count"] == 2
        assert body["meta"]["last_polled_at"] is not None

    @pytest.mark.asyncio
    async def test_failing_source_is_isolated(self, client: AsyncClient, remote_sources) -> None:
        remote_sources[NotificationType.LOW_STOCK].error = RuntimeError("inventory down")
        remote_sources[NotificationType.EXPIRED_ITEMS].count = 1

        response = await client.post("/api/v1/notifications/refresh")

        assert response.status_code == 200
        assert [n["type"] for n in response.json()["data"]] == ["expired_items"]

    @pytest.mark.asyncio
    async def test_read_state_survives_refresh(self, client: AsyncClient, remote_sources) -> None:
        remote_sources[NotificationType.LOW_STOCK].count = 4
        remote_sources[NotificationType.TODAYS_APPOINTMENTS].count = 6
        refreshed = (await client.post("/api/v1/notifications/refresh")).json()["data"]
        low_stock = next(n for n in refreshed if n["type"] == "low_stock")

        read = await client.patch(f"/api/v1/notifications/{low_stock['id']}/read")
        await client.post("/api/v1/notifications/refresh")
        unread = await client.get("/api/v1/notifications", params={"filter": "unread"})
        everything = await client.get("/api/v1/notifications")

        assert read.status_code == 204
        assert [n["type"] for n in unread.json()["data"]] == ["todays_appointments"]
        current = next(n for n in everything.json()["data"] if n["type"] == "low_stock")
        assert current["id"] == low_stock["id"]
        assert current["is_read"] is True

    @pytest.mark.asyncio
    async def test_action_required_filter(self, client: AsyncClient, remote_sources) -> None:
        remote_sources[NotificationType.LOW_STOCK].count = 4
        remote_sources[NotificationType.NEW_PATIENT_REGISTRATION].count = 2
        await client.post("/api/v1/notifications/refresh")

        response = await client.get(
            "/api/v1/notifications", params={"filter": "action_required"}
        )

        assert [n["type"] for n in response.json()["data"]] == ["low_stock"]

    @pytest.mark.asyncio
    async def test_invalid_filter(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/notifications", params={"filter": "recent"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_mark_all_read(self, client: AsyncClient, remote_sources) -> None:
        remote_sources[NotificationType.LOW_STOCK].count = 4
        remote_sources[NotificationType.OVERDUE_PAYMENT].count = 1
        await client.post("/api/v1/notifications/refresh")

        first = await client.post("/api/v1/notifications/read-all")
        second = await client.post("/api/v1/notifications/read-all")

        assert first.json() == {"count": 2}
        assert second.json() == {"count": 0}

    @pytest.mark.asyncio
    async def test_dismiss(self, client: AsyncClient, remote_sources) -> None:
        remote_sources[NotificationType.LOW_STOCK].count = 4
        [notification] = (await client.post("/api/v1/notifications/refresh")).json()["data"]

        response = await client.delete(f"/api/v1/notifications/{notification['id']}")
        again = await client.delete(f"/api/v1/notifications/{notification['id']}")
        listing = await client.get("/api/v1/notifications")

        assert response.status_code == 204
        assert again.status_code == 404
        assert again.json()["error_code"] == "NOTIFICATION_NOT_FOUND"
        assert listing.json()["data"] == []

    @pytest.mark.asyncio
    async def test_stats(self, client: AsyncClient, remote_sources) -> None:
        remote_sources[NotificationType.OVERDUE_PAYMENT].count = 2
        remote_sources[NotificationType.TODAYS_APPOINTMENTS].count = 5
        await client.post("/api/v1/notifications/refresh")

        response = await client.get("/api/v1/notifications/stats")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert body["unread"] == 2
        assert body["action_required"] == 1
        assert body["by_priority"] == {"low": 0, "medium": 1, "high": 1}
        assert body["by_type"]["overdue_payment"] == 1
        assert body["by_type"]["pending_tasks"] == 0

    @pytest.mark.asyncio
    async def test_type_and_priority_filters(self, client: AsyncClient, remote_sources) -> None:
        remote_sources[NotificationType.OVERDUE_PAYMENT].count = 2
        remote_sources[NotificationType.LOW_STOCK].count = 4
        remote_sources[NotificationType.TODAYS_APPOINTMENTS].count = 5
        await client.post("/api/v1/notifications/refresh")

        by_type = await client.get("/api/v1/notifications", params={"type": "low_stock"})
        by_priority = await client.get("/api/v1/notifications", params={"priority": "medium"})
        combined = await client.get(
            "/api/v1/notifications",
            params={"priority": "medium", "filter": "action_required"},
        )
        invalid = await client.get("/api/v1/notifications", params={"priority": "urgent"})

        assert [n["type"] for n in by_type.json()["data"]] == ["low_stock"]
        assert by_type.json()["meta"]["unread_count"] == 3
        assert [n["type"] for n in by_priority.json()["data"]] == [
            "low_stock",
            "todays_appointments",
        ]
        assert [n["type"] for n in combined.json()["data"]] == ["low_stock"]
        assert invalid.status_code == 422
        assert "priority" in invalid.json()["details"]["fields"]

    @pytest.mark.asyncio
    async def test_clear_feed(self, client: AsyncClient, remote_sources) -> None:
        remote_sources[NotificationType.LOW_STOCK].count = 4
        remote_sources[NotificationType.EXPIRED_ITEMS].count = 1
        await client.post("/api/v1/notifications/refresh")
        await client.post("/api/v1/notifications/read-all")

        cleared = await client.delete("/api/v1/notifications")
        empty = await client.get("/api/v1/notifications")
        refreshed = await client.post("/api/v1/notifications/refresh")

        assert cleared.status_code == 200
        assert cleared.json() == {"count": 2}
        assert empty.json()["data"] == []
        assert refreshed.json()["meta"]["unread_count"] == 2
