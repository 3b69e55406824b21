"""Unit tests for reminder fire-time computation."""

from datetime import datetime, timedelta, timezone

import pytest

from core.exceptions import ErrorCode, ReminderInPastError, ValidationError
from domain.entities.reminder import CustomReminder, OffsetReminder, ReminderOffset
from domain.services.reminder_scheduler import fire_time, parse_reminder, reminder_label

UTC = timezone.utc


class TestFireTime:
    """Tests for fire_time."""

    def test_offset_subtracts_from_due_date(self) -> None:
        due = datetime(2025, 1, 10, 10, 0, tzinfo=UTC)
        now = datetime(2025, 1, 9, 8, 0, tzinfo=UTC)

        result = fire_time(due, OffsetReminder(ReminderOffset.FIFTEEN_MINUTES), now)

        assert result == datetime(2025, 1, 10, 9, 45, tzinfo=UTC)

    @pytest.mark.parametrize(
        ("offset", "expected"),
        [
            (ReminderOffset.FIVE_MINUTES, datetime(2025, 1, 10, 9, 55, tzinfo=UTC)),
            (ReminderOffset.THIRTY_MINUTES, datetime(2025, 1, 10, 9, 30, tzinfo=UTC)),
            (ReminderOffset.ONE_HOUR, datetime(2025, 1, 10, 9, 0, tzinfo=UTC)),
            (ReminderOffset.TWO_HOURS, datetime(2025, 1, 10, 8, 0, tzinfo=UTC)),
            (ReminderOffset.ONE_DAY, datetime(2025, 1, 9, 10, 0, tzinfo=UTC)),
        ],
    )
    def test_every_offset(self, offset: ReminderOffset, expected: datetime) -> None:
        due = datetime(2025, 1, 10, 10, 0, tzinfo=UTC)
        now = datetime(2025, 1, 1, tzinfo=UTC)

        assert fire_time(due, OffsetReminder(offset), now) == expected

    def test_offset_may_fall_in_the_past(self) -> None:
        """Offsets are not checked against now; only custom times are."""
        due = datetime(2025, 1, 10, 10, 0, tzinfo=UTC)
        now = datetime(2025, 1, 10, 9, 58, tzinfo=UTC)

        result = fire_time(due, OffsetReminder(ReminderOffset.FIFTEEN_MINUTES), now)

        assert result < now

    def test_custom_returns_chosen_instant(self) -> None:
        at = datetime(2025, 1, 10, 7, 30, tzinfo=UTC)
        now = datetime(2025, 1, 10, 7, 0, tzinfo=UTC)

        assert fire_time(datetime(2025, 1, 12, tzinfo=UTC), CustomReminder(at), now) == at

    def test_custom_in_past_raises(self) -> None:
        at = datetime(2025, 1, 10, 6, 0, tzinfo=UTC)
        now = datetime(2025, 1, 10, 7, 0, tzinfo=UTC)

        with pytest.raises(ReminderInPastError) as exc_info:
            fire_time(datetime(2025, 1, 12, tzinfo=UTC), CustomReminder(at), now)

        assert isinstance(exc_info.value, ValidationError)
        assert exc_info.value.error_code == ErrorCode.REMINDER_IN_PAST
        assert exc_info.value.status_code == 400

    def test_custom_equal_to_now_is_allowed(self) -> None:
        now = datetime(2025, 1, 10, 7, 0, tzinfo=UTC)

        assert fire_time(now + timedelta(days=1), CustomReminder(now), now) == now

    def test_naive_custom_read_in_reference_zone(self) -> None:
        ist = timezone(timedelta(hours=5, minutes=30))
        now = datetime(2025, 1, 10, 7, 0, tzinfo=ist)

        with pytest.raises(ReminderInPastError):
            fire_time(now, CustomReminder(datetime(2025, 1, 10, 6, 59)), now)


class TestParseReminder:
    """Tests for parse_reminder and reminder_label."""

    @pytest.mark.parametrize("label", [None, "", "   "])
    def test_blank_means_no_reminder(self, label: str | None) -> None:
        assert parse_reminder(label) is None

    def test_offset_label(self) -> None:
        reminder = parse_reminder("15 minutes before")

        assert reminder == OffsetReminder(ReminderOffset.FIFTEEN_MINUTES)

    def test_offset_label_is_case_insensitive(self) -> None:
        assert parse_reminder("1 Day Before") == OffsetReminder(ReminderOffset.ONE_DAY)

    def test_custom_label(self) -> None:
        at = datetime(2025, 1, 10, 7, 30, tzinfo=UTC)

        assert parse_reminder("custom", at) == CustomReminder(at)

    def test_custom_without_time_raises(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            parse_reminder("custom")

        assert exc_info.value.field == "reminder_at"

    def test_unknown_label_raises(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            parse_reminder("3 minutes before")

        assert exc_info.value.field == "reminder"

    def test_label_round_trip(self) -> None:
        for offset in ReminderOffset:
            assert reminder_label(parse_reminder(offset.label)) == offset.label
        assert reminder_label(CustomReminder(datetime(2025, 1, 1, tzinfo=UTC))) == "custom"
        assert reminder_label(None) is None
