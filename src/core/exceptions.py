"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Not found errors (404)
    NOT_FOUND = "NOT_FOUND"
    TASK_NOT_FOUND = "TASK_NOT_FOUND"
    NOTIFICATION_NOT_FOUND = "NOTIFICATION_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    REMINDER_IN_PAST = "REMINDER_IN_PAST"

    # Other routing/protocol errors (405, 413, ...)
    HTTP_ERROR = "HTTP_ERROR"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationError(AppException):
    """Invalid task or reminder input."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=400,
            details={"field": field} if field else None,
        )
        self.field = field


class ReminderInPastError(ValidationError):
    """A custom reminder time lies before the scheduling instant."""

    def __init__(self, reminder_at: str) -> None:
        super().__init__(
            message=f"Reminder time is in the past: {reminder_at}",
            field="reminder",
            error_code=ErrorCode.REMINDER_IN_PAST,
        )


class NotFoundError(AppException):
    """Referenced entity does not exist."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.NOT_FOUND,
        details: Any | None = None,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=404,
            details=details,
        )


class TaskNotFoundError(NotFoundError):
    """Task not found."""

    def __init__(self, task_id: str) -> None:
        super().__init__(
            message=f"Task not found: {task_id}",
            error_code=ErrorCode.TASK_NOT_FOUND,
            details={"task_id": task_id},
        )


class NotificationNotFoundError(NotFoundError):
    """Notification not found in the live feed."""

    def __init__(self, notification_id: str) -> None:
        super().__init__(
            message=f"Notification not found: {notification_id}",
            error_code=ErrorCode.NOTIFICATION_NOT_FOUND,
            details={"notification_id": notification_id},
        )
