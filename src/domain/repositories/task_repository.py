"""Task repository protocol."""

from collections.abc import Iterable
from typing import Protocol
from uuid import UUID

from domain.entities.task import Task


class ITaskRepository(Protocol):
    """Repository interface for Task entities."""

    def get(self, id: UUID) -> Task | None:
        """Get a task by ID."""
        ...

    def list(self) -> Iterable[Task]:
        """Get every stored task in insertion order."""
        ...

    def add(self, task: Task) -> Task:
        """Store a new task."""
        ...

    def update(self, task: Task) -> Task:
        """Replace a stored task."""
        ...

    def delete(self, id: UUID) -> bool:
        """Delete a task and return success status."""
        ...
