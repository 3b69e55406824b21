"""In-memory implementation of the task repository."""

from collections.abc import Iterable
from dataclasses import replace
from uuid import UUID

from domain.entities.task import Task


class InMemoryTaskRepository:
    """Dict-backed task storage; iteration follows insertion order.

    Stored entities are copied on the way in and out so callers never hold a
    reference to the stored object.
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._tasks: dict[UUID, Task] = {t.id: replace(t) for t in tasks}

    def get(self, id: UUID) -> Task | None:
        task = self._tasks.get(id)
        return replace(task) if task else None

    def list(self) -> list[Task]:
        return [replace(t) for t in self._tasks.values()]

    def add(self, task: Task) -> Task:
        self._tasks[task.id] = replace(task)
        return replace(task)

    def update(self, task: Task) -> Task:
        self._tasks[task.id] = replace(task)
        return replace(task)

    def delete(self, id: UUID) -> bool:
        return self._tasks.pop(id, None) is not None

    def __len__(self) -> int:
        return len(self._tasks)
