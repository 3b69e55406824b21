"""Signal source backed by the in-process task store."""

from domain.services.task_store import TaskStore


class PendingTaskSignal:
    """Counts tasks in the local store that are not completed."""

    def __init__(self, store: TaskStore) -> None:
        self._store = store

    async def get_count(self) -> int:
        return self._store.pending_count()
