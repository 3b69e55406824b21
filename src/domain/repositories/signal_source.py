"""Signal source protocol."""

from typing import Protocol


class ISignalSource(Protocol):
    """An external subsystem that reports a single operational count.

    Implementations may raise any exception; callers treat failure as a zero
    count for that source.
    """

    async def get_count(self) -> int:
        """Fetch the current count (e.g. number of overdue payments)."""
        ...
