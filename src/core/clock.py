"""Injectable time and identity sources."""

from collections.abc import Callable
from datetime import datetime
from uuid import UUID, uuid4

Clock = Callable[[], datetime]
IdFactory = Callable[[], UUID]


def local_now() -> datetime:
    """Current wall-clock time in the host timezone (timezone-aware)."""
    return datetime.now().astimezone()


def new_id() -> UUID:
    """Default identity generator."""
    return uuid4()
