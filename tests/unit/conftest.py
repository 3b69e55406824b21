"""Shared fixtures for unit tests."""

from uuid import UUID

import pytest


class SequentialIds:
    """Deterministic id factory: 00000000-...-000000000001, ...02, ..."""

    def __init__(self) -> None:
        self.issued: list[UUID] = []

    def __call__(self) -> UUID:
        new = UUID(int=len(self.issued) + 1)
        self.issued.append(new)
        return new


@pytest.fixture
def ids() -> SequentialIds:
    """A fresh sequential id factory."""
    return SequentialIds()

