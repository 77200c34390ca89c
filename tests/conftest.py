from __future__ import annotations

import pytest

from taskboard.infra.store import TaskStore

from .fakes import CountingIds, FakeClock


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(clock: FakeClock) -> TaskStore:
    return TaskStore(clock=clock, id_factory=CountingIds())
