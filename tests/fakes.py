from __future__ import annotations

from datetime import datetime, timedelta, timezone

START = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, start: datetime = START, step: timedelta = timedelta(seconds=1)) -> None:
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current += self.step
        return now


class CountingIds:
    def __init__(self) -> None:
        self._next = 1

    def __call__(self) -> str:
        task_id = f"task-{self._next}"
        self._next += 1
        return task_id
