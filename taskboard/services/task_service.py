from __future__ import annotations

from typing import Any, Iterable

from taskboard.config import SETTINGS
from taskboard.domain.entities import NewTask, TaskEntity, TaskStatistics
from taskboard.domain.enums import SortDirection, SortField
from taskboard.domain.filters import TaskFilters
from taskboard.domain.query import (
    compute_statistics,
    filter_tasks,
    sort_tasks,
    tasks_by_assignee,
    upcoming_tasks,
)
from taskboard.infra.store import TaskStore


class TaskService:
    def __init__(self, store: TaskStore, upcoming_days: int = SETTINGS.upcoming_days) -> None:
        self._store = store
        self._upcoming_days = upcoming_days

    def list_tasks(
        self,
        filters: TaskFilters | None = None,
        sort_field: SortField | str | None = None,
        direction: SortDirection | str = SortDirection.ASC,
    ) -> list[TaskEntity]:
        tasks = self._store.snapshot()
        if filters:
            tasks = filter_tasks(tasks, filters)
        if sort_field:
            tasks = sort_tasks(tasks, sort_field, direction)
        return tasks

    def get_task(self, task_id: str) -> TaskEntity | None:
        return self._store.get_by_id(task_id)

    def create_task(self, request: NewTask) -> TaskEntity:
        return self._store.create(request)

    def update_task(self, task_id: str, data: dict[str, Any]) -> TaskEntity | None:
        return self._store.update(task_id, data)

    def delete_task(self, task_id: str) -> bool:
        return self._store.delete(task_id)

    def mark_done(self, task_id: str, actual_hours: float | None = None) -> TaskEntity | None:
        return self._store.complete(task_id, actual_hours)

    def reassign(self, task_id: str, assignee: str | None) -> TaskEntity | None:
        return self._store.reassign(task_id, assignee)

    def add_tags(self, task_id: str, tags: Iterable[str] | str) -> TaskEntity | None:
        return self._store.add_tags(task_id, tags)

    def remove_tags(self, task_id: str, tags: Iterable[str] | str) -> TaskEntity | None:
        return self._store.remove_tags(task_id, tags)

    def get_stats(self) -> TaskStatistics:
        return compute_statistics(self._store.snapshot(), now=self._store.now())

    def list_upcoming(self, days_ahead: int | None = None) -> list[TaskEntity]:
        if days_ahead is None:
            days_ahead = self._upcoming_days
        return upcoming_tasks(self._store.snapshot(), days_ahead, now=self._store.now())

    def list_for_assignee(self, assignee: str) -> list[TaskEntity]:
        return tasks_by_assignee(self._store.snapshot(), assignee)

    def export_json(self) -> str:
        return self._store.export_json()

    def import_json(self, text: str) -> bool:
        return self._store.import_json(text)
