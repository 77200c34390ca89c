from __future__ import annotations

import logging
from dataclasses import fields, replace
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Optional

from taskboard.domain.entities import NewTask, TaskEntity, unique_tags
from taskboard.domain.enums import TaskCategory, TaskPriority, TaskStatus

from .clock import ensure_aware, utcnow
from .ids import new_task_id
from .serialization import export_tasks, import_tasks

logger = logging.getLogger(__name__)

TASK_FIELDS = frozenset(f.name for f in fields(TaskEntity))
IMMUTABLE_FIELDS = frozenset({"id", "created_at"})
ENUM_FIELDS = {
    "priority": TaskPriority,
    "status": TaskStatus,
    "category": TaskCategory,
}


class TaskStore:
    def __init__(
        self,
        clock: Callable[[], datetime] = utcnow,
        id_factory: Callable[[], str] = new_task_id,
    ) -> None:
        self._tasks: list[TaskEntity] = []
        self._clock = clock
        self._id_factory = id_factory

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return any(task.id == task_id for task in self._tasks)

    def now(self) -> datetime:
        return self._clock()

    def snapshot(self) -> list[TaskEntity]:
        return list(self._tasks)

    def get_by_id(self, task_id: str) -> Optional[TaskEntity]:
        return next((task for task in self._tasks if task.id == task_id), None)

    def create(self, request: NewTask) -> TaskEntity:
        now = self._clock()
        task = TaskEntity(
            id=self._next_id(),
            title=request.title,
            description=request.description,
            priority=TaskPriority(request.priority),
            status=TaskStatus.TODO,
            category=TaskCategory(request.category),
            due_date=ensure_aware(request.due_date),
            created_at=now,
            updated_at=now,
            assigned_to=request.assigned_to,
            tags=unique_tags(request.tags),
            estimated_hours=request.estimated_hours,
            actual_hours=None,
        )
        self._tasks.append(task)
        logger.debug("Created task %s", task.id)
        return task

    def update(self, task_id: str, changes: Mapping[str, Any]) -> Optional[TaskEntity]:
        index = self._index_of(task_id)
        if index is None:
            logger.warning("Update skipped: task %s not found", task_id)
            return None

        normalized = self._normalize_changes(changes)
        updated = replace(self._tasks[index], **normalized, updated_at=self._clock())
        self._tasks[index] = updated
        logger.debug("Updated task %s fields=%s", task_id, sorted(normalized))
        return updated

    def delete(self, task_id: str) -> bool:
        index = self._index_of(task_id)
        if index is None:
            return False
        del self._tasks[index]
        logger.debug("Deleted task %s", task_id)
        return True

    def reassign(self, task_id: str, assignee: str | None) -> Optional[TaskEntity]:
        return self.update(task_id, {"assigned_to": assignee})

    def add_tags(self, task_id: str, tags: Iterable[str] | str) -> Optional[TaskEntity]:
        task = self.get_by_id(task_id)
        if not task:
            return None
        return self.update(task_id, {"tags": (*task.tags, *unique_tags(tags))})

    def remove_tags(self, task_id: str, tags: Iterable[str] | str) -> Optional[TaskEntity]:
        task = self.get_by_id(task_id)
        if not task:
            return None
        removed = set(unique_tags(tags))
        return self.update(task_id, {"tags": [tag for tag in task.tags if tag not in removed]})

    def complete(self, task_id: str, actual_hours: float | None = None) -> Optional[TaskEntity]:
        changes: dict[str, Any] = {"status": TaskStatus.COMPLETED}
        if actual_hours is not None:
            changes["actual_hours"] = actual_hours
        return self.update(task_id, changes)

    def replace_all(self, tasks: Iterable[TaskEntity]) -> None:
        self._tasks = list(tasks)

    def export_json(self) -> str:
        return export_tasks(self._tasks)

    def import_json(self, text: str) -> bool:
        tasks = import_tasks(text, now=self._clock())
        if tasks is None:
            return False
        self.replace_all(tasks)
        logger.info("Imported %d tasks", len(tasks))
        return True

    def _next_id(self) -> str:
        task_id = self._id_factory()
        while task_id in self:
            task_id = self._id_factory()
        return task_id

    def _index_of(self, task_id: str) -> Optional[int]:
        return next(
            (index for index, task in enumerate(self._tasks) if task.id == task_id),
            None,
        )

    @staticmethod
    def _normalize_changes(changes: Mapping[str, Any]) -> dict[str, Any]:
        unknown = set(changes) - TASK_FIELDS
        if unknown:
            raise ValueError(f"Unknown task fields: {', '.join(sorted(unknown))}")

        normalized: dict[str, Any] = {}
        for key, value in changes.items():
            if key == "updated_at":
                continue
            if key in IMMUTABLE_FIELDS:
                logger.warning("Ignoring change to immutable field %s", key)
                continue
            if key in ENUM_FIELDS:
                if value is None:
                    raise ValueError(f"Task field {key} cannot be empty")
                value = ENUM_FIELDS[key](value)
            elif key == "tags":
                value = unique_tags(value or ())
            elif key == "due_date":
                value = ensure_aware(value)
            normalized[key] = value
        return normalized
