from __future__ import annotations

import json
import logging
from dataclasses import asdict
from datetime import datetime
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from taskboard.config import SETTINGS
from taskboard.domain.entities import TaskEntity, unique_tags
from taskboard.domain.enums import TaskCategory, TaskPriority, TaskStatus

from .clock import ensure_aware, utcnow

logger = logging.getLogger(__name__)


class TaskPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    priority: TaskPriority
    status: TaskStatus
    category: TaskCategory
    description: str | None = None
    due_date: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    assigned_to: str | None = None
    tags: list[str] = Field(default_factory=list)
    estimated_hours: float | None = Field(default=None, ge=0)
    actual_hours: float | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _updated_not_before_created(self) -> TaskPayload:
        created_at = ensure_aware(self.created_at)
        updated_at = ensure_aware(self.updated_at)
        if created_at and updated_at and updated_at < created_at:
            raise ValueError("updated_at is earlier than created_at")
        return self

    def to_entity(self, now: datetime) -> TaskEntity:
        created_at = ensure_aware(self.created_at) or ensure_aware(self.updated_at) or now
        return TaskEntity(
            id=self.id,
            title=self.title,
            description=self.description,
            priority=self.priority,
            status=self.status,
            category=self.category,
            due_date=ensure_aware(self.due_date),
            created_at=created_at,
            updated_at=ensure_aware(self.updated_at) or created_at,
            assigned_to=self.assigned_to,
            tags=unique_tags(self.tags),
            estimated_hours=self.estimated_hours,
            actual_hours=self.actual_hours,
        )


def _task_to_dict(task: TaskEntity) -> dict:
    data = asdict(task)
    data["priority"] = task.priority.value
    data["status"] = task.status.value
    data["category"] = task.category.value
    data["tags"] = list(task.tags)
    data["due_date"] = task.due_date.isoformat() if task.due_date else None
    data["created_at"] = task.created_at.isoformat()
    data["updated_at"] = task.updated_at.isoformat()
    return data


def export_tasks(tasks: Iterable[TaskEntity], indent: int = SETTINGS.export_indent) -> str:
    return json.dumps([_task_to_dict(task) for task in tasks], indent=indent)


def import_tasks(text: str, now: datetime | None = None) -> list[TaskEntity] | None:
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as exc:
        logger.warning("Rejected import: not valid JSON (%s)", exc)
        return None

    if not isinstance(data, list):
        logger.warning("Rejected import: top-level value is %s, not an array", type(data).__name__)
        return None

    now = ensure_aware(now) if now is not None else utcnow()
    tasks: list[TaskEntity] = []
    seen_ids: set[str] = set()
    for index, item in enumerate(data):
        try:
            payload = TaskPayload.model_validate(item)
        except ValidationError as exc:
            logger.warning("Rejected import: element %d is invalid: %s", index, exc)
            return None
        if payload.id in seen_ids:
            logger.warning("Rejected import: duplicate id %s", payload.id)
            return None
        seen_ids.add(payload.id)
        tasks.append(payload.to_entity(now))

    return tasks
