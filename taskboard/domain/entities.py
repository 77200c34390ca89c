from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from .enums import TaskCategory, TaskPriority, TaskStatus


@dataclass(frozen=True)
class TaskEntity:
    id: str
    title: str
    description: str | None
    priority: TaskPriority
    status: TaskStatus
    category: TaskCategory
    due_date: Optional[datetime]
    created_at: datetime
    updated_at: datetime
    assigned_to: str | None = None
    tags: tuple[str, ...] = ()
    estimated_hours: float | None = None
    actual_hours: float | None = None


@dataclass(frozen=True)
class NewTask:
    title: str
    priority: TaskPriority
    category: TaskCategory
    description: str | None = None
    due_date: Optional[datetime] = None
    assigned_to: str | None = None
    tags: tuple[str, ...] = ()
    estimated_hours: float | None = None


@dataclass(frozen=True)
class TaskStatistics:
    total_tasks: int
    completed_tasks: int
    pending_tasks: int
    overdue_tasks: int
    tasks_by_priority: dict[TaskPriority, int] = field(default_factory=dict)
    tasks_by_category: dict[TaskCategory, int] = field(default_factory=dict)
    tasks_by_status: dict[TaskStatus, int] = field(default_factory=dict)
    average_completion_time: float = 0.0


def unique_tags(tags: Iterable[str] | str) -> tuple[str, ...]:
    if isinstance(tags, str):
        return (tags,)
    return tuple(dict.fromkeys(tags))
