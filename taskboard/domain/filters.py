from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .enums import TaskCategory, TaskPriority, TaskStatus


@dataclass(frozen=True)
class TaskFilters:
    statuses: frozenset[TaskStatus] = frozenset()
    priorities: frozenset[TaskPriority] = frozenset()
    categories: frozenset[TaskCategory] = frozenset()
    assigned_to: str | None = None
    due_date_from: Optional[datetime] = None
    due_date_to: Optional[datetime] = None
    search_term: str | None = None
    tags: frozenset[str] = frozenset()
