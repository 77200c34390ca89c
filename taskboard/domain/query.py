from __future__ import annotations

import locale
from datetime import datetime, timedelta
from functools import cmp_to_key
from numbers import Real
from typing import Any, Iterable, Sequence

from taskboard.infra.clock import ensure_aware, utcnow

from .entities import TaskEntity, TaskStatistics
from .enums import SortDirection, SortField, TaskCategory, TaskPriority, TaskStatus
from .filters import TaskFilters


def filter_tasks(tasks: Iterable[TaskEntity], criteria: TaskFilters) -> list[TaskEntity]:
    return [task for task in tasks if _matches(task, criteria)]


def _matches(task: TaskEntity, criteria: TaskFilters) -> bool:
    if criteria.statuses and task.status not in criteria.statuses:
        return False
    if criteria.priorities and task.priority not in criteria.priorities:
        return False
    if criteria.categories and task.category not in criteria.categories:
        return False
    if criteria.assigned_to is not None and task.assigned_to != criteria.assigned_to:
        return False

    # Records without a due date are not excluded by a date range.
    if task.due_date is not None:
        due = ensure_aware(task.due_date)
        if criteria.due_date_from is not None and due < ensure_aware(criteria.due_date_from):
            return False
        if criteria.due_date_to is not None and due > ensure_aware(criteria.due_date_to):
            return False

    if criteria.search_term:
        needle = criteria.search_term.lower()
        in_title = needle in task.title.lower()
        in_description = bool(task.description) and needle in task.description.lower()
        if not (in_title or in_description):
            return False

    if criteria.tags and not set(task.tags) & set(criteria.tags):
        return False

    return True


def compare_values(left: Any, right: Any) -> int:
    if isinstance(left, datetime) and isinstance(right, datetime):
        left, right = ensure_aware(left), ensure_aware(right)
        return (left > right) - (left < right)
    if isinstance(left, Real) and isinstance(right, Real):
        return (left > right) - (left < right)
    if isinstance(left, str) and isinstance(right, str):
        return locale.strcoll(left.casefold(), right.casefold()) or locale.strcoll(left, right)
    left_text, right_text = str(left), str(right)
    return (left_text > right_text) - (left_text < right_text)


def sort_tasks(
    tasks: Iterable[TaskEntity],
    field: SortField | str,
    direction: SortDirection | str = SortDirection.ASC,
) -> list[TaskEntity]:
    field = SortField(field)
    descending = SortDirection(direction) is SortDirection.DESC

    def compare(a: TaskEntity, b: TaskEntity) -> int:
        left = getattr(a, field.value)
        right = getattr(b, field.value)
        # Absent values go last in both directions.
        if left is None and right is None:
            return 0
        if left is None:
            return 1
        if right is None:
            return -1
        result = compare_values(left, right)
        return -result if descending else result

    return sorted(tasks, key=cmp_to_key(compare))


def compute_statistics(
    tasks: Sequence[TaskEntity], now: datetime | None = None
) -> TaskStatistics:
    now = ensure_aware(now) if now is not None else utcnow()

    by_priority = {priority: 0 for priority in TaskPriority}
    by_category = {category: 0 for category in TaskCategory}
    by_status = {status: 0 for status in TaskStatus}
    completed = 0
    overdue = 0
    completion_hours: list[float] = []

    for task in tasks:
        by_priority[task.priority] += 1
        by_category[task.category] += 1
        by_status[task.status] += 1

        if task.status == TaskStatus.COMPLETED:
            completed += 1
            if task.actual_hours:
                completion_hours.append(task.actual_hours)
        elif task.due_date is not None and ensure_aware(task.due_date) < now:
            overdue += 1

    average = sum(completion_hours) / len(completion_hours) if completion_hours else 0.0

    # Cancelled tasks count as pending.
    return TaskStatistics(
        total_tasks=len(tasks),
        completed_tasks=completed,
        pending_tasks=len(tasks) - completed,
        overdue_tasks=overdue,
        tasks_by_priority=by_priority,
        tasks_by_category=by_category,
        tasks_by_status=by_status,
        average_completion_time=average,
    )


def upcoming_tasks(
    tasks: Iterable[TaskEntity], days_ahead: int = 7, now: datetime | None = None
) -> list[TaskEntity]:
    now = ensure_aware(now) if now is not None else utcnow()
    horizon = now + timedelta(days=days_ahead)
    due_soon = [
        task
        for task in tasks
        if task.due_date is not None
        and now <= ensure_aware(task.due_date) <= horizon
        and task.status != TaskStatus.COMPLETED
    ]
    return sort_tasks(due_soon, SortField.DUE_DATE, SortDirection.ASC)


def tasks_by_assignee(tasks: Iterable[TaskEntity], assignee: str) -> list[TaskEntity]:
    return [task for task in tasks if task.assigned_to == assignee]
