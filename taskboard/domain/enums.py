from __future__ import annotations

from enum import StrEnum


class TaskStatus(StrEnum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskCategory(StrEnum):
    WORK = "work"
    PERSONAL = "personal"
    STUDY = "study"
    HEALTH = "health"
    FINANCE = "finance"


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


class SortField(StrEnum):
    ID = "id"
    TITLE = "title"
    DESCRIPTION = "description"
    PRIORITY = "priority"
    STATUS = "status"
    CATEGORY = "category"
    DUE_DATE = "due_date"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    ASSIGNED_TO = "assigned_to"
    TAGS = "tags"
    ESTIMATED_HOURS = "estimated_hours"
    ACTUAL_HOURS = "actual_hours"
