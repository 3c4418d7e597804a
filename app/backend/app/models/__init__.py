"""ORM model package."""

from app.models.entities import (
    EvmFixedTask,
    Holiday,
    HolidayType,
    Project,
    ProjectWorkHours,
    TimeEntry,
    TimeEntryAllocation,
    Wbs,
    WorkType,
)

__all__ = [
    "EvmFixedTask",
    "Holiday",
    "HolidayType",
    "Project",
    "ProjectWorkHours",
    "TimeEntry",
    "TimeEntryAllocation",
    "Wbs",
    "WorkType",
]
