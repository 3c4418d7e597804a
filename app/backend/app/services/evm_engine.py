"""Planned-value and actual-cost series per project for one month.

Every function here is a pure fold over already-fetched records: it returns new
series keyed by project id and never touches the records it reads.

Day attribution of tracked time uses the entry *start* time only. An entry that
runs past midnight is booked entirely on the day it started.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from itertools import accumulate
from uuid import UUID

from app.models.entities import WorkType
from app.services.evm_calendar import MonthCalendar

SECONDS_PER_HOUR = 3600.0
MINUTES_PER_HOUR = 60.0

DailySeries = tuple[float, ...]


@dataclass(frozen=True, slots=True)
class ProjectInput:
    project_id: UUID
    name: str
    work_type: WorkType | str | None = None


@dataclass(frozen=True, slots=True)
class FixedTaskInput:
    project_id: UUID
    task_date: date
    estimated_minutes: int


@dataclass(frozen=True, slots=True)
class AllocationInput:
    project_id: UUID
    percentage: float
    wbs_id: UUID | None = None


@dataclass(frozen=True, slots=True)
class TimeEntryInput:
    start_time: datetime
    end_time: datetime | None
    duration_seconds: int | None
    project_id: UUID | None = None
    wbs_id: UUID | None = None
    allocations: tuple[AllocationInput, ...] = field(default_factory=tuple)


def zero_series(length: int) -> DailySeries:
    return (0.0,) * length


def cumulative(values: Iterable[float]) -> DailySeries:
    return tuple(accumulate(values))


def _fold_into_series(
    length: int,
    project_ids: Collection[UUID],
    contributions: Iterable[tuple[UUID, int, float]],
) -> dict[UUID, DailySeries]:
    buckets: dict[UUID, list[float]] = {project_id: [0.0] * length for project_id in project_ids}
    for project_id, index, hours in contributions:
        bucket = buckets.get(project_id)
        if bucket is not None:
            bucket[index] += hours
    return {project_id: tuple(values) for project_id, values in buckets.items()}


# ---------- Fixed tasks ----------
def aggregate_fixed_hours(
    month: MonthCalendar,
    project_ids: Collection[UUID],
    fixed_tasks: Iterable[FixedTaskInput],
) -> dict[UUID, DailySeries]:
    """Hours of fixed-date tasks per project and day (minutes / 60).

    Every requested project gets a full-length series; tasks dated outside the
    month or owned by a project outside ``project_ids`` are ignored.
    """

    def contributions() -> Iterable[tuple[UUID, int, float]]:
        for task in fixed_tasks:
            index = month.index_of(task.task_date)
            if index is not None:
                yield task.project_id, index, task.estimated_minutes / MINUTES_PER_HOUR

    return _fold_into_series(month.total_days, project_ids, contributions())


# ---------- Actual cost ----------
def entry_cost_shares(entry: TimeEntryInput) -> list[tuple[UUID, float]]:
    """(project, hours) pairs a finished time entry contributes to actual cost.

    Allocations take precedence over the direct project. Percentages are used
    as stored; a split that does not add up to 100 is not normalized.
    """

    if entry.end_time is None:
        return []
    seconds = float(entry.duration_seconds or 0)
    if entry.allocations:
        return [
            (allocation.project_id, seconds * allocation.percentage / 100.0 / SECONDS_PER_HOUR)
            for allocation in entry.allocations
        ]
    if entry.project_id is not None:
        return [(entry.project_id, seconds / SECONDS_PER_HOUR)]
    return []


def aggregate_actual_hours(
    month: MonthCalendar,
    project_ids: Collection[UUID],
    time_entries: Iterable[TimeEntryInput],
) -> dict[UUID, DailySeries]:
    """Tracked hours per project and day, booked on the entry start day."""

    def contributions() -> Iterable[tuple[UUID, int, float]]:
        for entry in time_entries:
            index = month.index_of(entry.start_time.date())
            if index is None:
                continue
            for project_id, hours in entry_cost_shares(entry):
                yield project_id, index, hours

    return _fold_into_series(month.total_days, project_ids, contributions())


# ---------- Planned value ----------
@dataclass(frozen=True, slots=True)
class PlannedValueAllocation:
    fixed_total: float
    estimated_hours: float
    remaining_hours: float
    daily_allocation: float
    series: DailySeries


def allocate_planned_value(
    month: MonthCalendar,
    fixed_series: Sequence[float],
    estimated_hours: float,
) -> PlannedValueAllocation:
    """Spread the budget not consumed by fixed tasks evenly over working days.

    Holidays keep only their fixed-task hours. With no working days, or when
    fixed tasks already exhaust the budget, the daily allocation is zero.
    """

    fixed_total = sum(fixed_series)
    remaining = max(estimated_hours - fixed_total, 0.0)
    working_days = month.working_day_count
    daily_allocation = remaining / working_days if working_days > 0 else 0.0

    series = tuple(
        fixed + daily_allocation if month.is_working_day(key) else fixed
        for key, fixed in zip(month.days, fixed_series, strict=True)
    )
    return PlannedValueAllocation(
        fixed_total=fixed_total,
        estimated_hours=estimated_hours,
        remaining_hours=remaining,
        daily_allocation=daily_allocation,
        series=series,
    )


# ---------- Project series ----------
@dataclass(frozen=True, slots=True)
class ProjectEvmSeries:
    project_id: UUID
    project_name: str
    work_type: WorkType
    pv_series: DailySeries
    ac_series: DailySeries
    fixed_hours: float
    estimated_hours: float

    @property
    def pv_hours(self) -> float:
        return sum(self.pv_series)

    @property
    def ac_hours(self) -> float:
        return sum(self.ac_series)


def build_project_series(
    month: MonthCalendar,
    projects: Sequence[ProjectInput],
    fixed_tasks: Iterable[FixedTaskInput],
    time_entries: Iterable[TimeEntryInput],
    estimated_hours_by_project: Mapping[UUID, float],
) -> list[ProjectEvmSeries]:
    """PV and AC series of each project, in the order ``projects`` were given."""

    project_ids = [project.project_id for project in projects]
    fixed_by_project = aggregate_fixed_hours(month, project_ids, fixed_tasks)
    actual_by_project = aggregate_actual_hours(month, project_ids, time_entries)

    output: list[ProjectEvmSeries] = []
    for project in projects:
        estimated = float(estimated_hours_by_project.get(project.project_id, 0.0) or 0.0)
        planned = allocate_planned_value(month, fixed_by_project[project.project_id], estimated)
        output.append(
            ProjectEvmSeries(
                project_id=project.project_id,
                project_name=project.name,
                work_type=WorkType.resolve(project.work_type),
                pv_series=planned.series,
                ac_series=actual_by_project[project.project_id],
                fixed_hours=planned.fixed_total,
                estimated_hours=estimated,
            )
        )
    return output
