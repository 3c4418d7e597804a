"""EVM reporting service: reads one month of records and serializes engine output."""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from datetime import date
from io import BytesIO
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models.entities import EvmFixedTask, Holiday, Project, TimeEntry
from app.repositories.evm_repository import EvmRepository
from app.services.evm_calendar import (
    MonthCalendar,
    fiscal_year_months,
    month_bounds,
    resolve_month_calendar,
    summarize_holidays,
    working_days_by_month,
)
from app.services.evm_engine import (
    AllocationInput,
    FixedTaskInput,
    ProjectEvmSeries,
    ProjectInput,
    TimeEntryInput,
    build_project_series,
)
from app.services.work_type_engine import (
    RatioView,
    WorkTypeTotals,
    aggregate_by_work_type,
    ratio_series,
    snapshot_index,
    snapshot_ratios,
)

logger = logging.getLogger(__name__)

EXPORT_FORMATS = {"csv", "xlsx"}


@dataclass(slots=True)
class ExportFilePayload:
    media_type: str
    filename: str
    content: bytes


@dataclass(slots=True)
class MonthSnapshot:
    """Inputs and per-project output of one month's computation."""

    calendar: MonthCalendar
    projects: list[ProjectEvmSeries]


def _to_project_input(project: Project) -> ProjectInput:
    return ProjectInput(project_id=project.id, name=project.name, work_type=project.work_type)


def _to_fixed_task_input(task: EvmFixedTask) -> FixedTaskInput:
    return FixedTaskInput(
        project_id=task.project_id,
        task_date=task.task_date,
        estimated_minutes=task.estimated_minutes,
    )


def _to_time_entry_input(entry: TimeEntry) -> TimeEntryInput:
    return TimeEntryInput(
        start_time=entry.start_time,
        end_time=entry.end_time,
        duration_seconds=entry.duration,
        project_id=entry.project_id,
        wbs_id=entry.wbs_id,
        allocations=tuple(
            AllocationInput(project_id=row.project_id, percentage=row.percentage, wbs_id=row.wbs_id)
            for row in entry.allocations
        ),
    )


class EvmReportingService:
    """Service implementing the earned-value report contracts."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.repo = EvmRepository(db)

    # ---------- Month computation ----------
    def compute_month(self, *, year: int, month: int, project_id: UUID | None = None) -> MonthSnapshot:
        start_date, end_date = month_bounds(year, month)
        projects = self.repo.list_projects(project_id=project_id)
        project_scope = {project.id for project in projects} if project_id is not None else None

        holidays = self.repo.list_holidays(start_date=start_date, end_date=end_date)
        calendar = resolve_month_calendar(year, month, (row.holiday_date for row in holidays))

        time_entries = self.repo.list_completed_time_entries(start_date=start_date, end_date=end_date)
        fixed_tasks = self.repo.list_fixed_tasks(
            start_date=start_date,
            end_date=end_date,
            project_ids=project_scope,
        )
        estimated_hours = self.repo.map_estimated_hours(
            fiscal_year=calendar.fiscal_year,
            month=month,
            project_ids=project_scope,
        )
        logger.debug(
            "Loaded %s-%02d: %d projects, %d time entries, %d fixed tasks, %d holidays, %d budgets",
            year,
            month,
            len(projects),
            len(time_entries),
            len(fixed_tasks),
            len(calendar.holiday_keys),
            len(estimated_hours),
        )

        series = build_project_series(
            calendar,
            [_to_project_input(project) for project in projects],
            [_to_fixed_task_input(task) for task in fixed_tasks],
            [_to_time_entry_input(entry) for entry in time_entries],
            estimated_hours,
        )
        return MonthSnapshot(calendar=calendar, projects=series)

    def compute_work_types(self, *, year: int, month: int) -> tuple[MonthCalendar, list[WorkTypeTotals]]:
        snapshot = self.compute_month(year=year, month=month)
        return snapshot.calendar, aggregate_by_work_type(snapshot.calendar.total_days, snapshot.projects)

    # ---------- Serialization ----------
    @staticmethod
    def serialize_period(calendar: MonthCalendar) -> dict[str, str]:
        return {"start": calendar.start.isoformat(), "end": calendar.end.isoformat()}

    @staticmethod
    def serialize_project_series(row: ProjectEvmSeries) -> dict[str, object]:
        return {
            "projectId": str(row.project_id),
            "projectName": row.project_name,
            "pvSeries": list(row.pv_series),
            "acSeries": list(row.ac_series),
            "totals": {
                "pvHours": row.pv_hours,
                "acHours": row.ac_hours,
                "fixedHours": row.fixed_hours,
                "estimatedHours": row.estimated_hours,
            },
        }

    @staticmethod
    def serialize_work_type(row: WorkTypeTotals) -> dict[str, object]:
        return {
            "workType": row.work_type.value,
            "label": row.label,
            "pvDaily": list(row.pv_daily),
            "acDaily": list(row.ac_daily),
            "bacTotal": row.bac_total,
        }

    # ---------- Reports ----------
    def project_report(self, *, year: int, month: int, project_id: UUID | None = None) -> dict[str, object]:
        snapshot = self.compute_month(year=year, month=month, project_id=project_id)
        logger.info("EVM project report %s-%02d: %d projects", year, month, len(snapshot.projects))
        return {
            "period": self.serialize_period(snapshot.calendar),
            "days": list(snapshot.calendar.days),
            "projects": [self.serialize_project_series(row) for row in snapshot.projects],
        }

    def work_type_report(self, *, year: int, month: int) -> dict[str, object]:
        calendar, types = self.compute_work_types(year=year, month=month)
        logger.info("Work type report %s-%02d", year, month)
        return {
            "period": self.serialize_period(calendar),
            "days": list(calendar.days),
            "types": [self.serialize_work_type(row) for row in types],
        }

    def work_type_ratio_report(
        self,
        *,
        year: int,
        month: int,
        view: RatioView = RatioView.DAILY,
        today: date | None = None,
    ) -> dict[str, object]:
        calendar, types = self.compute_work_types(year=year, month=month)
        index = snapshot_index(calendar.days, today=today)
        series = ratio_series(types, view)
        snapshot = snapshot_ratios(types, index)
        logger.info("Work type ratio report %s-%02d (%s, snapshot day %d)", year, month, view.value, index)

        return {
            "period": self.serialize_period(calendar),
            "days": list(calendar.days),
            "view": view.value,
            "types": [
                {
                    "workType": row.work_type.value,
                    "label": row.label,
                    "pvRatio": list(row.pv_ratio),
                    "acRatio": list(row.ac_ratio),
                    "bacRatio": list(row.bac_ratio),
                    "forecastRatio": list(row.forecast_ratio),
                }
                for row in series
            ],
            "snapshot": {
                "day": calendar.days[index] if calendar.days else None,
                "types": [
                    {
                        "workType": row.work_type.value,
                        "label": row.label,
                        "pvRatio": row.pv_ratio,
                        "acRatio": row.ac_ratio,
                        "bacRatio": row.bac_ratio,
                        "forecastRatio": row.forecast_ratio,
                    }
                    for row in snapshot
                ],
            },
        }

    # ---------- Holidays ----------
    def _fiscal_year_holidays(self, fiscal_year: str) -> list[Holiday]:
        try:
            months = fiscal_year_months(fiscal_year)
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="fiscalYear must look like FY25.",
            ) from exc
        first_year, first_month = months[0]
        last_year, last_month = months[-1]
        return self.repo.list_holidays(
            start_date=month_bounds(first_year, first_month)[0],
            end_date=month_bounds(last_year, last_month)[1],
        )

    def working_days_report(self, *, fiscal_year: str) -> dict[str, object]:
        holidays = self._fiscal_year_holidays(fiscal_year)
        working_days = working_days_by_month(fiscal_year, (row.holiday_date for row in holidays))
        return {
            "fiscalYear": fiscal_year.upper(),
            "workingDays": {str(month): count for month, count in working_days.items()},
        }

    def holiday_summary(self, *, fiscal_year: str) -> dict[str, object]:
        holidays = self._fiscal_year_holidays(fiscal_year)
        stats = summarize_holidays(row.type for row in holidays)
        return {
            "fiscalYear": fiscal_year.upper(),
            "weekendCount": stats.weekend_count,
            "publicHolidayCount": stats.public_holiday_count,
            "specialHolidayCount": stats.special_holiday_count,
            "paidLeaveCount": stats.paid_leave_count,
            "annualHolidayCount": stats.annual_holiday_count,
        }

    # ---------- Exports ----------
    def _export_rows(self, report_key: str, year: int, month: int) -> list[dict[str, object]]:
        if report_key == "evm-projects":
            snapshot = self.compute_month(year=year, month=month)
            return [
                {
                    "day": day,
                    "project_id": str(row.project_id),
                    "project_name": row.project_name,
                    "work_type": row.work_type.value,
                    "pv_hours": pv,
                    "ac_hours": ac,
                }
                for row in snapshot.projects
                for day, pv, ac in zip(snapshot.calendar.days, row.pv_series, row.ac_series)
            ]

        calendar, types = self.compute_work_types(year=year, month=month)
        return [
            {
                "day": day,
                "work_type": row.work_type.value,
                "label": row.label,
                "pv_hours": pv,
                "ac_hours": ac,
                "bac_total": row.bac_total,
            }
            for row in types
            for day, pv, ac in zip(calendar.days, row.pv_daily, row.ac_daily)
        ]

    def export_report(self, *, report_key: str, format_name: str, year: int, month: int) -> ExportFilePayload:
        normalized_key = report_key.strip().lower()
        normalized_format = format_name.strip().lower()
        if normalized_format not in EXPORT_FORMATS:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="format must be one of: csv, xlsx.",
            )
        if normalized_key not in {"evm-projects", "work-types"}:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Unknown report_key for export.",
            )

        rows = self._export_rows(normalized_key, year, month)
        fieldnames = list(rows[0].keys()) if rows else []
        base_filename = f"{normalized_key}-{year}-{month:02d}"

        if normalized_format == "csv":
            csv_bytes = b""
            if fieldnames:
                sio = io.StringIO()
                writer = csv.DictWriter(sio, fieldnames=fieldnames)
                writer.writeheader()
                writer.writerows(rows)
                csv_bytes = sio.getvalue().encode("utf-8")
            return ExportFilePayload(
                media_type="text/csv; charset=utf-8",
                filename=f"{base_filename}.csv",
                content=csv_bytes,
            )

        # XLSX
        from openpyxl import Workbook

        workbook = Workbook()
        sheet = workbook.active
        sheet.title = normalized_key

        if fieldnames:
            sheet.append(fieldnames)
            for row in rows:
                sheet.append([row[column] for column in fieldnames])

        output = BytesIO()
        workbook.save(output)
        return ExportFilePayload(
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            filename=f"{base_filename}.xlsx",
            content=output.getvalue(),
        )
