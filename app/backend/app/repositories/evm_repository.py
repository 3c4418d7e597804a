"""Read-only queries over the records consumed by EVM reports."""

from __future__ import annotations

from datetime import date, datetime, time
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.orm import Session, selectinload

from app.models.entities import EvmFixedTask, Holiday, Project, ProjectWorkHours, TimeEntry


def _day_start(value: date) -> datetime:
    return datetime.combine(value, time.min)


def _day_end(value: date) -> datetime:
    # Inclusive upper bound; stays valid on date.max.
    return datetime.combine(value, time.max)


class EvmRepository:
    """Queries for one reporting window; nothing here writes."""

    def __init__(self, db: Session) -> None:
        self.db = db

    # ---------- Projects ----------
    def list_projects(self, *, project_id: UUID | None = None) -> list[Project]:
        statement = select(Project)
        if project_id is not None:
            statement = statement.where(Project.id == project_id)
        return list(self.db.scalars(statement.order_by(Project.name.asc(), Project.code.asc())).all())

    # ---------- Time entries ----------
    def list_completed_time_entries(self, *, start_date: date, end_date: date) -> list[TimeEntry]:
        """Finished entries whose start falls on ``start_date``..``end_date`` inclusive."""

        return list(
            self.db.scalars(
                select(TimeEntry)
                .options(selectinload(TimeEntry.allocations))
                .where(
                    and_(
                        TimeEntry.start_time >= _day_start(start_date),
                        TimeEntry.start_time <= _day_end(end_date),
                        TimeEntry.end_time.is_not(None),
                    )
                )
                .order_by(TimeEntry.start_time.asc())
            ).all()
        )

    # ---------- Fixed tasks ----------
    def list_fixed_tasks(
        self,
        *,
        start_date: date,
        end_date: date,
        project_ids: set[UUID] | None = None,
    ) -> list[EvmFixedTask]:
        conditions = [
            EvmFixedTask.task_date >= start_date,
            EvmFixedTask.task_date <= end_date,
        ]
        if project_ids is not None:
            conditions.append(EvmFixedTask.project_id.in_(project_ids))

        return list(
            self.db.scalars(
                select(EvmFixedTask).where(and_(*conditions)).order_by(EvmFixedTask.task_date.asc())
            ).all()
        )

    # ---------- Holidays ----------
    def list_holidays(self, *, start_date: date, end_date: date) -> list[Holiday]:
        return list(
            self.db.scalars(
                select(Holiday)
                .where(
                    and_(
                        Holiday.holiday_date >= start_date,
                        Holiday.holiday_date <= end_date,
                    )
                )
                .order_by(Holiday.holiday_date.asc())
            ).all()
        )

    # ---------- Monthly budgets ----------
    def map_estimated_hours(
        self,
        *,
        fiscal_year: str,
        month: int,
        project_ids: set[UUID] | None = None,
    ) -> dict[UUID, float]:
        conditions = [
            ProjectWorkHours.fiscal_year == fiscal_year,
            ProjectWorkHours.month == month,
        ]
        if project_ids is not None:
            conditions.append(ProjectWorkHours.project_id.in_(project_ids))

        rows = self.db.execute(
            select(ProjectWorkHours.project_id, ProjectWorkHours.estimated_hours).where(and_(*conditions))
        ).all()
        return {project_id: float(estimated_hours) for project_id, estimated_hours in rows}
