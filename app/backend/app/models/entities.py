"""ORM entities for the time-tracking records read by the EVM engine."""

from __future__ import annotations

import enum
import uuid
from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class WorkType(str, enum.Enum):
    """Classification bucket a project is rolled up into."""

    IN_PROGRESS = "IN_PROGRESS"
    SE_TRANSFER = "SE_TRANSFER"
    INDIRECT = "INDIRECT"

    @property
    def label(self) -> str:
        return WORK_TYPE_LABELS[self]

    @classmethod
    def resolve(cls, value: WorkType | str | None) -> WorkType:
        """Map a stored classification to a bucket, defaulting to active delivery."""

        if isinstance(value, cls):
            return value
        match value:
            case "SE_TRANSFER":
                return cls.SE_TRANSFER
            case "INDIRECT":
                return cls.INDIRECT
            case _:
                return cls.IN_PROGRESS


WORK_TYPE_LABELS: dict[WorkType, str] = {
    WorkType.IN_PROGRESS: "Active delivery",
    WorkType.SE_TRANSFER: "Transfer engagement",
    WorkType.INDIRECT: "Indirect",
}


class HolidayType(str, enum.Enum):
    PUBLIC_HOLIDAY = "PUBLIC_HOLIDAY"
    WEEKEND = "WEEKEND"
    SPECIAL_HOLIDAY = "SPECIAL_HOLIDAY"
    PAID_LEAVE = "PAID_LEAVE"


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (
        UniqueConstraint("code", name="uq_projects_code"),
        Index("ix_projects_name", "name"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    code: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    abbreviation: Mapped[str | None] = mapped_column(String(64), nullable=True)
    work_type: Mapped[WorkType | None] = mapped_column(
        SQLEnum(
            WorkType,
            name="work_type",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=True,
        default=WorkType.IN_PROGRESS,
    )
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Wbs(Base):
    __tablename__ = "wbs"
    __table_args__ = (Index("ix_wbs_project_id", "project_id"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("projects.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class TimeEntry(Base):
    __tablename__ = "time_entries"
    __table_args__ = (
        CheckConstraint("duration IS NULL OR duration >= 0", name="ck_time_entries_duration_non_negative"),
        Index("ix_time_entries_start_time", "start_time"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id"), nullable=True
    )
    wbs_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), ForeignKey("wbs.id"), nullable=True)
    start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_time: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    # seconds
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    note: Mapped[str | None] = mapped_column(String(2000), nullable=True)

    allocations: Mapped[list[TimeEntryAllocation]] = relationship(
        back_populates="time_entry",
        order_by="TimeEntryAllocation.percentage.desc()",
    )


class TimeEntryAllocation(Base):
    __tablename__ = "time_entry_allocations"
    __table_args__ = (
        CheckConstraint("percentage >= 0 AND percentage <= 100", name="ck_allocations_percentage_range"),
        Index("ix_time_entry_allocations_entry_id", "time_entry_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    time_entry_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("time_entries.id"), nullable=False
    )
    project_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("projects.id"), nullable=False)
    wbs_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), ForeignKey("wbs.id"), nullable=True)
    percentage: Mapped[float] = mapped_column(Float, nullable=False)

    time_entry: Mapped[TimeEntry] = relationship(back_populates="allocations")


class EvmFixedTask(Base):
    __tablename__ = "evm_fixed_tasks"
    __table_args__ = (
        CheckConstraint("estimated_minutes >= 0", name="ck_evm_fixed_tasks_minutes_non_negative"),
        Index("ix_evm_fixed_tasks_date", "date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("projects.id"), nullable=False)
    task_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    estimated_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class Holiday(Base):
    __tablename__ = "holidays"
    __table_args__ = (
        Index("ix_holidays_date", "date"),
        Index("ix_holidays_fiscal_year", "fiscal_year"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    holiday_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[HolidayType] = mapped_column(
        SQLEnum(
            HolidayType,
            name="holiday_type",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=HolidayType.PUBLIC_HOLIDAY,
    )
    fiscal_year: Mapped[str] = mapped_column(String(8), nullable=False)


class ProjectWorkHours(Base):
    """Monthly budget (estimated hours) of a project within a fiscal year."""

    __tablename__ = "project_work_hours"
    __table_args__ = (
        CheckConstraint("month >= 1 AND month <= 12", name="ck_project_work_hours_month_range"),
        CheckConstraint("estimated_hours >= 0", name="ck_project_work_hours_non_negative"),
        UniqueConstraint("project_id", "fiscal_year", "month", name="uq_project_work_hours_project_fy_month"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("projects.id"), nullable=False)
    fiscal_year: Mapped[str] = mapped_column(String(8), nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    estimated_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
