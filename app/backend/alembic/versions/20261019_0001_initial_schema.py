"""initial schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


work_type = postgresql.ENUM("IN_PROGRESS", "SE_TRANSFER", "INDIRECT", name="work_type", create_type=False)
holiday_type = postgresql.ENUM(
    "PUBLIC_HOLIDAY", "WEEKEND", "SPECIAL_HOLIDAY", "PAID_LEAVE", name="holiday_type", create_type=False
)


def upgrade() -> None:
    work_type.create(op.get_bind(), checkfirst=True)
    holiday_type.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "projects",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("abbreviation", sa.String(length=64), nullable=True),
        sa.Column("work_type", work_type, nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.UniqueConstraint("code", name="uq_projects_code"),
    )
    op.create_index("ix_projects_name", "projects", ["name"])

    op.create_table(
        "wbs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
    )
    op.create_index("ix_wbs_project_id", "wbs", ["project_id"])

    op.create_table(
        "time_entries",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("projects.id"), nullable=True),
        sa.Column("wbs_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("wbs.id"), nullable=True),
        sa.Column("start_time", sa.DateTime(), nullable=False),
        sa.Column("end_time", sa.DateTime(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("note", sa.String(length=2000), nullable=True),
        sa.CheckConstraint("duration IS NULL OR duration >= 0", name="ck_time_entries_duration_non_negative"),
    )
    op.create_index("ix_time_entries_start_time", "time_entries", ["start_time"])

    op.create_table(
        "time_entry_allocations",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column(
            "time_entry_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("time_entries.id"),
            nullable=False,
        ),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("wbs_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("wbs.id"), nullable=True),
        sa.Column("percentage", sa.Float(), nullable=False),
        sa.CheckConstraint("percentage >= 0 AND percentage <= 100", name="ck_allocations_percentage_range"),
    )
    op.create_index("ix_time_entry_allocations_entry_id", "time_entry_allocations", ["time_entry_id"])

    op.create_table(
        "evm_fixed_tasks",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("estimated_minutes", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.CheckConstraint("estimated_minutes >= 0", name="ck_evm_fixed_tasks_minutes_non_negative"),
    )
    op.create_index("ix_evm_fixed_tasks_date", "evm_fixed_tasks", ["date"])

    op.create_table(
        "holidays",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type", holiday_type, nullable=False),
        sa.Column("fiscal_year", sa.String(length=8), nullable=False),
    )
    op.create_index("ix_holidays_date", "holidays", ["date"])
    op.create_index("ix_holidays_fiscal_year", "holidays", ["fiscal_year"])

    op.create_table(
        "project_work_hours",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("fiscal_year", sa.String(length=8), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("estimated_hours", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.CheckConstraint("month >= 1 AND month <= 12", name="ck_project_work_hours_month_range"),
        sa.CheckConstraint("estimated_hours >= 0", name="ck_project_work_hours_non_negative"),
        sa.UniqueConstraint(
            "project_id",
            "fiscal_year",
            "month",
            name="uq_project_work_hours_project_fy_month",
        ),
    )


def downgrade() -> None:
    op.drop_table("project_work_hours")

    op.drop_index("ix_holidays_fiscal_year", table_name="holidays")
    op.drop_index("ix_holidays_date", table_name="holidays")
    op.drop_table("holidays")

    op.drop_index("ix_evm_fixed_tasks_date", table_name="evm_fixed_tasks")
    op.drop_table("evm_fixed_tasks")

    op.drop_index("ix_time_entry_allocations_entry_id", table_name="time_entry_allocations")
    op.drop_table("time_entry_allocations")

    op.drop_index("ix_time_entries_start_time", table_name="time_entries")
    op.drop_table("time_entries")

    op.drop_index("ix_wbs_project_id", table_name="wbs")
    op.drop_table("wbs")

    op.drop_index("ix_projects_name", table_name="projects")
    op.drop_table("projects")

    holiday_type.drop(op.get_bind(), checkfirst=True)
    work_type.drop(op.get_bind(), checkfirst=True)
