from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta

from sqlalchemy.orm import Session

from app.models.entities import EvmFixedTask, Project, ProjectWorkHours, TimeEntry
from app.repositories.evm_repository import EvmRepository


def _seed(db: Session) -> Project:
    project = Project(id=uuid.uuid4(), code="OPS", name="Operations", active=True)
    db.add(project)
    db.flush()
    db.add_all(
        [
            EvmFixedTask(project_id=project.id, task_date=date(2025, 4, 10), title="Audit", estimated_minutes=60),
            ProjectWorkHours(project_id=project.id, fiscal_year="FY25", month=4, estimated_hours=12.0),
            TimeEntry(
                project_id=project.id,
                start_time=datetime(2025, 4, 30, 23, 59, 59),
                end_time=datetime(2025, 4, 30, 23, 59, 59) + timedelta(minutes=30),
                duration=1800,
            ),
            TimeEntry(
                project_id=project.id,
                start_time=datetime(2025, 5, 1, 0, 0),
                end_time=datetime(2025, 5, 1, 1, 0),
                duration=3600,
            ),
        ]
    )
    db.commit()
    return project


def test_empty_project_scope_matches_nothing(db_session: Session) -> None:
    project = _seed(db_session)
    repo = EvmRepository(db_session)

    assert repo.list_fixed_tasks(start_date=date(2025, 4, 1), end_date=date(2025, 4, 30), project_ids=set()) == []
    assert repo.map_estimated_hours(fiscal_year="FY25", month=4, project_ids=set()) == {}

    scoped = repo.list_fixed_tasks(
        start_date=date(2025, 4, 1),
        end_date=date(2025, 4, 30),
        project_ids={project.id},
    )
    assert [task.title for task in scoped] == ["Audit"]
    assert repo.map_estimated_hours(fiscal_year="FY25", month=4) == {project.id: 12.0}


def test_time_entry_window_covers_whole_last_day(db_session: Session) -> None:
    _seed(db_session)
    repo = EvmRepository(db_session)

    entries = repo.list_completed_time_entries(start_date=date(2025, 4, 1), end_date=date(2025, 4, 30))

    assert [entry.start_time for entry in entries] == [datetime(2025, 4, 30, 23, 59, 59)]
    assert repo.list_completed_time_entries(start_date=date(9999, 12, 1), end_date=date(9999, 12, 31)) == []


def test_queries_return_lists(db_session: Session) -> None:
    _seed(db_session)
    repo = EvmRepository(db_session)

    assert isinstance(repo.list_projects(), list)
    assert isinstance(repo.list_holidays(start_date=date(2025, 4, 1), end_date=date(2025, 4, 30)), list)
    assert isinstance(
        repo.list_completed_time_entries(start_date=date(2025, 4, 1), end_date=date(2025, 4, 30)),
        list,
    )
    assert isinstance(repo.list_fixed_tasks(start_date=date(2025, 4, 1), end_date=date(2025, 4, 30)), list)
