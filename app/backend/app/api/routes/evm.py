"""Per-project earned-value endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.dependencies import get_db_session
from app.services.evm_calendar import resolve_period
from app.services.evm_reporting_service import EvmReportingService

router = APIRouter(prefix="/evm", tags=["evm"])


def _service(db: Session) -> EvmReportingService:
    return EvmReportingService(db)


@router.get("")
def get_project_evm(
    year: str | None = None,
    month: str | None = None,
    project_id: UUID | None = Query(default=None, alias="projectId"),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    report_year, report_month = resolve_period(year, month)
    service = _service(db)
    return service.project_report(year=report_year, month=report_month, project_id=project_id)
