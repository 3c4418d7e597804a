"""Work-type rollup and ratio endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.dependencies import get_db_session
from app.services.evm_calendar import resolve_period
from app.services.evm_reporting_service import EvmReportingService
from app.services.work_type_engine import RatioView

router = APIRouter(prefix="/reports", tags=["reports"])


def _service(db: Session) -> EvmReportingService:
    return EvmReportingService(db)


@router.get("/worktype")
def report_work_types(
    year: str | None = None,
    month: str | None = None,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    report_year, report_month = resolve_period(year, month)
    service = _service(db)
    return service.work_type_report(year=report_year, month=report_month)


@router.get("/worktype/ratios")
def report_work_type_ratios(
    year: str | None = None,
    month: str | None = None,
    view: RatioView = RatioView.DAILY,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    report_year, report_month = resolve_period(year, month)
    service = _service(db)
    return service.work_type_ratio_report(year=report_year, month=report_month, view=view)
