"""Fiscal-year holiday and working-day endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.dependencies import get_db_session
from app.services.evm_reporting_service import EvmReportingService

router = APIRouter(prefix="/holidays", tags=["holidays"])


def _service(db: Session) -> EvmReportingService:
    return EvmReportingService(db)


@router.get("/working-days")
def get_working_days(
    fiscal_year: str = Query(..., alias="fiscalYear"),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _service(db)
    return service.working_days_report(fiscal_year=fiscal_year)


@router.get("/summary")
def get_holiday_summary(
    fiscal_year: str = Query(..., alias="fiscalYear"),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _service(db)
    return service.holiday_summary(fiscal_year=fiscal_year)
