"""Export endpoint for EVM datasets."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.db.dependencies import get_db_session
from app.services.evm_calendar import resolve_period
from app.services.evm_reporting_service import EvmReportingService

router = APIRouter(prefix="/exports", tags=["exports"])


def _service(db: Session) -> EvmReportingService:
    return EvmReportingService(db)


@router.get("/{report_key}")
def export_report(
    report_key: str,
    format: str = Query(default="csv"),
    year: str | None = Query(default=None),
    month: str | None = Query(default=None),
    db: Session = Depends(get_db_session),
) -> Response:
    report_year, report_month = resolve_period(year, month)
    service = _service(db)
    exported = service.export_report(
        report_key=report_key,
        format_name=format,
        year=report_year,
        month=report_month,
    )
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )
