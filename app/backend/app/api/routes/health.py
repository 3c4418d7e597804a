"""Health check endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.db.dependencies import get_db_session

router = APIRouter()


@router.get("/health")
def health() -> dict[str, str]:
    """Simple liveness endpoint."""

    return {"status": "ok"}


@router.get("/health/db")
def database_health(db: Session = Depends(get_db_session)) -> dict[str, str]:
    """Readiness of the record store; read failures surface through the data-source error handler."""

    db.execute(text("SELECT 1"))
    return {"status": "ok", "database": "reachable"}
