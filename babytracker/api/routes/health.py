import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

from babytracker.config import build_sqlalchemy_db_url, settings
from babytracker.database import Base, engine, mask_db_url


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


class ServiceHealth(BaseModel):
    status: str
    service: str
    version: str
    environment: str
    checked_at: datetime


class DatabaseHealth(BaseModel):
    status: str
    db_url: str
    # Tables the models declare but the database lacks (run scripts/create_tables.py).
    missing_tables: list[str]
    checked_at: datetime


@router.get("", response_model=ServiceHealth, summary="Is the baby tracker API up")
def service_health() -> ServiceHealth:
    return ServiceHealth(
        status="ok",
        service=settings.app_name,
        version=settings.version,
        environment=settings.environment,
        checked_at=datetime.now(timezone.utc),
    )


@router.get("/db", response_model=DatabaseHealth, summary="Can the API reach its tables")
def database_health() -> DatabaseHealth:
    status = "ok"
    missing: list[str] = []
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            existing = set(inspect(conn).get_table_names())
        missing = [table.name for table in Base.metadata.sorted_tables if table.name not in existing]
        if missing:
            status = "degraded"
    except SQLAlchemyError as exc:
        logger.warning("health.db failed: %s", exc)
        status = "error"

    return DatabaseHealth(
        status=status,
        db_url=mask_db_url(build_sqlalchemy_db_url(settings)),
        missing_tables=missing,
        checked_at=datetime.now(timezone.utc),
    )
