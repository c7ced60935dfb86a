"""Liveness and database reachability for the blog API."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import check_db_connected, get_db
from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(request: Request, db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    """Report "degraded" while the database cannot be reached; the process itself is up."""
    connected = check_db_connected(db)
    return HealthResponse(
        status="ok" if connected else "degraded",
        version=request.app.version,
        environment=settings.APP_ENV,
        database="connected" if connected else "disconnected",
    )
