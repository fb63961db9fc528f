"""Health check endpoint with database connectivity and auth cache size."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import get_auth_cache
from app.core.config import settings
from app.core.database import check_db_connected, get_db
from app.schemas.health import HealthResponse
from app.services.auth_cache import AuthCache

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(
    db: Session = Depends(get_db),
    cache: AuthCache = Depends(get_auth_cache),
) -> HealthResponse:
    """
    Return service health status and database connectivity.
    Used by load balancers and monitoring.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"
    cache.sweep()

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database=db_status,
        cached_sessions=len(cache),
    )
