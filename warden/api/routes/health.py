"""Health check endpoint with database connectivity check. Ungated."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from warden.core.config import settings
from warden.core.database import check_db_connected, get_db
from warden.schemas.envelope import ApiResponse
from warden.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=ApiResponse[HealthResponse])
def get_health(db: Annotated[Session, Depends(get_db)]) -> ApiResponse[HealthResponse]:
    """
    Return service health and database connectivity.
    Used by load balancers and monitoring; never requires a session.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"
    return ApiResponse.ok(
        HealthResponse(environment=settings.APP_ENV, database=db_status)
    )
