# medicaledu/routers/health.py
from typing import Dict

import structlog
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from medicaledu import __version__
from medicaledu.routers.dependencies import get_db
from medicaledu.shared.config import settings

logger = structlog.get_logger()

router = APIRouter(tags=["System"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health(response: Response, db: Session = Depends(get_db)) -> Dict[str, str]:
    """
    Liveness and database reachability.
    Returns 503 Service Unavailable when the database cannot be queried.
    """
    result = {
        "status": "ok",
        "service": settings.APP_NAME,
        "version": __version__,
        "database": "up",
    }
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("health_check_failed", component="database", error=str(exc))
        result["status"] = "degraded"
        result["database"] = "down"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return result
