"""
Health check endpoint.
"""

from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quote_portal.core.config import get_settings
from quote_portal.core.dependencies import get_db
from quote_portal.modules.observability.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("/")
async def health_check(db: Session = Depends(get_db)):
    """
    Report service status.

    "degraded" means the API is up but the database did not answer.
    """
    settings = get_settings()

    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.error(f"[Health] database check failed: {e}")
        database = "error"

    return {
        "status": "healthy" if database == "ok" else "degraded",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "database": database,
        "timestamp": datetime.utcnow().isoformat(),
    }
