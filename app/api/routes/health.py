"""
Health check endpoint for deployment monitoring.
"""
import logging
from datetime import datetime

from fastapi import APIRouter
from sqlalchemy import text

from app.db.session import SessionLocal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
def health_check():
    """
    Returns 200 with ``status: healthy`` when the database answers,
    ``degraded`` otherwise.
    """
    status = "healthy"

    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
        db_status = "connected"
    except Exception as e:
        logger.error(f"Health check database probe failed: {e}")
        db_status = f"error: {str(e)}"
        status = "degraded"

    return {
        "status": status,
        "timestamp": datetime.utcnow().isoformat(),
        "database": db_status,
        "service": "EmploySmart API",
    }
