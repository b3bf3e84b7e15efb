"""
Health check endpoint.

Used by load balancers and monitoring to verify the
application is running and can reach its database.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cash_drawer.logging_config import get_logger
from cash_drawer.models.base import get_db

router = APIRouter(tags=["Health"])

logger = get_logger("api.health")


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Return application health status including database connectivity."""
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError:
        logger.exception("health_check_database_unreachable")
        db_status = "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "service": "cash-drawer-ledger",
        "database": db_status,
    }
