"""
Health check routes: liveness, readiness and a catalog summary.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from datetime import datetime, timezone
import time
import logging

from concierge.db.database import get_db
from concierge.db.repositories import ListingCatalog
from concierge.core.rate_limiting import limiter, HEALTH_LIMIT

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])

_STARTUP_TIME = time.time()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/")
@limiter.limit(HEALTH_LIMIT)
def health_check(request: Request, db: Session = Depends(get_db)):
    """Database connectivity, approved listing count and uptime."""
    health = {
        "status": "healthy",
        "database": "available",
        "approved_listings": 0,
        "uptime_seconds": int(time.time() - _STARTUP_TIME),
        "timestamp": _now(),
    }
    try:
        health["approved_listings"] = ListingCatalog(db).count_approved()
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        health["status"] = "degraded"
        health["database"] = "unavailable"
    return health


@router.get("/ready")
@limiter.limit(HEALTH_LIMIT)
def readiness_check(request: Request, db: Session = Depends(get_db)):
    """200 only when the database answers."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Readiness check failed: {e}")
        return JSONResponse(status_code=503, content={"ready": False, "timestamp": _now()})
    return {"ready": True, "timestamp": _now()}


@router.get("/live")
async def liveness_check():
    return {"alive": True, "uptime_seconds": int(time.time() - _STARTUP_TIME), "timestamp": _now()}
