import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import ServiceError
from app.db.init_db import create_review_tables
from app.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Service"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
def health_check():
    return {
        "status": "OK",
        "service": settings.SERVICE_NAME,
        "timestamp": _now(),
        "version": settings.VERSION,
    }


@router.get("/")
def read_root():
    return {
        "message": settings.PROJECT_NAME,
        "status": "running",
        "endpoints": {
            "health": "/health",
            "setup-database": "/setup-database (GET)",
            "create-review": "/reviews (POST)",
            "get-reviews": "/reviews (GET)",
            "landlord-response": "/reviews/:id/response (POST)",
            "review-stats": "/reviews/stats (GET)",
            "test": "/test",
        },
    }


@router.get("/test")
def test_endpoint():
    """Deployment diagnostics: listen port and whether DATABASE_URL is set."""
    return {
        "message": "Review service test endpoint working!",
        "database": "Connected" if settings.database_configured else "Not configured",
        "port": settings.PORT,
    }


@router.get("/setup-database")
def setup_database(db: Session = Depends(get_db)):
    """Create the review tables if they don't exist. Safe to call repeatedly."""
    try:
        tables = create_review_tables(bind=db.get_bind())
    except SQLAlchemyError as e:
        logger.exception("Database setup error")
        raise ServiceError("Failed to create review tables", details=str(e))

    return {
        "message": "Review service database tables created successfully!",
        "tables": tables,
        "timestamp": _now(),
    }
