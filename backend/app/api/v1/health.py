import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.simple import Health

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])

@router.get('/health', response_model=Health)
def health(db: Session = Depends(get_db)):
    # liveness stays "ok" so the process isn't restarted for a database outage
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError:
        logger.exception("Health check could not reach the database")
        database = "unavailable"
    return {'status': 'ok', 'database': database}
