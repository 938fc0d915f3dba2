# create_tables.py: run once to create missing tables (development helper)
import sys

from app.core.logging import setup_logging
from app.db.base import Base
from app.db import models  # noqa: F401  registers the tables on Base.metadata
from app.db.session import engine
from sqlalchemy.exc import SQLAlchemyError

logger = setup_logging()

logger.info("Creating tables in the database (if not exist)...")
try:
    Base.metadata.create_all(bind=engine)
    logger.info("Done: %s", ", ".join(sorted(Base.metadata.tables)))
except SQLAlchemyError:
    logger.exception("Error creating tables:")
    sys.exit(1)
