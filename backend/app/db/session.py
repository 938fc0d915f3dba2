# app/db/session.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.core.config import settings

DATABASE_URL = settings.DATABASE_URL

if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL not set in environment (.env)")

# sqlite needs this flag once FastAPI hands the session to a worker thread
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# create engine and session factory
engine = create_engine(DATABASE_URL, pool_pre_ping=True, future=True, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)

def get_db():
    """
    FastAPI dependency that yields a SQLAlchemy Session.
    Usage:
        db = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
