import os

# must be set before app modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ["OCR_PROVIDER"] = "google_vision"
os.environ["GOOGLE_VISION_API_KEY"] = "test-key"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db import models
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.services.security import create_access_token, hash_password

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def db_session():
    """Fresh in-memory schema per test."""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _make_user(db_session, email: str, **fields) -> models.User:
    user = models.User(email=email, hashed_password=hash_password("password123"), **fields)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def make_user(db_session):
    def factory(email: str = "alice@example.com", **fields) -> models.User:
        return _make_user(db_session, email, **fields)
    return factory


@pytest.fixture
def test_user(make_user):
    return make_user("testuser@example.com", name="Test User")


def headers_for(user: models.User) -> dict:
    token = create_access_token(user.id, email=user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(test_user):
    return headers_for(test_user)


@pytest.fixture
def auth_headers_for():
    return headers_for
