# app/api/v1/users.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.v1.deps import get_current_user
from app.db import models
from app.db.session import get_db
from app.schemas.auth import AuthResponse, LoginRequest, SignupSeedRequest, UserCreate, UserOut, UserUpdate
from app.services.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)
router = APIRouter(tags=["users"])


def find_user_by_email(db: Session, email: str):
    return db.query(models.User).filter(models.User.email == email).first()


def create_user(db: Session, payload: UserCreate) -> models.User:
    """Add (but do not commit) a new user; 409 if the email is taken."""
    if find_user_by_email(db, payload.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User with this email already exists")
    user = models.User(
        email=payload.email,
        hashed_password=hash_password(payload.password),
        name=payload.name,
        income=payload.income,
        total_budget=payload.total_budget,
        current_total=payload.current_total,
    )
    db.add(user)
    db.flush()
    return user


def auth_response(user: models.User) -> dict:
    token = create_access_token(user.id, email=user.email)
    return {"access_token": token, "token_type": "bearer", "user": user}


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def signup(payload: UserCreate, db: Session = Depends(get_db)):
    user = create_user(db, payload)
    db.commit()
    db.refresh(user)
    logger.info("user %s signed up", user.id)
    return user


@router.post("/signup-seed", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup_and_seed(payload: SignupSeedRequest, db: Session = Depends(get_db)):
    """Sign up and create the user's starting spending categories in one go."""
    user = create_user(db, payload.user)

    seen = set()
    for c in payload.categories:
        name = c.name.strip()
        # skip duplicate names inside the same wizard submission
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())
        db.add(models.SpendingCategory(
            user_id=user.id,
            name=name,
            total_budget_number=c.total_budget_number,
            total_budget_percent=c.total_budget_percent,
        ))

    db.commit()
    db.refresh(user)
    logger.info("user %s signed up with %d seeded categories", user.id, len(seen))
    return auth_response(user)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = find_user_by_email(db, payload.email)
    if not user or not verify_password(payload.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    return auth_response(user)


@router.get("/me", response_model=UserOut)
def read_me(current_user: models.User = Depends(get_current_user)):
    return current_user


@router.get("", response_model=List[UserOut])
def list_users(
    skip: int = 0,
    limit: int = 100,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return db.query(models.User).order_by(models.User.id).offset(skip).limit(limit).all()


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, current_user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    user = db.query(models.User).filter(models.User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User with ID {user_id} not found")
    return user


def _require_self(user_id: int, current_user: models.User) -> None:
    if user_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only modify your own account")


@router.patch("/{user_id}", response_model=UserOut)
def update_user(
    user_id: int,
    payload: UserUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    _require_self(user_id, current_user)
    data = payload.model_dump(exclude_unset=True)

    if data.get("email") and data["email"] != current_user.email:
        if find_user_by_email(db, data["email"]):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User with this email already exists")
        current_user.email = data["email"]
    if data.get("password"):
        current_user.hashed_password = hash_password(data["password"])
    for field in ("name", "income", "total_budget", "current_total"):
        if field in data:
            setattr(current_user, field, data[field])

    db.add(current_user)
    db.commit()
    db.refresh(current_user)
    return current_user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, current_user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    _require_self(user_id, current_user)
    db.delete(current_user)
    db.commit()
    logger.info("user %s deleted their account", user_id)
    return None
