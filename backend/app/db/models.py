# app/db/models.py: User, SpendingCategory, Transaction
from sqlalchemy import Column, Integer, String, DateTime, func, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import Base

class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(100), nullable=True)
    income = Column(Numeric(12, 2), nullable=True)
    total_budget = Column(Numeric(12, 2), nullable=True)
    current_total = Column(Numeric(12, 2), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    # relationships
    transactions = relationship(
        "Transaction", back_populates="user", cascade="all, delete-orphan"
    )
    categories = relationship(
        "SpendingCategory", back_populates="user", cascade="all, delete-orphan"
    )

class SpendingCategory(Base):
    __tablename__ = "spending_categories"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_spending_categories_user_name"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    # a budget is either a share of the user's total budget or a fixed amount
    total_budget_percent = Column(Numeric(5, 2), nullable=True)
    total_budget_number = Column(Numeric(12, 2), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="categories")
    transactions = relationship("Transaction", back_populates="category")

class Transaction(Base):
    __tablename__ = "transactions"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    item_purchased = Column(String(255), nullable=False)
    cost = Column(Numeric(10, 2), nullable=False)
    time = Column(DateTime, server_default=func.now(), nullable=False)
    plaid_category = Column(String(255), nullable=True)

    # optional category relation
    category_id = Column(Integer, ForeignKey("spending_categories.id", ondelete="SET NULL"), nullable=True, index=True)
    category = relationship("SpendingCategory", back_populates="transactions")

    user = relationship("User", back_populates="transactions")
