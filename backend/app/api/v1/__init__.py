# app.api.v1 package - exports router modules so
# "from app.api.v1 import health, users, ..." works.
from . import analytics, categories, health, scanner, transactions, users

__all__ = ["analytics", "categories", "health", "scanner", "transactions", "users"]
