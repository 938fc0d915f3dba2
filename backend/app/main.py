# app/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1 import analytics, categories, health, scanner, transactions, users
from app.core.config import settings
from app.core.logging import RequestLoggingMiddleware, setup_logging

logger = setup_logging()

app = FastAPI(title="SmartSpend API", version="0.1.0")

origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]
app.add_middleware(
  CORSMiddleware,
  allow_origins=origins,
  allow_credentials=True,
  allow_methods=["*"],
  allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(health.router, prefix="/api/v1")
app.include_router(users.router, prefix="/api/v1/users", tags=["users"])
app.include_router(categories.router, prefix="/api/v1/spending-categories", tags=["spending-categories"])
app.include_router(transactions.router, prefix="/api/v1/transactions", tags=["transactions"])
app.include_router(analytics.router, prefix="/api/v1/analytics", tags=["analytics"])
app.include_router(scanner.router, prefix="/api/v1/scanner", tags=["scanner"])

@app.get("/")
def root():
    return {"message": "SmartSpend API - visit /api/v1/health"}
