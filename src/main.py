"""
Spendboard - ad spend and commission dashboard backend.

Main FastAPI application with:
- Owner / operator authentication
- Daily ad data entry (operator panel)
- Commission leaderboard and stored commission cache (admin)
- Scheduled recompute of today's commission
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import select

from src.api import admin_router, api_router, panel_router
from src.auth.middleware import AuthMiddleware
from src.config import settings
from src.db import get_db_context
from src.models import User, UserRole
from src.scheduler.jobs import scheduler, setup_scheduler
from src.services.exceptions import (
    CommissionRefreshError,
    SpendboardError,
)
from src.utils.password import hash_password

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Creates owner account if not exists
    - Starts the commission refresh scheduler

    Shutdown:
    - Stops the scheduler
    """
    logger.info("Starting Spendboard...")

    async with get_db_context() as db:
        result = await db.execute(
            select(User).where(User.role == UserRole.OWNER)
        )
        owner = result.scalar_one_or_none()

        if not owner:
            logger.info("Creating owner account...")
            db.add(
                User(
                    username=settings.owner_username,
                    password_hash=hash_password(settings.owner_password),
                    role=UserRole.OWNER,
                    display_name="Owner",
                    is_active=True,
                )
            )
            logger.info(f"Owner account created: {settings.owner_username}")

    if setup_scheduler():
        scheduler.start()

    logger.info(
        f"Spendboard started (fx_rate={settings.fx_rate}, "
        f"commission operators={settings.commission_operators})"
    )

    yield

    logger.info("Shutting down Spendboard...")
    if scheduler.running:
        scheduler.shutdown(wait=False)


app = FastAPI(
    title="Spendboard",
    description="Ad spend, ROI and commission dashboard",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)

app.add_middleware(AuthMiddleware)

app.include_router(api_router)  # /api/*
app.include_router(admin_router)  # /admin/*
app.include_router(panel_router)  # /panel/*


@app.exception_handler(SpendboardError)
async def domain_error_handler(request: Request, exc: SpendboardError):
    """Map domain errors onto HTTP responses."""
    if isinstance(exc, CommissionRefreshError):
        logger.error(f"Commission refresh failed: {exc}")
        status_code = 500
    else:
        status_code = 400

    return JSONResponse(
        status_code=status_code,
        content={
            "error": type(exc).__name__,
            "detail": str(exc),
        },
    )


@app.get("/", include_in_schema=False)
async def root():
    return {"service": "spendboard", "docs": "/docs"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.is_production,
    )
