"""Panel router aggregation."""

from fastapi import APIRouter

from src.api.panel.commission import router as commission_router
from src.api.panel.entries import router as entries_router

panel_router = APIRouter(prefix="/panel", tags=["Panel"])

panel_router.include_router(entries_router)
panel_router.include_router(commission_router)

__all__ = ["panel_router"]
