"""Admin router aggregation."""

from fastapi import APIRouter

from src.api.admin.audit import router as audit_router
from src.api.admin.commission import router as commission_router
from src.api.admin.operators import router as operators_router

admin_router = APIRouter(prefix="/admin", tags=["Admin"])

admin_router.include_router(commission_router)
admin_router.include_router(operators_router)
admin_router.include_router(audit_router)

__all__ = ["admin_router"]
