"""
Database models for Spendboard.

All models are exported here for convenient imports:
    from src.models import User, AdDataEntry, StoredCommission, etc.
"""

from src.models.ad_entry import AdDataEntry
from src.models.audit import AuditAction, AuditLog
from src.models.base import Base, BaseModel, TimestampMixin
from src.models.commission import CommissionStatus, StoredCommission
from src.models.user import User, UserRole

__all__ = [
    # Base
    "Base",
    "BaseModel",
    "TimestampMixin",
    # User
    "User",
    "UserRole",
    # Ad data
    "AdDataEntry",
    # Commission
    "StoredCommission",
    "CommissionStatus",
    # Audit
    "AuditLog",
    "AuditAction",
]
