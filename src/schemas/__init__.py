"""Pydantic schemas for request/response validation."""

from src.schemas.ad_entry import AdEntryCreate, AdEntryResponse, AdEntryUpdate
from src.schemas.auth import LoginRequest, LoginResponse, TokenPayload
from src.schemas.commission import (
    CommissionRecord,
    DailyEntry,
    OperatorAggregate,
    RankedEntry,
    RankTier,
)
from src.schemas.user import OperatorCreate, OperatorResponse, OperatorUpdate

__all__ = [
    # Auth
    "LoginRequest",
    "LoginResponse",
    "TokenPayload",
    # User
    "OperatorCreate",
    "OperatorResponse",
    "OperatorUpdate",
    # Ad data
    "AdEntryCreate",
    "AdEntryResponse",
    "AdEntryUpdate",
    # Commission pipeline
    "DailyEntry",
    "OperatorAggregate",
    "CommissionRecord",
    "RankedEntry",
    "RankTier",
]
