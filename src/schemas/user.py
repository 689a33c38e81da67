"""User and operator schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class OperatorCreate(BaseModel):
    """Create a login for a roster operator."""

    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=6, max_length=100)
    display_name: str = Field(..., min_length=1, max_length=100)
    operator_code: str = Field(..., min_length=1, max_length=20)


class OperatorUpdate(BaseModel):
    display_name: Optional[str] = Field(None, min_length=1, max_length=100)
    is_active: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=6, max_length=100)


class OperatorResponse(BaseModel):
    """Operator account for admin view."""

    id: int
    username: str
    display_name: str
    operator_code: Optional[str]
    is_active: bool
    created_at: datetime
    last_active_at: Optional[datetime]

    model_config = {"from_attributes": True}
