"""Daily ad data entry schemas."""

import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

# Upper bound of the Postgres INTEGER columns
INT_MAX = 2_147_483_647


class AdEntryCreate(BaseModel):
    """Submit (or overwrite) one operator's figures for a day."""

    date: datetime.date
    staff: str = Field(..., min_length=1, max_length=20)
    ad_spend: Decimal = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    credit_card_amount: Decimal = Field(Decimal("0"), ge=0, max_digits=14, decimal_places=2)
    payment_info_count: int = Field(0, ge=0, le=INT_MAX)
    credit_card_orders: int = Field(0, ge=0, le=INT_MAX)


class AdEntryUpdate(BaseModel):
    """Partial update of an existing entry."""

    ad_spend: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    credit_card_amount: Optional[Decimal] = Field(None, ge=0, max_digits=14, decimal_places=2)
    payment_info_count: Optional[int] = Field(None, ge=0, le=INT_MAX)
    credit_card_orders: Optional[int] = Field(None, ge=0, le=INT_MAX)


class AdEntryResponse(BaseModel):
    id: int
    date: datetime.date
    staff: str
    ad_spend: Decimal
    credit_card_amount: Decimal
    payment_info_count: int
    credit_card_orders: int
    created_at: datetime.datetime
    updated_at: Optional[datetime.datetime] = None

    model_config = {"from_attributes": True}
