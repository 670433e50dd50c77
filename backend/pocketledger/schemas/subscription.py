"""Pydantic schemas for user subscription overrides."""

from pydantic import BaseModel, Field
from typing import List
from datetime import datetime

from pocketledger.models.recurring import Frequency


class UserSubscriptionResponse(BaseModel):
    id: str
    merchant_name: str
    category: str
    amount: float
    frequency: Frequency
    transaction_ids: List[str]
    is_confirmed: bool
    is_hidden: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AddFromTransactionRequest(BaseModel):
    """Mark a single transaction as a subscription."""
    transaction_id: str
    frequency: Frequency = Frequency.monthly


class AddFromVendorRequest(BaseModel):
    """Add a subscription from several transactions of one vendor."""
    vendor_name: str = Field(..., min_length=1)
    transaction_ids: List[str]


class UnconfirmedStatusResponse(BaseModel):
    has_unconfirmed: bool
    count: int
