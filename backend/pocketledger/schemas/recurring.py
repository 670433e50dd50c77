"""Pydantic schemas for recurring groups."""

from pydantic import BaseModel
from typing import Dict, List, Optional
from datetime import date

from pocketledger.models.recurring import Frequency
from pocketledger.schemas.transaction import TransactionResponse


class RecurringGroupResponse(BaseModel):
    id: str
    merchant_name: str
    category: str
    average_amount: float
    frequency: Frequency
    is_subscription: bool
    variance: float
    last_transaction_date: date
    next_expected_date: Optional[date] = None
    is_user_managed: bool = False
    transaction_ids: List[str] = []
    transactions: List[TransactionResponse] = []

    class Config:
        from_attributes = True


class CategoryBreakdownResponse(BaseModel):
    count: int
    amount: float

    class Config:
        from_attributes = True


class TopSubscriptionResponse(BaseModel):
    name: str
    amount: float
    frequency: Frequency

    class Config:
        from_attributes = True


class RecurringSummaryResponse(BaseModel):
    total_subscriptions: int
    total_recurring: int
    monthly_total: float
    yearly_total: float
    by_category: Dict[str, CategoryBreakdownResponse]
    top_subscriptions: List[TopSubscriptionResponse]

    class Config:
        from_attributes = True


class ProcessRecurringResponse(BaseModel):
    """Response from re-running detection over the store."""
    total_found: int
    groups: List[RecurringGroupResponse]
