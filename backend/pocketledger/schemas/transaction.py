"""
Transaction schemas.
"""

from pydantic import BaseModel
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

from pocketledger.models.recurring import Frequency
from pocketledger.models.transaction import TransactionType


class TransactionBase(BaseModel):
    description: str
    date: date
    amount: Decimal
    currency: str = "EUR"
    type: TransactionType
    category: Optional[str] = None
    iban: Optional[str] = None
    reference: Optional[str] = None


class TransactionCreate(TransactionBase):
    id: Optional[str] = None


class TransactionUpdate(BaseModel):
    category: Optional[str] = None


class TransactionResponse(BaseModel):
    id: str
    statement_id: Optional[str]
    description: str
    date: date
    amount: Decimal
    currency: str
    type: TransactionType
    category: str
    iban: Optional[str] = None
    reference: Optional[str] = None
    ai_categorized: bool
    is_recurring: bool
    recurring_group_id: Optional[str]
    recurring_frequency: Optional[Frequency]
    merchant_name: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TransactionListResponse(BaseModel):
    items: list[TransactionResponse]
    total: int
    page: int
    pages: int
