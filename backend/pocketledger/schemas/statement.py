"""
Statement schemas.
"""

from pydantic import BaseModel, Field
from typing import List
from datetime import datetime
from decimal import Decimal

from pocketledger.schemas.transaction import TransactionCreate, TransactionResponse


class StatementBase(BaseModel):
    file_name: str
    month: str
    year: int
    opening_balance: Decimal = Decimal("0")
    closing_balance: Decimal = Decimal("0")


class StatementImportRequest(StatementBase):
    """An already parsed statement."""
    transactions: List[TransactionCreate] = Field(default_factory=list)


class StatementResponse(StatementBase):
    id: str
    upload_date: datetime
    total_income: Decimal
    total_expenses: Decimal

    class Config:
        from_attributes = True


class StatementDetailResponse(StatementResponse):
    transactions: List[TransactionResponse] = []


class StatementImportResponse(BaseModel):
    statement: StatementResponse
    transaction_count: int
    categorized_count: int
    recurring_group_count: int
