"""
Transaction database model.
"""

import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Date, Numeric, Text, ForeignKey, Index, Enum
from sqlalchemy.orm import relationship
from pocketledger.database import Base
from pocketledger.models.recurring import Frequency


class TransactionType(str, enum.Enum):
    """Direction of a ledger line."""
    income = "income"
    expense = "expense"


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    statement_id = Column(String(36), ForeignKey("statements.id", ondelete="CASCADE"), nullable=True, index=True)
    description = Column(Text, nullable=False)
    date = Column(Date, nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)  # Sign is not trusted, use type
    currency = Column(String(3), default="EUR", nullable=False)
    type = Column(Enum(TransactionType), nullable=False)
    category = Column(String(100), default="Other", nullable=False)
    iban = Column(String(64), nullable=True)
    reference = Column(String(255), nullable=True)
    ai_categorized = Column(Boolean, default=False, nullable=False)

    # Written by the recurring detection pass
    is_recurring = Column(Boolean, default=False, nullable=False)
    recurring_group_id = Column(String(255), nullable=True, index=True)
    recurring_frequency = Column(Enum(Frequency), nullable=True)
    merchant_name = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    statement = relationship("Statement", back_populates="transactions")

    __table_args__ = (
        Index("idx_transaction_date_type", "date", "type"),
        Index("idx_transaction_category", "category"),
    )
