"""
Statement database model.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Numeric
from sqlalchemy.orm import relationship
from pocketledger.database import Base


class Statement(Base):
    """An imported bank statement and its transactions."""

    __tablename__ = "statements"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    file_name = Column(String(255), nullable=False)
    upload_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    month = Column(String(20), nullable=False)
    year = Column(Integer, nullable=False)
    opening_balance = Column(Numeric(12, 2), default=0, nullable=False)
    closing_balance = Column(Numeric(12, 2), default=0, nullable=False)
    total_income = Column(Numeric(12, 2), default=0, nullable=False)
    total_expenses = Column(Numeric(12, 2), default=0, nullable=False)

    # Relationships
    transactions = relationship(
        "Transaction",
        back_populates="statement",
        cascade="all, delete-orphan",
        order_by="Transaction.date",
    )
