"""
User subscription override model.
"""

from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Float, JSON, Enum
from pocketledger.database import Base
from pocketledger.models.recurring import Frequency


class UserSubscription(Base):
    """
    A user decision about a subscription.

    Confirmed rows point at a detected group id, hidden rows soft-delete a
    group, and rows that are neither were added by hand.
    """

    __tablename__ = "user_subscriptions"

    id = Column(String(255), primary_key=True)
    merchant_name = Column(String(255), nullable=False, default="")
    category = Column(String(100), nullable=False, default="")
    amount = Column(Float, nullable=False, default=0.0)  # Unsigned average
    frequency = Column(Enum(Frequency), nullable=False, default=Frequency.monthly)
    transaction_ids = Column(JSON, nullable=False, default=list)
    is_confirmed = Column(Boolean, default=False, nullable=False)
    is_hidden = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
