"""
Category rule database model.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime
from pocketledger.database import Base


class CategoryRule(Base):
    """Local keyword or regex rule mapping descriptions to a category."""

    __tablename__ = "category_rules"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    pattern = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False)
    is_regex = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
