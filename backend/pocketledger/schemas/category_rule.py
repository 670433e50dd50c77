"""
Category rule schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime


class CategoryRuleBase(BaseModel):
    pattern: str = Field(..., min_length=1, max_length=255)
    category: str
    is_regex: bool = False


class CategoryRuleCreate(CategoryRuleBase):
    pass


class CategoryRuleResponse(CategoryRuleBase):
    id: str
    created_at: datetime

    class Config:
        from_attributes = True
