"""
Database models package.
"""

from pocketledger.models.recurring import Frequency
from pocketledger.models.statement import Statement
from pocketledger.models.transaction import Transaction, TransactionType
from pocketledger.models.user_subscription import UserSubscription
from pocketledger.models.category_rule import CategoryRule

__all__ = [
    "Frequency",
    "Statement",
    "Transaction",
    "TransactionType",
    "UserSubscription",
    "CategoryRule",
]
