"""
Recurring frequency enumeration shared by transactions and subscriptions.
"""

import enum


class Frequency(str, enum.Enum):
    """Recurring frequency enumeration."""
    weekly = "weekly"
    monthly = "monthly"
    yearly = "yearly"
