"""
Pydantic schemas package.
"""

from pocketledger.schemas.transaction import (
    TransactionBase,
    TransactionCreate,
    TransactionUpdate,
    TransactionResponse,
    TransactionListResponse,
)
from pocketledger.schemas.statement import (
    StatementImportRequest,
    StatementResponse,
    StatementDetailResponse,
    StatementImportResponse,
)
from pocketledger.schemas.recurring import (
    RecurringGroupResponse,
    RecurringSummaryResponse,
    ProcessRecurringResponse,
)
from pocketledger.schemas.subscription import (
    UserSubscriptionResponse,
    AddFromTransactionRequest,
    AddFromVendorRequest,
    UnconfirmedStatusResponse,
)
from pocketledger.schemas.category_rule import (
    CategoryRuleCreate,
    CategoryRuleResponse,
)

__all__ = [
    "TransactionBase",
    "TransactionCreate",
    "TransactionUpdate",
    "TransactionResponse",
    "TransactionListResponse",
    "StatementImportRequest",
    "StatementResponse",
    "StatementDetailResponse",
    "StatementImportResponse",
    "RecurringGroupResponse",
    "RecurringSummaryResponse",
    "ProcessRecurringResponse",
    "UserSubscriptionResponse",
    "AddFromTransactionRequest",
    "AddFromVendorRequest",
    "UnconfirmedStatusResponse",
    "CategoryRuleCreate",
    "CategoryRuleResponse",
]
