"""
Statement import service.

Statements arrive already parsed. Importing stores the statement and its
transactions, categorizes what has no category yet, and re-runs
recurring detection over the whole store.
"""

import logging
import uuid
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from pocketledger.models.statement import Statement
from pocketledger.models.transaction import Transaction, TransactionType
from pocketledger.schemas.statement import StatementImportRequest
from pocketledger.services.categorization_service import categorize_transactions
from pocketledger.services.detection_config import DetectionConfig
from pocketledger.services.recurring_detector import RecurringGroup
from pocketledger.services.recurring_service import process_recurring_transactions

logger = logging.getLogger(__name__)


def _totals(transactions: List[Transaction]) -> Tuple[Decimal, Decimal]:
    total_income = sum(
        (abs(Decimal(t.amount)) for t in transactions if t.type == TransactionType.income),
        Decimal("0"),
    )
    total_expenses = sum(
        (abs(Decimal(t.amount)) for t in transactions if t.type == TransactionType.expense),
        Decimal("0"),
    )
    return total_income, total_expenses


async def import_statement(
    db: Session,
    request: StatementImportRequest,
    use_ai: Optional[bool] = None,
    config: Optional[DetectionConfig] = None,
) -> Tuple[Statement, int, List[RecurringGroup]]:
    """
    Store a parsed statement and refresh recurring annotations.

    Returns the statement, the number of transactions categorized during
    import, and the recurring groups detected afterwards.
    """
    statement = Statement(
        id=str(uuid.uuid4()),
        file_name=request.file_name,
        month=request.month,
        year=request.year,
        opening_balance=request.opening_balance,
        closing_balance=request.closing_balance,
    )

    transactions = [
        Transaction(
            id=item.id or str(uuid.uuid4()),
            statement_id=statement.id,
            description=item.description,
            date=item.date,
            amount=item.amount,
            currency=item.currency,
            type=item.type,
            category=item.category or "",
            iban=item.iban,
            reference=item.reference,
        )
        for item in request.transactions
    ]

    categorized = await categorize_transactions(db, transactions, use_ai=use_ai, config=config)

    statement.total_income, statement.total_expenses = _totals(transactions)
    statement.transactions = transactions
    db.add(statement)
    db.commit()

    logger.info(
        "Imported statement %s with %d transactions (%d categorized)",
        statement.file_name,
        len(transactions),
        categorized,
    )

    groups = process_recurring_transactions(db, config)
    db.refresh(statement)
    return statement, categorized, groups


def get_statements(db: Session) -> List[Statement]:
    return db.query(Statement).order_by(Statement.year.desc(), Statement.upload_date.desc()).all()


def get_statement(db: Session, statement_id: str) -> Optional[Statement]:
    return db.get(Statement, statement_id)


def delete_statement(
    db: Session,
    statement_id: str,
    config: Optional[DetectionConfig] = None,
) -> bool:
    """Delete a statement with its transactions and refresh detection."""
    statement = db.get(Statement, statement_id)
    if statement is None:
        return False

    db.delete(statement)
    db.commit()
    process_recurring_transactions(db, config)
    return True
