"""Service for running recurring detection against stored transactions."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from pocketledger.models.transaction import Transaction
from pocketledger.services.detection_config import DetectionConfig
from pocketledger.services.recurring_detector import (
    DetectionResult,
    RecurringGroup,
    apply_annotations,
    detect_recurring_transactions,
)

logger = logging.getLogger(__name__)


def get_all_transactions(db: Session) -> List[Transaction]:
    """All transactions across every imported statement."""
    return db.query(Transaction).order_by(Transaction.date).all()


def detect_for_store(db: Session, config: Optional[DetectionConfig] = None) -> DetectionResult:
    return detect_recurring_transactions(get_all_transactions(db), config)


def get_recurring_groups(db: Session, config: Optional[DetectionConfig] = None) -> List[RecurringGroup]:
    """Detect recurring groups from current transactions without persisting anything."""
    return detect_for_store(db, config).groups


def process_recurring_transactions(
    db: Session,
    config: Optional[DetectionConfig] = None,
) -> List[RecurringGroup]:
    """
    Detect recurring groups and persist the annotations on every transaction.

    Call whenever statements are imported, deleted or recategorized.
    """
    transactions = get_all_transactions(db)
    result = detect_recurring_transactions(transactions, config)

    annotated = apply_annotations(transactions, result.annotations)
    db.commit()

    logger.info(
        "Detected %d recurring transaction groups, annotated %d transactions",
        len(result.groups),
        annotated,
    )
    return result.groups
