"""
Service for user subscription overrides.

Auto-detected recurring groups are recomputed on every request; the user's
decisions about them live in the user_subscriptions table keyed by the
deterministic group id:

- confirmed: the user accepted a detected group
- hidden: the user rejected or removed a group (soft delete)
- manual: neither confirmed nor hidden, added from a transaction or vendor

Merging the two produces the visible subscription list and the queue of
groups the user has not been asked about yet.
"""

import logging
import uuid
from collections import Counter
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy.orm import Session

from pocketledger.models.recurring import Frequency
from pocketledger.models.transaction import Transaction
from pocketledger.models.user_subscription import UserSubscription
from pocketledger.services.detection_config import DetectionConfig, resolve_config
from pocketledger.services.frequency import calculate_next_expected, intervals_in_days
from pocketledger.services.recurring_detector import RecurringGroup, make_group_id
from pocketledger.services.recurring_service import get_recurring_groups

logger = logging.getLogger(__name__)


def _upsert(db: Session, subscription_id: str, **fields: Any) -> UserSubscription:
    """Insert or update a user subscription by id. Bumps updated_at."""
    now = datetime.utcnow()
    subscription = db.get(UserSubscription, subscription_id)

    if subscription is None:
        subscription = UserSubscription(id=subscription_id, created_at=now, **fields)
        db.add(subscription)
    else:
        for name, value in fields.items():
            setattr(subscription, name, value)

    subscription.updated_at = now
    db.commit()
    db.refresh(subscription)
    return subscription


# --- Pure reconciliation -------------------------------------------------


def _materialize_manual_group(
    subscription: UserSubscription,
    transactions_by_id: Dict[str, Transaction],
) -> RecurringGroup:
    transactions = sorted(
        (transactions_by_id[tid] for tid in subscription.transaction_ids or [] if tid in transactions_by_id),
        key=lambda t: t.date,
    )
    last_date = transactions[-1].date if transactions else date.today()
    frequency = Frequency(subscription.frequency)

    return RecurringGroup(
        id=subscription.id,
        merchant_name=subscription.merchant_name,
        category=subscription.category,
        average_amount=float(subscription.amount),
        frequency=frequency,
        transactions=transactions,
        is_subscription=True,
        variance=0.0,
        last_transaction_date=last_date,
        next_expected_date=calculate_next_expected(last_date, frequency),
        is_user_managed=True,
    )


def merge_subscriptions(
    auto_detected: Sequence[RecurringGroup],
    user_subscriptions: Sequence[UserSubscription],
    transactions_by_id: Dict[str, Transaction],
) -> List[RecurringGroup]:
    """
    Merge detected groups with user decisions.

    Hidden groups are removed. Detected groups with a visible row (confirmed,
    restored, or added again from a vendor search) are marked user-managed
    and listed once. Remaining manual additions are turned into groups.
    Sorted by average amount (highest first).
    """
    detected_ids = {group.id for group in auto_detected}
    hidden_ids = {s.id for s in user_subscriptions if s.is_hidden}
    managed_ids = {s.id for s in user_subscriptions if not s.is_hidden}
    manual_subs = [
        s for s in user_subscriptions
        if not s.is_confirmed and not s.is_hidden and s.id not in detected_ids
    ]

    visible_auto_detected = [
        replace(group, is_user_managed=True) if group.id in managed_ids else group
        for group in auto_detected
        if group.id not in hidden_ids
    ]
    manual_groups = [_materialize_manual_group(s, transactions_by_id) for s in manual_subs]

    merged = visible_auto_detected + manual_groups
    merged.sort(key=lambda g: g.average_amount, reverse=True)
    return merged


def filter_unconfirmed(
    auto_detected: Sequence[RecurringGroup],
    user_subscriptions: Iterable[UserSubscription],
) -> List[RecurringGroup]:
    """Detected groups the user has never confirmed or hidden."""
    interacted_ids = {s.id for s in user_subscriptions}
    return [group for group in auto_detected if group.id not in interacted_ids]


def estimate_vendor_frequency(
    transactions: Sequence[Any],
    config: Optional[DetectionConfig] = None,
) -> Frequency:
    """Coarse frequency guess for a hand-picked set of vendor transactions."""
    if len(transactions) < 2:
        return Frequency.monthly
    config = resolve_config(config)

    dates = sorted(t.date for t in transactions)
    intervals = intervals_in_days(dates)
    avg_interval = sum(intervals) / len(intervals)

    if config.weekly_band.contains(avg_interval):
        return Frequency.weekly
    if avg_interval >= 300:
        return Frequency.yearly
    return Frequency.monthly


# --- Store operations -----------------------------------------------------


def get_user_subscriptions(db: Session) -> List[UserSubscription]:
    """All user subscriptions, hidden ones included."""
    return db.query(UserSubscription).order_by(UserSubscription.created_at).all()


def get_visible_user_subscriptions(db: Session) -> List[UserSubscription]:
    return [s for s in get_user_subscriptions(db) if not s.is_hidden]


def get_merged_subscriptions(
    db: Session,
    config: Optional[DetectionConfig] = None,
) -> List[RecurringGroup]:
    """Merge auto-detected groups with stored user decisions."""
    auto_detected = get_recurring_groups(db, config)
    user_subs = get_user_subscriptions(db)

    referenced_ids = {
        tid
        for s in user_subs
        if not s.is_confirmed and not s.is_hidden
        for tid in (s.transaction_ids or [])
    }
    transactions_by_id: Dict[str, Transaction] = {}
    if referenced_ids:
        transactions_by_id = {
            t.id: t
            for t in db.query(Transaction).filter(Transaction.id.in_(list(referenced_ids))).all()
        }

    return merge_subscriptions(auto_detected, user_subs, transactions_by_id)


def get_unconfirmed_subscriptions(
    db: Session,
    config: Optional[DetectionConfig] = None,
) -> List[RecurringGroup]:
    """Detected groups waiting for a user decision (drives onboarding)."""
    return filter_unconfirmed(get_recurring_groups(db, config), get_user_subscriptions(db))


def has_unconfirmed_subscriptions(db: Session, config: Optional[DetectionConfig] = None) -> bool:
    return len(get_unconfirmed_subscriptions(db, config)) > 0


def find_detected_group(
    db: Session,
    group_id: str,
    config: Optional[DetectionConfig] = None,
) -> Optional[RecurringGroup]:
    for group in get_recurring_groups(db, config):
        if group.id == group_id:
            return group
    return None


def confirm_subscription(db: Session, group: RecurringGroup) -> UserSubscription:
    """Accept an auto-detected group. Repeated calls update the same row."""
    subscription = _upsert(
        db,
        group.id,
        merchant_name=group.merchant_name,
        category=group.category,
        amount=float(group.average_amount),
        frequency=Frequency(group.frequency),
        transaction_ids=list(group.transaction_ids),
        is_confirmed=True,
        is_hidden=False,
    )
    logger.info("Confirmed subscription %s", group.id)
    return subscription


def remove_subscription(db: Session, subscription_id: str) -> UserSubscription:
    """
    Hide a subscription instead of deleting it.

    Detected groups that have no row yet get a hidden placeholder so the
    next detection run keeps them out of the list.
    """
    subscription = _upsert(db, subscription_id, is_hidden=True)
    logger.info("Hid subscription %s", subscription_id)
    return subscription


def restore_subscription(db: Session, subscription_id: str) -> Optional[UserSubscription]:
    """Un-hide a subscription. Unknown ids are ignored."""
    if db.get(UserSubscription, subscription_id) is None:
        return None
    return _upsert(db, subscription_id, is_hidden=False)


def delete_subscription(db: Session, subscription_id: str) -> bool:
    """Delete a subscription row permanently. Returns whether a row existed."""
    subscription = db.get(UserSubscription, subscription_id)
    if subscription is None:
        return False
    db.delete(subscription)
    db.commit()
    return True


def add_subscription_from_transaction(
    db: Session,
    transaction: Transaction,
    frequency: Frequency,
) -> UserSubscription:
    """Mark a single transaction as a subscription."""
    frequency = Frequency(frequency)
    return _upsert(
        db,
        str(uuid.uuid4()),
        merchant_name=transaction.merchant_name or transaction.description,
        category=transaction.category,
        amount=abs(float(transaction.amount)),
        frequency=frequency,
        transaction_ids=[transaction.id],
        is_confirmed=False,
        is_hidden=False,
    )


def add_subscription_from_vendor(
    db: Session,
    vendor_name: str,
    transactions: Sequence[Transaction],
    config: Optional[DetectionConfig] = None,
) -> UserSubscription:
    """
    Add a subscription covering several transactions of one vendor.

    The id is derived from vendor, frequency and average amount, so adding
    the same selection twice updates the existing row.
    """
    if not transactions:
        raise ValueError("No transactions provided")

    average_amount = sum(abs(float(t.amount)) for t in transactions) / len(transactions)
    frequency = estimate_vendor_frequency(transactions, config)
    category = Counter(t.category for t in transactions).most_common(1)[0][0]

    return _upsert(
        db,
        make_group_id(vendor_name, frequency, average_amount),
        merchant_name=vendor_name,
        category=category,
        amount=average_amount,
        frequency=frequency,
        transaction_ids=[t.id for t in transactions],
        is_confirmed=False,
        is_hidden=False,
    )
