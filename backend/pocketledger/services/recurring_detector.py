"""
Recurring transaction detection.

Takes an unordered batch of transactions and partitions the expenses into
merchant groups paid on a weekly, monthly or yearly cadence:

1. keep expenses and key each one by its normalized merchant name
2. greedily cluster on merchant similarity and amount tolerance
3. drop small clusters and excluded categories
4. infer frequency from the day gaps, drop clusters without one
5. compute statistics, classify, and assign a content-derived id

Group ids depend only on merchant, frequency and average amount, so
re-running detection over the same data yields the same ids and stored
user decisions keep matching. Input objects are never modified; the
per-transaction annotations are returned alongside the groups.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from pocketledger.models.recurring import Frequency
from pocketledger.models.transaction import TransactionType
from pocketledger.schemas.recurring import (
    CategoryBreakdownResponse,
    RecurringSummaryResponse,
    TopSubscriptionResponse,
)
from pocketledger.services.detection_config import DetectionConfig, resolve_config
from pocketledger.services.frequency import (
    calculate_next_expected,
    detect_frequency,
    infer_single_interval_frequency,
    intervals_in_days,
    monthly_equivalent,
)
from pocketledger.services.merchant_normalizer import normalize_merchant_name
from pocketledger.services.similarity import amounts_similar, calculate_similarity
from pocketledger.services.subscription_classifier import (
    classify_subscription,
    is_direct_debit,
    is_excluded_category,
    is_likely_subscription,
)

logger = logging.getLogger(__name__)


@dataclass
class RecurringGroup:
    """A set of transactions judged to be the same recurring payment."""
    id: str
    merchant_name: str
    category: str
    average_amount: float
    frequency: Frequency
    transactions: List[Any]
    is_subscription: bool
    variance: float
    last_transaction_date: date
    next_expected_date: Optional[date] = None
    is_user_managed: bool = False

    @property
    def transaction_ids(self) -> List[str]:
        return [t.id for t in self.transactions]


@dataclass(frozen=True)
class RecurringAnnotation:
    """Fields the detection pass assigns to a member transaction."""
    recurring_group_id: str
    recurring_frequency: Frequency
    merchant_name: str
    is_recurring: bool = True


@dataclass
class DetectionResult:
    groups: List[RecurringGroup] = field(default_factory=list)
    annotations: Dict[str, RecurringAnnotation] = field(default_factory=dict)


@dataclass
class _Candidate:
    transaction: Any
    merchant_name: str
    amount: float
    date: date


@dataclass
class _Cluster:
    key: str
    members: List[_Candidate]

    @property
    def seed(self) -> _Candidate:
        return self.members[0]


def _as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def make_group_id(merchant_name: str, frequency: Frequency, average_amount: float) -> str:
    """Deterministic group id: slug_frequency_cents."""
    slug = re.sub(r"\s+", "-", merchant_name)
    return f"{slug}_{Frequency(frequency).value}_{_round_half_up(average_amount * 100)}"


def _build_clusters(candidates: List[_Candidate], config: DetectionConfig) -> List[_Cluster]:
    clusters: List[_Cluster] = []

    for candidate in candidates:
        is_subscription = is_likely_subscription(
            candidate.merchant_name, candidate.transaction.category, config
        )

        for cluster in clusters:
            seed = cluster.seed
            similarity = calculate_similarity(candidate.merchant_name, seed.merchant_name)
            if similarity >= config.similarity_threshold and amounts_similar(
                candidate.amount, seed.amount, is_subscription, config
            ):
                cluster.members.append(candidate)
                break
        else:
            clusters.append(_Cluster(
                key=f"{candidate.merchant_name}_{candidate.amount:.2f}",
                members=[candidate],
            ))

    return clusters


def _analyze_cluster(cluster: _Cluster, config: DetectionConfig) -> Optional[RecurringGroup]:
    if len(cluster.members) < config.min_group_size:
        return None

    members = sorted(cluster.members, key=lambda c: c.date)
    last = members[-1]
    merchant_name = last.merchant_name
    category = last.transaction.category

    if is_excluded_category(merchant_name, category, config):
        logger.debug("Skipping %s: excluded category %s", cluster.key, category)
        return None

    intervals = intervals_in_days([m.date for m in members])
    frequency = detect_frequency(intervals, config)
    if frequency is None and len(members) == 2:
        frequency = infer_single_interval_frequency(intervals[0], config)
    if frequency is None:
        return None

    amounts = [m.amount for m in members]
    average_amount = sum(amounts) / len(amounts)
    variance = (max(amounts) - min(amounts)) / average_amount * 100 if average_amount else 0.0

    has_direct_debit = any(
        is_direct_debit(m.transaction.description, config) for m in members
    )
    is_subscription = classify_subscription(
        merchant_name, category, has_direct_debit, variance, frequency, config
    )

    return RecurringGroup(
        id=make_group_id(merchant_name, frequency, average_amount),
        merchant_name=merchant_name,
        category=category,
        average_amount=average_amount,
        frequency=frequency,
        transactions=[m.transaction for m in members],
        is_subscription=is_subscription,
        variance=variance,
        last_transaction_date=last.date,
        next_expected_date=calculate_next_expected(last.date, frequency),
    )


def detect_recurring_transactions(
    transactions: Iterable[Any],
    config: Optional[DetectionConfig] = None,
) -> DetectionResult:
    """
    Detect recurring groups in a batch of transactions.

    Transactions need id, description, date, amount, type and category
    attributes. Returns the groups sorted by average amount (highest
    first) and a map of transaction id to recurring annotation.
    """
    config = resolve_config(config)

    candidates: List[_Candidate] = []
    for txn in transactions:
        if txn.type != TransactionType.expense:
            continue
        merchant_name = normalize_merchant_name(txn.description or "", config.max_merchant_tokens)
        if len(merchant_name) < config.min_merchant_key_length:
            continue
        candidates.append(_Candidate(
            transaction=txn,
            merchant_name=merchant_name,
            amount=abs(float(txn.amount)),
            date=_as_date(txn.date),
        ))

    result = DetectionResult()
    for cluster in _build_clusters(candidates, config):
        group = _analyze_cluster(cluster, config)
        if group is None:
            continue
        result.groups.append(group)
        for txn in group.transactions:
            result.annotations[txn.id] = RecurringAnnotation(
                recurring_group_id=group.id,
                recurring_frequency=group.frequency,
                merchant_name=group.merchant_name,
            )

    result.groups.sort(key=lambda g: g.average_amount, reverse=True)

    logger.info(
        "Detected %d recurring groups from %d candidate expenses",
        len(result.groups),
        len(candidates),
    )
    return result


def apply_annotations(
    transactions: Iterable[Any],
    annotations: Dict[str, RecurringAnnotation],
) -> int:
    """
    Write annotations onto transaction objects.

    Transactions without an annotation are reset so stale group links
    from an earlier run do not survive. Returns the number of annotated
    transactions.
    """
    annotated = 0
    for txn in transactions:
        annotation = annotations.get(txn.id)
        if annotation is None:
            txn.is_recurring = False
            txn.recurring_group_id = None
            txn.recurring_frequency = None
            txn.merchant_name = None
            continue
        txn.is_recurring = annotation.is_recurring
        txn.recurring_group_id = annotation.recurring_group_id
        txn.recurring_frequency = annotation.recurring_frequency
        txn.merchant_name = annotation.merchant_name
        annotated += 1
    return annotated


def get_recurring_summary(
    groups: List[RecurringGroup],
    config: Optional[DetectionConfig] = None,
    top_n: int = 5,
) -> RecurringSummaryResponse:
    """Aggregate projected costs over recurring groups."""
    config = resolve_config(config)

    monthly_total = 0.0
    by_category: Dict[str, CategoryBreakdownResponse] = {}
    for group in groups:
        monthly_amount = monthly_equivalent(group.average_amount, group.frequency, config)
        monthly_total += monthly_amount
        breakdown = by_category.setdefault(group.category, CategoryBreakdownResponse(count=0, amount=0.0))
        breakdown.count += 1
        breakdown.amount += monthly_amount

    subscriptions = [g for g in groups if g.is_subscription]

    return RecurringSummaryResponse(
        total_subscriptions=len(subscriptions),
        total_recurring=len(groups),
        monthly_total=monthly_total,
        yearly_total=monthly_total * 12,
        by_category=by_category,
        top_subscriptions=[
            TopSubscriptionResponse(name=g.merchant_name, amount=g.average_amount, frequency=g.frequency)
            for g in subscriptions[:top_n]
        ],
    )
