"""
Transaction categorization.

Categories come from the AI categorizer when it is enabled, otherwise (or
when it fails) from the local keyword rules, and finally the default
category. Detection only ever sees the resulting category string.
"""

import asyncio
import logging
import re
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from pocketledger.ai.client import get_ai_client
from pocketledger.ai.prompts import CATEGORIZATION_SYSTEM, CATEGORIZATION_USER
from pocketledger.config import settings
from pocketledger.models.category_rule import CategoryRule
from pocketledger.models.transaction import Transaction
from pocketledger.services.detection_config import DetectionConfig, resolve_config

logger = logging.getLogger(__name__)


def match_category_rules(description: str, rules: Sequence[CategoryRule]) -> Optional[str]:
    """Return the category of the first rule matching the description."""
    text = (description or "").lower()
    for rule in rules:
        if rule.is_regex:
            try:
                if re.search(rule.pattern, description or "", re.IGNORECASE):
                    return rule.category
            except re.error as e:
                logger.warning(f"Skipping invalid category rule {rule.id}: {e}")
        elif rule.pattern.lower() in text:
            return rule.category
    return None


def categorize_locally(
    description: str,
    rules: Sequence[CategoryRule],
    config: Optional[DetectionConfig] = None,
) -> str:
    config = resolve_config(config)
    return match_category_rules(description, rules) or config.default_category


async def categorize_with_ai(
    descriptions: Sequence[str],
    config: Optional[DetectionConfig] = None,
) -> List[Optional[str]]:
    """
    Ask the AI categorizer for one label per description.

    Labels outside the category vocabulary come back as None. Errors from
    the AI call propagate to the caller.
    """
    config = resolve_config(config)
    client = get_ai_client()

    user_prompt = CATEGORIZATION_USER.format(
        transactions="\n".join(f"{i + 1}. {d}" for i, d in enumerate(descriptions))
    )

    parsed = await asyncio.wait_for(
        client.complete_json(
            system_prompt=CATEGORIZATION_SYSTEM.format(categories=", ".join(config.categories)),
            user_prompt=user_prompt,
            temperature=0.3,
            max_tokens=4000,
        ),
        timeout=settings.ai_timeout_seconds,
    )

    if isinstance(parsed, dict):
        items = parsed.get("results") or parsed.get("transactions") or parsed.get("categorizedTransactions")
    else:
        items = parsed
    if not isinstance(items, list):
        raise ValueError("AI categorization response is not a list")

    labels: List[Optional[str]] = []
    for i in range(len(descriptions)):
        category = items[i].get("category") if i < len(items) and isinstance(items[i], dict) else None
        if category not in config.categories:
            if category is not None:
                logger.warning(f"Invalid category {category!r} for {descriptions[i]!r}")
            category = None
        labels.append(category)
    return labels


async def categorize_transactions(
    db: Session,
    transactions: Sequence[Transaction],
    use_ai: Optional[bool] = None,
    config: Optional[DetectionConfig] = None,
) -> int:
    """
    Assign categories to transactions that have none from the vocabulary.

    Returns the number of transactions that were categorized.
    """
    config = resolve_config(config)
    if use_ai is None:
        use_ai = settings.ai_auto_categorize

    pending = [t for t in transactions if t.category not in config.categories]
    if not pending:
        return 0

    ai_labels: List[Optional[str]] = [None] * len(pending)
    if use_ai:
        try:
            ai_labels = await categorize_with_ai([t.description for t in pending], config)
        except Exception as e:
            logger.warning(f"AI categorization failed, using local rules: {e}")

    rules = db.query(CategoryRule).order_by(CategoryRule.created_at).all()
    for txn, label in zip(pending, ai_labels):
        if label:
            txn.category = label
            txn.ai_categorized = True
        else:
            txn.category = categorize_locally(txn.description, rules, config)
            txn.ai_categorized = False

    return len(pending)
