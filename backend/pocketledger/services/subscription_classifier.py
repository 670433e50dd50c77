"""
Subscription classification for recurring merchant groups.

A recurring group is any merchant paid on a cadence. A subscription is a
recurring group that additionally looks like a billed service.
"""

from typing import Optional

from pocketledger.models.recurring import Frequency
from pocketledger.services.detection_config import DetectionConfig, resolve_config


def is_transit_subscription(
    merchant_name: str,
    category: str,
    config: Optional[DetectionConfig] = None,
) -> bool:
    """Transit passes filed under Transport escape the category exclusion."""
    config = resolve_config(config)
    name = merchant_name.lower()
    return category == config.transit_category and any(
        sub in name for sub in config.transit_subscriptions
    )


def is_excluded_category(
    merchant_name: str,
    category: str,
    config: Optional[DetectionConfig] = None,
) -> bool:
    config = resolve_config(config)
    return category in config.excluded_categories and not is_transit_subscription(
        merchant_name, category, config
    )


def is_likely_subscription(
    merchant_name: str,
    category: str,
    config: Optional[DetectionConfig] = None,
) -> bool:
    """Detect if a merchant is likely a subscription service."""
    config = resolve_config(config)
    name = merchant_name.lower()

    if is_excluded_category(name, category, config):
        return False

    if any(keyword in name for keyword in config.non_subscription_keywords):
        return False

    return any(sub in name for sub in config.known_subscriptions)


def is_direct_debit(description: str, config: Optional[DetectionConfig] = None) -> bool:
    """Direct debits are usually bills or subscriptions."""
    config = resolve_config(config)
    return config.direct_debit_marker in (description or "").lower()


def classify_subscription(
    merchant_name: str,
    category: str,
    has_direct_debit: bool,
    variance: float,
    frequency: Frequency,
    config: Optional[DetectionConfig] = None,
) -> bool:
    """
    Decide whether a recurring group is a subscription.

    Any one of these is enough:
    1. the merchant is a known subscription service
    2. at least one payment was a direct debit
    3. the amount barely varies and the cadence is monthly or yearly
    """
    config = resolve_config(config)

    if is_likely_subscription(merchant_name, category, config):
        return True

    if has_direct_debit:
        return True

    return variance < config.subscription_variance_threshold and frequency in (
        Frequency.monthly,
        Frequency.yearly,
    )
