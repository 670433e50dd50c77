"""
Thresholds and keyword lists used by recurring detection.

Everything the detector needs lives in one immutable DetectionConfig so
tests and deployments can swap lists without touching the algorithm.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

from pocketledger.config import settings

logger = logging.getLogger(__name__)


DEFAULT_CATEGORIES: Tuple[str, ...] = (
    "Groceries",
    "Shopping",
    "Bars & Restaurants",
    "Transport",
    "Media & Telecom",
    "Entertainment",
    "Health & Fitness",
    "Health & Insurance",
    "Insurance",
    "Rent",
    "Utilities",
    "Subscriptions",
    "Salary",
    "Transfers",
    "Education",
    "Travel",
    "Other",
)


class FrequencyBand(BaseModel):
    """Accepted mean interval range and maximum deviation, in days."""

    model_config = ConfigDict(frozen=True)

    min_days: float
    max_days: float
    max_deviation: float = 0.0

    def contains(self, days: float) -> bool:
        return self.min_days <= days <= self.max_days


class DetectionConfig(BaseModel):
    """Immutable detection policy."""

    model_config = ConfigDict(frozen=True)

    # Grouping
    similarity_threshold: float = 0.7
    subscription_amount_tolerance: float = 0.10
    default_amount_tolerance: float = 0.20
    min_merchant_key_length: int = 3
    min_group_size: int = 2
    max_merchant_tokens: int = 3

    # Classification
    subscription_variance_threshold: float = 10.0
    direct_debit_marker: str = "lastschrift"

    # Frequency bands (mean interval, max deviation)
    weekly_band: FrequencyBand = FrequencyBand(min_days=3, max_days=14, max_deviation=10)
    monthly_band: FrequencyBand = FrequencyBand(min_days=23, max_days=38, max_deviation=12)
    yearly_band: FrequencyBand = FrequencyBand(min_days=340, max_days=390, max_deviation=30)

    # Two-transaction fallback bands (single interval)
    fallback_monthly_band: FrequencyBand = FrequencyBand(min_days=20, max_days=40)
    fallback_yearly_band: FrequencyBand = FrequencyBand(min_days=340, max_days=400)
    fallback_weekly_band: FrequencyBand = FrequencyBand(min_days=3, max_days=15)

    # Cost projection
    weeks_per_month: float = 4.33

    known_subscriptions: Tuple[str, ...] = (
        "spotify", "netflix", "amazon prime", "amazon", "prime video", "disney", "hbo", "apple",
        "youtube", "google", "microsoft", "adobe", "dropbox", "icloud",
        "gym", "fitness", "mcfit", "fitnessstudio",
        "insurance", "versicherung", "barmer", "tk", "aok", "allianz", "mcv",
        "internet", "telekom", "vodafone", "o2", "1&1", "unitymedia", "telefonica",
        "miete", "rent", "vermietung", "landlord",
        "navigo", "bvg", "deutschlandticket",
        "n26 ratenzahlung", "ratenzahlung", "installment",
    )
    non_subscription_keywords: Tuple[str, ...] = (
        "rewe", "edeka", "aldi", "lidl", "penny", "netto", "kaufland",
        "restaurant", "cafe", "bar", "burger", "pizza", "mcdonald",
        "uber", "taxi", "bvg", "transport", "tankstelle", "shell", "aral",
    )
    excluded_categories: Tuple[str, ...] = (
        "Groceries",
        "Shopping",
        "Bars & Restaurants",
        "Other",
    )
    transit_category: str = "Transport"
    transit_subscriptions: Tuple[str, ...] = (
        "navigo", "bvg", "deutschlandticket", "klimaticket", "mvg", "hvv",
    )

    categories: Tuple[str, ...] = DEFAULT_CATEGORIES
    default_category: str = "Other"


DEFAULT_DETECTION_CONFIG = DetectionConfig()


def load_detection_config(path: str) -> DetectionConfig:
    """Load a config from a JSON file. Missing keys keep their defaults."""
    raw = Path(path).read_text(encoding="utf-8")
    return DetectionConfig.model_validate_json(raw)


@lru_cache(maxsize=1)
def get_detection_config() -> DetectionConfig:
    """Return the process-wide detection config."""
    if settings.detection_config_path:
        logger.info("Loading detection config from %s", settings.detection_config_path)
        return load_detection_config(settings.detection_config_path)
    return DEFAULT_DETECTION_CONFIG


def resolve_config(config: Optional[DetectionConfig]) -> DetectionConfig:
    return config if config is not None else get_detection_config()
