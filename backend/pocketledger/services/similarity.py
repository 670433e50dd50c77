"""Pairwise merchant-name and amount comparison."""

from typing import Optional

from pocketledger.services.detection_config import DetectionConfig, resolve_config


def calculate_similarity(name1: str, name2: str) -> float:
    """
    Similarity between two merchant keys in [0, 1].

    Equal keys score 1.0, containment scores 0.8, otherwise the share of
    common words longer than two characters is mapped onto [0.5, 1.0].
    """
    s1 = name1.lower()
    s2 = name2.lower()

    if s1 == s2:
        return 1.0

    if s1 in s2 or s2 in s1:
        return 0.8

    words1 = s1.split(" ")
    words2 = s2.split(" ")
    common_words = [w for w in words1 if w in words2 and len(w) > 2]

    if common_words:
        return 0.5 + (len(common_words) / max(len(words1), len(words2))) * 0.5

    return 0.0


def amounts_similar(
    amount1: float,
    amount2: float,
    is_subscription: bool,
    config: Optional[DetectionConfig] = None,
) -> bool:
    """Whether two amounts are within the relative tolerance for their kind."""
    config = resolve_config(config)
    threshold = config.subscription_amount_tolerance if is_subscription else config.default_amount_tolerance

    a1 = abs(float(amount1))
    a2 = abs(float(amount2))
    avg = (a1 + a2) / 2
    if avg == 0:
        return a1 == a2
    return abs(a1 - a2) / avg <= threshold
