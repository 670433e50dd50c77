"""
Merchant name normalization for recurring detection.
"""

import re
from typing import Optional

from pocketledger.services.detection_config import resolve_config

# Bank-statement payment method labels
_PREFIX_RE = re.compile(r"^(?:(?:mastercard|lastschriften|gutschriften|belastungen)\s*)+", re.IGNORECASE)
_IBAN_BIC_RE = re.compile(r"\b(?:iban|bic):\s*[a-z0-9]+", re.IGNORECASE)
_DATE_RE = re.compile(r"\b\d{2}[./]\d{2}[./]\d{4}\b")
_REFERENCE_RE = re.compile(r"\b(?:ref|reference|order|transaction)[:.\s]*[a-z0-9-]+", re.IGNORECASE)
_AMOUNT_RE = re.compile(r"[+-]?\d+[.,]\d{2}\s*€?")
_WHITESPACE_RE = re.compile(r"\s+")


def _normalize_once(text: str, max_tokens: int) -> str:
    normalized = text.lower().strip()
    normalized = _PREFIX_RE.sub("", normalized)
    normalized = _IBAN_BIC_RE.sub("", normalized)
    normalized = _DATE_RE.sub("", normalized)
    normalized = _REFERENCE_RE.sub("", normalized)
    normalized = _AMOUNT_RE.sub("", normalized)
    normalized = _WHITESPACE_RE.sub(" ", normalized).strip()

    words = normalized.split(" ")
    if len(words) > max_tokens:
        normalized = " ".join(words[:max_tokens])

    return normalized


def normalize_merchant_name(description: str, max_tokens: Optional[int] = None) -> str:
    """
    Reduce a raw transaction description to a merchant key.

    Strips payment method prefixes, IBAN/BIC fragments, dates, reference
    numbers and amounts, then keeps the first few words (the detection
    config's max_merchant_tokens unless given). The result is a
    fixed point: normalizing it again returns the same string.
    """
    if not description:
        return ""
    if max_tokens is None:
        max_tokens = resolve_config(None).max_merchant_tokens

    current = description
    while True:
        normalized = _normalize_once(current, max_tokens)
        # Every pass only removes characters, so this terminates
        if normalized == current:
            return normalized
        current = normalized
