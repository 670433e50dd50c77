"""Payment cadence inference and date projection."""

from datetime import date, timedelta
from typing import List, Optional, Sequence

from dateutil.relativedelta import relativedelta

from pocketledger.models.recurring import Frequency
from pocketledger.services.detection_config import DetectionConfig, resolve_config


def intervals_in_days(dates: Sequence[date]) -> List[int]:
    """Day gaps between consecutive dates of an ascending sequence."""
    return [abs((dates[i] - dates[i - 1]).days) for i in range(1, len(dates))]


def detect_frequency(
    intervals: Sequence[float],
    config: Optional[DetectionConfig] = None,
) -> Optional[Frequency]:
    """
    Infer weekly, monthly or yearly cadence from day gaps.

    Uses the mean gap and the largest absolute deviation from it. Bands
    are checked weekly, then monthly, then yearly. Returns None when no
    band matches or there are no gaps.
    """
    if not intervals:
        return None
    config = resolve_config(config)

    avg_interval = sum(intervals) / len(intervals)
    max_deviation = max(abs(i - avg_interval) for i in intervals)

    for frequency, band in (
        (Frequency.weekly, config.weekly_band),
        (Frequency.monthly, config.monthly_band),
        (Frequency.yearly, config.yearly_band),
    ):
        if band.contains(avg_interval) and max_deviation <= band.max_deviation:
            return frequency

    return None


def infer_single_interval_frequency(
    interval: float,
    config: Optional[DetectionConfig] = None,
) -> Optional[Frequency]:
    """Relaxed inference for a pair of transactions (one gap)."""
    config = resolve_config(config)

    # Monthly is checked before yearly before weekly
    for frequency, band in (
        (Frequency.monthly, config.fallback_monthly_band),
        (Frequency.yearly, config.fallback_yearly_band),
        (Frequency.weekly, config.fallback_weekly_band),
    ):
        if band.contains(interval):
            return frequency

    return None


def calculate_next_expected(last_date: date, frequency: Frequency) -> date:
    """Calculate the next expected date based on frequency."""
    if frequency == Frequency.weekly:
        return last_date + timedelta(days=7)
    elif frequency == Frequency.monthly:
        # relativedelta clamps to the last day of shorter months
        return last_date + relativedelta(months=1)
    elif frequency == Frequency.yearly:
        return last_date + relativedelta(years=1)
    raise ValueError(f"Unsupported frequency: {frequency}")


def monthly_equivalent(
    amount: float,
    frequency: Frequency,
    config: Optional[DetectionConfig] = None,
) -> float:
    """Project an amount paid at the given cadence onto one month."""
    if frequency == Frequency.monthly:
        return amount
    if frequency == Frequency.weekly:
        return amount * resolve_config(config).weeks_per_month
    return amount / 12
