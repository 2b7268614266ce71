"""Streak-based trend detection over a daily metric series."""

from typing import Sequence

from wisdom_insights.core.schemas import Direction, Strength, TrendAnalysis

# Day-over-day moves smaller than this are treated as noise.
NOISE_THRESHOLD = 0.5
SIGNIFICANT_DAYS = 3


def classify_step(diff: float) -> Direction:
    """Classify a single day-over-day change."""
    if abs(diff) < NOISE_THRESHOLD:
        return "flat"
    if diff > 0:
        return "rising"
    return "falling"


def trend_strength(consecutive_days: int) -> Strength:
    """Map a run length onto weak / moderate / strong."""
    if consecutive_days <= 2:
        return "weak"
    if consecutive_days <= 4:
        return "moderate"
    return "strong"


def analyze_trend(values: Sequence[float]) -> TrendAnalysis:
    """
    Find the unbroken run of same-direction steps ending at the last value.

    The direction is pinned by the most recent step. A flat most recent step
    yields a flat result even when an earlier run exists.

    Args:
        values: Daily samples, oldest first.

    Returns:
        A TrendAnalysis describing only the run that ends at values[-1].
    """
    if len(values) < 2:
        return TrendAnalysis(direction="flat", consecutive_days=0, strength="weak", is_significant=False)

    direction = classify_step(values[-1] - values[-2])
    consecutive = 0
    if direction != "flat":
        for i in range(len(values) - 1, 0, -1):
            if classify_step(values[i] - values[i - 1]) != direction:
                break
            consecutive += 1

    return TrendAnalysis(
        direction=direction,
        consecutive_days=consecutive,
        strength=trend_strength(consecutive),
        is_significant=consecutive >= SIGNIFICANT_DAYS,
    )
