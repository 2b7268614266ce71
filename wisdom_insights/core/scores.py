"""
Daily metric scoring.

Turns the raw records of a single day into 0-100 energy, focus and
fulfillment scores. Every scorer falls back to the neutral score when the
day has no data.
"""

import math
from statistics import mean
from typing import Any, Dict, List

from wisdom_insights.config import settings


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def _mood_energy(mood: Any) -> int:
    if mood == "positive":
        return settings.POSITIVE_MOOD_SCORE
    if mood == "negative":
        return settings.NEGATIVE_MOOD_SCORE
    return settings.NEUTRAL_SCORE


def energy_score(journals: List[Dict[str, Any]]) -> int:
    """Average journal energy; entries without an energy level use their mood."""
    if not journals:
        return settings.NEUTRAL_SCORE

    values = [j.get("energy_level") or _mood_energy(j.get("mood")) for j in journals]
    return round_half_up(mean(values))


def focus_score(checkins: List[Dict[str, Any]], commitments: List[Dict[str, Any]]) -> int:
    """
    Average check-in focus, boosted by the share of commitments completed.

    Args:
        checkins: Check-ins recorded on the day.
        commitments: Commitments updated on the day.
    """
    score: float = settings.NEUTRAL_SCORE

    if checkins:
        score = mean(
            c.get("focus_level") or c.get("productivity_score") or settings.NEUTRAL_SCORE
            for c in checkins
        )

    if commitments:
        completed = len([c for c in commitments if c.get("status") == "completed"])
        boost = completed / len(commitments) * settings.COMMITMENT_BOOST
        score = min(100, score + boost)

    return round_half_up(score)


def fulfillment_score(life_area_scores: List[Dict[str, Any]]) -> int:
    """Average of the latest life-area scores."""
    if not life_area_scores:
        return settings.NEUTRAL_SCORE
    return round_half_up(mean(s["score"] for s in life_area_scores))


def commitment_progress(commitments: List[Dict[str, Any]]) -> int:
    """Mean progress of the active commitments, 0 when there are none."""
    if not commitments:
        return 0
    return round_half_up(mean(c.get("progress") or 0 for c in commitments))
