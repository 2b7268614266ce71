"""
Pattern recognition over life events.

Looks for recurring themes, emotional cycles, cross-area correlations and
per-area trends in a window of events. Events are plain dicts with `id`,
`title`, `description`, `tags`, `life_area_id`, `emotional_charge` and a
datetime `occurred_at`.
"""

import re
import uuid
from collections import Counter
from datetime import datetime, timedelta
from statistics import mean
from typing import Any, Dict, List, Optional

from wisdom_insights.config import settings
from wisdom_insights.core.schemas import AnalysisWindow, InsightGenerationResult, PatternResult
from wisdom_insights.data_access.dal import DataAccessLayer
from wisdom_insights.infra import log_utils

MIN_EVENTS = 3
MIN_OCCURRENCES = 3
CHARGE_THRESHOLD = 2
CORRELATION_WINDOW = timedelta(days=7)

STOP_WORDS = {
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "up", "about", "into", "through", "during",
    "is", "was", "are", "were", "been", "be", "have", "has", "had", "do",
    "does", "did", "will", "would", "could", "should", "may", "might",
    "i", "me", "my", "we", "our", "you", "your", "it", "its", "this", "that",
}
WORD_RE = re.compile(r"\b[a-z]{4,}\b")

CATEGORIES = {
    "RECURRING_THEME": "BEHAVIORAL",
    "EMOTIONAL_CYCLE": "EMOTIONAL",
    "CORRELATION": "RELATIONAL",
    "TREND": "SYSTEMIC",
}


def _unique(values: List[Any]) -> List[Any]:
    return list(dict.fromkeys(values))


def _sorted_by_time(events: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(events, key=lambda e: e["occurred_at"])


def extract_keywords(events: List[Dict[str, Any]], limit: int = 10) -> List[str]:
    """Most frequent non-stop-words of four letters or more, seen at least 3 times."""
    counts: Counter = Counter()
    for event in events:
        text = f"{event.get('title', '')} {event.get('description', '')}".lower()
        counts.update(w for w in WORD_RE.findall(text) if w not in STOP_WORDS)

    frequent = [(word, n) for word, n in counts.items() if n >= MIN_OCCURRENCES]
    frequent.sort(key=lambda item: item[1], reverse=True)
    return [word for word, _ in frequent[:limit]]


def detect_recurring_themes(events: List[Dict[str, Any]]) -> List[PatternResult]:
    patterns: List[PatternResult] = []

    tag_groups: Dict[str, List[Dict[str, Any]]] = {}
    for event in events:
        for tag in event.get("tags") or []:
            tag_groups.setdefault(tag, []).append(event)

    for tag, tagged in tag_groups.items():
        if len(tagged) < MIN_OCCURRENCES:
            continue
        areas = _unique([e["life_area_id"] for e in tagged])
        patterns.append(
            PatternResult(
                type="RECURRING_THEME",
                confidence=min(1.0, len(tagged) / 10),
                title=f'Recurring pattern: "{tag}"',
                description=(
                    f"This theme appeared {len(tagged)} times across {len(areas)} "
                    f"life area(s) in the analysis window."
                ),
                affected_areas=areas,
                evidence_event_ids=[e["id"] for e in tagged],
                metadata={
                    "tag": tag,
                    "frequency": len(tagged),
                    "firstOccurrence": tagged[0]["occurred_at"].isoformat(),
                    "lastOccurrence": tagged[-1]["occurred_at"].isoformat(),
                },
            )
        )

    for keyword in extract_keywords(events):
        matching = [
            e for e in events
            if keyword in (e.get("description") or "").lower() or keyword in (e.get("title") or "").lower()
        ]
        if len(matching) < MIN_OCCURRENCES:
            continue
        patterns.append(
            PatternResult(
                type="RECURRING_THEME",
                confidence=min(1.0, len(matching) / 8),
                title=f'Recurring topic: "{keyword}"',
                description=f'Events related to "{keyword}" occurred {len(matching)} times.',
                affected_areas=_unique([e["life_area_id"] for e in matching]),
                evidence_event_ids=[e["id"] for e in matching],
                metadata={"keyword": keyword, "frequency": len(matching)},
            )
        )

    return patterns


def detect_emotional_cycles(events: List[Dict[str, Any]]) -> List[PatternResult]:
    """Mood swings between strongly positive and strongly negative events."""
    patterns: List[PatternResult] = []
    if len(events) < 5:
        return patterns

    ordered = _sorted_by_time(events)
    swings = 0
    previous = ordered[0]["emotional_charge"]
    for event in ordered[1:]:
        current = event["emotional_charge"]
        if (previous > CHARGE_THRESHOLD and current < -CHARGE_THRESHOLD) or (
            previous < -CHARGE_THRESHOLD and current > CHARGE_THRESHOLD
        ):
            swings += 1
        previous = current

    if swings >= 3:
        patterns.append(
            PatternResult(
                type="EMOTIONAL_CYCLE",
                confidence=min(1.0, swings / 5),
                title="Emotional fluctuation detected",
                description=(
                    f"You experienced {swings} significant mood swings in the analysis window. "
                    "Consider exploring what triggers these emotional shifts."
                ),
                affected_areas=_unique([e["life_area_id"] for e in ordered]),
                evidence_event_ids=[e["id"] for e in ordered],
                metadata={
                    "swingCount": swings,
                    "averageCharge": mean(e["emotional_charge"] for e in ordered),
                },
            )
        )

    negative = [e for e in events if e["emotional_charge"] < -CHARGE_THRESHOLD]
    positive = [e for e in events if e["emotional_charge"] > CHARGE_THRESHOLD]

    if len(negative) >= 5:
        patterns.append(
            PatternResult(
                type="EMOTIONAL_CYCLE",
                confidence=0.8,
                title="Prolonged challenging period",
                description=(
                    f"{len(negative)} challenging events recorded. This may indicate areas "
                    "needing support or boundaries that need reinforcement."
                ),
                affected_areas=_unique([e["life_area_id"] for e in negative]),
                evidence_event_ids=[e["id"] for e in negative],
                metadata={"negativeEventCount": len(negative), "tone": "NEGATIVE"},
            )
        )

    if len(positive) >= 5:
        patterns.append(
            PatternResult(
                type="EMOTIONAL_CYCLE",
                confidence=0.8,
                title="Period of growth and breakthrough",
                description=(
                    f"{len(positive)} positive events recorded. You're experiencing momentum - "
                    "consider what's working and how to sustain it."
                ),
                affected_areas=_unique([e["life_area_id"] for e in positive]),
                evidence_event_ids=[e["id"] for e in positive],
                metadata={"positiveEventCount": len(positive), "tone": "POSITIVE"},
            )
        )

    return patterns


def detect_cross_area_correlations(events: List[Dict[str, Any]]) -> List[PatternResult]:
    """Events in one area repeatedly followed by events in another within a week."""
    patterns: List[PatternResult] = []
    if len(events) < 6:
        return patterns

    ordered = _sorted_by_time(events)
    pairs: Dict[tuple, Dict[str, Any]] = {}
    for first, second in zip(ordered, ordered[1:]):
        if second["occurred_at"] - first["occurred_at"] > CORRELATION_WINDOW:
            continue
        if first["life_area_id"] == second["life_area_id"]:
            continue
        key = (first["life_area_id"], second["life_area_id"])
        entry = pairs.setdefault(key, {"count": 0, "events": []})
        entry["count"] += 1
        entry["events"].extend([first, second])

    for (area_a, area_b), data in pairs.items():
        if data["count"] < MIN_OCCURRENCES:
            continue
        patterns.append(
            PatternResult(
                type="CORRELATION",
                confidence=min(1.0, data["count"] / 5),
                title="Cross-area connection detected",
                description=(
                    f"Events in one life area often precede events in another "
                    f"({data['count']} instances). These areas may be interconnected."
                ),
                affected_areas=[area_a, area_b],
                evidence_event_ids=_unique([e["id"] for e in data["events"]]),
                metadata={"correlation": f"{area_a}->{area_b}", "frequency": data["count"]},
            )
        )

    return patterns


def detect_area_trends(events: List[Dict[str, Any]]) -> List[PatternResult]:
    """Compare mean emotional charge of the first and second half of each area's events."""
    patterns: List[PatternResult] = []

    by_area: Dict[str, List[Dict[str, Any]]] = {}
    for event in events:
        by_area.setdefault(event["life_area_id"], []).append(event)

    for area, area_events in by_area.items():
        if len(area_events) < 4:
            continue
        ordered = _sorted_by_time(area_events)
        midpoint = len(ordered) // 2
        first = mean(e["emotional_charge"] for e in ordered[:midpoint])
        second = mean(e["emotional_charge"] for e in ordered[midpoint:])
        difference = second - first

        if abs(difference) <= CHARGE_THRESHOLD:
            continue
        improving = difference > 0
        patterns.append(
            PatternResult(
                type="TREND",
                confidence=min(1.0, abs(difference) / 5),
                title="Upward trend detected" if improving else "Downward trend detected",
                description=(
                    "This life area shows improvement over time. Recent events are more positive than earlier ones."
                    if improving
                    else "This life area shows decline over time. Recent events are more challenging than "
                    "earlier ones. Consider reviewing boundaries and commitments."
                ),
                affected_areas=[area],
                evidence_event_ids=[e["id"] for e in ordered],
                metadata={
                    "trendDirection": "IMPROVING" if improving else "DECLINING",
                    "avgChargeFirst": first,
                    "avgChargeSecond": second,
                    "difference": difference,
                },
            )
        )

    return patterns


def detect_patterns(
    events: List[Dict[str, Any]],
    window_days: Optional[int] = None,
    now: Optional[datetime] = None,
) -> InsightGenerationResult:
    """
    Run every detector over a window of events.

    Args:
        events: Events already limited to the window, oldest first.
        window_days: Window length, only used to report the window bounds.
        now: End of the window (default: now).
    """
    window_days = window_days or settings.RECOGNITION_WINDOW_DAYS
    end = now or datetime.now()
    window = AnalysisWindow(start_date=end - timedelta(days=window_days), end_date=end, total_events=len(events))

    if len(events) < MIN_EVENTS:
        return InsightGenerationResult(insights=[], total_patterns_detected=0, analysis_window=window)

    patterns: List[PatternResult] = []
    patterns.extend(detect_recurring_themes(events))
    patterns.extend(detect_emotional_cycles(events))
    patterns.extend(detect_cross_area_correlations(events))
    patterns.extend(detect_area_trends(events))

    return InsightGenerationResult(
        insights=patterns, total_patterns_detected=len(patterns), analysis_window=window
    )


def to_insight_record(pattern: PatternResult) -> Dict[str, Any]:
    """Shape a recognised pattern as a storable insight record."""
    return {
        "id": uuid.uuid4().hex,
        "type": "PATTERN_RECOGNIZED",
        "category": CATEGORIES.get(pattern.type, "OTHER"),
        "title": pattern.title,
        "description": pattern.description,
        "confidence": pattern.confidence,
        "metadata": pattern.metadata,
        "source_event_ids": pattern.evidence_event_ids,
        "status": "ACTIVE",
    }


def recognize_patterns(
    dal: DataAccessLayer,
    user_id: str,
    window_days: Optional[int] = None,
    now: Optional[datetime] = None,
    save: bool = False,
) -> InsightGenerationResult:
    """Load a user's events through the DAL, detect patterns and optionally store them."""
    window_days = window_days or settings.RECOGNITION_WINDOW_DAYS
    end = now or datetime.now()
    events = dal.get_events(user_id, end - timedelta(days=window_days), end)

    result = detect_patterns(events, window_days, end)
    log_utils.log_message(
        f"[recognizer] {result.total_patterns_detected} pattern(s) from {len(events)} events for {user_id}"
    )

    if save and result.insights:
        dal.save_insights(user_id, [to_insight_record(p) for p in result.insights])
    return result
