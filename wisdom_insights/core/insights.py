"""
Deterministic insight text for pattern reports.

Everything here is templated from threshold rules; the same inputs always
produce the same sentences.
"""

from typing import Dict, List

from wisdom_insights.config import settings
from wisdom_insights.core.schemas import (
    DayPattern,
    MetricAverages,
    MetricTrend,
    PatternReport,
    SignificantTrend,
)

# Used verbatim whenever the report is built from the fallback dataset.
FALLBACK_NARRATIVE = (
    "Your patterns indicate stronger alignment when structured routines precede creative work. "
    "Try scheduling your highest-impact activities between 9-11am on high-energy days (Thu-Sat)."
)


def _label(day: DayPattern) -> str:
    return day.day_of_week or day.date


def fulfillment_insight(avg_fulfillment: int) -> str:
    if avg_fulfillment >= settings.HIGH_FULFILLMENT:
        return f"Fulfillment is running high (avg {avg_fulfillment}). Keep protecting what is working."
    if avg_fulfillment >= settings.LOW_FULFILLMENT:
        return f"Fulfillment is steady (avg {avg_fulfillment}). Small wins in neglected areas could lift it further."
    return f"Fulfillment is low (avg {avg_fulfillment}). Revisit the life areas that feel most neglected."


def build_insights(
    patterns: List[DayPattern],
    averages: MetricAverages,
    significant: List[SignificantTrend],
) -> List[str]:
    """Peak/low day, fulfillment level and streak insights, in that order."""
    if not patterns:
        return []

    insights: List[str] = []

    peak_energy = max(patterns, key=lambda p: p.energy)
    low_energy = min(patterns, key=lambda p: p.energy)
    peak_focus = max(patterns, key=lambda p: p.focus)

    insights.append(
        f"Your energy peaks on {_label(peak_energy)} ({peak_energy.energy}). "
        "Schedule high-impact work around it."
    )
    if low_energy.energy < peak_energy.energy:
        insights.append(
            f"Energy dips on {_label(low_energy)} ({low_energy.energy}). "
            "Consider lighter tasks or self-care activities."
        )
    insights.append(f"Your focus peaks on {_label(peak_focus)} ({peak_focus.focus}).")
    insights.append(fulfillment_insight(averages.fulfillment))

    for trend in significant:
        insights.append(
            f"{trend.metric.capitalize()} has been {trend.direction} for "
            f"{trend.consecutive_days} consecutive days ({trend.strength} trend)."
        )

    return insights


def build_narrative(patterns: List[DayPattern], trends: Dict[str, MetricTrend]) -> str:
    """Templated one-paragraph summary for live reports."""
    if not patterns:
        return ""

    peak_energy = max(patterns, key=lambda p: p.energy)
    peak_focus = max(patterns, key=lambda p: p.focus)
    parts = [f"Energy peaked on {_label(peak_energy)} and focus peaked on {_label(peak_focus)}."]

    moving = [
        f"{metric} is {trend.direction} ({trend.consecutive_days} day{'s' if trend.consecutive_days != 1 else ''})"
        for metric, trend in trends.items()
        if trend.direction != "flat"
    ]
    if moving:
        parts.append("Right now " + ", ".join(moving) + ".")
    else:
        parts.append("All three metrics held steady over the last day.")
    return " ".join(parts)


def render_report_message(report: PatternReport) -> str:
    """Plain-text rendering of a pattern report for chat delivery."""
    avg = report.averages
    lines = [
        "Weekly patterns",
        f"Energy {avg.energy} | Focus {avg.focus} | Fulfillment {avg.fulfillment}",
        "",
    ]
    lines.extend(f"- {insight}" for insight in report.insights)
    if report.ai_insight:
        lines.extend(["", report.ai_insight])
    if report.source == "fallback":
        lines.extend(["", "(example data)"])
    return "\n".join(lines)
