"""
Pattern report aggregation.

Builds the per-day energy/focus/fulfillment series for a user, runs the trend
analyzer over each metric and assembles the report payload. Any failure while
reading or aggregating degrades to a fixed example week so callers always get
a complete report; such reports are marked with `source="fallback"`.
"""

from datetime import date, datetime, time, timedelta
from statistics import mean
from typing import Dict, List, Optional, Tuple

from wisdom_insights.config import settings
from wisdom_insights.core import insights, scores
from wisdom_insights.core.schemas import (
    DayPattern,
    MetricAverages,
    MetricTrend,
    PatternReport,
    PatternSummary,
    SignificantTrend,
)
from wisdom_insights.core.trend import analyze_trend
from wisdom_insights.data_access.dal import DataAccessLayer
from wisdom_insights.infra import log_utils

METRICS = ("energy", "focus", "fulfillment")

FALLBACK_PATTERNS = [
    {"date": "Mon", "energy": 72, "focus": 68, "fulfillment": 75, "journal_count": 2, "commitment_progress": 60, "day_of_week": "Mon"},
    {"date": "Tue", "energy": 78, "focus": 70, "fulfillment": 80, "journal_count": 3, "commitment_progress": 65, "day_of_week": "Tue"},
    {"date": "Wed", "energy": 65, "focus": 63, "fulfillment": 70, "journal_count": 1, "commitment_progress": 62, "day_of_week": "Wed"},
    {"date": "Thu", "energy": 80, "focus": 75, "fulfillment": 82, "journal_count": 2, "commitment_progress": 70, "day_of_week": "Thu"},
    {"date": "Fri", "energy": 85, "focus": 81, "fulfillment": 88, "journal_count": 3, "commitment_progress": 75, "day_of_week": "Fri"},
    {"date": "Sat", "energy": 90, "focus": 88, "fulfillment": 92, "journal_count": 4, "commitment_progress": 80, "day_of_week": "Sat"},
    {"date": "Sun", "energy": 76, "focus": 70, "fulfillment": 78, "journal_count": 2, "commitment_progress": 72, "day_of_week": "Sun"},
]

NO_ACTIVITY_NOTE = "Using example data - no activity recorded in this window"
DATA_ERROR_NOTE = "Using example data - data source unavailable"


def _collect_day(
    dal: DataAccessLayer, user_id: str, day: date, progress: int
) -> Tuple[DayPattern, int]:
    """Score a single day. Also returns how many source records were seen."""
    journals = dal.get_journal_entries(user_id, day)
    checkins = dal.get_checkins(user_id, day)
    commitments = dal.get_commitments_updated(user_id, day)
    area_scores = dal.get_life_area_scores(
        user_id, datetime.combine(day, time.min), settings.LIFE_AREA_COUNT
    )

    pattern = DayPattern(
        date=day.isoformat(),
        energy=scores.energy_score(journals),
        focus=scores.focus_score(checkins, commitments),
        fulfillment=scores.fulfillment_score(area_scores),
        journal_count=len(journals),
        commitment_progress=progress,
        day_of_week=day.strftime("%a"),
    )
    return pattern, len(journals) + len(checkins) + len(commitments) + len(area_scores)


def load_patterns(
    dal: DataAccessLayer, user_id: str, days: int, today: date
) -> Tuple[List[DayPattern], int]:
    """Score the last `days` days ending today, oldest first."""
    active = dal.get_active_commitments(user_id)
    progress = scores.commitment_progress(active)

    patterns: List[DayPattern] = []
    records = len(active)
    for offset in range(days - 1, -1, -1):
        pattern, seen = _collect_day(dal, user_id, today - timedelta(days=offset), progress)
        patterns.append(pattern)
        records += seen
    return patterns, records


def assemble_report(
    patterns: List[DayPattern],
    source: str = "live",
    ai_insight: Optional[str] = None,
    note: Optional[str] = None,
) -> PatternReport:
    """Compute averages, trends and insight text over a non-empty pattern list."""
    averages = MetricAverages(
        **{m: scores.round_half_up(mean(getattr(p, m) for p in patterns)) for m in METRICS}
    )

    trends: Dict[str, MetricTrend] = {}
    significant: List[SignificantTrend] = []
    for metric in METRICS:
        series = [getattr(p, metric) for p in patterns]
        analysis = analyze_trend(series)
        trends[metric] = MetricTrend(
            direction=analysis.direction,
            change=series[-1] - series[0],
            consecutive_days=analysis.consecutive_days,
            trend_strength=analysis.strength,
            is_significant=analysis.is_significant,
        )
        if analysis.is_significant:
            significant.append(
                SignificantTrend(
                    metric=metric,
                    direction=analysis.direction,
                    consecutive_days=analysis.consecutive_days,
                    strength=analysis.strength,
                )
            )

    if ai_insight is None:
        ai_insight = insights.build_narrative(patterns, trends)

    return PatternReport(
        patterns=patterns,
        averages=averages,
        trends=trends,
        significant_trends=significant,
        insights=insights.build_insights(patterns, averages, significant),
        ai_insight=ai_insight,
        summary=PatternSummary(
            total_journals=sum(p.journal_count for p in patterns),
            most_active_day=max(patterns, key=lambda p: p.journal_count),
        ),
        source=source,
        note=note,
    )


def fallback_report(note: str) -> PatternReport:
    """The fixed example week, marked as fallback."""
    patterns = [DayPattern(**p) for p in FALLBACK_PATTERNS]
    return assemble_report(
        patterns, source="fallback", ai_insight=insights.FALLBACK_NARRATIVE, note=note
    )


def build_pattern_report(
    dal: DataAccessLayer,
    user_id: str,
    days: Optional[int] = None,
    today: Optional[date] = None,
) -> PatternReport:
    """
    Build the pattern report for a user.

    Args:
        dal: Data source for daily activity.
        user_id: The user whose activity is analysed.
        days: Window length (default settings.PATTERN_DAYS).
        today: Last day of the window (default: today).

    Returns:
        A live report, or the fallback report when the window holds no
        activity or anything goes wrong while reading it.
    """
    days = settings.PATTERN_DAYS if days is None else days
    days = max(1, min(days, settings.MAX_PATTERN_DAYS))
    today = today or date.today()

    try:
        patterns, records = load_patterns(dal, user_id, days, today)
        if records == 0:
            log_utils.log_message(f"[patterns] No activity for {user_id} over {days} days, using fallback", "WARN")
            return fallback_report(NO_ACTIVITY_NOTE)
        report = assemble_report(patterns)
    except Exception as e:
        log_utils.log_message(f"[patterns] Aggregation failed for {user_id}: {e}", "ERROR")
        return fallback_report(DATA_ERROR_NOTE)

    log_utils.log_message(
        f"[patterns] Built {days}-day report for {user_id}, "
        f"{len(report.significant_trends)} significant trend(s)"
    )
    return report
