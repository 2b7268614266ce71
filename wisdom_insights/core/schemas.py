"""
Typed payloads returned by the insight engine.

Fields are snake_case in Python and camelCase on the wire; dump with
`model_dump(by_alias=True)` before handing a payload to a client.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Direction = Literal["rising", "falling", "flat"]
Strength = Literal["weak", "moderate", "strong"]
Metric = Literal["energy", "focus", "fulfillment"]


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TrendAnalysis(_Payload):
    """The streak of same-direction steps ending at the last sample."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    direction: Direction
    consecutive_days: int
    strength: Strength
    is_significant: bool


class DayPattern(_Payload):
    date: str
    energy: int
    focus: int
    fulfillment: int
    journal_count: int = 0
    commitment_progress: int = 0
    day_of_week: str


class MetricAverages(_Payload):
    energy: int
    focus: int
    fulfillment: int


class MetricTrend(_Payload):
    direction: Direction
    change: Union[int, float]
    consecutive_days: int
    trend_strength: Strength
    is_significant: bool


class SignificantTrend(_Payload):
    metric: Metric
    direction: Direction
    consecutive_days: int
    strength: Strength


class PatternSummary(_Payload):
    total_journals: int
    most_active_day: DayPattern


class PatternReport(_Payload):
    patterns: List[DayPattern]
    averages: MetricAverages
    trends: Dict[str, MetricTrend]
    significant_trends: List[SignificantTrend]
    insights: List[str]
    ai_insight: str
    summary: PatternSummary
    source: Literal["live", "fallback"] = "live"
    note: Optional[str] = Field(default=None, alias="_note")


# --- Pattern recognition ---------------------------------------------------

PatternType = Literal["RECURRING_THEME", "EMOTIONAL_CYCLE", "CORRELATION", "TREND"]


class PatternResult(_Payload):
    type: PatternType
    confidence: float  # 0-1
    title: str
    description: str
    affected_areas: List[str]
    evidence_event_ids: List[str]
    metadata: Dict[str, Any] = Field(default_factory=dict)


class AnalysisWindow(_Payload):
    start_date: datetime
    end_date: datetime
    total_events: int


class InsightGenerationResult(_Payload):
    insights: List[PatternResult]
    total_patterns_detected: int
    analysis_window: AnalysisWindow
