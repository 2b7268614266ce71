import datetime
from typing import Any, Dict, List

from wisdom_insights.config import settings
from wisdom_insights.core import insights
from wisdom_insights.core.patterns import (
    DATA_ERROR_NOTE,
    NO_ACTIVITY_NOTE,
    build_pattern_report,
)
from wisdom_insights.data_access.dal import DataAccessLayer

TODAY = datetime.date(2024, 1, 7)  # a Sunday
WEEK = [TODAY - datetime.timedelta(days=6 - i) for i in range(7)]


class DummyDal(DataAccessLayer):
    def __init__(
        self,
        energy: Dict[datetime.date, int] | None = None,
        fulfillment: Dict[datetime.date, int] | None = None,
        active: List[Dict[str, Any]] | None = None,
    ):
        self._energy = energy or {}
        self._fulfillment = fulfillment or {}
        self._active = active or []

    def get_journal_entries(self, user_id: str, day: datetime.date) -> List[Dict[str, Any]]:
        if day in self._energy:
            return [{"energy_level": self._energy[day], "mood": None}]
        return []

    def get_checkins(self, user_id: str, day: datetime.date) -> List[Dict[str, Any]]:
        return []

    def get_commitments_updated(self, user_id: str, day: datetime.date) -> List[Dict[str, Any]]:
        return []

    def get_active_commitments(self, user_id: str) -> List[Dict[str, Any]]:
        return self._active

    def get_life_area_scores(self, user_id: str, before: datetime.datetime, limit: int) -> List[Dict[str, Any]]:
        if before.date() in self._fulfillment:
            return [{"score": self._fulfillment[before.date()]}]
        return []

    def get_events(self, user_id, start, end) -> List[Dict[str, Any]]:
        return []

    def save_insights(self, user_id: str, insights: List[Dict[str, Any]]) -> None:
        pass


class BrokenDal(DummyDal):
    def get_active_commitments(self, user_id: str) -> List[Dict[str, Any]]:
        raise RuntimeError("connection refused")


def rising_energy_dal(**kwargs) -> DummyDal:
    return DummyDal(energy={day: 40 + 5 * i for i, day in enumerate(WEEK)}, **kwargs)


def test_empty_history_uses_fallback_week():
    report = build_pattern_report(DummyDal(), "user-1", today=TODAY)

    assert report.source == "fallback"
    assert report.note == NO_ACTIVITY_NOTE
    assert [p.date for p in report.patterns] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    assert [p.energy for p in report.patterns] == [72, 78, 65, 80, 85, 90, 76]
    assert [p.focus for p in report.patterns] == [68, 70, 63, 75, 81, 88, 70]
    assert [p.fulfillment for p in report.patterns] == [75, 80, 70, 82, 88, 92, 78]
    assert report.averages.model_dump() == {"energy": 78, "focus": 74, "fulfillment": 81}
    assert report.ai_insight == insights.FALLBACK_NARRATIVE


def test_fallback_trends_use_streaks_and_change():
    report = build_pattern_report(DummyDal(), "user-1", today=TODAY)

    energy = report.trends["energy"]
    assert (energy.direction, energy.change, energy.consecutive_days, energy.trend_strength, energy.is_significant) == (
        "falling", 4, 1, "weak", False,
    )
    assert report.trends["focus"].change == 2
    assert report.trends["fulfillment"].change == 3
    assert all(t.direction == "falling" for t in report.trends.values())
    assert report.significant_trends == []
    assert report.summary.total_journals == 17
    assert report.summary.most_active_day.date == "Sat"


def test_data_error_uses_fallback_and_logs():
    report = build_pattern_report(BrokenDal(), "user-1", today=TODAY)

    assert report.source == "fallback"
    assert report.note == DATA_ERROR_NOTE
    log = settings.log_path.read_text(encoding="utf-8")
    assert "[ERROR]" in log and "connection refused" in log


def test_live_report_from_activity():
    report = build_pattern_report(rising_energy_dal(), "user-1", today=TODAY)

    assert report.source == "live"
    assert report.note is None
    assert [p.date for p in report.patterns] == [d.isoformat() for d in WEEK]
    assert report.patterns[0].day_of_week == "Mon"
    assert report.patterns[-1].day_of_week == "Sun"
    assert [p.energy for p in report.patterns] == [40, 45, 50, 55, 60, 65, 70]
    assert report.averages.model_dump() == {"energy": 55, "focus": 50, "fulfillment": 50}

    energy = report.trends["energy"]
    assert (energy.direction, energy.change, energy.consecutive_days, energy.trend_strength) == (
        "rising", 30, 6, "strong",
    )
    assert report.trends["focus"].direction == "flat"
    assert report.trends["focus"].change == 0

    assert [(t.metric, t.direction, t.consecutive_days, t.strength) for t in report.significant_trends] == [
        ("energy", "rising", 6, "strong"),
    ]
    assert report.summary.total_journals == 7
    assert report.summary.most_active_day.date == WEEK[0].isoformat()


def test_live_insights_text():
    report = build_pattern_report(rising_energy_dal(), "user-1", today=TODAY)

    assert report.insights == [
        "Your energy peaks on Sun (70). Schedule high-impact work around it.",
        "Energy dips on Mon (40). Consider lighter tasks or self-care activities.",
        "Your focus peaks on Mon (50).",
        "Fulfillment is low (avg 50). Revisit the life areas that feel most neglected.",
        "Energy has been rising for 6 consecutive days (strong trend).",
    ]
    assert report.ai_insight == (
        "Energy peaked on Sun and focus peaked on Mon. Right now energy is rising (6 days)."
    )


def test_significant_trends_follow_metric_order():
    fulfillment = {day: 90 - 5 * i for i, day in enumerate(WEEK)}
    report = build_pattern_report(rising_energy_dal(fulfillment=fulfillment), "user-1", today=TODAY)

    assert [t.metric for t in report.significant_trends] == ["energy", "fulfillment"]
    assert report.significant_trends[1].direction == "falling"
    assert report.trends["fulfillment"].change == -30


def test_commitment_progress_is_shared_across_days():
    dal = rising_energy_dal(active=[{"status": "active", "progress": 40}, {"status": "active", "progress": 61}])
    report = build_pattern_report(dal, "user-1", today=TODAY)
    assert {p.commitment_progress for p in report.patterns} == {51}


def test_window_length_is_respected_and_clamped():
    report = build_pattern_report(rising_energy_dal(), "user-1", days=3, today=TODAY)
    assert [p.date for p in report.patterns] == [d.isoformat() for d in WEEK[-3:]]

    report = build_pattern_report(rising_energy_dal(), "user-1", days=500, today=TODAY)
    assert len(report.patterns) == settings.MAX_PATTERN_DAYS


def test_zero_or_negative_days_clamp_to_one():
    for days in (0, -4):
        report = build_pattern_report(rising_energy_dal(), "user-1", days=days, today=TODAY)
        assert report.source == "live"
        assert [p.date for p in report.patterns] == [TODAY.isoformat()]

    report = build_pattern_report(rising_energy_dal(), "user-1", days=None, today=TODAY)
    assert len(report.patterns) == settings.PATTERN_DAYS


def test_report_payload_keys():
    payload = build_pattern_report(DummyDal(), "user-1", today=TODAY).model_dump(
        mode="json", by_alias=True, exclude_none=True
    )

    assert set(payload) == {
        "patterns", "averages", "trends", "significantTrends", "insights",
        "aiInsight", "summary", "source", "_note",
    }
    assert set(payload["trends"]["energy"]) == {
        "direction", "change", "consecutiveDays", "trendStrength", "isSignificant",
    }
    assert payload["patterns"][0]["dayOfWeek"] == "Mon"
    assert payload["summary"]["mostActiveDay"]["journalCount"] == 4

    live = build_pattern_report(rising_energy_dal(), "user-1", today=TODAY).model_dump(
        mode="json", by_alias=True, exclude_none=True
    )
    assert "_note" not in live
    assert live["source"] == "live"
