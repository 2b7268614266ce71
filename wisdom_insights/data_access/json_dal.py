"""JSON file-based implementation of the Data Access Layer."""

from __future__ import annotations

import json
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from wisdom_insights.config import settings
from wisdom_insights.infra import log_utils
from .dal import DataAccessLayer


def _naive_utc(moment: datetime) -> datetime:
    """Offset-aware moments become naive UTC; naive ones are taken as UTC already."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def _parse_ts(value: str) -> datetime:
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return _naive_utc(datetime.fromisoformat(value))


class JsonDal(DataAccessLayer):
    """
    Data Access Layer that persists records to JSON files on disk.

    Each table is a single file under `settings.data_path` holding a list of
    records; timestamps are ISO-8601 strings.
    """

    def _table_path(self, table: str) -> Path:
        return settings.data_path / f"{table}.json"

    def _read_json(self, path: Path) -> Any:
        if not path.exists():
            return []
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)

    def _write_json(self, path: Path, data: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)

    def _user_rows(self, table: str, user_id: str) -> List[Dict[str, Any]]:
        return [r for r in self._read_json(self._table_path(table)) if r.get("user_id") == user_id]

    def _on_day(self, table: str, user_id: str, day: date, field: str) -> List[Dict[str, Any]]:
        return [
            r for r in self._user_rows(table, user_id)
            if r.get(field) and _parse_ts(r[field]).date() == day
        ]

    # --- Writes --------------------------------------------------------------
    def add_record(self, table: str, record: Dict[str, Any]) -> None:
        """Append a record to a table file."""
        path = self._table_path(table)
        rows = self._read_json(path)
        rows.append(record)
        self._write_json(path, rows)

    def save_insights(self, user_id: str, insights: List[Dict[str, Any]]) -> None:
        path = self._table_path("insights")
        rows = self._read_json(path)
        rows.extend({**insight, "user_id": user_id} for insight in insights)
        self._write_json(path, rows)
        log_utils.log_message(f"[JsonDal] Saved {len(insights)} insights for {user_id}")

    # --- Daily activity ------------------------------------------------------
    def get_journal_entries(self, user_id: str, day: date) -> List[Dict[str, Any]]:
        return self._on_day("journal_entries", user_id, day, "created_at")

    def get_checkins(self, user_id: str, day: date) -> List[Dict[str, Any]]:
        return self._on_day("checkins", user_id, day, "created_at")

    def get_commitments_updated(self, user_id: str, day: date) -> List[Dict[str, Any]]:
        return self._on_day("commitments", user_id, day, "updated_at")

    def get_active_commitments(self, user_id: str) -> List[Dict[str, Any]]:
        return [r for r in self._user_rows("commitments", user_id) if r.get("status") == "active"]

    def get_life_area_scores(self, user_id: str, before: datetime, limit: int) -> List[Dict[str, Any]]:
        before = _naive_utc(before)
        rows = [
            r for r in self._user_rows("life_area_scores", user_id)
            if _parse_ts(r["created_at"]) <= before
        ]
        rows.sort(key=lambda r: _parse_ts(r["created_at"]), reverse=True)
        return rows[:limit]

    # --- Events --------------------------------------------------------------
    def get_events(self, user_id: str, start: datetime, end: datetime) -> List[Dict[str, Any]]:
        start, end = _naive_utc(start), _naive_utc(end)
        out: List[Dict[str, Any]] = []
        for row in self._user_rows("events", user_id):
            occurred_at = _parse_ts(row["occurred_at"])
            if start <= occurred_at <= end:
                out.append({**row, "occurred_at": occurred_at})
        out.sort(key=lambda e: e["occurred_at"])
        return out
