from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb
from psycopg_pool import ConnectionPool

from wisdom_insights.config import settings
from wisdom_insights.data_access.dal import DataAccessLayer
from wisdom_insights.infra import log_utils


def _day_bounds(day: date):
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


class PostgresDal(DataAccessLayer):
    """
    A Data Access Layer implementation that uses a PostgreSQL database as the backend.
    This class fulfills the contract defined by the DataAccessLayer ABC.
    """

    def __init__(self, conninfo: Optional[str] = None):
        conninfo = conninfo or settings.DATABASE_URL
        if not conninfo:
            raise ValueError("DATABASE_URL is not configured")
        # Rows come back as dicts, matching the JSON DAL's records.
        self.pool = ConnectionPool(
            conninfo=conninfo,
            min_size=1,
            max_size=3,
            kwargs={"row_factory": dict_row},
            open=True,
        )

    def close(self) -> None:
        self.pool.close()

    def _fetch_all(self, query: str, params: tuple) -> List[Dict[str, Any]]:
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                return [dict(row) for row in cur.fetchall()]

    # --- Daily activity ------------------------------------------------------
    def get_journal_entries(self, user_id: str, day: date) -> List[Dict[str, Any]]:
        start, end = _day_bounds(day)
        return self._fetch_all(
            "SELECT mood, energy_level FROM journal_entries "
            "WHERE user_id = %s AND created_at >= %s AND created_at < %s;",
            (user_id, start, end),
        )

    def get_checkins(self, user_id: str, day: date) -> List[Dict[str, Any]]:
        start, end = _day_bounds(day)
        return self._fetch_all(
            "SELECT focus_level, productivity_score FROM checkins "
            "WHERE user_id = %s AND created_at >= %s AND created_at < %s;",
            (user_id, start, end),
        )

    def get_commitments_updated(self, user_id: str, day: date) -> List[Dict[str, Any]]:
        start, end = _day_bounds(day)
        return self._fetch_all(
            "SELECT status, progress FROM commitments "
            "WHERE user_id = %s AND updated_at >= %s AND updated_at < %s;",
            (user_id, start, end),
        )

    def get_active_commitments(self, user_id: str) -> List[Dict[str, Any]]:
        return self._fetch_all(
            "SELECT status, progress FROM commitments WHERE user_id = %s AND status = 'active';",
            (user_id,),
        )

    def get_life_area_scores(self, user_id: str, before: datetime, limit: int) -> List[Dict[str, Any]]:
        rows = self._fetch_all(
            "SELECT score, created_at FROM life_area_scores "
            "WHERE user_id = %s AND created_at <= %s ORDER BY created_at DESC LIMIT %s;",
            (user_id, before, limit),
        )
        for row in rows:
            row["score"] = float(row["score"])
        return rows

    # --- Events --------------------------------------------------------------
    def get_events(self, user_id: str, start: datetime, end: datetime) -> List[Dict[str, Any]]:
        return self._fetch_all(
            "SELECT id, title, description, tags, life_area_id, emotional_charge, occurred_at "
            "FROM events WHERE user_id = %s AND occurred_at BETWEEN %s AND %s "
            "ORDER BY occurred_at ASC;",
            (user_id, start, end),
        )

    def save_insights(self, user_id: str, insights: List[Dict[str, Any]]) -> None:
        log_utils.log_message(f"[PostgresDal] Saving {len(insights)} insights for {user_id}")
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                for insight in insights:
                    cur.execute(
                        """
                        INSERT INTO insights (
                            id, user_id, type, category, title, description,
                            confidence, metadata, source_event_ids, status
                        ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s);
                        """,
                        (
                            insight["id"],
                            user_id,
                            insight["type"],
                            insight["category"],
                            insight["title"],
                            insight["description"],
                            insight["confidence"],
                            Jsonb(insight.get("metadata", {})),
                            insight.get("source_event_ids", []),
                            insight.get("status", "ACTIVE"),
                        ),
                    )
