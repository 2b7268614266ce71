from abc import ABC, abstractmethod
from typing import Any, Dict, List
from datetime import date, datetime


class DataAccessLayer(ABC):
    """
    Abstract Base Class for a Data Access Layer.
    Defines the contract for all data storage operations, so the insight
    engine can read activity from any storage backend (JSON, DB, etc.)
    through a consistent interface.
    """

    def close(self) -> None:
        """Releases backend resources. File-based stores hold none."""
        pass

    @abstractmethod
    def get_journal_entries(self, user_id: str, day: date) -> List[Dict[str, Any]]:
        """Journal entries (`mood`, `energy_level`) created on the given day."""
        pass

    @abstractmethod
    def get_checkins(self, user_id: str, day: date) -> List[Dict[str, Any]]:
        """Check-ins (`focus_level`, `productivity_score`) created on the given day."""
        pass

    @abstractmethod
    def get_commitments_updated(self, user_id: str, day: date) -> List[Dict[str, Any]]:
        """Commitments (`status`, `progress`) updated on the given day."""
        pass

    @abstractmethod
    def get_active_commitments(self, user_id: str) -> List[Dict[str, Any]]:
        """All commitments currently in the `active` status."""
        pass

    @abstractmethod
    def get_life_area_scores(self, user_id: str, before: datetime, limit: int) -> List[Dict[str, Any]]:
        """
        Retrieves the most recent life-area scores recorded at or before a moment.

        Args:
            user_id: Owner of the scores.
            before: Upper bound (inclusive) on `created_at`.
            limit: Maximum number of rows, newest first.

        Returns:
            A list of score dictionaries, newest first.
        """
        pass

    @abstractmethod
    def get_events(self, user_id: str, start: datetime, end: datetime) -> List[Dict[str, Any]]:
        """
        Retrieves life events that occurred within a window.

        Args:
            user_id: Owner of the events.
            start: Start of the window (inclusive).
            end: End of the window (inclusive).

        Returns:
            A list of event dictionaries ordered by `occurred_at` ascending.
        """
        pass

    @abstractmethod
    def save_insights(self, user_id: str, insights: List[Dict[str, Any]]) -> None:
        """Persists recognised patterns as insight records."""
        pass
