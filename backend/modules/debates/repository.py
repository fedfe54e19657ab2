"""
Debate repository for Supabase.

All debate state lives in a single ``debates`` table (see
migrations/001_create_debates.sql); opinions, votes and results are JSON
columns owned by their row. Status-advancing updates carry the expected
prior status in their filter, so a transition that lost a race updates no
rows and is reported as InvalidStateError.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Any, Sequence

from supabase import Client

from shared.repository import BaseRepository
from .exceptions import DebateNotFoundError, InvalidStateError
from .identifiers import generate_debate_id
from .models import (
    Debate,
    DebateStatus,
    DebateSummary,
    Opinion,
    Results,
    Vote,
)

logger = logging.getLogger(__name__)

TABLE = "debates"
SUMMARY_COLUMNS = "id, prompt, status, opinions, votes, created_at"
SUMMARY_PROMPT_LENGTH = 100


class DebateRepository(BaseRepository[Debate]):
    """
    Repository for debate data access.

    All methods return Pydantic models mapped from database rows and raise
    StoreError when the Supabase client fails.
    """

    def __init__(self, db: Client) -> None:
        super().__init__(db)

    # -------------------------------------------------------------------------
    # Debate CRUD operations
    # -------------------------------------------------------------------------

    def create(
        self,
        prompt: str,
        opinions: Sequence[Opinion],
        debate_id: Optional[str] = None,
    ) -> str:
        """
        Insert a new debate in COLLECTING_OPINIONS status.

        Args:
            prompt: Sanitized topic
            opinions: Complete opinion set, in panel order
            debate_id: Pre-generated ID (generated here if omitted)

        Returns:
            The debate ID.
        """
        debate_id = debate_id or generate_debate_id()
        now = datetime.now(timezone.utc).isoformat()
        data = {
            "id": debate_id,
            "prompt": prompt,
            "status": DebateStatus.COLLECTING_OPINIONS.value,
            "opinions": [op.model_dump(mode="json") for op in opinions],
            "votes": [],
            "results": None,
            "created_at": now,
            "updated_at": now,
        }
        self._execute("create", lambda: self._db.table(TABLE).insert(data).execute())
        return debate_id

    def find_by_id(self, debate_id: str) -> Optional[Debate]:
        """
        Get a debate by ID.

        Returns:
            Debate with opinions, votes and results, or None if not found.
        """
        response = self._execute(
            "find_by_id",
            lambda: self._db.table(TABLE).select("*").eq("id", debate_id).execute(),
        )
        rows = self._rows(response)
        if not rows:
            return None
        return self._map_to_debate(rows[0])

    def update_votes(self, debate_id: str, votes: Sequence[Vote]) -> None:
        """Store votes and advance COLLECTING_OPINIONS -> VOTING."""
        data = {
            "votes": [v.model_dump(mode="json") for v in votes],
            "status": DebateStatus.VOTING.value,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        self._conditional_update(
            "update_votes", debate_id, data, expected=DebateStatus.COLLECTING_OPINIONS
        )

    def update_results(self, debate_id: str, results: Results) -> None:
        """Store results and advance VOTING -> COMPLETED."""
        data = {
            "results": results.model_dump(mode="json"),
            "status": DebateStatus.COMPLETED.value,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        self._conditional_update("update_results", debate_id, data, expected=DebateStatus.VOTING)

    # -------------------------------------------------------------------------
    # Listing and counting
    # -------------------------------------------------------------------------

    def list_recent(self, limit: int) -> list[DebateSummary]:
        """List the most recent debates, newest first."""
        response = self._execute(
            "list_recent",
            lambda: self._db.table(TABLE)
            .select(SUMMARY_COLUMNS)
            .order("created_at", desc=True)
            .limit(limit)
            .execute(),
        )
        return [self._map_to_summary(row) for row in self._rows(response)]

    def list_all(self) -> list[DebateSummary]:
        """List every debate, newest first."""
        response = self._execute(
            "list_all",
            lambda: self._db.table(TABLE)
            .select(SUMMARY_COLUMNS)
            .order("created_at", desc=True)
            .execute(),
        )
        return [self._map_to_summary(row) for row in self._rows(response)]

    def count_in_last_hour(self) -> int:
        """Count debates created in the trailing 60 minutes."""
        cutoff = self._hour_ago()
        response = self._execute(
            "count_in_last_hour",
            lambda: self._db.table(TABLE)
            .select("id", count="exact")
            .gte("created_at", cutoff)
            .execute(),
        )
        return response.count or 0

    def count_all(self) -> int:
        """Count all debates."""
        response = self._execute(
            "count_all",
            lambda: self._db.table(TABLE).select("id", count="exact").execute(),
        )
        return response.count or 0

    def oldest_created_in_last_hour(self) -> Optional[datetime]:
        """Creation time of the oldest debate inside the hourly window."""
        cutoff = self._hour_ago()
        response = self._execute(
            "oldest_created_in_last_hour",
            lambda: self._db.table(TABLE)
            .select("created_at")
            .gte("created_at", cutoff)
            .order("created_at")
            .limit(1)
            .execute(),
        )
        rows = self._rows(response)
        if not rows:
            return None
        return datetime.fromisoformat(rows[0]["created_at"])

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    def _conditional_update(
        self,
        operation: str,
        debate_id: str,
        data: dict[str, Any],
        expected: DebateStatus,
    ) -> None:
        """Apply an update only while the debate is in the expected status."""
        response = self._execute(
            operation,
            lambda: self._db.table(TABLE)
            .update(data)
            .eq("id", debate_id)
            .eq("status", expected.value)
            .execute(),
        )
        if self._rows(response):
            return

        current = self.find_by_id(debate_id)
        if current is None:
            raise DebateNotFoundError(debate_id)
        logger.warning(f"{operation} on {debate_id} skipped: status is {current.status.value}")
        raise InvalidStateError(debate_id, current.status.value, expected.value)

    @staticmethod
    def _hour_ago() -> str:
        return (datetime.now(timezone.utc) - timedelta(hours=1)).isoformat()

    def _map_to_debate(self, data: dict[str, Any]) -> Debate:
        """Map database row to Debate model."""
        results_data = data.get("results")
        return Debate(
            id=str(data["id"]),
            prompt=data["prompt"],
            status=DebateStatus(data["status"]),
            opinions=[Opinion.model_validate(op) for op in data.get("opinions") or []],
            votes=[Vote.model_validate(v) for v in data.get("votes") or []],
            results=Results.model_validate(results_data) if results_data else None,
            created_at=data["created_at"],
            updated_at=data.get("updated_at"),
        )

    def _map_to_summary(self, data: dict[str, Any]) -> DebateSummary:
        """Map database row to DebateSummary model."""
        prompt = data["prompt"]
        truncated_prompt = (
            prompt[:SUMMARY_PROMPT_LENGTH] + "..." if len(prompt) > SUMMARY_PROMPT_LENGTH else prompt
        )
        return DebateSummary(
            id=str(data["id"]),
            prompt=truncated_prompt,
            status=DebateStatus(data["status"]),
            opinion_count=len(data.get("opinions") or []),
            vote_count=len(data.get("votes") or []),
            created_at=data["created_at"],
        )
