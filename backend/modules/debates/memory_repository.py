"""
In-process debate repository.

Used by default when no Supabase project is configured, and by the tests.
Holds debates in a dict guarded by a lock; state is lost on restart.
"""

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Sequence

from shared.repository import StoreError
from .exceptions import DebateNotFoundError, InvalidStateError
from .identifiers import generate_debate_id
from .models import (
    NEXT_STATUS,
    Debate,
    DebateStatus,
    DebateSummary,
    Opinion,
    Results,
    Vote,
)

logger = logging.getLogger(__name__)

SUMMARY_PROMPT_LENGTH = 100


class InMemoryDebateRepository:
    """Dict-backed implementation of IDebateRepository."""

    def __init__(self, clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self._clock = clock
        self._debates: dict[str, Debate] = {}
        self._lock = threading.Lock()

    def create(
        self,
        prompt: str,
        opinions: Sequence[Opinion],
        debate_id: Optional[str] = None,
    ) -> str:
        now = self._clock()
        debate_id = debate_id or generate_debate_id(now)
        with self._lock:
            if debate_id in self._debates:
                raise StoreError("create", f"debate {debate_id} already exists")
            self._debates[debate_id] = Debate(
                id=debate_id,
                prompt=prompt,
                status=DebateStatus.COLLECTING_OPINIONS,
                opinions=list(opinions),
                created_at=now,
                updated_at=now,
            )
        return debate_id

    def find_by_id(self, debate_id: str) -> Optional[Debate]:
        with self._lock:
            debate = self._debates.get(debate_id)
        # Callers get a copy; the stored aggregate only changes through _advance
        return debate.model_copy(deep=True) if debate is not None else None

    def update_votes(self, debate_id: str, votes: Sequence[Vote]) -> None:
        self._advance(debate_id, DebateStatus.COLLECTING_OPINIONS, votes=list(votes))

    def update_results(self, debate_id: str, results: Results) -> None:
        self._advance(debate_id, DebateStatus.VOTING, results=results.model_copy(deep=True))

    def list_recent(self, limit: int) -> list[DebateSummary]:
        return self.list_all()[:limit]

    def list_all(self) -> list[DebateSummary]:
        with self._lock:
            debates = sorted(self._debates.values(), key=lambda d: d.created_at, reverse=True)
        return [self._summarize(d) for d in debates]

    def count_in_last_hour(self) -> int:
        cutoff = self._clock() - timedelta(hours=1)
        with self._lock:
            return sum(1 for d in self._debates.values() if d.created_at >= cutoff)

    def count_all(self) -> int:
        with self._lock:
            return len(self._debates)

    def oldest_created_in_last_hour(self) -> Optional[datetime]:
        cutoff = self._clock() - timedelta(hours=1)
        with self._lock:
            recent = [d.created_at for d in self._debates.values() if d.created_at >= cutoff]
        return min(recent, default=None)

    def _advance(self, debate_id: str, expected: DebateStatus, **changes) -> None:
        """Apply changes and move to the next status, only from the expected one."""
        with self._lock:
            debate = self._debates.get(debate_id)
            if debate is None:
                raise DebateNotFoundError(debate_id)
            if debate.status != expected:
                logger.warning(
                    f"Update on {debate_id} skipped: status is {debate.status.value}"
                )
                raise InvalidStateError(debate_id, debate.status.value, expected.value)
            self._debates[debate_id] = debate.model_copy(
                update={**changes, "status": NEXT_STATUS[expected], "updated_at": self._clock()}
            )

    @staticmethod
    def _summarize(debate: Debate) -> DebateSummary:
        prompt = debate.prompt
        if len(prompt) > SUMMARY_PROMPT_LENGTH:
            prompt = prompt[:SUMMARY_PROMPT_LENGTH] + "..."
        return DebateSummary(
            id=debate.id,
            prompt=prompt,
            status=debate.status,
            opinion_count=len(debate.opinions),
            vote_count=len(debate.votes),
            created_at=debate.created_at,
        )
