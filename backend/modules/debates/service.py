"""
Debate lifecycle service.

Ties the panel, input guard, admission controller, collectors and tally
together behind the repository boundary. Owns the authoritative status of
every debate: collecting_opinions -> voting -> completed.
"""

import asyncio
import logging
import weakref
from typing import Optional

from shared.config import Settings
from shared.exceptions import CouncilError
from shared.logging_config import truncate_for_log
from .admission import AdmissionController
from .exceptions import DebateNotFoundError, InvalidStateError
from .guard import InputGuard
from .identifiers import generate_debate_id
from .interfaces import IDebateRepository, IDebateService, ISampler
from .models import (
    AdmissionStatus,
    Debate,
    DebateStatus,
    DebateSummary,
    Results,
    StartDebateResponse,
    VoteBreakdownItem,
    VotingResponse,
)
from .opinions import OpinionCollector
from .panel import PanelRegistry
from .tally import resolve
from .voting import VoteCollector

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 10
MAX_LIST_LIMIT = 100


class DebateService(IDebateService):
    """
    Debate orchestration over a repository and a sampler.

    Transitions on one debate are serialised by a per-debate lock; the
    repository's status-conditional updates catch anything that slips past
    it (another process, for instance).
    """

    def __init__(
        self,
        repository: IDebateRepository,
        sampler: ISampler,
        panel: Optional[PanelRegistry] = None,
        guard: Optional[InputGuard] = None,
        admission: Optional[AdmissionController] = None,
        opinion_collector: Optional[OpinionCollector] = None,
        vote_collector: Optional[VoteCollector] = None,
    ):
        self._repository = repository
        self._panel = panel or PanelRegistry.default()
        self._guard = guard or InputGuard()
        self._admission = admission or AdmissionController(repository)
        self._opinions = opinion_collector or OpinionCollector(sampler)
        self._votes = vote_collector or VoteCollector(sampler)
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    @property
    def panel(self) -> PanelRegistry:
        return self._panel

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    async def start_debate(self, topic: str) -> StartDebateResponse:
        """Admit, validate, collect opinions and persist a new debate."""
        async with self._admission.reserve():
            topic = self._guard.validate_and_sanitize_topic(topic)
            debate_id = generate_debate_id()
            logger.info(f"Starting debate {debate_id}: {truncate_for_log(topic)}")

            try:
                opinions = await self._opinions.collect(topic, self._panel)
                self._repository.create(topic, opinions, debate_id=debate_id)
            except CouncilError as e:
                logger.error(f"Debate {debate_id} failed to start: {e.message}")
                raise

        logger.info(f"Debate {debate_id} started with {len(opinions)} opinions")
        return StartDebateResponse(debate_id=debate_id, opinion_count=len(opinions))

    async def conduct_voting(self, debate_id: str) -> VotingResponse:
        """Collect one vote per member and advance the debate to VOTING."""
        debate_id = self._guard.validate_external_id(debate_id)

        async with self._lock_for(debate_id):
            debate = self._require(debate_id)
            self._check_ready_for_voting(debate)
            logger.info(f"Voting on debate {debate_id}")

            try:
                votes = await self._votes.collect(debate.opinions, self._panel)
                self._repository.update_votes(debate_id, votes)
            except CouncilError as e:
                logger.error(f"Voting on debate {debate_id} failed: {e.message}")
                raise

        logger.info(f"Debate {debate_id} collected {len(votes)} votes")
        return VotingResponse(
            debate_id=debate_id,
            total_votes=len(votes),
            vote_breakdown=[
                VoteBreakdownItem(voter=v.voter_name, voted_for=v.voted_for_name) for v in votes
            ],
        )

    async def resolve_debate(self, debate_id: str) -> Results:
        """Tally a debate in VOTING status and mark it COMPLETED."""
        debate_id = self._guard.validate_external_id(debate_id)

        async with self._lock_for(debate_id):
            return self._resolve(self._require(debate_id))

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def get_results(self, debate_id: str) -> Results:
        """Stored results for a completed debate; resolves one still in VOTING."""
        debate_id = self._guard.validate_external_id(debate_id)

        async with self._lock_for(debate_id):
            debate = self._require(debate_id)
            if debate.status == DebateStatus.COMPLETED and debate.results is not None:
                return debate.results
            if debate.status == DebateStatus.VOTING:
                return self._resolve(debate)
            raise InvalidStateError(
                debate_id,
                debate.status.value,
                DebateStatus.VOTING.value,
                reason="votes have not been collected yet",
            )

    async def get_debate(self, debate_id: str) -> Debate:
        debate_id = self._guard.validate_external_id(debate_id)
        return self._require(debate_id)

    async def list_past_debates(self, limit: int = DEFAULT_LIST_LIMIT) -> list[DebateSummary]:
        limit = max(1, min(limit, MAX_LIST_LIMIT))
        return self._repository.list_recent(limit)

    async def get_admission_status(self) -> AdmissionStatus:
        return self._admission.usage()

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    def _lock_for(self, debate_id: str) -> asyncio.Lock:
        lock = self._locks.get(debate_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[debate_id] = lock
        return lock

    def _require(self, debate_id: str) -> Debate:
        debate = self._repository.find_by_id(debate_id)
        if debate is None:
            raise DebateNotFoundError(debate_id)
        return debate

    def _check_ready_for_voting(self, debate: Debate) -> None:
        required = DebateStatus.COLLECTING_OPINIONS.value
        if debate.status != DebateStatus.COLLECTING_OPINIONS:
            raise InvalidStateError(debate.id, debate.status.value, required)
        if len(debate.opinions) != self._panel.size:
            raise InvalidStateError(
                debate.id,
                debate.status.value,
                required,
                reason=f"expected {self._panel.size} opinions, found {len(debate.opinions)}",
            )
        if sorted(op.member_id for op in debate.opinions) != sorted(self._panel.ids()):
            raise InvalidStateError(
                debate.id,
                debate.status.value,
                required,
                reason="opinions do not match the current panel",
            )

    def _resolve(self, debate: Debate) -> Results:
        """Resolve a debate already loaded under its lock."""
        required = DebateStatus.VOTING.value
        if debate.status != DebateStatus.VOTING:
            raise InvalidStateError(debate.id, debate.status.value, required)
        if len(debate.votes) != self._panel.size:
            raise InvalidStateError(
                debate.id,
                debate.status.value,
                required,
                reason=f"expected {self._panel.size} votes, found {len(debate.votes)}",
            )

        results = resolve(debate.votes)
        self._repository.update_results(debate.id, results)
        logger.info(f"Debate {debate.id} completed, winners: {results.winner_ids}")
        return results


# -----------------------------------------------------------------------------
# Construction from settings
# -----------------------------------------------------------------------------

def build_repository(settings: Settings) -> IDebateRepository:
    """Repository for the configured storage backend."""
    if settings.storage_backend == "supabase":
        from shared.database import get_supabase_client
        from .repository import DebateRepository
        return DebateRepository(get_supabase_client(settings))

    from .memory_repository import InMemoryDebateRepository
    return InMemoryDebateRepository()


def build_debate_service(
    settings: Settings,
    repository: Optional[IDebateRepository] = None,
    sampler: Optional[ISampler] = None,
    panel: Optional[PanelRegistry] = None,
) -> DebateService:
    """Wire a DebateService from settings, building any collaborator not given."""
    if repository is None:
        repository = build_repository(settings)
    if sampler is None:
        from providers.factory import build_sampler
        sampler = build_sampler(settings)

    return DebateService(
        repository=repository,
        sampler=sampler,
        panel=panel or PanelRegistry.default(),
        guard=InputGuard(max_topic_length=settings.max_topic_length),
        admission=AdmissionController(
            repository,
            hourly_limit=settings.hourly_debate_limit,
            total_limit=settings.total_debate_limit,
        ),
        opinion_collector=OpinionCollector(
            sampler,
            max_tokens=settings.opinion_max_tokens,
            temperature=settings.opinion_temperature,
        ),
        vote_collector=VoteCollector(
            sampler,
            max_tokens=settings.vote_max_tokens,
            temperature=settings.vote_temperature,
        ),
    )

