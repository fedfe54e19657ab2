"""
Debates module interfaces.

IDebateService is what the API layer and CLI depend on. ISampler and
IDebateRepository are the two external capabilities the engine consumes;
concrete adapters live in providers.sampler and in this module's
repository implementations.
"""

from datetime import datetime
from typing import Protocol, Optional, Sequence, runtime_checkable

from .models import (
    AdmissionStatus,
    Debate,
    DebateSummary,
    Opinion,
    Results,
    SamplerMessage,
    SamplerResult,
    StartDebateResponse,
    Vote,
    VotingResponse,
)


@runtime_checkable
class ISampler(Protocol):
    """Text generation capability."""

    async def generate(
        self,
        messages: Sequence[SamplerMessage],
        max_tokens: int,
        temperature: Optional[float] = None,
        system_prompt: Optional[str] = None,
        include_context: str = "none",
    ) -> SamplerResult:
        """
        Generate one response.

        Args:
            messages: Conversation to respond to
            max_tokens: Response token budget
            temperature: Sampling temperature (backend default if None)
            system_prompt: Optional system prompt
            include_context: Context inclusion hint ("none", "thisServer", "allServers")

        Returns:
            SamplerResult whose content may or may not be text

        Raises:
            SamplerError: On transport failure or timeout
        """
        ...


@runtime_checkable
class IDebateRepository(Protocol):
    """
    Persistence capability for debate records.

    Status-advancing updates are conditional: they only apply while the
    debate is still in the expected prior status, and raise
    InvalidStateError otherwise. Storage failures raise StoreError.
    """

    def create(
        self,
        prompt: str,
        opinions: Sequence[Opinion],
        debate_id: Optional[str] = None,
    ) -> str:
        """Persist a new debate in COLLECTING_OPINIONS status and return its ID."""
        ...

    def find_by_id(self, debate_id: str) -> Optional[Debate]:
        """Return the debate, or None if it does not exist."""
        ...

    def update_votes(self, debate_id: str, votes: Sequence[Vote]) -> None:
        """Store the vote set and advance COLLECTING_OPINIONS -> VOTING."""
        ...

    def update_results(self, debate_id: str, results: Results) -> None:
        """Store results and advance VOTING -> COMPLETED."""
        ...

    def list_recent(self, limit: int) -> list[DebateSummary]:
        """Most recent debates first."""
        ...

    def list_all(self) -> list[DebateSummary]:
        """Every debate, most recent first."""
        ...

    def count_in_last_hour(self) -> int:
        """Number of debates created in the trailing 60 minutes."""
        ...

    def count_all(self) -> int:
        """Number of debates ever created."""
        ...

    def oldest_created_in_last_hour(self) -> Optional[datetime]:
        """Creation time of the oldest debate still inside the hourly window."""
        ...


@runtime_checkable
class IDebateService(Protocol):
    """
    Interface for debate operations.

    This protocol defines the contract that the debates module exposes
    to the API layer and the CLI.
    """

    async def start_debate(self, topic: str) -> StartDebateResponse:
        """
        Start a debate: validate, admit, collect opinions, persist.

        Raises:
            InputValidationError: If the topic is rejected
            RateLimitExceededError: If admission is denied
            MemberCallError: If any member's opinion could not be collected
            StoreError: If persistence fails
        """
        ...

    async def conduct_voting(self, debate_id: str) -> VotingResponse:
        """
        Run the voting round of a debate in COLLECTING_OPINIONS status.

        Raises:
            InputValidationError: If the debate ID is malformed
            DebateNotFoundError: If the debate doesn't exist
            InvalidStateError: If the debate is not ready for voting
            MemberCallError: If any member's vote could not be collected
        """
        ...

    async def resolve_debate(self, debate_id: str) -> Results:
        """
        Tally a debate in VOTING status and mark it COMPLETED.

        Raises:
            DebateNotFoundError: If the debate doesn't exist
            InvalidStateError: If the debate is not in VOTING status
        """
        ...

    async def get_results(self, debate_id: str) -> Results:
        """
        Return results, resolving the debate first if voting has finished.

        Raises:
            DebateNotFoundError: If the debate doesn't exist
            InvalidStateError: If voting has not happened yet
        """
        ...

    async def get_debate(self, debate_id: str) -> Debate:
        """Return the full debate or raise DebateNotFoundError."""
        ...

    async def list_past_debates(self, limit: int = 10) -> list[DebateSummary]:
        """Return recent debate summaries, newest first."""
        ...

    async def get_admission_status(self) -> AdmissionStatus:
        """Return current usage against the rate ceilings without reserving."""
        ...
