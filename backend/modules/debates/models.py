"""
Debates module data models.

These models define the core data structures for council debates:
panel members, opinions, votes, results and the debate aggregate itself,
plus the request/response shapes of the public operations and the
sampler message types.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Literal, Union
from pydantic import BaseModel, Field


class DebateStatus(str, Enum):
    """Debate lifecycle status. Transitions only move forward."""

    COLLECTING_OPINIONS = "collecting_opinions"  # Opinions persisted, awaiting votes
    VOTING = "voting"                            # Votes persisted, awaiting tally
    COMPLETED = "completed"                      # Results persisted (terminal)


class ResultsStatus(str, Enum):
    """Status carried inside a Results record."""

    IN_PROGRESS = "in_progress"
    VOTING_COMPLETE = "voting_complete"
    RESULTS_READY = "results_ready"


# Forward-only transitions of the lifecycle state machine
NEXT_STATUS: dict[DebateStatus, Optional[DebateStatus]] = {
    DebateStatus.COLLECTING_OPINIONS: DebateStatus.VOTING,
    DebateStatus.VOTING: DebateStatus.COMPLETED,
    DebateStatus.COMPLETED: None,
}


class PanelMember(BaseModel):
    """A fixed participant persona on the council."""

    model_config = {"frozen": True}

    id: str = Field(..., description="Stable slug, unique within the registry")
    display_name: str = Field(..., description="Name shown to users and used in prompts")
    persona_prompt: str = Field(..., description="System prompt framing the member's persona")


class Opinion(BaseModel):
    """A panel member's stance on the debate topic."""

    model_config = {"frozen": True}

    member_id: str = Field(..., description="Owning panel member ID")
    member_name: str = Field(..., description="Member display name at creation time")
    text: str = Field(..., description="The member's opinion text")
    perspective: str = Field(..., description="Perspective label")


class Vote(BaseModel):
    """One member's choice of another member's opinion."""

    model_config = {"frozen": True}

    voter_id: str = Field(..., description="Voting panel member ID")
    voter_name: str = Field(..., description="Voting member display name")
    voted_for_id: str = Field(..., description="Member ID of the chosen opinion")
    voted_for_name: str = Field(..., description="Display name of the chosen opinion's member")
    reasoning: str = Field(..., description="Voter's justification")


class VoteTotal(BaseModel):
    """Number of votes received by one opinion."""

    model_config = {"frozen": True}

    member_id: str
    member_name: str
    count: int = Field(..., ge=0)


class Results(BaseModel):
    """Outcome of tallying a debate's votes."""

    model_config = {"frozen": True}

    status: ResultsStatus = Field(..., description="Results status")
    winner_ids: list[str] = Field(
        default_factory=list,
        description="Member IDs tied for the most votes (more than one means a tie)",
    )
    winner_names: list[str] = Field(
        default_factory=list,
        description="Display names matching winner_ids, same order",
    )
    synthesis: Optional[str] = Field(None, description="Narrative summary of the outcome")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the results were computed",
    )
    vote_totals: list[VoteTotal] = Field(
        default_factory=list,
        description="Per-opinion vote counts, descending count then ascending member ID",
    )

    @property
    def is_tie(self) -> bool:
        return len(self.winner_ids) > 1


class Debate(BaseModel):
    """
    Full debate with all data.

    The aggregate root: owns its opinions, votes and results.
    """

    id: str = Field(..., description="Debate ID (YYYYMMDD_HHMMSS_xxxxxxxxxxxx)")
    prompt: str = Field(..., description="Validated and sanitized topic")
    status: DebateStatus = Field(..., description="Current lifecycle status")
    opinions: list[Opinion] = Field(default_factory=list, description="Opinions in panel order")
    votes: list[Vote] = Field(default_factory=list, description="Votes in panel order")
    results: Optional[Results] = Field(None, description="Results (completed debates only)")
    created_at: datetime = Field(..., description="Creation time")
    updated_at: Optional[datetime] = Field(None, description="Last update time")


class DebateSummary(BaseModel):
    """Summary item for debate lists (without opinion and vote content)."""

    id: str = Field(..., description="Debate ID")
    prompt: str = Field(..., description="Debate topic (may be truncated)")
    status: DebateStatus = Field(..., description="Current status")
    opinion_count: int = Field(default=0, description="Number of opinions")
    vote_count: int = Field(default=0, description="Number of votes")
    created_at: datetime = Field(..., description="Creation time")


class AdmissionStatus(BaseModel):
    """Usage against the debate creation ceilings."""

    hourly_used: int
    hourly_remaining: int
    total_used: int
    total_remaining: int


# Requests and responses of the public operations

class StartDebateRequest(BaseModel):
    """Request to start a new debate."""

    topic: str = Field(..., description="The question or topic to debate")


class StartDebateResponse(BaseModel):
    """Result of starting a debate."""

    status: str = "debate_started"
    debate_id: str
    opinion_count: int


class VoteBreakdownItem(BaseModel):
    """One line of the voting summary."""

    voter: str
    voted_for: str


class VotingResponse(BaseModel):
    """Result of a voting round."""

    status: str = "voting_complete"
    debate_id: str
    total_votes: int
    vote_breakdown: list[VoteBreakdownItem]


# Sampler message types

class TextContent(BaseModel):
    """Plain text content block."""

    type: Literal["text"] = "text"
    text: str


class OtherContent(BaseModel):
    """Any non-text content block (image, tool use, ...)."""

    type: str
    data: Optional[str] = None


SamplerContent = Union[TextContent, OtherContent]


class SamplerMessage(BaseModel):
    """A message sent to the sampler."""

    role: Literal["user", "assistant"] = "user"
    content: TextContent


class SamplerResult(BaseModel):
    """A sampler response: a role plus a single content block."""

    role: str = "assistant"
    content: SamplerContent
    model: Optional[str] = None

    @property
    def text(self) -> Optional[str]:
        """The text payload, or None when the content is not text."""
        if isinstance(self.content, TextContent):
            return self.content.text
        return None
