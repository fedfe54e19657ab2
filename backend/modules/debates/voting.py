"""
Vote collection.

Each member is shown every opinion except their own, numbered 1..N-1, and
must answer in a two-line tagged format::

    VOTE: Option <n>
    REASONING: <free text, may span several lines>

Grammar (tags are case-insensitive, markdown emphasis around tags is
tolerated)::

    response   := <any> vote-line <any> reasoning-line
                | <any> reasoning-line vote-line <any>
    vote-line  := "VOTE" ":" ws* "Option" ws* digits
    reasoning  := "REASONING" ":" ws* <text up to the VOTE line, or to end of response>

A REASONING tag after the VOTE line takes precedence over one before it.

The first integer after "Option" is the choice. A missing or non-numeric
option, an option outside 1..N-1, or a missing REASONING tag fails that
member's vote. An empty reasoning becomes NO_REASONING. Nothing is ever
guessed or defaulted to an option.
"""

import logging
import re
from dataclasses import dataclass
from typing import Sequence

from .exceptions import MemberCallError, SamplerError, VoteParseError
from .fanout import gather_in_panel_order
from .interfaces import ISampler
from .models import Opinion, PanelMember, SamplerMessage, TextContent, Vote
from .panel import PanelRegistry

logger = logging.getLogger(__name__)

DEFAULT_VOTE_MAX_TOKENS = 500
DEFAULT_VOTE_TEMPERATURE = 0.7
NO_REASONING = "No reasoning provided"

_VOTE_TAG = re.compile(r"\**\bVOTE\**\s*:\**", re.IGNORECASE)
_OPTION = re.compile(r"\s*\**\s*Option\s*#?\s*(\d+)", re.IGNORECASE)
_REASONING = re.compile(r"\**REASONING\**\s*:\**\s*(.*)", re.IGNORECASE | re.DOTALL)


class VoteFormatError(ValueError):
    """Raised by parse_vote_response when a response breaks the grammar."""


@dataclass(frozen=True)
class ParsedVote:
    """A syntactically valid voting response."""

    option: int
    reasoning: str


def parse_vote_response(response: str) -> ParsedVote:
    """
    Parse a member's voting response.

    Args:
        response: Raw text returned by the sampler

    Returns:
        The chosen 1-based option number and the reasoning text

    Raises:
        VoteFormatError: If the VOTE line, option number or REASONING tag is missing
    """
    tag = _VOTE_TAG.search(response)
    if tag is None:
        raise VoteFormatError("response has no VOTE line")

    option = _OPTION.match(response, tag.end())
    if option is None:
        raise VoteFormatError("could not parse an option number after VOTE")

    reasoning_match = _REASONING.search(response, tag.end())
    if reasoning_match is not None:
        reasoning = reasoning_match.group(1)
    else:
        # REASONING given before the VOTE line runs up to that line
        reasoning_match = _REASONING.search(response, 0, tag.start())
        if reasoning_match is None:
            raise VoteFormatError("response has no REASONING line")
        reasoning = reasoning_match.group(1)

    reasoning = reasoning.strip() or NO_REASONING
    return ParsedVote(option=int(option.group(1)), reasoning=reasoning)


def build_ballot(member: PanelMember, opinions: Sequence[Opinion]) -> list[Opinion]:
    """Opinions offered to a member: everything except their own, in panel order."""
    return [op for op in opinions if op.member_id != member.id]


def build_voting_prompt(member: PanelMember, ballot: Sequence[Opinion]) -> str:
    """User message presenting the numbered ballot to a member."""
    options = "\n".join(
        f"**Option {number}:** {op.member_name}\n{op.text}\n"
        for number, op in enumerate(ballot, start=1)
    )
    return f"""As {member.display_name}, review the following council member opinions \
and vote for the one that best aligns with your perspective.

{options}
Instructions:
- Evaluate each opinion based on your worldview and expertise
- Consider factors like: feasibility, vision, systems thinking, user impact, etc.
- Vote for the opinion you find most compelling
- Provide clear reasoning for your choice

Respond in this exact format:
VOTE: Option X
REASONING: [Your detailed reasoning for this choice]"""


def resolve_ballot_choice(member: PanelMember, ballot: Sequence[Opinion], parsed: ParsedVote) -> Vote:
    """
    Turn a parsed option number into a Vote.

    Raises:
        VoteParseError: If the option is outside 1..len(ballot)
    """
    if not 1 <= parsed.option <= len(ballot):
        raise VoteParseError(
            member.id,
            member.display_name,
            f"invalid vote option: {parsed.option} (ballot has {len(ballot)} options)",
        )

    chosen = ballot[parsed.option - 1]
    return Vote(
        voter_id=member.id,
        voter_name=member.display_name,
        voted_for_id=chosen.member_id,
        voted_for_name=chosen.member_name,
        reasoning=parsed.reasoning,
    )


class VoteCollector:
    """Asks every panel member to vote on the other members' opinions."""

    def __init__(
        self,
        sampler: ISampler,
        max_tokens: int = DEFAULT_VOTE_MAX_TOKENS,
        temperature: float = DEFAULT_VOTE_TEMPERATURE,
    ):
        self._sampler = sampler
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def collect(self, opinions: Sequence[Opinion], panel: PanelRegistry) -> list[Vote]:
        """
        Collect one vote per panel member, in panel order.

        Args:
            opinions: One opinion per panel member
            panel: The council

        Returns:
            Exactly len(panel) votes, none for the voter's own opinion

        Raises:
            ValueError: If opinions don't cover exactly the panel's members
            MemberCallError: If any member's call fails
            VoteParseError: If any member's response can't be parsed into a vote
        """
        opinion_ids = [op.member_id for op in opinions]
        if sorted(opinion_ids) != sorted(panel.ids()):
            raise ValueError("Voting needs exactly one opinion from every panel member")

        logger.info(f"Collecting votes from {panel.size} panel members")

        async def ask(member: PanelMember) -> Vote:
            return await self._collect_one(member, opinions)

        votes = await gather_in_panel_order(panel.all(), ask)
        logger.info(f"Collected {len(votes)} votes")
        return votes

    async def _collect_one(self, member: PanelMember, opinions: Sequence[Opinion]) -> Vote:
        ballot = build_ballot(member, opinions)
        messages = [
            SamplerMessage(
                role="user",
                content=TextContent(text=build_voting_prompt(member, ballot)),
            )
        ]
        logger.debug(f"Ballot for {member.id} has {len(ballot)} options")

        try:
            result = await self._sampler.generate(
                messages,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system_prompt=member.persona_prompt,
                include_context="none",
            )
        except SamplerError as e:
            logger.warning(f"Vote call failed for {member.id}: {e.reason}")
            raise MemberCallError(member.id, member.display_name, "vote", e.reason) from e
        except TimeoutError as e:
            logger.warning(f"Vote call timed out for {member.id}")
            raise MemberCallError(member.id, member.display_name, "vote", "timed out") from e

        text = result.text
        if text is None:
            raise MemberCallError(
                member.id,
                member.display_name,
                "vote",
                f"expected text content, got '{result.content.type}'",
            )

        try:
            parsed = parse_vote_response(text)
        except VoteFormatError as e:
            logger.warning(f"Unparseable vote from {member.id}: {e}")
            raise VoteParseError(member.id, member.display_name, str(e)) from e

        logger.debug(f"{member.id} chose option {parsed.option}")
        return resolve_ballot_choice(member, ballot, parsed)
