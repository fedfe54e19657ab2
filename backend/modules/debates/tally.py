"""
Vote tally and winner resolution.

Pure functions: the same multiset of votes always produces the same
Results, whatever order the votes arrive in. Candidates are ordered by
descending vote count, then ascending member ID. Every candidate tied for
the top count is a winner.
"""

from collections import Counter
from datetime import datetime, timezone
from typing import Optional, Sequence

from .models import Results, ResultsStatus, Vote, VoteTotal


def tally_votes(votes: Sequence[Vote]) -> list[VoteTotal]:
    """
    Count votes per opinion.

    Returns:
        One VoteTotal per opinion that received at least one vote, ordered
        by descending count then ascending member ID
    """
    counts = Counter(vote.voted_for_id for vote in votes)
    names = {vote.voted_for_id: vote.voted_for_name for vote in votes}
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [
        VoteTotal(member_id=member_id, member_name=names[member_id], count=count)
        for member_id, count in ordered
    ]


def summarize(winners: Sequence[VoteTotal], total_votes: int) -> str:
    """One-sentence narrative of the outcome."""
    if not winners:
        return "No votes have been cast."
    top = winners[0].count
    if len(winners) == 1:
        return f"{winners[0].member_name} won with {top} of {total_votes} votes."
    names = ", ".join(w.member_name for w in winners[:-1]) + f" and {winners[-1].member_name}"
    return f"Tie between {names} with {top} of {total_votes} votes each."


def resolve(votes: Sequence[Vote], now: Optional[datetime] = None) -> Results:
    """
    Resolve a vote set into Results.

    An empty vote set yields no winners and IN_PROGRESS status; callers
    only resolve once every panel member has voted.

    Args:
        votes: The debate's votes
        now: Timestamp for the results (defaults to current UTC time)

    Returns:
        Results with the full winner set and per-opinion totals
    """
    totals = tally_votes(votes)
    top = totals[0].count if totals else 0
    winners = [t for t in totals if t.count == top] if totals else []

    return Results(
        status=ResultsStatus.RESULTS_READY if winners else ResultsStatus.IN_PROGRESS,
        winner_ids=[w.member_id for w in winners],
        winner_names=[w.member_name for w in winners],
        synthesis=summarize(winners, len(votes)),
        timestamp=now or datetime.now(timezone.utc),
        vote_totals=totals,
    )
