"""Tests for the vote response parser and vote collection."""

import pytest

from modules.debates.exceptions import MemberCallError, SamplerError, VoteParseError
from modules.debates.models import Opinion
from modules.debates.voting import (
    NO_REASONING,
    ParsedVote,
    VoteCollector,
    VoteFormatError,
    build_ballot,
    build_voting_prompt,
    parse_vote_response,
    resolve_ballot_choice,
)


def make_opinions(panel) -> list[Opinion]:
    return [
        Opinion(
            member_id=m.id,
            member_name=m.display_name,
            text=f"Opinion of {m.id}",
            perspective=m.display_name,
        )
        for m in panel
    ]


class TestParseVoteResponse:
    def test_reference_format(self):
        parsed = parse_vote_response("VOTE: Option 3\nREASONING: Most practical.")
        assert parsed == ParsedVote(option=3, reasoning="Most practical.")

    def test_tags_are_case_insensitive(self):
        parsed = parse_vote_response("vote: option 2\nreasoning: fine")
        assert parsed.option == 2

    def test_tolerates_markdown_emphasis(self):
        parsed = parse_vote_response("**VOTE:** Option 4\n**REASONING:** Bold choice")
        assert parsed == ParsedVote(option=4, reasoning="Bold choice")

    def test_tolerates_preamble_and_hash(self):
        parsed = parse_vote_response("After reflection:\n\nVOTE: Option #7\nREASONING: ok")
        assert parsed.option == 7

    def test_multiline_reasoning(self):
        parsed = parse_vote_response("VOTE: Option 1\nREASONING: first line\nsecond line\n")
        assert parsed.reasoning == "first line\nsecond line"

    def test_first_integer_is_the_choice(self):
        assert parse_vote_response("VOTE: Option 12 or 3\nREASONING: x").option == 12

    def test_empty_reasoning_gets_placeholder(self):
        assert parse_vote_response("VOTE: Option 1\nREASONING:").reasoning == NO_REASONING

    def test_reasoning_before_vote(self):
        parsed = parse_vote_response("REASONING: Grounded and\nrealistic.\nVOTE: Option 5")
        assert parsed == ParsedVote(option=5, reasoning="Grounded and\nrealistic.")

    def test_reasoning_before_vote_with_emphasis(self):
        parsed = parse_vote_response("**REASONING:** Sharp\n**VOTE:** Option 2\n")
        assert parsed == ParsedVote(option=2, reasoning="Sharp")

    def test_reasoning_after_vote_wins(self):
        parsed = parse_vote_response("Reasoning: draft\nVOTE: Option 1\nREASONING: final")
        assert parsed.reasoning == "final"

    @pytest.mark.parametrize(
        "response",
        [
            "I pick the second one.\nREASONING: it is good",
            "VOTE: the visionary\nREASONING: bold",
            "VOTE: Option two\nREASONING: bold",
            "VOTE: Option 2",
            "DEVOTE: Option 2\nREASONING: x",
            "",
        ],
    )
    def test_malformed_responses_fail(self, response):
        """Nothing is guessed: a broken response is a parse failure."""
        with pytest.raises(VoteFormatError):
            parse_vote_response(response)


class TestBallot:
    def test_ballot_excludes_own_opinion(self, panel):
        member = panel.get("optimist")
        ballot = build_ballot(member, make_opinions(panel))
        assert len(ballot) == panel.size - 1
        assert "optimist" not in [op.member_id for op in ballot]
        assert [op.member_id for op in ballot] == [i for i in panel.ids() if i != "optimist"]

    def test_voting_prompt_numbers_options(self, panel):
        member = panel.get("pragmatist")
        ballot = build_ballot(member, make_opinions(panel))
        prompt = build_voting_prompt(member, ballot)

        assert prompt.startswith(f"As {member.display_name},")
        assert f"**Option 1:** {ballot[0].member_name}" in prompt
        assert f"**Option 8:** {ballot[7].member_name}" in prompt
        assert "**Option 9:**" not in prompt
        assert "VOTE: Option X" in prompt

    @pytest.mark.parametrize("option", [0, 9, 42])
    def test_out_of_range_option_fails(self, panel, option):
        member = panel.get("pragmatist")
        ballot = build_ballot(member, make_opinions(panel))

        with pytest.raises(VoteParseError) as exc_info:
            resolve_ballot_choice(member, ballot, ParsedVote(option=option, reasoning="x"))
        assert f"invalid vote option: {option}" in exc_info.value.reason
        assert exc_info.value.code == "VOTE_PARSE_FAILED"

    def test_option_maps_to_ballot_position(self, panel):
        member = panel.get("pragmatist")
        ballot = build_ballot(member, make_opinions(panel))
        vote = resolve_ballot_choice(member, ballot, ParsedVote(option=2, reasoning="why"))
        assert vote.voter_id == "pragmatist"
        assert vote.voted_for_id == "systems_thinker"
        assert vote.reasoning == "why"


class TestVoteCollector:
    @pytest.mark.asyncio
    async def test_one_vote_per_member_none_for_self(self, panel, sampler):
        votes = await VoteCollector(sampler).collect(make_opinions(panel), panel)

        assert [v.voter_id for v in votes] == panel.ids()
        assert all(v.voted_for_id != v.voter_id for v in votes)
        # Option 1 is the pragmatist for everyone except the pragmatist
        assert votes[0].voted_for_id == "visionary"
        assert all(v.voted_for_id == "pragmatist" for v in votes[1:])

    @pytest.mark.asyncio
    async def test_uses_vote_parameters(self, panel, sampler):
        await VoteCollector(sampler, max_tokens=77, temperature=0.1).collect(
            make_opinions(panel), panel
        )
        assert {c["max_tokens"] for c in sampler.calls} == {77}
        assert {c["temperature"] for c in sampler.calls} == {0.1}

    @pytest.mark.asyncio
    async def test_unparseable_vote_fails_phase(self, panel, sampler):
        def responder(member, prompt):
            if member.id == "analyst":
                return "I abstain."
            return "VOTE: Option 1\nREASONING: ok"

        sampler.responder = responder

        with pytest.raises(VoteParseError) as exc_info:
            await VoteCollector(sampler).collect(make_opinions(panel), panel)
        assert exc_info.value.member_id == "analyst"
        assert exc_info.value.phase == "vote"

    @pytest.mark.asyncio
    async def test_out_of_range_vote_fails_phase(self, panel, sampler):
        sampler.responder = lambda member, prompt: "VOTE: Option 9\nREASONING: ok"
        with pytest.raises(VoteParseError, match="invalid vote option: 9"):
            await VoteCollector(sampler).collect(make_opinions(panel), panel)

    @pytest.mark.asyncio
    async def test_sampler_failure_fails_phase(self, panel, sampler):
        def responder(member, prompt):
            raise SamplerError("rate limited")

        sampler.responder = responder
        with pytest.raises(MemberCallError) as exc_info:
            await VoteCollector(sampler).collect(make_opinions(panel), panel)
        assert exc_info.value.phase == "vote"
        assert not isinstance(exc_info.value, VoteParseError)

    @pytest.mark.asyncio
    async def test_requires_one_opinion_per_member(self, panel, sampler):
        with pytest.raises(ValueError):
            await VoteCollector(sampler).collect(make_opinions(panel)[:-1], panel)
        assert sampler.calls == []
