"""Tests for opinion collection."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from modules.debates.exceptions import MemberCallError, SamplerError
from modules.debates.models import OtherContent, SamplerResult, TextContent
from modules.debates.opinions import OpinionCollector, build_opinion_request


class TestBuildOpinionRequest:
    def test_addresses_member_and_topic(self, panel):
        member = panel.get("analyst")
        assert build_opinion_request(member, "Cats or dogs?") == (
            "As 📊 The Analyst, provide your opinion on: Cats or dogs?"
        )


class TestOpinionCollector:
    @pytest.mark.asyncio
    async def test_one_opinion_per_member_in_panel_order(self, panel, sampler):
        """N members produce exactly N opinions, in registry order."""
        opinions = await OpinionCollector(sampler).collect("Cats or dogs?", panel)

        assert [op.member_id for op in opinions] == panel.ids()
        for opinion, member in zip(opinions, panel):
            assert opinion.member_name == member.display_name
            assert opinion.perspective == member.display_name
            assert opinion.text == f"Opinion of {member.id}"

    @pytest.mark.asyncio
    async def test_passes_persona_and_generation_parameters(self, panel, sampler):
        await OpinionCollector(sampler, max_tokens=123, temperature=0.5).collect("Topic", panel)

        assert len(sampler.calls) == panel.size
        for call in sampler.calls:
            member = panel.get(call["member_id"])
            assert call["system_prompt"] == member.persona_prompt
            assert call["max_tokens"] == 123
            assert call["temperature"] == 0.5
            assert call["include_context"] == "none"

    @pytest.mark.asyncio
    async def test_cleans_response_text(self, panel, sampler):
        sampler.responder = lambda member, prompt: "```\nFirst   point\n\n\n\nSecond\n```"
        opinions = await OpinionCollector(sampler).collect("Topic", panel)
        assert opinions[0].text == "First point\n\nSecond"

    @pytest.mark.asyncio
    async def test_sampler_failure_fails_whole_set(self, panel, sampler):
        """One member's transport failure fails the phase with that member named."""

        def responder(member, prompt):
            if member.id == "mediator":
                raise SamplerError("connection refused")
            return "fine"

        sampler.responder = responder

        with pytest.raises(MemberCallError) as exc_info:
            await OpinionCollector(sampler).collect("Topic", panel)

        error = exc_info.value
        assert error.member_id == "mediator"
        assert error.phase == "opinion"
        assert error.reason == "connection refused"
        assert error.code == "MEMBER_CALL_FAILED"

    @pytest.mark.asyncio
    async def test_timeout_is_a_member_failure(self, panel):
        sampler = AsyncMock()
        sampler.generate.side_effect = asyncio.TimeoutError()

        with pytest.raises(MemberCallError) as exc_info:
            await OpinionCollector(sampler).collect("Topic", panel)
        assert exc_info.value.reason == "timed out"

    @pytest.mark.asyncio
    async def test_non_text_content_is_a_member_failure(self, panel):
        sampler = AsyncMock()
        sampler.generate.return_value = SamplerResult(content=OtherContent(type="image"))

        with pytest.raises(MemberCallError, match="expected text content, got 'image'"):
            await OpinionCollector(sampler).collect("Topic", panel)

    @pytest.mark.asyncio
    async def test_empty_text_is_a_member_failure(self, panel):
        sampler = AsyncMock()
        sampler.generate.return_value = SamplerResult(content=TextContent(text="  \n "))

        with pytest.raises(MemberCallError, match="empty response"):
            await OpinionCollector(sampler).collect("Topic", panel)
