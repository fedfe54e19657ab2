"""Tests for the LangChain sampler adapter."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from modules.debates.exceptions import MemberCallError, SamplerError
from modules.debates.interfaces import ISampler
from modules.debates.models import OtherContent, SamplerMessage, TextContent
from modules.debates.opinions import OpinionCollector
from modules.debates.panel import PanelRegistry
from providers.sampler import LangChainSampler, to_langchain_messages, to_sampler_content


def mock_llm(reply=None, side_effect=None) -> MagicMock:
    """Chat model double whose bound runnable returns `reply`."""
    llm = MagicMock()
    llm.bind.return_value.ainvoke = AsyncMock(return_value=reply, side_effect=side_effect)
    return llm


def user(text: str) -> SamplerMessage:
    return SamplerMessage(role="user", content=TextContent(text=text))


class TestToLangchainMessages:
    def test_system_prompt_first(self):
        messages = to_langchain_messages([user("hi")], system_prompt="persona")
        assert isinstance(messages[0], SystemMessage)
        assert messages[0].content == "persona"
        assert isinstance(messages[1], HumanMessage)

    def test_roles_map_to_message_types(self):
        messages = to_langchain_messages(
            [user("q"), SamplerMessage(role="assistant", content=TextContent(text="a"))]
        )
        assert [type(m) for m in messages] == [HumanMessage, AIMessage]


class TestToSamplerContent:
    def test_string_is_text(self):
        assert to_sampler_content("hello") == TextContent(text="hello")

    def test_first_text_block_wins(self):
        content = [{"type": "thinking", "thinking": "..."}, {"type": "text", "text": "answer"}]
        assert to_sampler_content(content) == TextContent(text="answer")

    def test_non_text_blocks(self):
        assert to_sampler_content([{"type": "tool_use", "id": "x"}]) == OtherContent(type="tool_use")

    def test_empty_content_is_malformed(self):
        with pytest.raises(SamplerError, match="malformed"):
            to_sampler_content([])

    @pytest.mark.parametrize("text", [None, 42, ["nested"]])
    def test_text_block_with_non_string_text_is_malformed(self, text):
        with pytest.raises(SamplerError, match="malformed"):
            to_sampler_content([{"type": "text", "text": text}])


class TestLangChainSampler:
    def test_satisfies_protocol(self):
        assert isinstance(LangChainSampler(mock_llm()), ISampler)

    @pytest.mark.asyncio
    async def test_generate_binds_parameters(self):
        llm = mock_llm(AIMessage(content="An opinion", response_metadata={"model": "claude-x"}))
        sampler = LangChainSampler(llm)

        result = await sampler.generate([user("hi")], max_tokens=300, temperature=0.8, system_prompt="p")

        llm.bind.assert_called_once_with(max_tokens=300, temperature=0.8)
        sent = llm.bind.return_value.ainvoke.call_args[0][0]
        assert isinstance(sent[0], SystemMessage)
        assert result.role == "assistant"
        assert result.text == "An opinion"
        assert result.model == "claude-x"

    @pytest.mark.asyncio
    async def test_temperature_omitted_when_none(self):
        llm = mock_llm(AIMessage(content="ok"))
        await LangChainSampler(llm, model_name="m").generate([user("hi")], max_tokens=10)
        llm.bind.assert_called_once_with(max_tokens=10)

    @pytest.mark.asyncio
    async def test_model_name_fallback(self):
        llm = mock_llm(AIMessage(content="ok"))
        result = await LangChainSampler(llm, model_name="configured").generate([user("hi")], 10)
        assert result.model == "configured"

    @pytest.mark.asyncio
    async def test_transport_error_becomes_sampler_error(self):
        llm = mock_llm(side_effect=ConnectionError("connection refused"))

        with pytest.raises(SamplerError) as exc_info:
            await LangChainSampler(llm).generate([user("hi")], max_tokens=10)

        assert exc_info.value.reason == "connection refused"
        assert exc_info.value.details["original_error"] == "ConnectionError"

    @pytest.mark.asyncio
    async def test_timeout_becomes_sampler_error(self):
        async def slow(messages):
            await asyncio.sleep(1)

        llm = MagicMock()
        llm.bind.return_value.ainvoke = slow

        with pytest.raises(SamplerError, match="timed out"):
            await LangChainSampler(llm, timeout_seconds=0.01).generate([user("hi")], max_tokens=10)

    @pytest.mark.asyncio
    async def test_malformed_text_block_becomes_sampler_error(self):
        llm = mock_llm(AIMessage(content=[{"type": "text", "text": None}]))

        with pytest.raises(SamplerError, match="malformed"):
            await LangChainSampler(llm).generate([user("hi")], max_tokens=10)

    @pytest.mark.asyncio
    async def test_malformed_reply_fails_the_member_slot(self):
        """A malformed reply surfaces from collection as a member-identifying error."""
        llm = mock_llm(AIMessage(content=[{"type": "text", "text": None}]))
        collector = OpinionCollector(LangChainSampler(llm))

        with pytest.raises(MemberCallError) as exc_info:
            await collector.collect("Cats or dogs?", PanelRegistry.default())

        assert exc_info.value.phase == "opinion"
        assert exc_info.value.member_id in PanelRegistry.default().ids()
