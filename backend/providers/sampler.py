"""Sampler adapter over a LangChain chat model.

Implements the debates module's ISampler protocol: builds the LangChain
message list, binds the per-call generation parameters, enforces the
timeout and reduces the reply to a single SamplerResult content block.
"""

import asyncio
import logging
from typing import Any, Optional, Sequence

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from pydantic import ValidationError

from modules.debates.exceptions import SamplerError
from modules.debates.models import (
    OtherContent,
    SamplerContent,
    SamplerMessage,
    SamplerResult,
    TextContent,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60.0


def to_langchain_messages(
    messages: Sequence[SamplerMessage],
    system_prompt: Optional[str] = None,
) -> list[BaseMessage]:
    """Convert sampler messages (plus optional system prompt) to LangChain messages."""
    converted: list[BaseMessage] = []
    if system_prompt:
        converted.append(SystemMessage(content=system_prompt))
    for message in messages:
        if message.role == "assistant":
            converted.append(AIMessage(content=message.content.text))
        else:
            converted.append(HumanMessage(content=message.content.text))
    return converted


def to_sampler_content(content: Any) -> SamplerContent:
    """
    Reduce a LangChain message content to one content block.

    A plain string is text. For a list of blocks the first text block wins;
    without one, the first block is reported as non-text.

    Raises:
        SamplerError: If the content is empty or of an unknown shape
    """
    if isinstance(content, str):
        return TextContent(text=content)

    if isinstance(content, list) and content:
        for block in content:
            if isinstance(block, str):
                return TextContent(text=block)
            if isinstance(block, dict) and block.get("type") == "text":
                text = block.get("text", "")
                if not isinstance(text, str):
                    raise SamplerError(
                        "malformed response content",
                        original_error=f"text block holds {type(text).__name__}",
                    )
                return TextContent(text=text)
        first = content[0]
        block_type = first.get("type", "unknown") if isinstance(first, dict) else type(first).__name__
        return OtherContent(type=str(block_type))

    raise SamplerError("malformed response content", original_error=repr(content)[:200])


class LangChainSampler:
    """ISampler backed by any LangChain chat model."""

    def __init__(
        self,
        llm: BaseChatModel,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        model_name: Optional[str] = None,
    ):
        self._llm = llm
        self.timeout_seconds = timeout_seconds
        self.model_name = model_name

    async def generate(
        self,
        messages: Sequence[SamplerMessage],
        max_tokens: int,
        temperature: Optional[float] = None,
        system_prompt: Optional[str] = None,
        include_context: str = "none",
    ) -> SamplerResult:
        """
        Generate one reply.

        include_context is accepted for protocol compatibility; a bare chat
        model has no server context to include.

        Raises:
            SamplerError: On timeout, transport failure or malformed content
        """
        params: dict[str, Any] = {"max_tokens": max_tokens}
        if temperature is not None:
            params["temperature"] = temperature

        runnable = self._llm.bind(**params)
        lc_messages = to_langchain_messages(messages, system_prompt)

        try:
            response = await asyncio.wait_for(
                runnable.ainvoke(lc_messages),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            logger.warning(f"Sampler call timed out after {self.timeout_seconds}s")
            raise SamplerError(f"timed out after {self.timeout_seconds}s") from e
        except Exception as e:
            logger.warning(f"Sampler call failed: {type(e).__name__}: {e}")
            raise SamplerError(str(e) or type(e).__name__, original_error=type(e).__name__) from e

        metadata = getattr(response, "response_metadata", None) or {}
        try:
            return SamplerResult(
                role="assistant",
                content=to_sampler_content(getattr(response, "content", None)),
                model=metadata.get("model") or metadata.get("model_name") or self.model_name,
            )
        except ValidationError as e:
            raise SamplerError("malformed response content", original_error="ValidationError") from e
