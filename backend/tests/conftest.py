"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules:
a scripted sampler standing in for the LLM backend, and singleton resets.
"""

from typing import Callable, Optional, Sequence

import pytest

from api.dependencies import reset_container
from modules.debates.models import (
    PanelMember,
    SamplerMessage,
    SamplerResult,
    TextContent,
)
from modules.debates.panel import PanelRegistry
from shared.config import get_settings


Responder = Callable[[PanelMember, str], str]


def text_result(text: str) -> SamplerResult:
    """Wrap text as a sampler result."""
    return SamplerResult(role="assistant", content=TextContent(text=text))


def is_voting_prompt(text: str) -> bool:
    return "VOTE: Option X" in text


def default_responder(member: PanelMember, prompt: str) -> str:
    """Opinions name their member; every vote picks option 1."""
    if is_voting_prompt(prompt):
        return f"VOTE: Option 1\nREASONING: {member.id} finds it most compelling"
    return f"Opinion of {member.id}"


class ScriptedSampler:
    """
    In-process ISampler double.

    Works out which member is speaking from the "As <display name>," prefix
    of the user message and answers through a responder function. A
    responder may raise to simulate a transport failure.
    """

    def __init__(self, panel: PanelRegistry, responder: Responder = default_responder):
        self.panel = panel
        self.responder = responder
        self.calls: list[dict] = []

    def member_for(self, prompt: str) -> PanelMember:
        for member in self.panel:
            if prompt.startswith(f"As {member.display_name},"):
                return member
        raise AssertionError(f"No panel member addressed by prompt: {prompt[:60]}")

    async def generate(
        self,
        messages: Sequence[SamplerMessage],
        max_tokens: int,
        temperature: Optional[float] = None,
        system_prompt: Optional[str] = None,
        include_context: str = "none",
    ) -> SamplerResult:
        prompt = messages[-1].content.text
        member = self.member_for(prompt)
        self.calls.append(
            {
                "member_id": member.id,
                "prompt": prompt,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "system_prompt": system_prompt,
                "include_context": include_context,
            }
        )
        return text_result(self.responder(member, prompt))


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached settings and the service container around each test."""
    get_settings.cache_clear()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_container()


@pytest.fixture
def panel() -> PanelRegistry:
    """The reference nine-member council."""
    return PanelRegistry.default()


@pytest.fixture
def sampler(panel: PanelRegistry) -> ScriptedSampler:
    """A sampler that answers every member successfully."""
    return ScriptedSampler(panel)
