"""
Opinion collection.

Every panel member answers the topic independently and concurrently. The
collection is all-or-nothing: one member failing fails the whole set.
"""

import logging

from .exceptions import MemberCallError, SamplerError
from .fanout import gather_in_panel_order
from .guard import clean_response_text
from .interfaces import ISampler
from .models import Opinion, PanelMember, SamplerMessage, TextContent
from .panel import PanelRegistry

logger = logging.getLogger(__name__)

DEFAULT_OPINION_MAX_TOKENS = 300
DEFAULT_OPINION_TEMPERATURE = 0.8


def build_opinion_request(member: PanelMember, topic: str) -> str:
    """User message asking one member for their opinion."""
    return f"As {member.display_name}, provide your opinion on: {topic}"


class OpinionCollector:
    """Fans a topic out to every panel member via the sampler."""

    def __init__(
        self,
        sampler: ISampler,
        max_tokens: int = DEFAULT_OPINION_MAX_TOKENS,
        temperature: float = DEFAULT_OPINION_TEMPERATURE,
    ):
        self._sampler = sampler
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def collect(self, topic: str, panel: PanelRegistry) -> list[Opinion]:
        """
        Collect one opinion per panel member, in panel order.

        Args:
            topic: Validated and sanitized topic
            panel: The council

        Returns:
            Exactly len(panel) opinions

        Raises:
            MemberCallError: If any member's call fails or returns no usable text
        """
        logger.info(f"Collecting opinions from {panel.size} panel members")

        async def ask(member: PanelMember) -> Opinion:
            return await self._collect_one(member, topic)

        opinions = await gather_in_panel_order(panel.all(), ask)
        logger.info(f"Collected {len(opinions)} opinions")
        return opinions

    async def _collect_one(self, member: PanelMember, topic: str) -> Opinion:
        messages = [
            SamplerMessage(
                role="user",
                content=TextContent(text=build_opinion_request(member, topic)),
            )
        ]

        try:
            result = await self._sampler.generate(
                messages,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system_prompt=member.persona_prompt,
                include_context="none",
            )
        except SamplerError as e:
            logger.warning(f"Opinion call failed for {member.id}: {e.reason}")
            raise MemberCallError(member.id, member.display_name, "opinion", e.reason) from e
        except TimeoutError as e:
            logger.warning(f"Opinion call timed out for {member.id}")
            raise MemberCallError(member.id, member.display_name, "opinion", "timed out") from e

        text = result.text
        if text is None:
            raise MemberCallError(
                member.id,
                member.display_name,
                "opinion",
                f"expected text content, got '{result.content.type}'",
            )

        text = clean_response_text(text)
        if not text:
            raise MemberCallError(member.id, member.display_name, "opinion", "empty response")

        return Opinion(
            member_id=member.id,
            member_name=member.display_name,
            text=text,
            perspective=member.display_name,
        )
