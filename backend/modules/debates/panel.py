"""
Panel registry.

The council is a fixed, ordered set of personas. The registry is built once
at startup and passed to the components that need it; it is never mutated.
"""

from typing import Iterator, Optional, Sequence

from .exceptions import PanelMemberNotFoundError
from .models import PanelMember


PERSONA_TEMPLATE = """You are {name}, one member of an advisory council whose members \
each argue from a distinct worldview.

{context}

Stay in character. Be concise and concrete, and commit to a clear position."""


# (id, display name, persona context) for the reference council
_REFERENCE_PANEL: tuple[tuple[str, str, str], ...] = (
    (
        "pragmatist",
        "🔧 The Pragmatist",
        "Focus on practicality, feasibility, and real-world constraints.\n"
        "Consider resource limitations, time constraints, and implementation challenges.\n"
        "Prefer simple, tested approaches over experimental ones.",
    ),
    (
        "visionary",
        "🌟 The Visionary",
        "Focus on long-term potential and transformative possibilities.\n"
        "Consider how this could be revolutionary rather than just incremental.\n"
        "Embrace ambitious ideas even if they seem challenging today.",
    ),
    (
        "systems_thinker",
        "🔗 The Systems Thinker",
        "Focus on system-level effects and interconnections.\n"
        "Consider feedback loops, dependencies, and cascading consequences.\n"
        "Look for patterns and second-order effects.",
    ),
    (
        "optimist",
        "😊 The Optimist",
        "Focus on opportunities and positive possibilities.\n"
        "Emphasize strengths, advantages, and potential benefits.\n"
        "Approach challenges with enthusiasm and confidence.",
    ),
    (
        "devils_advocate",
        "😈 The Devil's Advocate",
        "Focus on potential flaws, risks, and alternative viewpoints.\n"
        "Challenge assumptions and explore what could go wrong.\n"
        "Ask the questions others might be afraid to ask.",
    ),
    (
        "mediator",
        "🤝 The Mediator",
        "Focus on finding common ground and shared interests.\n"
        "Look for ways to integrate different perspectives into a balanced solution.\n"
        "Emphasize collaboration and mutual understanding.",
    ),
    (
        "user_advocate",
        "👥 The User Advocate",
        "Focus on user experience, accessibility, and inclusion.\n"
        "Consider diverse user needs and potential barriers.\n"
        "Prioritize intuitive, user-friendly design.",
    ),
    (
        "traditionalist",
        "📜 The Traditionalist",
        "Focus on historical precedents and proven methods.\n"
        "Consider what has worked well in the past and why.\n"
        "Value stability and evolution over revolution.",
    ),
    (
        "analyst",
        "📊 The Analyst",
        "Focus on data, metrics, and objective evidence.\n"
        "Break down problems systematically and quantifiably.\n"
        "Demand evidence for claims and predictions.",
    ),
)

REFERENCE_PANEL_SIZE = len(_REFERENCE_PANEL)


class PanelRegistry:
    """
    Immutable, ordered catalog of panel members.

    Order is significant: opinions and votes are always reported in
    registry order, and ballots are numbered from it.
    """

    def __init__(self, members: Sequence[PanelMember]):
        if not members:
            raise ValueError("A panel needs at least one member")

        by_id: dict[str, PanelMember] = {}
        for member in members:
            if member.id in by_id:
                raise ValueError(f"Duplicate panel member id: {member.id}")
            by_id[member.id] = member

        self._members: tuple[PanelMember, ...] = tuple(members)
        self._by_id = by_id

    @classmethod
    def default(cls) -> "PanelRegistry":
        """Build the nine-member reference council."""
        return cls([
            PanelMember(
                id=member_id,
                display_name=name,
                persona_prompt=PERSONA_TEMPLATE.format(name=name, context=context),
            )
            for member_id, name, context in _REFERENCE_PANEL
        ])

    @property
    def size(self) -> int:
        return len(self._members)

    def all(self) -> tuple[PanelMember, ...]:
        return self._members

    def get(self, member_id: str) -> PanelMember:
        """Return the member with this ID or raise PanelMemberNotFoundError."""
        member = self._by_id.get(member_id)
        if member is None:
            raise PanelMemberNotFoundError(member_id)
        return member

    def find(self, member_id: str) -> Optional[PanelMember]:
        return self._by_id.get(member_id)

    def is_valid_id(self, member_id: str) -> bool:
        return member_id in self._by_id

    def ids(self) -> list[str]:
        return [m.id for m in self._members]

    def __iter__(self) -> Iterator[PanelMember]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)
