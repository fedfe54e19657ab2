"""
Debates module.

Runs council debates: opinion collection, voting and tallying, gated by
input validation and admission control.

Public API:
- IDebateService: Interface for debate operations
- DebateService: Implementation over a repository and a sampler
- Debate, Results: The debate aggregate and its outcome
- PanelRegistry: The council's members
"""

from .interfaces import IDebateRepository, IDebateService, ISampler
from .models import (
    AdmissionStatus,
    Debate,
    DebateStatus,
    DebateSummary,
    Opinion,
    PanelMember,
    Results,
    ResultsStatus,
    StartDebateResponse,
    Vote,
    VotingResponse,
)
from .exceptions import (
    DebateError,
    DebateNotFoundError,
    InputValidationError,
    InvalidStateError,
    MemberCallError,
    PanelMemberNotFoundError,
    RateLimitExceededError,
    SamplerError,
    StoreError,
    VoteParseError,
)
from .panel import PanelRegistry
from .service import DebateService, build_debate_service

__all__ = [
    # Interfaces
    "IDebateService",
    "IDebateRepository",
    "ISampler",
    # Service
    "DebateService",
    "build_debate_service",
    "PanelRegistry",
    # Models
    "AdmissionStatus",
    "Debate",
    "DebateStatus",
    "DebateSummary",
    "Opinion",
    "PanelMember",
    "Results",
    "ResultsStatus",
    "StartDebateResponse",
    "Vote",
    "VotingResponse",
    # Exceptions
    "DebateError",
    "DebateNotFoundError",
    "InputValidationError",
    "InvalidStateError",
    "MemberCallError",
    "PanelMemberNotFoundError",
    "RateLimitExceededError",
    "SamplerError",
    "StoreError",
    "VoteParseError",
]
