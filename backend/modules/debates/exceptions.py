"""
Debates module exceptions.

Every failure a caller can see is one of these types, so the caller can
decide whether to fix input, retry later, or treat the debate as stuck.
"""

from typing import Optional

from shared.exceptions import (
    CouncilError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)
from shared.repository import StoreError


class DebateError(CouncilError):
    """Base exception for debate-related errors."""

    pass


class DebateNotFoundError(NotFoundError):
    """Raised when a debate is not found."""

    def __init__(self, debate_id: str):
        super().__init__(
            f"Debate not found: {debate_id}",
            code="DEBATE_NOT_FOUND",
            details={"debate_id": debate_id},
        )
        self.debate_id = debate_id


class PanelMemberNotFoundError(NotFoundError):
    """Raised when a panel member ID is not in the registry."""

    def __init__(self, member_id: str):
        super().__init__(
            f"Panel member not found: {member_id}",
            code="PANEL_MEMBER_NOT_FOUND",
            details={"member_id": member_id},
        )


class InputValidationError(ValidationError):
    """Raised when a topic or external identifier is rejected."""

    def __init__(
        self,
        message: str,
        validation_type: str,
        field: Optional[str] = None,
    ):
        super().__init__(
            message,
            code="VALIDATION_FAILED",
            details={"validation_type": validation_type, "field": field},
        )
        self.validation_type = validation_type
        self.field = field


class RateLimitExceededError(CouncilError):
    """Raised when admission control denies a new debate."""

    def __init__(
        self,
        limit_type: str,
        current: int,
        limit: int,
        retry_after_seconds: Optional[int] = None,
    ):
        super().__init__(
            f"Rate limit exceeded: {current}/{limit} debates ({limit_type})",
            code="RATE_LIMIT_EXCEEDED",
            details={
                "limit_type": limit_type,
                "current": current,
                "limit": limit,
                "retry_after_seconds": retry_after_seconds,
            },
        )
        self.limit_type = limit_type
        self.current = current
        self.limit = limit
        self.retry_after_seconds = retry_after_seconds


class InvalidStateError(DebateError):
    """Raised when a lifecycle transition is attempted out of order."""

    def __init__(
        self,
        debate_id: str,
        current: str,
        required: str,
        reason: Optional[str] = None,
    ):
        message = f"Debate {debate_id} is '{current}', operation requires '{required}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message,
            code="INVALID_STATE",
            details={
                "debate_id": debate_id,
                "current_status": current,
                "required_status": required,
            },
        )
        self.current = current
        self.required = required


class MemberCallError(DebateError):
    """Raised when one panel member's sampler call or response fails."""

    default_code = "MEMBER_CALL_FAILED"

    def __init__(
        self,
        member_id: str,
        member_name: str,
        phase: str,
        reason: str,
    ):
        super().__init__(
            f"{phase.capitalize()} from {member_name} failed: {reason}",
            code=self.default_code,
            details={
                "member_id": member_id,
                "member_name": member_name,
                "phase": phase,
                "reason": reason,
            },
        )
        self.member_id = member_id
        self.member_name = member_name
        self.phase = phase
        self.reason = reason


class VoteParseError(MemberCallError):
    """Raised when a member's voting response cannot be turned into a vote."""

    default_code = "VOTE_PARSE_FAILED"

    def __init__(self, member_id: str, member_name: str, reason: str):
        super().__init__(member_id, member_name, "vote", reason)


class SamplerError(ExternalServiceError):
    """Raised when the text-generation backend fails or times out."""

    def __init__(self, reason: str, original_error: Optional[str] = None):
        super().__init__(
            f"Sampler error: {reason}",
            service="sampler",
            code="SAMPLER_FAILURE",
            details={"reason": reason, "original_error": original_error},
        )
        self.reason = reason


__all__ = [
    "DebateError",
    "DebateNotFoundError",
    "PanelMemberNotFoundError",
    "InputValidationError",
    "RateLimitExceededError",
    "InvalidStateError",
    "MemberCallError",
    "VoteParseError",
    "SamplerError",
    "StoreError",
]
