"""
Base exception classes for the council backend.

Each module defines its own exceptions on top of these bases so callers
can tell input problems, missing resources and infrastructure failures apart
without inspecting messages.
"""

from typing import Optional, Any


class CouncilError(Exception):
    """
    Base exception for all council errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(CouncilError):
    """Resource not found."""

    pass


class ValidationError(CouncilError):
    """Input validation failed."""

    pass


class ExternalServiceError(CouncilError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
