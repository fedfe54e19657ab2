"""
Base repository class for database access.

Wraps Supabase client access and turns client failures into StoreError so
the orchestration layer sees one failure type per persistence operation.
"""

from typing import Any, Callable, TypeVar, Generic

from supabase import Client

from .exceptions import ExternalServiceError


T = TypeVar("T")
R = TypeVar("R")


class StoreError(ExternalServiceError):
    """Raised when a persistence operation fails."""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            f"Store operation '{operation}' failed: {reason}",
            service="store",
            code="STORE_FAILURE",
            details={"operation": operation, "reason": reason},
        )
        self.operation = operation


class BaseRepository(Generic[T]):
    """
    Base class for Supabase-backed repositories.

    Provides:
    - Supabase client access via self._db
    - _execute() to run a query builder and map client errors to StoreError

    Subclasses implement domain-specific data access methods and handle
    dict-to-Pydantic model mapping internally.
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    def _execute(self, operation: str, query: Callable[[], R]) -> R:
        """
        Run a query, converting client exceptions into StoreError.

        Args:
            operation: Name of the repository operation (for error reporting)
            query: Zero-argument callable that builds and executes the query

        Returns:
            Whatever the query returns (usually an APIResponse).
        """
        try:
            return query()
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(operation, str(e)) from e

    @staticmethod
    def _rows(response: Any) -> list[dict[str, Any]]:
        """Return the row list from a Supabase response (empty if none)."""
        return list(response.data or [])
