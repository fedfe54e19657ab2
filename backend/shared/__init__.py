"""
Shared infrastructure for the council backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- logging_config: Log setup for entry points
- repository: Base class for Supabase repositories

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import get_supabase_client, reset_client_cache
from .exceptions import (
    CouncilError,
    NotFoundError,
    ValidationError,
    ExternalServiceError,
)
from .logging_config import configure_logging
from .repository import BaseRepository, StoreError

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "reset_client_cache",
    "CouncilError",
    "NotFoundError",
    "ValidationError",
    "ExternalServiceError",
    "configure_logging",
    "BaseRepository",
    "StoreError",
]
