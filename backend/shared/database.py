"""
Supabase client for the debate store.

Only the backend writes debates, so a single service-role client is shared
by every repository in the process.
"""

from typing import Optional

from supabase import create_client, Client

from .config import Settings, get_settings

_client: Optional[Client] = None


def get_supabase_client(settings: Optional[Settings] = None) -> Client:
    """
    Return the process-wide service-role client, creating it on first use.

    Args:
        settings: Settings to read the URL and key from (defaults to get_settings())

    Raises:
        RuntimeError: If the Supabase URL or service role key is not configured
    """
    global _client

    if _client is not None:
        return _client

    settings = settings or get_settings()
    missing = [
        name
        for name, value in (
            ("COUNCIL_SUPABASE_URL", settings.supabase_url),
            ("COUNCIL_SUPABASE_SERVICE_ROLE_KEY", settings.supabase_service_role_key),
        )
        if not value
    ]
    if missing:
        raise RuntimeError(
            f"Supabase storage selected but {' and '.join(missing)} not set. "
            "Set COUNCIL_SUPABASE_URL and COUNCIL_SUPABASE_SERVICE_ROLE_KEY, "
            "or use COUNCIL_STORAGE_BACKEND=memory."
        )

    _client = create_client(settings.supabase_url, settings.supabase_service_role_key)
    return _client


def reset_client_cache() -> None:
    """Drop the cached client (tests, configuration changes)."""
    global _client
    _client = None
