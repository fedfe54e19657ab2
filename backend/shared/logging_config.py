"""
Logging setup shared by the API server and the CLI.

Modules log through ``logging.getLogger(__name__)``; entry points call
configure_logging() once at startup.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the root logger with a single stream handler.

    Calling it again only updates the level.

    Args:
        level: Logging level name (e.g. "INFO", "DEBUG")
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    if not any(getattr(h, "_council_handler", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._council_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)


def truncate_for_log(text: str, limit: int = 80) -> str:
    """Shorten user-supplied text before it goes into a log line."""
    return text if len(text) <= limit else text[:limit] + "..."
