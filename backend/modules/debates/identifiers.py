"""
Debate identifier generation.

Format: ``YYYYMMDD_HHMMSS_`` (UTC creation time) followed by 12 random
lowercase alphanumeric characters, e.g. ``20240101_120000_abcdef012345``.
"""

import re
import secrets
import string
from datetime import datetime, timezone
from typing import Optional

DEBATE_ID_MAX_LENGTH = 64
DEBATE_ID_SUFFIX_LENGTH = 12
DEBATE_ID_PATTERN = re.compile(r"^\d{8}_\d{6}_[a-z0-9]{12}$")

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def generate_debate_id(now: Optional[datetime] = None) -> str:
    """
    Generate a fresh debate ID.

    Args:
        now: Creation time (defaults to the current UTC time)

    Returns:
        A new ID matching DEBATE_ID_PATTERN
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(DEBATE_ID_SUFFIX_LENGTH))
    return f"{now:%Y%m%d_%H%M%S}_{suffix}"


def is_debate_id_format(value: str) -> bool:
    return DEBATE_ID_PATTERN.fullmatch(value) is not None
