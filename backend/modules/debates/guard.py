"""
Input guard for topics and externally supplied identifiers.

Everything that enters the engine from outside the process passes through
here first. Validation fails closed: suspicious input is rejected with a
typed error, never silently rewritten and accepted.
"""

import logging
import re

from .exceptions import InputValidationError
from .identifiers import DEBATE_ID_MAX_LENGTH, is_debate_id_format

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOPIC_LENGTH = 5000
DEFAULT_SANITIZE_LENGTH = 10000

# (signature name reported to the caller, pattern)
INJECTION_SIGNATURES: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (name, re.compile(pattern, re.IGNORECASE))
    for name, pattern in (
        ("ignore previous instructions", r"ignore\s+(all\s+)?(the\s+)?(previous|above)"),
        ("disregard the above", r"disregard\s+(all\s+)?(the\s+)?(previous|above)"),
        ("forget previous instructions", r"forget\s+(all\s+)?(the\s+)?(previous|above)"),
        ("start a new conversation", r"new\s+(conversation|chat)"),
        ("override instructions", r"override\s+(all\s+)?(the\s+|your\s+)?instructions"),
        ("admin mode", r"admin\s+mode"),
        ("system prompt", r"system\s+prompt"),
    )
)

# C0 controls and DEL, except tab (\x09), newline (\x0a) and carriage return (\x0d)
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_TRAVERSAL_PATTERNS = ("..", "/", "\\", "\0")
_CODE_FENCE = re.compile(r"```\w*\n?")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")
_EXCESS_SPACES = re.compile(r"[ \t]{2,}")


def sanitize(text: str, max_length: int = DEFAULT_SANITIZE_LENGTH) -> str:
    """
    Strip NUL and non-printable control characters, then truncate.

    Newlines and tabs are kept. sanitize(sanitize(x, n), n) == sanitize(x, n).

    Raises:
        ValueError: If max_length is negative
    """
    if max_length < 0:
        raise ValueError(f"max_length must be non-negative, got {max_length}")
    cleaned = _CONTROL_CHARS.sub("", text)
    return cleaned[:max_length]


def clean_response_text(text: str) -> str:
    """
    Normalise text returned by the sampler before it is stored.

    Sanitizes, drops markdown code fence markers, collapses runs of blank
    lines and horizontal whitespace, and trims.
    """
    cleaned = sanitize(text)
    cleaned = _CODE_FENCE.sub("", cleaned)
    cleaned = _EXCESS_NEWLINES.sub("\n\n", cleaned)
    cleaned = _EXCESS_SPACES.sub(" ", cleaned)
    return cleaned.strip()


class InputGuard:
    """Validates topics and external debate IDs."""

    def __init__(self, max_topic_length: int = DEFAULT_MAX_TOPIC_LENGTH):
        self.max_topic_length = max_topic_length

    def validate_topic(self, text: str) -> str:
        """
        Validate a raw debate topic.

        Args:
            text: Topic as supplied by the caller

        Returns:
            The topic, unchanged

        Raises:
            InputValidationError: empty_prompt, prompt_length or prompt_injection
        """
        if not text or not text.strip():
            raise InputValidationError(
                "Prompt cannot be empty",
                validation_type="empty_prompt",
                field="topic",
            )

        if len(text) > self.max_topic_length:
            raise InputValidationError(
                f"Prompt too long: {len(text)} characters (max {self.max_topic_length})",
                validation_type="prompt_length",
                field="topic",
            )

        matched = [name for name, pattern in INJECTION_SIGNATURES if pattern.search(text)]
        if matched:
            logger.warning(f"Rejected topic matching injection signatures: {matched}")
            raise InputValidationError(
                f"Prompt injection detected: {', '.join(matched)}",
                validation_type="prompt_injection",
                field="topic",
            )

        return text

    def validate_and_sanitize_topic(self, text: str) -> str:
        """Validate a topic, then return its sanitized form."""
        return sanitize(self.validate_topic(text))

    def validate_external_id(self, debate_id: str) -> str:
        """
        Validate a debate ID received from outside the process.

        Only IDs in the generator's own format are accepted.

        Raises:
            InputValidationError: debate_id_length, path_traversal or invalid_debate_id
        """
        if len(debate_id) > DEBATE_ID_MAX_LENGTH:
            raise InputValidationError(
                f"Debate ID too long: {len(debate_id)} characters (max {DEBATE_ID_MAX_LENGTH})",
                validation_type="debate_id_length",
                field="debate_id",
            )

        if any(pattern in debate_id for pattern in _TRAVERSAL_PATTERNS):
            raise InputValidationError(
                "Invalid debate ID: contains path traversal pattern",
                validation_type="path_traversal",
                field="debate_id",
            )

        if not is_debate_id_format(debate_id):
            raise InputValidationError(
                f"Invalid debate ID format: {debate_id}",
                validation_type="invalid_debate_id",
                field="debate_id",
            )

        return debate_id
