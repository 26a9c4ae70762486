"""Input validation and sanitization for chat requests.

Sanitization is best-effort XSS hardening: ``<script>`` blocks are
removed and every remaining angle bracket is stripped.  It is not an
HTML sanitizer and other injection vectors (e.g. ``javascript:`` text)
pass through untouched; replies are rendered as plain text by the
client.
"""

import re
from collections.abc import Mapping
from typing import Any

from .exceptions import InvalidChatInput
from .models import ConversationTurn, ValidatedMessage

MAX_MESSAGE_LENGTH = 500
MAX_CONVERSATION_HISTORY = 10

_SCRIPT_BLOCK = re.compile(r"<script\b[^>]*>.*?</script\s*>", re.IGNORECASE | re.DOTALL)
_ANGLE_BRACKETS = re.compile(r"[<>]")
_WHITESPACE = re.compile(r"\s+")

REASON_REQUIRED = "Message is required"
REASON_EMPTY = "Message cannot be empty"
REASON_BAD_HISTORY = "Invalid conversation history format"


def sanitize(text: str) -> str:
    """Remove script blocks, then strip all ``<`` and ``>``."""
    return _ANGLE_BRACKETS.sub("", _SCRIPT_BLOCK.sub("", text))


def validate_message(
    raw: Any, max_length: int = MAX_MESSAGE_LENGTH
) -> ValidatedMessage:
    """Validate and sanitize a raw visitor message.

    Raises:
        InvalidChatInput: with the rule that was violated.
    """
    if not isinstance(raw, str):
        raise InvalidChatInput(REASON_REQUIRED)

    trimmed = raw.strip()
    if not trimmed:
        raise InvalidChatInput(REASON_EMPTY)
    if len(trimmed) > max_length:
        raise InvalidChatInput(f"Message too long (max {max_length} characters)")

    sanitized = sanitize(trimmed).strip()
    if not sanitized:
        raise InvalidChatInput(REASON_EMPTY)
    return ValidatedMessage(sanitized=sanitized)


def validate_history(
    raw: Any, max_turns: int = MAX_CONVERSATION_HISTORY
) -> list[ConversationTurn]:
    """Keep the last *max_turns* usable turns of a raw history list.

    ``None`` means no history.  Turn text is sanitized like the message
    and folded onto one line; entries left without text are dropped
    silently.  Only a real ``true`` marks a turn as the visitor's.

    Raises:
        InvalidChatInput: when *raw* is present but not a list.
    """
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise InvalidChatInput(REASON_BAD_HISTORY)

    turns: list[ConversationTurn] = []
    for entry in raw[-max_turns:] if max_turns > 0 else []:
        if not isinstance(entry, Mapping):
            continue
        text = entry.get("text")
        if not isinstance(text, str):
            continue
        text = _WHITESPACE.sub(" ", sanitize(text)).strip()
        if not text:
            continue
        turns.append(ConversationTurn(text=text, is_user=entry.get("isUser") is True))
    return turns
