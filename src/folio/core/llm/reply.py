"""Post-processing of generated replies.

Models tend to open with greetings or narrate where their facts come
from ("According to my data, ...").  ``clean_reply`` strips those
openers, normalises whitespace and capitalises the first letter.  Replies
longer than the cap are cut at the last whitespace before it, so a link
is either kept whole or dropped.  Replies that mention credentials are
replaced wholesale.
"""

import re

# Room for a ~150-word answer with a couple of links.
MAX_REPLY_CHARS = 1000

REDACTED_REPLY = "Information not available"

_FILLER_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"^hi there!?\s*",
        r"^hello!?\s*",
        r"^hey!?\s*",
        r"^greetings!?\s*",
        r"^good\s+(morning|afternoon|evening)!?\s*",
        r"^(well|so|actually|basically|essentially),?\s+",
        r"my (database|records) shows?\s*",
        r"(according to|based on|as per|looking at) my (data|database|information|records),?\s*",
        r"(from|in) my (database|records)[,:]\s*",
        r"let me tell you\s*",
        r"i can tell you that\s*",
        r"here's what i (have|know|can tell you)[,:]?\s*",
        r"to answer your question,?\s*",
        r"in response to your query,?\s*",
    )
]

_SENSITIVE_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"password",
        r"secret",
        r"\btoken\b",
        r"api[_\s]?key",
        r"private[_\s]?key",
    )
]

_LEADING_PUNCTUATION = re.compile(r"^[,.:;!?\-\s]+")
_WHITESPACE = re.compile(r"\s+")
_URL = re.compile(r"^(https?://|www\.)", re.IGNORECASE)


def clean_reply(text: str, max_chars: int = MAX_REPLY_CHARS) -> str:
    """Return *text* without filler, trimmed to *max_chars*.

    May return an empty string; callers treat that as no answer.
    """
    cleaned = text.strip()
    for pattern in _FILLER_PATTERNS:
        cleaned = pattern.sub("", cleaned)

    cleaned = _LEADING_PUNCTUATION.sub("", cleaned)
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    if not cleaned:
        return ""

    if any(p.search(cleaned) for p in _SENSITIVE_PATTERNS):
        return REDACTED_REPLY

    if not _URL.match(cleaned):
        cleaned = cleaned[0].upper() + cleaned[1:]
    return _truncate(cleaned, max_chars)


def _truncate(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    # One extra char so a space right at the cap still counts as a boundary.
    head = text[: max_chars + 1]
    last_space = head.rfind(" ")
    if last_space > 0:
        return head[:last_space].rstrip()
    # A single overlong token: never emit half a link.
    return "" if _URL.match(text) else text[:max_chars]
