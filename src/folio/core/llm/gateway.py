"""LLM gateway: one guarded generation call per chat turn.

``LLMGateway.generate`` never raises.  A missing credential, a provider
error, an empty completion, or a call that outlives ``timeout`` all
yield the fallback reply instead.  There is no retry: a failure is
final for the request.
"""

import asyncio
import logging
from datetime import timedelta

from langchain_core.language_models import BaseChatModel

from folio.core.metrics import (
    LLM_CALLS_TOTAL,
    LLM_FALLBACKS_TOTAL,
    LLM_LATENCY_SECONDS,
)

from .reply import MAX_REPLY_CHARS, clean_reply

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = timedelta(seconds=10)
DEFAULT_FALLBACK = "AI unavailable. Please contact me directly."

REASON_NO_CREDENTIAL = "no_credential"
REASON_TIMEOUT = "timeout"
REASON_PROVIDER_ERROR = "provider_error"
REASON_EMPTY = "empty"


class LLMGateway:
    """Timeout-bounded wrapper around a LangChain chat model."""

    def __init__(
        self,
        llm: BaseChatModel | None,
        *,
        timeout: timedelta = DEFAULT_TIMEOUT,
        fallback_message: str = DEFAULT_FALLBACK,
        max_reply_chars: int = MAX_REPLY_CHARS,
    ) -> None:
        self._llm = llm
        self._timeout = timeout.total_seconds()
        self.fallback_message = fallback_message
        self._max_reply_chars = max_reply_chars

    @property
    def available(self) -> bool:
        return self._llm is not None

    async def generate(self, prompt: str, fallback: str | None = None) -> str:
        """Return the model's cleaned reply to *prompt*, or the fallback."""
        fallback = fallback or self.fallback_message

        if self._llm is None:
            logger.warning("LLM credential not configured; using fallback reply")
            return self._fail(REASON_NO_CREDENTIAL, fallback)

        LLM_CALLS_TOTAL.inc()
        try:
            with LLM_LATENCY_SECONDS.time():
                message = await asyncio.wait_for(
                    self._llm.ainvoke(prompt), timeout=self._timeout
                )
        except asyncio.TimeoutError:
            logger.warning("LLM call timed out after %.1fs", self._timeout)
            return self._fail(REASON_TIMEOUT, fallback)
        except Exception:
            logger.exception("LLM provider call failed")
            return self._fail(REASON_PROVIDER_ERROR, fallback)

        text = clean_reply(_message_text(message), self._max_reply_chars)
        if not text:
            logger.warning("LLM returned an empty reply")
            return self._fail(REASON_EMPTY, fallback)
        return text

    def _fail(self, reason: str, fallback: str) -> str:
        LLM_FALLBACKS_TOTAL.labels(reason=reason).inc()
        return fallback


def _message_text(message: object) -> str:
    """Extract plain text from an ``AIMessage`` (or a bare string)."""
    if isinstance(message, str):
        return message
    content = getattr(message, "content", "")
    if isinstance(content, str):
        return content
    # Some providers return a list of content blocks.
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(str(block.get("text", "")))
    return "".join(parts)
