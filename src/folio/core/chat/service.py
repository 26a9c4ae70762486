"""Chat orchestrator: one visitor message in, one reply out.

Sequence per request, each failure short-circuiting the rest:

1. rate limit (429)
2. message validation (400)
3. history validation (400)
4. classify
5. fetch context
6. direct answer (LLM skipped)
7. prompt + LLM gateway (fallback text on provider failure)

Anything unexpected in steps 4–7 becomes a generic 500; details go to
the log only.
"""

import logging
import time
from typing import Any

from folio.core.llm.gateway import LLMGateway
from folio.core.metrics import (
    CHAT_REQUEST_DURATION_SECONDS,
    CHAT_REQUESTS_TOTAL,
    CONTEXT_CATEGORIES_TOTAL,
)
from folio.infra.concurrency.limiter import RateLimiter

from .classifier import classify
from .context import ContextProvider
from .direct import resolve_direct_answer
from .exceptions import InvalidChatInput
from .models import ChatContext, ChatOutcome, ConversationTurn
from .prompt import PromptBuilder
from .validation import (
    MAX_CONVERSATION_HISTORY,
    MAX_MESSAGE_LENGTH,
    validate_history,
    validate_message,
)

logger = logging.getLogger(__name__)

TOO_MANY_REQUESTS = "Too many requests. Please try again later."
INTERNAL_ERROR = "Internal server error"

OUTCOME_DIRECT = "direct"
OUTCOME_LLM = "llm"
OUTCOME_RATE_LIMITED = "rate_limited"
OUTCOME_INVALID = "invalid"
OUTCOME_ERROR = "error"


class ChatOrchestrator:
    """Runs the contextual chat pipeline for a single request."""

    def __init__(
        self,
        *,
        rate_limiter: RateLimiter,
        context_provider: ContextProvider,
        prompt_builder: PromptBuilder,
        gateway: LLMGateway,
        max_message_length: int = MAX_MESSAGE_LENGTH,
        max_history: int = MAX_CONVERSATION_HISTORY,
    ) -> None:
        self._rate_limiter = rate_limiter
        self._context_provider = context_provider
        self._prompt_builder = prompt_builder
        self._gateway = gateway
        self._max_message_length = max_message_length
        self._max_history = max_history

    async def handle(
        self, raw_message: Any, raw_history: Any, client_key: str
    ) -> ChatOutcome:
        start = time.monotonic()
        outcome = await self._handle(raw_message, raw_history, client_key)
        elapsed = time.monotonic() - start
        outcome.processing_time_ms = round(elapsed * 1000, 1)

        label = _outcome_label(outcome)
        CHAT_REQUESTS_TOTAL.labels(outcome=label).inc()
        CHAT_REQUEST_DURATION_SECONDS.labels(outcome=label).observe(elapsed)
        return outcome

    async def _handle(
        self, raw_message: Any, raw_history: Any, client_key: str
    ) -> ChatOutcome:
        if not self._rate_limiter.check(client_key):
            logger.info("Rate limit exceeded for client %s", client_key)
            return ChatOutcome(success=False, status_code=429, error=TOO_MANY_REQUESTS)

        try:
            message = validate_message(raw_message, self._max_message_length).sanitized
            history = validate_history(raw_history, self._max_history)
        except InvalidChatInput as exc:
            return ChatOutcome(success=False, status_code=400, error=str(exc))

        try:
            return await self._reply(message, history)
        except Exception:
            logger.exception("Chat pipeline failed for client %s", client_key)
            return ChatOutcome(success=False, status_code=500, error=INTERNAL_ERROR)

    async def _reply(
        self, message: str, history: list[ConversationTurn]
    ) -> ChatOutcome:
        categories = classify(message)
        for category in categories:
            CONTEXT_CATEGORIES_TOTAL.labels(category=category.value).inc()

        ctx = await self._context_provider.fetch(categories)

        direct = resolve_direct_answer(message, ctx)
        if direct is not None:
            return ChatOutcome(success=True, reply=direct, direct=True)

        prompt = self._prompt_builder.build(message, history, ctx)
        reply = await self._gateway.generate(prompt, fallback=self._fallback(ctx))
        return ChatOutcome(success=True, reply=reply)

    def _fallback(self, ctx: ChatContext) -> str | None:
        """Fallback reply that points to the owner's email when known."""
        if ctx.profile and ctx.profile.email:
            return (
                "I'm having trouble answering right now. "
                f"Please contact me at {ctx.profile.email}"
            )
        return None


def _outcome_label(outcome: ChatOutcome) -> str:
    if outcome.success:
        return OUTCOME_DIRECT if outcome.direct else OUTCOME_LLM
    if outcome.status_code == 429:
        return OUTCOME_RATE_LIMITED
    if outcome.status_code == 400:
        return OUTCOME_INVALID
    return OUTCOME_ERROR
