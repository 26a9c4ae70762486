"""FastAPI dependency factories for the chat pipeline.

``build_context_cache`` is a lifespan dependency (the cache must outlive
requests); ``get_chat_orchestrator`` is a per-request ``Depends``
factory with an explicit parameter chain.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from folio.configs.config import AppConfig, get_app_config
from folio.core.llm import LLMGateway, get_llm_gateway
from folio.infra.concurrency.limiter import RateLimiter, get_rate_limiter
from folio.infra.db.engine import get_portfolio_repository
from folio.infra.db.repository import PortfolioRepository
from folio.infra.lifespan import get_app

from .context import ContextCache, ContextProvider
from .prompt import PromptBuilder, PromptLimits
from .service import ChatOrchestrator


async def build_context_cache(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    """Create the shared per-category context cache on ``app.state``."""
    cache = ContextCache(ttl=config.context.cache_ttl)
    app.state.context_cache = cache
    yield
    cache.clear()


def get_context_cache(request: Request) -> ContextCache:
    return request.app.state.context_cache


def get_context_provider(
    repository: Annotated[PortfolioRepository, Depends(get_portfolio_repository)],
    cache: Annotated[ContextCache, Depends(get_context_cache)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> ContextProvider:
    return ContextProvider(
        repository, timeout=config.context.fetch_timeout, cache=cache
    )


def get_prompt_builder(
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> PromptBuilder:
    p = config.prompt
    return PromptBuilder(
        PromptLimits(
            max_projects=p.max_projects,
            max_experiences=p.max_experiences,
            max_blogs=p.max_blogs,
            reply_word_limit=p.reply_word_limit,
            max_description_chars=p.max_description_chars,
            max_history_turn_chars=p.max_history_turn_chars,
        ),
        persona_name=config.persona.name,
        persona_title=config.persona.title,
    )


def get_chat_orchestrator(
    rate_limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
    context_provider: Annotated[ContextProvider, Depends(get_context_provider)],
    prompt_builder: Annotated[PromptBuilder, Depends(get_prompt_builder)],
    gateway: Annotated[LLMGateway, Depends(get_llm_gateway)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> ChatOrchestrator:
    """Create a configured orchestrator per request."""
    return ChatOrchestrator(
        rate_limiter=rate_limiter,
        context_provider=context_provider,
        prompt_builder=prompt_builder,
        gateway=gateway,
        max_message_length=config.chat.max_message_length,
        max_history=config.chat.max_conversation_history,
    )
