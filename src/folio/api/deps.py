"""Centralized FastAPI dependency type aliases.

Import these ``*Dep`` aliases in route modules instead of manually
writing ``Annotated[T, Depends(get_xxx)]`` everywhere.  Each alias
corresponds to a single ``get_*`` factory and can be overridden in
tests via ``app.dependency_overrides[get_xxx] = ...``.
"""

from typing import Annotated

from fastapi import Depends

from folio.core.chat.deps import get_chat_orchestrator
from folio.core.chat.service import ChatOrchestrator
from folio.infra.concurrency.limiter import RateLimiter, get_rate_limiter
from folio.infra.concurrency.real_ip import get_client_key

ChatOrchestratorDep = Annotated[ChatOrchestrator, Depends(get_chat_orchestrator)]
ClientKeyDep = Annotated[str, Depends(get_client_key)]
RateLimiterDep = Annotated[RateLimiter, Depends(get_rate_limiter)]
