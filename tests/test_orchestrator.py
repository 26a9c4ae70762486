"""End-to-end tests of the chat pipeline with in-memory collaborators."""

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.messages import AIMessage

from fakes import FakeSource
from folio.core.chat.context import ContextProvider
from folio.core.chat.models import ProfileInfo
from folio.core.chat.prompt import PromptBuilder
from folio.core.chat.service import ChatOrchestrator
from folio.core.llm.gateway import DEFAULT_FALLBACK, LLMGateway
from folio.infra.concurrency.limiter import RateLimiter


class _HangingLLM:
    async def ainvoke(self, prompt):
        await asyncio.Event().wait()


def _mock_llm(content: str = "I enjoy building things.") -> MagicMock:
    llm = MagicMock()
    llm.ainvoke = AsyncMock(return_value=AIMessage(content=content))
    return llm


def _orchestrator(
    source: FakeSource,
    llm=None,
    *,
    limiter: RateLimiter | None = None,
    llm_timeout: timedelta = timedelta(seconds=10),
) -> ChatOrchestrator:
    return ChatOrchestrator(
        rate_limiter=limiter if limiter is not None else RateLimiter(),
        context_provider=ContextProvider(source),
        prompt_builder=PromptBuilder(),
        gateway=LLMGateway(llm, timeout=llm_timeout),
    )


@pytest.fixture
def ada() -> ProfileInfo:
    return ProfileInfo(first_name="Ada", last_name="Lovelace")


class TestChatScenarios:
    @pytest.mark.asyncio
    async def test_direct_answer_skips_llm(self, ada):
        llm = _mock_llm()
        orchestrator = _orchestrator(FakeSource(profile=ada), llm)

        outcome = await orchestrator.handle("What is your name?", None, "1.1.1.1")

        assert outcome.success
        assert outcome.status_code == 200
        assert outcome.reply == "Ada Lovelace"
        assert outcome.direct
        assert outcome.processing_time_ms is not None
        llm.ainvoke.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_message_rejected_before_any_work(self, ada):
        source = FakeSource(profile=ada)
        llm = _mock_llm()
        orchestrator = _orchestrator(source, llm)

        outcome = await orchestrator.handle("", None, "1.1.1.1")

        assert not outcome.success
        assert outcome.status_code == 400
        assert outcome.error == "Message cannot be empty"
        assert source.calls == []
        llm.ainvoke.assert_not_called()

    @pytest.mark.asyncio
    async def test_thirty_first_request_is_throttled(self, ada):
        orchestrator = _orchestrator(FakeSource(profile=ada), _mock_llm())

        for _ in range(30):
            outcome = await orchestrator.handle("What is your name?", None, "k")
            assert outcome.success

        outcome = await orchestrator.handle("What is your name?", None, "k")
        assert not outcome.success
        assert outcome.status_code == 429
        assert outcome.error == "Too many requests. Please try again later."

        other = await orchestrator.handle("What is your name?", None, "other")
        assert other.success

    @pytest.mark.asyncio
    async def test_throttling_precedes_validation(self):
        orchestrator = _orchestrator(
            FakeSource(), limiter=RateLimiter(max_requests=1)
        )
        await orchestrator.handle("", None, "k")
        outcome = await orchestrator.handle(None, "garbage", "k")
        assert outcome.status_code == 429

    @pytest.mark.asyncio
    async def test_open_question_calls_llm_once(self, ada):
        llm = _mock_llm("Why did the developer go broke? Too much cache.")
        orchestrator = _orchestrator(FakeSource(profile=ada), llm)

        outcome = await orchestrator.handle("Tell me a joke", None, "k")

        assert outcome.success
        assert not outcome.direct
        assert outcome.reply == "Why did the developer go broke? Too much cache."
        llm.ainvoke.assert_awaited_once()
        prompt = llm.ainvoke.await_args.args[0]
        assert prompt.startswith("You are Ada")
        assert "User: Tell me a joke" in prompt.splitlines()

    @pytest.mark.asyncio
    async def test_llm_timeout_still_succeeds(self):
        orchestrator = _orchestrator(
            FakeSource(), _HangingLLM(), llm_timeout=timedelta(0)
        )

        outcome = await asyncio.wait_for(
            orchestrator.handle("Tell me a joke", None, "k"), timeout=2
        )

        assert outcome.success
        assert outcome.reply == DEFAULT_FALLBACK

    @pytest.mark.asyncio
    async def test_fallback_points_to_email(self):
        profile = ProfileInfo(first_name="Ada", email="ada@example.com")
        orchestrator = _orchestrator(
            FakeSource(profile=profile), _HangingLLM(), llm_timeout=timedelta(0)
        )

        outcome = await orchestrator.handle("Tell me a joke", None, "k")

        assert outcome.success
        assert outcome.reply == (
            "I'm having trouble answering right now. "
            "Please contact me at ada@example.com"
        )


class TestChatFailures:
    @pytest.mark.asyncio
    async def test_bad_history_rejected(self, ada):
        orchestrator = _orchestrator(FakeSource(profile=ada))
        outcome = await orchestrator.handle("hi", "not a list", "k")
        assert outcome.status_code == 400
        assert outcome.error == "Invalid conversation history format"

    @pytest.mark.asyncio
    async def test_history_reaches_prompt(self, ada):
        llm = _mock_llm()
        orchestrator = _orchestrator(FakeSource(profile=ada), llm)
        history = [{"text": "Hi", "isUser": True}, {"text": "Hello!", "isUser": False}]

        await orchestrator.handle("Tell me a joke", history, "k")

        prompt = llm.ainvoke.await_args.args[0]
        assert "User: Hi\nAssistant: Hello!" in prompt

    @pytest.mark.asyncio
    async def test_storage_failure_is_generic_500(self):
        source = FakeSource(error=RuntimeError("db password leaked"))
        orchestrator = _orchestrator(source, _mock_llm())

        outcome = await orchestrator.handle("What is your name?", None, "k")

        assert not outcome.success
        assert outcome.status_code == 500
        assert outcome.error == "Internal server error"
        assert outcome.reply is None

    @pytest.mark.asyncio
    async def test_missing_credential_degrades_to_fallback(self, ada):
        orchestrator = _orchestrator(FakeSource(profile=ada), llm=None)
        outcome = await orchestrator.handle("Tell me a joke", None, "k")
        assert outcome.success
        assert outcome.reply == DEFAULT_FALLBACK
