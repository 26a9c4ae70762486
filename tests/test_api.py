"""HTTP-level tests for the chat and health endpoints.

The lifespan is not started (no database); request-scoped dependencies
are swapped through ``app.dependency_overrides``.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from fakes import FakeSource
from folio.app import app
from folio.core.chat.context import ContextProvider
from folio.core.chat.deps import get_chat_orchestrator
from folio.core.chat.models import ProfileInfo
from folio.core.chat.prompt import PromptBuilder
from folio.core.chat.service import ChatOrchestrator
from folio.core.llm.gateway import LLMGateway
from folio.infra.concurrency.limiter import RateLimiter, get_rate_limiter


@pytest.fixture
def limiter() -> RateLimiter:
    return RateLimiter(max_requests=30)


@pytest.fixture
def client(limiter):
    orchestrator = ChatOrchestrator(
        rate_limiter=limiter,
        context_provider=ContextProvider(
            FakeSource(
                profile=ProfileInfo(
                    first_name="Ada", last_name="Lovelace", email="ada@example.com"
                )
            )
        ),
        prompt_builder=PromptBuilder(),
        gateway=LLMGateway(None),
    )
    app.dependency_overrides[get_chat_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_rate_limiter] = lambda: limiter
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


class TestChatEndpoint:
    def test_direct_answer(self, client):
        resp = client.post("/api/v1/chat", json={"message": "What is your name?"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["reply"] == "Ada Lovelace"
        assert isinstance(body["processingTime"], (int, float))
        assert "error" not in body

    def test_conversation_history_accepted(self, client):
        resp = client.post(
            "/api/v1/chat",
            json={
                "message": "What's your email?",
                "conversationHistory": [{"text": "Hi", "isUser": True}],
            },
        )
        assert resp.status_code == 200
        assert resp.json()["reply"] == "ada@example.com"

    def test_empty_message(self, client):
        resp = client.post("/api/v1/chat", json={"message": "   "})
        assert resp.status_code == 400
        body = resp.json()
        assert body == {
            "success": False,
            "error": "Message cannot be empty",
            "processingTime": body["processingTime"],
        }

    def test_missing_message(self, client):
        resp = client.post("/api/v1/chat", json={})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Message is required"

    def test_invalid_json_treated_as_missing_message(self, client):
        resp = client.post(
            "/api/v1/chat",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "Message is required"

    def test_non_object_body(self, client):
        resp = client.post("/api/v1/chat", json=["What is your name?"])
        assert resp.status_code == 400

    def test_bad_history(self, client):
        resp = client.post(
            "/api/v1/chat", json={"message": "hi", "conversationHistory": "x"}
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid conversation history format"

    def test_llm_unavailable_is_still_success(self, client):
        resp = client.post("/api/v1/chat", json={"message": "Tell me a joke"})
        assert resp.status_code == 200
        assert resp.json()["reply"] == (
            "I'm having trouble answering right now. "
            "Please contact me at ada@example.com"
        )


class TestChatRateLimit:
    @pytest.fixture
    def limiter(self) -> RateLimiter:
        return RateLimiter(max_requests=1)

    def test_second_request_throttled(self, client):
        headers = {"x-forwarded-for": "203.0.113.7"}
        first = client.post(
            "/api/v1/chat", json={"message": "name"}, headers=headers
        )
        second = client.post(
            "/api/v1/chat", json={"message": "name"}, headers=headers
        )

        assert first.status_code == 200
        assert second.status_code == 429
        assert second.headers["retry-after"] == "60"
        assert second.json()["error"] == "Too many requests. Please try again later."

    def test_clients_keyed_by_forwarded_ip(self, client):
        for ip in ("203.0.113.1", "203.0.113.2"):
            resp = client.post(
                "/api/v1/chat",
                json={"message": "name"},
                headers={"x-forwarded-for": f"{ip}, 10.0.0.1"},
            )
            assert resp.status_code == 200


class TestUnexpectedErrors:
    def test_unhandled_exception_is_generic_500(self, client):
        broken = AsyncMock(spec=ChatOrchestrator)
        broken.handle.side_effect = RuntimeError("boom")
        app.dependency_overrides[get_chat_orchestrator] = lambda: broken

        resp = client.post("/api/v1/chat", json={"message": "hi"})

        assert resp.status_code == 500
        assert resp.json() == {"success": False, "error": "Internal server error"}


class TestOperationalEndpoints:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_metrics(self, client):
        client.post("/api/v1/chat", json={"message": "name"})
        resp = client.get("/metrics")
        assert resp.status_code == 200
        assert "folio_chat_requests_total" in resp.text
