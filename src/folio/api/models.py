"""Pydantic models for the chat API.

The wire format is camelCase (``conversationHistory``,
``processingTime``); Python attributes stay snake_case.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from folio.core.chat.models import ChatOutcome


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChatRequest(_CamelModel):
    """Request body of ``POST /api/v1/chat``.

    Documentation only: the route reads the raw JSON itself so that
    malformed input is reported through the chat error envelope instead
    of FastAPI's 422.
    """

    message: str = Field(description="Visitor message")
    conversation_history: list[dict[str, Any]] | None = Field(
        default=None,
        description="Previous turns as ``{text, isUser}`` objects",
    )


class ChatResponse(_CamelModel):
    """Response envelope of ``POST /api/v1/chat``."""

    success: bool
    reply: str | None = None
    error: str | None = None
    processing_time: float | None = Field(
        default=None, description="Server-side processing time in milliseconds"
    )

    @classmethod
    def from_outcome(cls, outcome: ChatOutcome) -> "ChatResponse":
        return cls(
            success=outcome.success,
            reply=outcome.reply,
            error=outcome.error,
            processing_time=outcome.processing_time_ms,
        )

    def to_content(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class HealthResponse(BaseModel):
    status: str = "ok"
