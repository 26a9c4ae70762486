"""Chat API endpoint implementation."""

import logging
import math
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from .deps import ChatOrchestratorDep, ClientKeyDep, RateLimiterDep
from .models import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["chat"])


async def _read_body(request: Request) -> dict[str, Any]:
    """Parse the JSON body; anything but a JSON object reads as empty."""
    try:
        body = await request.json()
    except ValueError:
        logger.debug("Chat request body is not valid JSON")
        return {}
    return body if isinstance(body, dict) else {}


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={
        400: {"model": ChatResponse},
        429: {"model": ChatResponse},
        500: {"model": ChatResponse},
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {
                    "schema": ChatRequest.model_json_schema(by_alias=True)
                }
            },
        }
    },
)
async def chat(
    request: Request,
    orchestrator: ChatOrchestratorDep,
    rate_limiter: RateLimiterDep,
    client_key: ClientKeyDep,
) -> JSONResponse:
    """Answer one visitor message about the site owner.

    Always responds with the ``{success, reply?, error?, processingTime?}``
    envelope.  Status codes: 200 on a reply (including the fallback
    reply when the LLM is unavailable), 400 for invalid input, 429 when
    the client exceeded its request budget, 500 on internal failure.
    """
    body = await _read_body(request)
    outcome = await orchestrator.handle(
        body.get("message"), body.get("conversationHistory"), client_key
    )

    headers = None
    if outcome.status_code == 429:
        retry_after = math.ceil(rate_limiter.window.total_seconds())
        headers = {"Retry-After": str(retry_after)}

    return JSONResponse(
        status_code=outcome.status_code,
        content=ChatResponse.from_outcome(outcome).to_content(),
        headers=headers,
    )
