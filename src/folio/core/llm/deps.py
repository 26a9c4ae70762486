"""LLM client factories.

``get_llm`` builds the LangChain chat model for the configured provider,
or returns ``None`` when no credential is configured so the gateway can
degrade to its fallback reply.  Client-level retries are disabled: the
gateway treats any failure as final.
"""

from typing import Annotated

from fastapi import Depends
from langchain_core.language_models import BaseChatModel
from langchain_google_genai import (
    ChatGoogleGenerativeAI,
    HarmBlockThreshold,
    HarmCategory,
)
from langchain_openai import ChatOpenAI

from folio.configs.config import get_llm_config
from folio.configs.system import LLMConfig

from .gateway import LLMGateway

PROVIDER_GEMINI = "gemini"
PROVIDER_OPENAI = "openai"

SAFETY_SETTINGS: dict[HarmCategory, HarmBlockThreshold] = {
    HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
}


def get_llm(
    config: Annotated[LLMConfig, Depends(get_llm_config)],
) -> BaseChatModel | None:
    """Create the chat model for ``config.provider``; ``None`` without a key."""
    if config.api_key is None or not config.api_key.get_secret_value():
        return None

    provider = config.provider.lower()
    timeout = config.timeout.total_seconds()

    if provider == PROVIDER_GEMINI:
        return ChatGoogleGenerativeAI(
            model=config.model_name,
            google_api_key=config.api_key,
            temperature=config.temperature,
            top_p=config.top_p,
            top_k=config.top_k,
            max_output_tokens=config.max_tokens,
            timeout=timeout,
            max_retries=0,
            safety_settings=SAFETY_SETTINGS if config.safety_filtering else None,
        )

    if provider == PROVIDER_OPENAI:
        # OpenAI-compatible endpoints expose no safety-settings knob.
        return ChatOpenAI(
            base_url=config.endpoint,
            api_key=config.api_key,
            model=config.model_name,
            temperature=config.temperature,
            top_p=config.top_p,
            max_tokens=config.max_tokens,
            timeout=timeout,
            max_retries=0,
        )

    raise NotImplementedError(f"LLM provider {config.provider} is not implemented.")


def get_llm_gateway(
    config: Annotated[LLMConfig, Depends(get_llm_config)],
    llm: Annotated[BaseChatModel | None, Depends(get_llm)],
) -> LLMGateway:
    """Wrap the chat model with timeout and fallback handling."""
    return LLMGateway(
        llm,
        timeout=config.timeout,
        fallback_message=config.fallback_message,
        max_reply_chars=config.max_reply_chars,
    )
