"""LLM access: client factory and the fail-closed generation gateway."""

from .deps import get_llm, get_llm_gateway  # noqa: F401
from .gateway import LLMGateway  # noqa: F401
from .reply import clean_reply  # noqa: F401
