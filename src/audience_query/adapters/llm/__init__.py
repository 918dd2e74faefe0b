"""LLM 어댑터 모듈."""

from audience_query.adapters.llm.openai_client import (
    OpenAIClient,
    RateLimitError,
    RequestTimeoutError,
    SQLGenerationError,
)

__all__ = ["OpenAIClient", "RateLimitError", "RequestTimeoutError", "SQLGenerationError"]
