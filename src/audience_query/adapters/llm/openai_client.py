"""OpenAI 호환 LLM 클라이언트 (LM Studio 등 지원)."""

import logging
from typing import Any, Optional

from langchain_openai import ChatOpenAI

from audience_query.core.config import Settings

logger = logging.getLogger(__name__)


class SQLGenerationError(Exception):
    """SQL 생성 요청 실패."""

    pass


class RateLimitError(SQLGenerationError):
    """Rate limit 에러."""

    pass


class RequestTimeoutError(SQLGenerationError):
    """Timeout 에러."""

    pass


class OpenAIClient:
    """OpenAI 호환 LLM 클라이언트.

    요청은 한 번만 보내며 실패 시 재시도하지 않는다.
    """

    def __init__(self, settings: Settings, api_key: Optional[str] = None) -> None:
        """클라이언트 초기화.

        Args:
            settings: 애플리케이션 설정
            api_key: 호출자가 전달하는 API 키 (없으면 설정값 사용)
        """
        self._settings = settings
        self._llm: Any = ChatOpenAI(
            base_url=settings.llm_base_url,
            api_key=api_key or settings.llm_api_key,
            model=settings.llm_model,
            temperature=settings.llm_temperature,
            timeout=settings.llm_timeout,
            max_retries=0,
        )

    def invoke(self, message: str, system_prompt: Optional[str] = None) -> str:
        """메시지를 전송하고 응답을 수신.

        Args:
            message: 전송할 메시지
            system_prompt: 시스템 프롬프트

        Returns:
            LLM의 응답 텍스트

        Raises:
            RateLimitError: Rate limit 초과 시
            RequestTimeoutError: 요청 타임아웃 시
            SQLGenerationError: 그 밖의 요청 실패 시
        """
        messages = []
        if system_prompt:
            messages.append(("system", system_prompt))
        messages.append(("human", message))

        try:
            response = self._llm.invoke(messages)
            return response.content
        except Exception as e:
            logger.debug("LLM 요청 실패: %s", e)
            error_msg = str(e).lower()
            if "rate limit" in error_msg:
                raise RateLimitError(f"Rate limit exceeded: {e}") from e
            if "timed out" in error_msg or "timeout" in error_msg:
                raise RequestTimeoutError(f"Request timed out: {e}") from e
            raise SQLGenerationError(f"SQL generation request failed: {e}") from e
