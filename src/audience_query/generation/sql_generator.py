"""자연어 질의를 SQL로 변환하는 생성기."""

import logging
import re
from typing import Optional, Protocol

from audience_query.core.catalog import Catalog
from audience_query.core.models import Policy

logger = logging.getLogger(__name__)

# ```sql ... ``` 코드 블록 마커
CODE_FENCE_PATTERN = re.compile(r"```(?:sql)?\n?", re.IGNORECASE)


class LLMClient(Protocol):
    """SQL 생성에 사용하는 LLM 클라이언트 인터페이스."""

    def invoke(self, message: str, system_prompt: Optional[str] = None) -> str:
        ...


def strip_code_fences(text: str) -> str:
    """LLM 응답에서 코드 블록 마커를 제거.

    Args:
        text: LLM 응답 텍스트

    Returns:
        마커를 제거하고 앞뒤 공백을 정리한 SQL
    """
    return CODE_FENCE_PATTERN.sub("", text.strip()).strip()


class SQLGenerator:
    """카탈로그 스키마와 정책 제약을 담은 프롬프트로 SQL을 생성한다."""

    def __init__(self, llm_client: LLMClient, catalog: Catalog, policy: Policy) -> None:
        """생성기 초기화.

        Args:
            llm_client: LLM 클라이언트
            catalog: 스키마 카탈로그
            policy: 관리자 정책 (시간 범위, 결과 제한을 프롬프트에 반영)
        """
        self._llm_client = llm_client
        self._catalog = catalog
        self._policy = policy

    def build_system_prompt(self, tables: Optional[list[str]] = None) -> str:
        """시스템 프롬프트 생성.

        Args:
            tables: 프롬프트에 포함할 테이블명 (없으면 카탈로그 전체)

        Returns:
            시스템 프롬프트 문자열
        """
        names = tables if tables is not None else self._catalog.table_names

        lines = ["You are a SQL expert. Convert natural language queries to SQL.", ""]
        lines.append("Available tables:")
        for name in names:
            table = self._catalog.get(name)
            if table is None:
                continue
            columns = ", ".join(
                f"{column.name} ({column.declared_type})" for column in table.columns
            )
            lines.append(f"- {table.schema}.{table.name}: {columns}")

        lines.append("")
        lines.append("Constraints:")
        lines.append(
            f"- Only include data from the last {self._policy.date_window_days} days "
            "unless the question asks otherwise"
        )
        lines.append(f"- Always end the query with LIMIT {self._policy.default_result_limit}")
        lines.append("- Use table aliases and qualify every column")
        lines.append("")
        lines.append("Only return the SQL query, nothing else.")
        return "\n".join(lines)

    def generate(self, question: str, tables: Optional[list[str]] = None) -> str:
        """자연어 질의를 SQL로 변환.

        Args:
            question: 자연어 질의
            tables: 대상 테이블명 (없으면 카탈로그 전체)

        Returns:
            코드 블록 마커를 제거한 SQL

        Raises:
            ValueError: 질의가 비어 있는 경우
            SQLGenerationError: LLM 요청 실패 시 (재시도하지 않음)
        """
        if not question or not question.strip():
            raise ValueError("Question must not be empty")

        response = self._llm_client.invoke(
            question.strip(), system_prompt=self.build_system_prompt(tables)
        )
        sql = strip_code_fences(response)
        logger.debug("생성된 SQL: %s", sql)
        return sql
