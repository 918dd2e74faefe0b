"""SQL 생성기 테스트."""

from typing import Optional

import pytest

from audience_query.core.models import Policy


class FakeLLMClient:
    """호출 내역을 기록하는 LLM 클라이언트."""

    def __init__(self, response: str) -> None:
        self.response = response
        self.calls: list[tuple[str, Optional[str]]] = []

    def invoke(self, message: str, system_prompt: Optional[str] = None) -> str:
        self.calls.append((message, system_prompt))
        return self.response


@pytest.fixture
def catalog():
    """데모 카탈로그 fixture."""
    from audience_query.core.sample_catalog import load_sample_catalog

    return load_sample_catalog()


class TestStripCodeFences:
    """코드 블록 마커 제거 테스트."""

    def test_strip_sql_fence(self):
        """```sql 마커를 제거해야 한다."""
        from audience_query.generation.sql_generator import strip_code_fences

        text = "```sql\nSELECT * FROM users LIMIT 10\n```"

        assert strip_code_fences(text) == "SELECT * FROM users LIMIT 10"

    def test_plain_text_is_unchanged(self):
        """마커가 없으면 공백만 정리해야 한다."""
        from audience_query.generation.sql_generator import strip_code_fences

        assert strip_code_fences("  SELECT 1  ") == "SELECT 1"


class TestSQLGenerator:
    """SQLGenerator 테스트."""

    def test_system_prompt_embeds_policy_constraints(self, catalog):
        """시스템 프롬프트에 시간 범위와 결과 제한이 포함되어야 한다."""
        from audience_query.generation.sql_generator import SQLGenerator

        generator = SQLGenerator(
            FakeLLMClient(""), catalog, Policy(date_window_days=30, default_result_limit=500)
        )

        prompt = generator.build_system_prompt(["users"])

        assert "last 30 days" in prompt
        assert "LIMIT 500" in prompt
        assert "public.users: id (SERIAL)" in prompt
        assert "orders" not in prompt
        assert prompt.endswith("Only return the SQL query, nothing else.")

    def test_generate_strips_fences(self, catalog):
        """생성 결과에서 코드 블록 마커를 제거해야 한다."""
        from audience_query.generation.sql_generator import SQLGenerator

        client = FakeLLMClient("```sql\nSELECT * FROM users LIMIT 10000\n```")
        generator = SQLGenerator(client, catalog, Policy())

        sql = generator.generate("  active users  ")

        assert sql == "SELECT * FROM users LIMIT 10000"
        assert client.calls[0][0] == "active users"
        assert "Available tables:" in client.calls[0][1]

    def test_generate_rejects_empty_question(self, catalog):
        """빈 질의는 거부해야 한다."""
        from audience_query.generation.sql_generator import SQLGenerator

        generator = SQLGenerator(FakeLLMClient(""), catalog, Policy())

        with pytest.raises(ValueError):
            generator.generate("   ")

    def test_generate_propagates_client_errors(self, catalog):
        """클라이언트 에러는 재시도 없이 전파해야 한다."""
        from audience_query.adapters.llm.openai_client import SQLGenerationError
        from audience_query.generation.sql_generator import SQLGenerator

        class FailingClient:
            calls = 0

            def invoke(self, message, system_prompt=None):
                FailingClient.calls += 1
                raise SQLGenerationError("boom")

        generator = SQLGenerator(FailingClient(), catalog, Policy())

        with pytest.raises(SQLGenerationError):
            generator.generate("active users")
        assert FailingClient.calls == 1
