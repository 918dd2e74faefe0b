"""애플리케이션 설정 모듈."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from audience_query.core.models import Policy


class Settings(BaseSettings):
    """애플리케이션 설정."""

    # LLM API 설정 (OpenAI 호환)
    llm_base_url: Optional[str] = Field(default=None, description="OpenAI 호환 API 기본 URL")
    llm_api_key: Optional[str] = Field(default=None, description="API 키")
    llm_model: str = Field(default="gpt-4o-mini", description="사용할 모델명")
    llm_temperature: float = Field(default=0.3, description="생성 온도")
    llm_timeout: float = Field(default=30.0, description="요청 타임아웃 (초)")

    # 쿼리 안전성 정책 기본값
    require_date_filter: bool = Field(default=True, description="날짜 필터 요구 여부")
    max_join_tables: int = Field(default=3, ge=0, description="권장 최대 테이블 수")
    allowed_tables: list[str] = Field(default_factory=list, description="허용 테이블 목록")
    disallowed_tables: list[str] = Field(
        default_factory=lambda: ["raw_logs", "raw_events"], description="차단 테이블 목록"
    )
    default_result_limit: int = Field(default=10000, ge=1, description="자동 보정 LIMIT 값")
    hard_result_cap: int = Field(default=50000, ge=1, description="미리보기 결과 상한")
    optimized_tables: list[str] = Field(
        default_factory=lambda: ["customer_metrics"], description="최적화 뷰 테이블 목록"
    )
    date_window_days: int = Field(default=90, ge=1, description="권장 조회 기간 (일)")

    model_config = SettingsConfigDict(
        env_prefix="AUDIENCE_QUERY_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    def to_policy(self) -> Policy:
        """설정값으로 관리자 정책을 생성.

        Returns:
            읽기 전용 Policy 객체
        """
        return Policy(
            require_date_filter=self.require_date_filter,
            max_join_tables=self.max_join_tables,
            allowed_tables=frozenset(self.allowed_tables),
            disallowed_tables=frozenset(self.disallowed_tables),
            default_result_limit=self.default_result_limit,
            hard_result_cap=self.hard_result_cap,
            optimized_tables=frozenset(self.optimized_tables),
            date_window_days=self.date_window_days,
        )
