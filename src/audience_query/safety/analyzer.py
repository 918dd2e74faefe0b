"""관리자 정책 기반 쿼리 안전성 분석기."""

import logging
import re
from typing import Optional

from audience_query.core.models import ParsedQuery, Policy, SafetyReport
from audience_query.parser.ast import Between, Comparison, SelectStmt, iter_predicates
from audience_query.parser.extractor import StructuralExtractor

logger = logging.getLogger(__name__)

# 날짜 컬럼으로 간주하는 이름
DATE_COLUMN_NAMES = frozenset(
    {
        "created_at",
        "updated_at",
        "order_date",
        "last_login",
        "signup_date",
        "purchase_date",
        "event_date",
        "start_date",
        "end_date",
        "next_billing",
    }
)

DATE_COLUMN_PATTERN = re.compile(
    r"(_at|_date|_time|_on)$|^(date|timestamp)$|^date_|^last_login", re.IGNORECASE
)

# 읽기 전용이 아닌 문장 시작 키워드
WRITE_KEYWORDS = frozenset(
    {
        "INSERT",
        "UPDATE",
        "DELETE",
        "MERGE",
        "CREATE",
        "ALTER",
        "DROP",
        "TRUNCATE",
        "GRANT",
        "REVOKE",
    }
)

TRAILING_TERMINATOR_PATTERN = re.compile(r"[\s;]+$")


def is_date_column(name: str) -> bool:
    """날짜/시간 컬럼명인지 여부."""
    return name.lower() in DATE_COLUMN_NAMES or DATE_COLUMN_PATTERN.search(name) is not None


class SafetyAnalyzer:
    """Policy에 따라 SQL을 평가해 SafetyReport를 생성한다.

    모든 규칙은 서로 독립적으로 평가된다.
    """

    def __init__(self, extractor: Optional[StructuralExtractor] = None) -> None:
        self._extractor = extractor or StructuralExtractor()

    def analyze(
        self, sql: str, policy: Policy, parsed: Optional[ParsedQuery] = None
    ) -> SafetyReport:
        """SQL을 정책에 따라 평가.

        Args:
            sql: SQL 문자열
            policy: 관리자 정책
            parsed: 이미 추출된 ParsedQuery (없으면 새로 추출)

        Returns:
            SafetyReport 객체
        """
        if parsed is None or parsed.statement is None:
            parsed = self._extractor.extract(sql)
        stmt = parsed.statement

        tables = tuple(parsed.tables)
        has_date_filter = self._has_date_filter(stmt)
        # 서브쿼리 안의 LIMIT도 결과 제한으로 인정
        limit = parsed.limit if parsed.limit is not None else max(stmt.limit_values, default=None)
        has_result_limit = limit is not None

        errors: list[str] = []
        warnings: list[str] = []

        if stmt.tokenize_error:
            errors.append(
                "Query text could not be fully tokenized (check for unbalanced quotes)"
            )

        write_keywords = [kw for kw in dict.fromkeys(stmt.leading_keywords) if kw in WRITE_KEYWORDS]
        if write_keywords:
            errors.append(
                "Only read-only SELECT statements are allowed "
                f"(found: {', '.join(write_keywords)})"
            )

        disallowed = [t for t in tables if t.lower() in policy.disallowed_tables]
        if disallowed:
            errors.append(f"Query references disallowed tables: {', '.join(disallowed)}")

        if policy.allowed_tables:
            outside = [
                t
                for t in tables
                if t.lower() not in policy.allowed_tables and t.lower() not in policy.disallowed_tables
            ]
            if outside:
                warnings.append(
                    f"Query references tables outside the allowed list: {', '.join(outside)}"
                )

        if len(tables) > policy.max_join_tables:
            warnings.append(
                f"Query joins {len(tables)} tables (max recommended: {policy.max_join_tables})"
            )

        if policy.require_date_filter and not has_date_filter:
            warnings.append(
                "No date filter detected. Consider limiting to the last "
                f"{policy.date_window_days} days for better performance"
            )

        if not has_result_limit:
            warnings.append(
                "No LIMIT clause found. Results will be capped at "
                f"{policy.default_result_limit:,} rows"
            )
        elif limit > policy.hard_result_cap:
            warnings.append(
                f"LIMIT {limit:,} exceeds the hard cap; preview is capped at "
                f"{policy.hard_result_cap:,} rows"
            )

        report = SafetyReport(
            has_date_filter=has_date_filter,
            has_result_limit=has_result_limit,
            uses_optimized_view=any(t.lower() in policy.optimized_tables for t in tables),
            tables_used=tables,
            estimated_date_span=stmt.intervals[0] if stmt.intervals else None,
            warnings=tuple(warnings),
            errors=tuple(errors),
        )
        logger.debug(
            "안전성 분석 완료: valid=%s warnings=%d errors=%d",
            report.is_valid,
            len(report.warnings),
            len(report.errors),
        )
        return report

    def apply_limit_fix(
        self, sql: str, policy: Policy, report: Optional[SafetyReport] = None
    ) -> str:
        """LIMIT이 없는 쿼리에 기본 LIMIT을 붙인 SQL을 반환.

        다른 경고나 에러는 다루지 않는다. 결과는 다시 분석해야 한다.

        Args:
            sql: SQL 문자열
            policy: 관리자 정책
            report: 이미 계산된 SafetyReport (없으면 새로 분석)

        Returns:
            LIMIT이 보장된 SQL 문자열 (이미 LIMIT이 있으면 원문 그대로)
        """
        if report is None:
            report = self.analyze(sql, policy)
        if report.has_result_limit:
            return sql
        trimmed = TRAILING_TERMINATOR_PATTERN.sub("", sql)
        return f"{trimmed}\nLIMIT {policy.default_result_limit}"

    def _has_date_filter(self, stmt: SelectStmt) -> bool:
        if stmt.intervals or stmt.uses_current_date or stmt.uses_now:
            return True
        for predicate, _ in iter_predicates(stmt.where):
            if isinstance(predicate, (Comparison, Between)) and is_date_column(
                predicate.column.name
            ):
                return True
        return False


def analyze(sql: str, policy: Policy) -> SafetyReport:
    """기본 분석기로 SQL을 정책에 따라 평가."""
    return SafetyAnalyzer().analyze(sql, policy)


def apply_limit_fix(sql: str, policy: Policy) -> str:
    """기본 분석기로 LIMIT 자동 보정을 적용."""
    return SafetyAnalyzer().apply_limit_fix(sql, policy)
