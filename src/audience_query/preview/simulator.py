"""실행 시뮬레이터 - 카탈로그 샘플 행으로 쿼리 결과를 근사."""

import logging
import re
from typing import Any, Optional

from audience_query.core.catalog import Catalog
from audience_query.core.models import (
    Condition,
    ConditionOperator,
    ParsedQuery,
    PreviewResult,
)
from audience_query.preview.join_strategy import HeuristicJoinStrategy, JoinStrategy, Row

logger = logging.getLogger(__name__)

# 문자열 앞부분의 숫자 (예: "42.5kg" -> 42.5)
LEADING_NUMBER_PATTERN = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


class ExecutionSimulator:
    """ParsedQuery를 카탈로그 샘플 행에 대해 실행한다.

    조건은 SQL의 AND/OR와 무관하게 모두 AND로 적용된다.
    투영 결과의 키는 요청한 컬럼명이 아니라 실제 행의 키이다
    (``segment`` 요청이 ``customer_segment`` 키로 나온다).
    어떤 경우에도 예외를 던지지 않고 빈 결과나 근사 결과를 반환한다.
    """

    def __init__(
        self,
        join_strategy: Optional[JoinStrategy] = None,
        hard_result_cap: Optional[int] = None,
    ) -> None:
        """시뮬레이터 초기화.

        Args:
            join_strategy: 조인 전략 (기본: HeuristicJoinStrategy)
            hard_result_cap: LIMIT 상한 (None이면 LIMIT 값 그대로 사용)
        """
        self._join_strategy = join_strategy or HeuristicJoinStrategy()
        self._hard_result_cap = hard_result_cap

    def simulate(self, query: ParsedQuery, catalog: Catalog) -> PreviewResult:
        """쿼리를 샘플 데이터에 대해 시뮬레이션.

        Args:
            query: 추출된 쿼리 구조
            catalog: 스키마 카탈로그

        Returns:
            PreviewResult 객체
        """
        tables = [catalog.get(name) for name in query.tables]
        tables = [table for table in tables if table is not None]
        if not tables:
            logger.debug("카탈로그에서 찾은 테이블 없음: %s", query.tables)
            return PreviewResult(rows=[])

        rows = [dict(row) for row in tables[0].sample_rows]
        for table in tables[1:]:
            rows = self._join_strategy.join(rows, list(table.sample_rows))

        rows = [row for row in rows if self._matches(row, query.conditions)]

        if query.columns:
            rows = [self._project(row, query.columns) for row in rows]

        limit = self._effective_limit(query.limit)
        if limit is not None:
            rows = rows[:limit]

        logger.debug("시뮬레이션 결과: %d행", len(rows))
        return PreviewResult(rows=rows)

    def _effective_limit(self, limit: Optional[int]) -> Optional[int]:
        if limit is None:
            return None
        if self._hard_result_cap is not None:
            return min(limit, self._hard_result_cap)
        return limit

    def _matches(self, row: Row, conditions: list[Condition]) -> bool:
        for condition in conditions:
            key = _find_key(row, condition.column)
            if key is None:
                continue
            if not _satisfies(row[key], condition):
                return False
        return True

    def _project(self, row: Row, columns: list[str]) -> Row:
        """요청 컬럼에 대응하는 행의 키만 남긴다.

        정확한 이름(대소문자 무시), 없으면 ``_<column>`` 접미사로 찾는다.
        결과 키는 매칭된 행의 키를 그대로 쓴다. 하나도 매칭되지 않으면 전체 행.
        """
        projected = {}
        for column in columns:
            key = _find_key(row, column)
            if key is None:
                suffix = f"_{column.lower()}"
                key = next((k for k in row if k.lower().endswith(suffix)), None)
            if key is not None:
                projected[key] = row[key]
        return projected or dict(row)


def _find_key(row: Row, column: str) -> Optional[str]:
    """대소문자를 무시하고 행에서 컬럼 키를 찾는다."""
    if column in row:
        return column
    lowered = column.lower()
    return next((key for key in row if key.lower() == lowered), None)


def _satisfies(value: Any, condition: Condition) -> bool:
    operator = condition.operator
    if operator is ConditionOperator.EQ:
        return _as_text(value).lower() == _as_text(condition.value).lower()
    if operator is ConditionOperator.IN:
        candidates = condition.value if isinstance(condition.value, list) else [condition.value]
        text = _as_text(value).lower()
        return any(text == _as_text(candidate).lower() for candidate in candidates)

    number = _as_number(value)
    target = _as_number(condition.value)
    if number is None or target is None:
        return False
    if operator is ConditionOperator.GT:
        return number > target
    if operator is ConditionOperator.LT:
        return number < target
    if operator is ConditionOperator.GTE:
        return number >= target
    return number <= target


def _as_text(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _as_number(value: Any) -> Optional[float]:
    """값의 앞부분을 숫자로 해석 (해석 불가 시 None)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    match = LEADING_NUMBER_PATTERN.match(str(value))
    if match is None:
        return None
    return float(match.group(1))


def simulate(query: ParsedQuery, catalog: Catalog) -> PreviewResult:
    """기본 시뮬레이터로 쿼리를 실행."""
    return ExecutionSimulator().simulate(query, catalog)
