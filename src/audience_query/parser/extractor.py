"""SQL 구조 추출기 - 테이블, 컬럼, 단순 조건 추출."""

import logging
from typing import Optional

from audience_query.core.models import Condition, ConditionOperator, ParsedQuery
from audience_query.parser.ast import Comparison, InList, SelectStmt, iter_predicates
from audience_query.parser.parser import parse_sql

logger = logging.getLogger(__name__)

# 숫자 비교에 사용하는 연산자
NUMERIC_OPERATORS = {
    "=": ConditionOperator.EQ,
    ">": ConditionOperator.GT,
    "<": ConditionOperator.LT,
    ">=": ConditionOperator.GTE,
    "<=": ConditionOperator.LTE,
}


class StructuralExtractor:
    """SQL 텍스트에서 ParsedQuery를 추출한다.

    추출은 실패하지 않는다. 인식할 수 없는 입력은 빈 ParsedQuery가 된다.
    """

    def extract(self, sql: str) -> ParsedQuery:
        """SQL에서 테이블, 컬럼, 조건을 추출.

        Args:
            sql: SQL 문자열

        Returns:
            ParsedQuery 객체
        """
        stmt = parse_sql(sql)

        parsed = ParsedQuery(
            tables=self.extract_tables(stmt),
            columns=self.extract_columns(stmt),
            conditions=self.extract_conditions(stmt),
            limit=stmt.limit,
            statement=stmt,
        )
        logger.debug(
            "추출 결과: tables=%s columns=%s conditions=%d",
            parsed.tables,
            parsed.columns,
            len(parsed.conditions),
        )
        return parsed

    def extract_tables(self, stmt: SelectStmt) -> list[str]:
        """FROM/JOIN 테이블명을 첫 등장 순서대로 중복 없이 반환."""
        return list(dict.fromkeys(ref.name for ref in stmt.table_refs))

    def extract_columns(self, stmt: SelectStmt) -> list[str]:
        """SELECT 목록의 컬럼명. ``*``가 있으면 빈 리스트."""
        if any(item.is_star and "." not in item.text for item in stmt.select_items):
            return []
        return [item.column for item in stmt.select_items if item.column]

    def extract_conditions(self, stmt: SelectStmt) -> list[Condition]:
        """WHERE 절의 AND 조건 중 리터럴 비교만 추출."""
        conditions = []
        for predicate, negated in iter_predicates(stmt.where):
            if negated:
                continue
            condition = self._to_condition(predicate)
            if condition is not None:
                conditions.append(condition)
        return conditions

    def _to_condition(self, predicate: object) -> Optional[Condition]:
        if isinstance(predicate, Comparison) and predicate.is_literal:
            value = predicate.value
            if isinstance(value, str):
                if predicate.operator != "=":
                    return None
                return Condition(predicate.column.name, ConditionOperator.EQ, value)
            operator = NUMERIC_OPERATORS.get(predicate.operator)
            if operator is None:
                return None
            return Condition(predicate.column.name, operator, value)

        if isinstance(predicate, InList) and not predicate.negated:
            return Condition(
                predicate.column.name,
                ConditionOperator.IN,
                [str(value) for value in predicate.values],
            )
        return None


def extract(sql: str) -> ParsedQuery:
    """기본 추출기로 SQL 구조를 추출."""
    return StructuralExtractor().extract(sql)
