"""SQL 결함 탐지기 - 알려진 스키마/구문 오류 패턴 검사."""

import logging
from typing import Optional

from audience_query.core.catalog import Catalog
from audience_query.core.models import DefectKind, DetectedDefect, ParsedQuery
from audience_query.parser.ast import SelectStmt
from audience_query.parser.parser import parse_sql
from audience_query.parser.tokenizer import TokenKind

logger = logging.getLogger(__name__)

# SELECT 목록에 나타나면 안 되는 자리표시자
PLACEHOLDER_COLUMNS = frozenset({"undefined", "null_column"})

# 한 글자가 빠진 키워드 오타 (검사 순서대로)
KEYWORD_TYPOS = ("SELEC", "FORM", "WHER")


class DefectDetector:
    """SQL에서 최우선 결함 하나를 찾는다.

    우선순위: 알 수 없는 테이블 > 잘못된 컬럼 자리표시자 > 키워드 오타 > 모호한 컬럼

    모든 검사는 토큰 단위로 이루어진다. 모호한 컬럼 검사는 ``.`` 토큰이 있는지를
    보므로 ``'a@b.com'`` 같은 문자열 리터럴이나 ``1.5`` 같은 숫자 안의 점은 테이블
    한정으로 치지 않는다. 닫히지 않은 따옴표로 sqlglot 토큰화가 실패해도 복구 스캔
    토큰으로 같은 검사를 수행한다.
    """

    def detect(
        self, sql: str, catalog: Catalog, parsed: Optional[ParsedQuery] = None
    ) -> Optional[DetectedDefect]:
        """SQL에서 결함을 탐지.

        Args:
            sql: SQL 문자열
            catalog: 스키마 카탈로그
            parsed: 이미 추출된 ParsedQuery (문장 AST 재사용)

        Returns:
            DetectedDefect 또는 None
        """
        stmt = parsed.statement if parsed is not None and parsed.statement is not None else None
        if stmt is None:
            stmt = parse_sql(sql)

        for check in (
            self._unknown_table,
            self._invalid_column,
            self._keyword_typo,
            self._ambiguous_column,
        ):
            defect = check(sql, stmt, catalog)
            if defect is not None:
                logger.debug("결함 탐지: %s (line %d)", defect.kind.value, defect.line_number)
                return defect
        return None

    def _unknown_table(
        self, sql: str, stmt: SelectStmt, catalog: Catalog
    ) -> Optional[DetectedDefect]:
        for ref in stmt.table_refs:
            if ref.name not in catalog:
                return DetectedDefect(
                    kind=DefectKind.UNKNOWN_TABLE,
                    message=f"Table '{ref.name}' does not exist in the catalog",
                    line_number=ref.line,
                    suggestion=f"Available tables: {', '.join(catalog.table_names)}",
                )
        return None

    def _invalid_column(
        self, sql: str, stmt: SelectStmt, catalog: Catalog
    ) -> Optional[DetectedDefect]:
        for item in stmt.select_items:
            if any(name.lower() in PLACEHOLDER_COLUMNS for name in item.identifiers):
                return DetectedDefect(
                    kind=DefectKind.INVALID_COLUMN,
                    message="Invalid column reference in SELECT clause",
                    line_number=1,
                    suggestion="Replace placeholder columns with real column names",
                )
        return None

    def _keyword_typo(
        self, sql: str, stmt: SelectStmt, catalog: Catalog
    ) -> Optional[DetectedDefect]:
        for typo in KEYWORD_TYPOS:
            for token in stmt.tokens:
                if (
                    token.kind is TokenKind.WORD
                    and token.text == typo
                    and sql[token.end + 1 : token.end + 2].isspace()
                ):
                    return DetectedDefect(
                        kind=DefectKind.KEYWORD_TYPO,
                        message=f"Syntax error near '{typo}'",
                        line_number=token.line,
                        suggestion="Check keyword spelling (should be SELECT, FROM, WHERE)",
                    )
        return None

    def _ambiguous_column(
        self, sql: str, stmt: SelectStmt, catalog: Catalog
    ) -> Optional[DetectedDefect]:
        if stmt.has_join and len(stmt.table_refs) > 1 and not stmt.has_qualified_reference:
            return DetectedDefect(
                kind=DefectKind.AMBIGUOUS_COLUMN,
                message="Column references may be ambiguous across joined tables",
                line_number=1,
                suggestion="Qualify columns with a table alias (e.g. u.id, o.user_id)",
            )
        return None


def detect(sql: str, catalog: Catalog) -> Optional[DetectedDefect]:
    """기본 탐지기로 SQL 결함을 탐지."""
    return DefectDetector().detect(sql, catalog)
