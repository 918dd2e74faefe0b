"""제한된 SELECT 문법을 위한 재귀 하강 파서.

지원 문법:
    SELECT [DISTINCT] items FROM table [[AS] alias]
        {[LEFT|RIGHT|INNER|FULL|CROSS] [OUTER] JOIN table [[AS] alias] [ON expr]}
        [WHERE expr] [GROUP BY ...] [HAVING ...] [ORDER BY ...] [LIMIT n]

해석할 수 없는 부분은 오류 없이 건너뛰거나 OpaquePredicate로 남긴다.
"""

import re
from typing import Optional

from audience_query.parser.ast import (
    Between,
    BoolOp,
    ColumnRef,
    Comparison,
    Expression,
    InList,
    Join,
    LiteralValue,
    Not,
    OpaquePredicate,
    SelectItem,
    SelectStmt,
    TableRef,
)
from audience_query.parser.tokenizer import Token, TokenKind, tokenize_checked

COMPARISON_OPERATORS = frozenset({"=", ">", "<", ">=", "<=", "<>", "!="})

JOIN_MODIFIERS = frozenset({"LEFT", "RIGHT", "INNER", "OUTER", "FULL", "CROSS", "NATURAL"})

# WHERE 절을 끝내는 최상위 키워드
WHERE_TERMINATORS = frozenset(
    {"GROUP BY", "GROUP", "ORDER BY", "ORDER", "HAVING", "LIMIT", "OFFSET", "UNION", ";"}
)

# SELECT 목록 / ON 조건을 끝내는 최상위 키워드
CLAUSE_KEYWORDS = WHERE_TERMINATORS | {"FROM", "WHERE"}

# INTERVAL '<n> <unit>' 값 패턴
INTERVAL_VALUE_PATTERN = re.compile(r"\s*\d+\s+[A-Za-z]+\s*")

INTEGER_PATTERN = re.compile(r"\d+")


def parse_sql(sql: str) -> SelectStmt:
    """SQL 문자열을 SelectStmt로 파싱한다.

    Args:
        sql: SQL 문자열

    Returns:
        SelectStmt (인식 가능한 구조가 없으면 빈 SelectStmt)
    """
    tokens, complete = tokenize_checked(sql)
    stmt = _StatementParser(sql, tokens).parse()
    stmt.tokenize_error = not complete
    return stmt


class _StatementParser:
    """문장 수준 파서 - 절 키워드를 기준으로 분기한다."""

    def __init__(self, sql: str, tokens: list[Token]) -> None:
        self._sql = sql
        self._tokens = tokens
        self._pos = 0

    def parse(self) -> SelectStmt:
        stmt = SelectStmt(tokens=self._tokens)
        self._scan(stmt)

        depth = 0
        while self._pos < len(self._tokens):
            token = self._tokens[self._pos]
            keyword = token.keyword

            if keyword == "(":
                depth += 1
            elif keyword == ")":
                depth = max(0, depth - 1)
            elif depth == 0:
                if keyword == ";":
                    break
                if keyword == "SELECT" and not stmt.select_items:
                    self._parse_select_list(stmt)
                    continue
                if keyword == "FROM" and stmt.from_table is None:
                    self._parse_from(stmt)
                    continue
                if self._join_start_at(self._pos):
                    self._parse_join(stmt)
                    continue
                if keyword == "WHERE" and stmt.where is None:
                    self._parse_where(stmt)
                    continue
                if keyword == "LIMIT" and stmt.limit is None:
                    self._parse_limit(stmt)
                    continue

            self._pos += 1

        return stmt

    # ------------------------------------------------------------------
    # 전체 토큰 스캔
    # ------------------------------------------------------------------

    def _scan(self, stmt: SelectStmt) -> None:
        """문장 전체에서 테이블 참조, 시간 표현, LIMIT 값, 문장 시작 키워드를 수집."""
        # 괄호 스택: 서브쿼리 괄호면 True
        paren_stack: list[bool] = []
        statement_start = True

        for idx, token in enumerate(self._tokens):
            keyword = token.keyword
            next_token = self._peek_at(idx + 1)

            if statement_start and keyword != ";":
                stmt.leading_keywords.append(keyword or token.text.upper())
                statement_start = False

            if keyword == "(":
                paren_stack.append(
                    next_token is not None and next_token.keyword in ("SELECT", "WITH")
                )
            elif keyword == ")":
                if paren_stack:
                    paren_stack.pop()
            elif keyword == ";":
                statement_start = True
            elif keyword == ".":
                stmt.has_qualified_reference = True
            elif keyword == "FROM" or token.is_join:
                if token.is_join:
                    stmt.join_count += 1
                if not paren_stack or paren_stack[-1]:
                    table_ref, _ = self._parse_table_ref(idx + 1)
                    if table_ref is not None:
                        stmt.table_refs.append(table_ref)
            elif keyword == "INTERVAL":
                if (
                    next_token is not None
                    and next_token.kind is TokenKind.STRING
                    and INTERVAL_VALUE_PATTERN.fullmatch(next_token.text)
                ):
                    stmt.intervals.append(self._sql[token.start : next_token.end + 1])
            elif keyword == "LIMIT":
                if (
                    next_token is not None
                    and next_token.kind is TokenKind.NUMBER
                    and INTEGER_PATTERN.fullmatch(next_token.text)
                ):
                    stmt.limit_values.append(int(next_token.text))
            elif keyword == "CURRENT_DATE":
                stmt.uses_current_date = True
            elif keyword == "NOW" and next_token is not None and next_token.keyword == "(":
                stmt.uses_now = True

    # ------------------------------------------------------------------
    # 절 파싱
    # ------------------------------------------------------------------

    def _parse_select_list(self, stmt: SelectStmt) -> None:
        self._pos += 1
        if self._peek_keyword() in ("DISTINCT", "ALL"):
            self._pos += 1

        end = self._find_boundary(self._pos, CLAUSE_KEYWORDS)
        for item_tokens in self._split_commas(self._pos, end):
            stmt.select_items.append(self._build_select_item(item_tokens))
        self._pos = end

    def _parse_from(self, stmt: SelectStmt) -> None:
        table_ref, next_pos = self._parse_table_ref(self._pos + 1)
        stmt.from_table = table_ref
        self._pos = next_pos if table_ref is not None else self._pos + 1

    def _parse_join(self, stmt: SelectStmt) -> None:
        modifiers = []
        while not self._tokens[self._pos].is_join:
            modifiers.append(self._tokens[self._pos].keyword)
            self._pos += 1
        keyword = self._tokens[self._pos].keyword
        modifiers.extend(keyword.split()[:-1])
        kind = " ".join(modifiers) or "INNER"

        table_ref, next_pos = self._parse_table_ref(self._pos + 1)
        if table_ref is None:
            self._pos += 1
            return
        self._pos = next_pos

        condition = None
        if self._peek_keyword() == "ON":
            start = self._pos + 1
            end = self._find_boundary(start, CLAUSE_KEYWORDS, stop_at_join=True)
            condition = _ExpressionParser(self._sql, self._tokens[start:end]).parse()
            self._pos = end
        stmt.joins.append(Join(kind=kind, table=table_ref, condition=condition))

    def _parse_where(self, stmt: SelectStmt) -> None:
        start = self._pos + 1
        end = self._find_boundary(start, WHERE_TERMINATORS)
        stmt.where = _ExpressionParser(self._sql, self._tokens[start:end]).parse()
        self._pos = end

    def _parse_limit(self, stmt: SelectStmt) -> None:
        value = self._peek_at(self._pos + 1)
        if (
            value is not None
            and value.kind is TokenKind.NUMBER
            and INTEGER_PATTERN.fullmatch(value.text)
        ):
            stmt.limit = int(value.text)
            self._pos += 2
        else:
            self._pos += 1

    def _parse_table_ref(self, idx: int) -> tuple[Optional[TableRef], int]:
        """idx 위치에서 ``[schema.]table [[AS] alias]``를 파싱.

        Returns:
            (TableRef 또는 None, 다음 위치)
        """
        first = self._peek_at(idx)
        if first is None or not first.is_identifier:
            return None, idx

        parts = [first.text]
        idx += 1
        while self._keyword_at(idx) == "." and self._is_identifier_at(idx + 1):
            parts.append(self._tokens[idx + 1].text)
            idx += 2

        alias = None
        if self._keyword_at(idx) == "AS" and self._is_identifier_at(idx + 1):
            alias = self._tokens[idx + 1].text
            idx += 2
        elif self._is_identifier_at(idx):
            alias = self._tokens[idx].text
            idx += 1

        schema = ".".join(parts[:-1]) or None
        return TableRef(name=parts[-1].lower(), line=first.line, schema=schema, alias=alias), idx

    def _build_select_item(self, tokens: list[Token]) -> SelectItem:
        text = self._sql[tokens[0].start : tokens[-1].end + 1] if tokens else ""
        identifiers = tuple(token.text for token in tokens if token.is_identifier)
        has_call = any(token.keyword == "(" for token in tokens)
        is_star = bool(tokens) and tokens[-1].keyword == "*" and (
            len(tokens) == 1 or tokens[-2].keyword == "."
        )

        column = None
        if not (has_call or is_star) and tokens and tokens[0].is_identifier:
            idx = 0
            while (
                idx + 2 < len(tokens)
                and tokens[idx + 1].keyword == "."
                and tokens[idx + 2].is_identifier
            ):
                idx += 2
            rest = [token.keyword or token.text for token in tokens[idx + 1 :]]
            if not rest or (len(rest) == 1 and tokens[-1].is_identifier) or (
                len(rest) == 2 and rest[0] == "AS" and tokens[-1].is_identifier
            ):
                column = tokens[idx].text

        return SelectItem(
            text=text,
            column=column,
            is_star=is_star,
            has_call=has_call,
            identifiers=identifiers,
        )

    # ------------------------------------------------------------------
    # 토큰 탐색 헬퍼
    # ------------------------------------------------------------------

    def _find_boundary(
        self, start: int, keywords: frozenset[str], stop_at_join: bool = False
    ) -> int:
        """start부터 괄호 깊이 0에서 keywords가 나오는 위치를 반환."""
        depth = 0
        idx = start
        while idx < len(self._tokens):
            keyword = self._tokens[idx].keyword
            if keyword == "(":
                depth += 1
            elif keyword == ")":
                if depth == 0:
                    return idx
                depth -= 1
            elif depth == 0:
                if keyword in keywords:
                    return idx
                if stop_at_join and self._join_start_at(idx):
                    return idx
            idx += 1
        return idx

    def _split_commas(self, start: int, end: int) -> list[list[Token]]:
        items: list[list[Token]] = [[]]
        depth = 0
        for token in self._tokens[start:end]:
            keyword = token.keyword
            if keyword == "(":
                depth += 1
            elif keyword == ")":
                depth -= 1
            elif keyword == "," and depth == 0:
                items.append([])
                continue
            items[-1].append(token)
        return [item for item in items if item]

    def _join_start_at(self, idx: int) -> bool:
        """idx 위치가 ``[modifiers] JOIN``의 시작인지 여부."""
        while idx < len(self._tokens):
            token = self._tokens[idx]
            if token.is_join:
                return True
            if token.keyword not in JOIN_MODIFIERS:
                return False
            idx += 1
        return False

    def _peek_at(self, idx: int) -> Optional[Token]:
        return self._tokens[idx] if 0 <= idx < len(self._tokens) else None

    def _peek_keyword(self) -> str:
        return self._keyword_at(self._pos)

    def _keyword_at(self, idx: int) -> str:
        token = self._peek_at(idx)
        return token.keyword if token is not None else ""

    def _is_identifier_at(self, idx: int) -> bool:
        token = self._peek_at(idx)
        return token is not None and token.is_identifier


class _ExpressionParser:
    """조건식 파서.

    or_expr  := and_expr (OR and_expr)*
    and_expr := not_expr (AND not_expr)*
    not_expr := NOT not_expr | primary
    primary  := '(' or_expr ')' | predicate
    """

    def __init__(self, sql: str, tokens: list[Token]) -> None:
        self._sql = sql
        self._tokens = tokens
        self._pos = 0

    def parse(self) -> Optional[Expression]:
        if not self._tokens:
            return None

        parts: list[Expression] = []
        while self._pos < len(self._tokens):
            # 짝이 맞지 않는 닫는 괄호는 무시
            if self._keyword() == ")":
                self._pos += 1
                continue
            parts.append(self._parse_or())

        if not parts:
            return None
        return parts[0] if len(parts) == 1 else BoolOp("AND", tuple(parts))

    def _parse_or(self) -> Expression:
        operands = [self._parse_and()]
        while self._keyword() == "OR":
            self._pos += 1
            operands.append(self._parse_and())
        return operands[0] if len(operands) == 1 else BoolOp("OR", tuple(operands))

    def _parse_and(self) -> Expression:
        operands = [self._parse_not()]
        while self._keyword() == "AND":
            self._pos += 1
            operands.append(self._parse_not())
        return operands[0] if len(operands) == 1 else BoolOp("AND", tuple(operands))

    def _parse_not(self) -> Expression:
        if self._keyword() == "NOT":
            self._pos += 1
            return Not(self._parse_not())
        return self._parse_primary()

    def _parse_primary(self) -> Expression:
        if self._keyword() != "(":
            return self._parse_predicate()

        start = self._pos
        close = self._matching_paren(start)
        if close is None or self._keyword_at(start + 1) in ("SELECT", "WITH"):
            return self._consume_opaque()

        inner = _ExpressionParser(self._sql, self._tokens[start + 1 : close]).parse()
        self._pos = close + 1
        if inner is None or not self._at_boundary():
            # (a + b) > 5 처럼 괄호가 불리언 그룹이 아닌 경우
            self._pos = start
            return self._consume_opaque()
        return inner

    def _parse_predicate(self) -> Expression:
        start = self._pos
        column = self._parse_column_ref()
        if column is None:
            self._pos = start
            return self._consume_opaque()

        keyword = self._keyword()
        if keyword in COMPARISON_OPERATORS:
            operator = "<>" if keyword == "!=" else keyword
            self._pos += 1
            value_start = self._pos
            value = self._parse_literal()
            if value is not None and self._at_boundary():
                return Comparison(column, operator, value)
            self._pos = value_start
            self._skip_to_boundary()
            return Comparison(column, operator)

        negated = False
        if keyword == "NOT" and self._keyword_at(self._pos + 1) in ("IN", "BETWEEN"):
            negated = True
            self._pos += 1
            keyword = self._keyword()

        if keyword == "IN":
            in_list = self._parse_in_list(column, negated)
            if in_list is not None:
                return in_list
        elif keyword == "BETWEEN":
            between = self._parse_between(column, negated)
            if between is not None:
                return between

        self._pos = start
        return self._consume_opaque()

    def _parse_in_list(self, column: ColumnRef, negated: bool) -> Optional[InList]:
        open_idx = self._pos + 1
        if self._keyword_at(open_idx) != "(":
            return None
        close = self._matching_paren(open_idx)
        if close is None:
            return None

        values: list[LiteralValue] = []
        for item in self._split_commas(open_idx + 1, close):
            value = _literal_of(item)
            if value is None:
                return None
            values.append(value)

        self._pos = close + 1
        if not self._at_boundary():
            return None
        return InList(column, tuple(values), negated)

    def _parse_between(self, column: ColumnRef, negated: bool) -> Optional[Between]:
        self._pos += 1
        low_start = self._pos
        depth = 0
        while self._pos < len(self._tokens):
            keyword = self._keyword()
            if keyword == "(":
                depth += 1
            elif keyword == ")":
                depth -= 1
            elif keyword == "AND" and depth == 0:
                break
            self._pos += 1
        if self._pos >= len(self._tokens) or self._pos == low_start:
            return None

        low = self._text(low_start, self._pos)
        self._pos += 1
        high_start = self._pos
        self._skip_to_boundary()
        if self._pos == high_start:
            return None
        return Between(column, low, self._text(high_start, self._pos), negated)

    def _parse_column_ref(self) -> Optional[ColumnRef]:
        token = self._token()
        if token is None or not token.is_identifier:
            return None

        parts = [token.text]
        self._pos += 1
        while self._keyword() == "." and self._is_identifier_at(self._pos + 1):
            parts.append(self._tokens[self._pos + 1].text)
            self._pos += 2

        # 함수 호출
        if self._keyword() == "(":
            return None
        return ColumnRef(name=parts[-1], qualifier=".".join(parts[:-1]) or None)

    def _parse_literal(self) -> Optional[LiteralValue]:
        token = self._token()
        if token is None:
            return None
        if token.keyword == "-":
            following = self._token_at(self._pos + 1)
            value = _literal_of([token, following]) if following is not None else None
            if value is not None:
                self._pos += 2
            return value
        value = _literal_of([token])
        if value is not None:
            self._pos += 1
        return value

    def _consume_opaque(self) -> OpaquePredicate:
        start = self._pos
        self._skip_to_boundary()
        if self._pos == start and self._pos < len(self._tokens):
            # 경계 토큰에서 멈춘 경우에도 진행을 보장
            self._pos += 1
        return OpaquePredicate(self._text(start, self._pos))

    def _skip_to_boundary(self) -> None:
        depth = 0
        while self._pos < len(self._tokens):
            keyword = self._keyword()
            if keyword == "(":
                depth += 1
            elif keyword == ")":
                if depth == 0:
                    return
                depth -= 1
            elif keyword in ("AND", "OR") and depth == 0:
                return
            self._pos += 1

    def _at_boundary(self) -> bool:
        return self._pos >= len(self._tokens) or self._keyword() in ("AND", "OR", ")")

    def _matching_paren(self, open_idx: int) -> Optional[int]:
        depth = 0
        for idx in range(open_idx, len(self._tokens)):
            keyword = self._tokens[idx].keyword
            if keyword == "(":
                depth += 1
            elif keyword == ")":
                depth -= 1
                if depth == 0:
                    return idx
        return None

    def _split_commas(self, start: int, end: int) -> list[list[Token]]:
        items: list[list[Token]] = [[]]
        depth = 0
        for token in self._tokens[start:end]:
            keyword = token.keyword
            if keyword == "(":
                depth += 1
            elif keyword == ")":
                depth -= 1
            elif keyword == "," and depth == 0:
                items.append([])
                continue
            items[-1].append(token)
        return items

    def _text(self, start: int, end: int) -> str:
        if start >= end:
            return ""
        return self._sql[self._tokens[start].start : self._tokens[end - 1].end + 1]

    def _token(self) -> Optional[Token]:
        return self._token_at(self._pos)

    def _token_at(self, idx: int) -> Optional[Token]:
        return self._tokens[idx] if 0 <= idx < len(self._tokens) else None

    def _keyword(self) -> str:
        return self._keyword_at(self._pos)

    def _keyword_at(self, idx: int) -> str:
        token = self._token_at(idx)
        return token.keyword if token is not None else ""

    def _is_identifier_at(self, idx: int) -> bool:
        token = self._token_at(idx)
        return token is not None and token.is_identifier


def _literal_of(tokens: list[Token]) -> Optional[LiteralValue]:
    """토큰 묶음이 단일 리터럴이면 그 값을 반환 (``-`` 부호 허용)."""
    sign = 1
    if len(tokens) == 2 and tokens[0].keyword == "-":
        sign = -1
        tokens = tokens[1:]
    if len(tokens) != 1:
        return None

    token = tokens[0]
    if token.kind is TokenKind.STRING and sign == 1:
        return token.text
    if token.kind is TokenKind.NUMBER:
        if INTEGER_PATTERN.fullmatch(token.text):
            return sign * int(token.text)
        try:
            return sign * float(token.text)
        except ValueError:
            return None
    return None
