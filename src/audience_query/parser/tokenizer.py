"""SQL 토크나이저 - sqlglot 토크나이저 결과를 엔진용 토큰으로 변환."""

import logging
import re
from dataclasses import dataclass
from enum import Enum

from sqlglot.errors import TokenError
from sqlglot.tokens import Tokenizer, TokenType

logger = logging.getLogger(__name__)

# 따옴표 없는 식별자 패턴
WORD_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_$]*")

# sqlglot이 거부한 입력의 복구 스캔 패턴 (그룹명 = TokenKind)
RECOVERY_PATTERN = re.compile(
    r"""
    (?P<comment>--[^\n]*)
    |(?P<string>'(?:[^']|'')*'?)
    |(?P<identifier>"[^"]*"?)
    |(?P<number>\d+(?:\.\d*)?|\.\d+)
    |(?P<word>[A-Za-z_][A-Za-z0-9_$]*)
    |(?P<symbol>>=|<=|<>|!=|\S)
    """,
    re.VERBOSE,
)

# 식별자로 취급하지 않는 키워드
RESERVED_KEYWORDS = frozenset(
    {
        "SELECT", "FROM", "JOIN", "WHERE", "AND", "OR", "NOT", "IN", "BETWEEN",
        "LIMIT", "OFFSET", "AS", "ON", "USING", "LEFT", "RIGHT", "INNER", "OUTER",
        "FULL", "CROSS", "NATURAL", "GROUP", "ORDER", "BY", "HAVING", "DISTINCT",
        "ALL", "IS", "NULL", "LIKE", "ILIKE", "UNION", "INTERSECT", "EXCEPT",
        "WITH", "CASE", "WHEN", "THEN", "ELSE", "END", "INTERVAL", "EXISTS",
        "CURRENT_DATE", "CURRENT_TIMESTAMP",
    }
)


class TokenKind(Enum):
    """토큰 분류."""

    WORD = "word"
    IDENTIFIER = "identifier"
    STRING = "string"
    NUMBER = "number"
    SYMBOL = "symbol"


@dataclass(frozen=True)
class Token:
    """SQL 토큰.

    start/end는 원본 텍스트 기준 위치이며 end는 마지막 문자를 포함한다.
    """

    kind: TokenKind
    text: str
    line: int
    start: int
    end: int

    @property
    def keyword(self) -> str:
        """대문자로 정규화한 키워드 텍스트 (문자열/숫자/따옴표 식별자는 빈 문자열)."""
        if self.kind in (TokenKind.WORD, TokenKind.SYMBOL):
            return " ".join(self.text.upper().split())
        return ""

    @property
    def is_identifier(self) -> bool:
        """테이블/컬럼명으로 쓰일 수 있는 토큰인지 여부."""
        if self.kind is TokenKind.IDENTIFIER:
            return True
        return (
            self.kind is TokenKind.WORD
            and WORD_PATTERN.fullmatch(self.text) is not None
            and self.keyword not in RESERVED_KEYWORDS
        )

    @property
    def is_join(self) -> bool:
        """JOIN 키워드 여부 (``LEFT JOIN``처럼 묶인 토큰 포함)."""
        keyword = self.keyword
        return keyword == "JOIN" or keyword.endswith(" JOIN")


def tokenize(sql: str) -> list[Token]:
    """SQL 문자열을 토큰 리스트로 변환한다.

    Args:
        sql: SQL 문자열

    Returns:
        Token 리스트
    """
    tokens, _ = tokenize_checked(sql)
    return tokens


def tokenize_checked(sql: str) -> tuple[list[Token], bool]:
    """SQL 문자열을 토큰화하고 정상 토큰화 여부를 함께 반환한다.

    sqlglot이 거부하는 입력(닫히지 않은 따옴표 등)은 복구 스캔으로 토큰화한다.
    복구 스캔에서 닫히지 않은 문자열은 텍스트 끝까지 하나의 STRING 토큰이 된다.

    Args:
        sql: SQL 문자열

    Returns:
        (Token 리스트, sqlglot 토큰화 성공 여부)
    """
    try:
        raw_tokens = Tokenizer().tokenize(sql)
    except TokenError as e:
        logger.debug("SQL 토큰화 실패, 복구 스캔 사용: %s", e)
        return _recover_tokens(sql), False

    tokens = [
        Token(
            kind=_kind_of(raw.token_type, raw.text),
            text=raw.text,
            line=raw.line,
            start=raw.start,
            end=raw.end,
        )
        for raw in raw_tokens
    ]
    return tokens, True


def _recover_tokens(sql: str) -> list[Token]:
    tokens = []
    for match in RECOVERY_PATTERN.finditer(sql):
        kind_name = match.lastgroup
        if kind_name == "comment":
            continue
        text = match.group()
        if kind_name == "string":
            closed = len(text) > 1 and text.endswith("'")
            text = text[1:-1] if closed else text[1:]
        elif kind_name == "identifier":
            text = text.strip('"')
        tokens.append(
            Token(
                kind=TokenKind[kind_name.upper()],
                text=text,
                line=sql.count("\n", 0, match.start()) + 1,
                start=match.start(),
                end=match.end() - 1,
            )
        )
    return tokens


def _kind_of(token_type: TokenType, text: str) -> TokenKind:
    if token_type == TokenType.STRING:
        return TokenKind.STRING
    if token_type == TokenType.NUMBER:
        return TokenKind.NUMBER
    if token_type == TokenType.IDENTIFIER:
        return TokenKind.IDENTIFIER
    if text[:1].isalpha() or text[:1] == "_":
        return TokenKind.WORD
    return TokenKind.SYMBOL
