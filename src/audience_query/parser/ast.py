"""SELECT 문 AST 정의."""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

from audience_query.parser.tokenizer import Token

LiteralValue = Union[str, int, float]


@dataclass(frozen=True)
class TableRef:
    """FROM/JOIN 절의 테이블 참조."""

    name: str
    line: int
    schema: Optional[str] = None
    alias: Optional[str] = None


@dataclass(frozen=True)
class ColumnRef:
    """컬럼 참조 (``u.status`` 또는 ``status``)."""

    name: str
    qualifier: Optional[str] = None


@dataclass(frozen=True)
class SelectItem:
    """SELECT 목록의 항목.

    column은 단순 컬럼 참조일 때만 채워진다. 함수 호출, ``*``, 리터럴은 None.
    """

    text: str
    column: Optional[str] = None
    is_star: bool = False
    has_call: bool = False
    identifiers: tuple[str, ...] = ()


@dataclass(frozen=True)
class Comparison:
    """``column op value`` 비교. 우변이 리터럴이 아니면 value는 None."""

    column: ColumnRef
    operator: str
    value: Optional[LiteralValue] = None

    @property
    def is_literal(self) -> bool:
        return self.value is not None


@dataclass(frozen=True)
class InList:
    column: ColumnRef
    values: tuple[LiteralValue, ...]
    negated: bool = False


@dataclass(frozen=True)
class Between:
    column: ColumnRef
    low: str
    high: str
    negated: bool = False


@dataclass(frozen=True)
class OpaquePredicate:
    """구조를 해석하지 않는 조건 (함수 비교, IS NULL, 서브쿼리 등)."""

    text: str


@dataclass(frozen=True)
class Not:
    operand: "Expression"


@dataclass(frozen=True)
class BoolOp:
    """AND/OR 결합."""

    operator: str
    operands: tuple["Expression", ...]


Expression = Union[Comparison, InList, Between, OpaquePredicate, Not, BoolOp]
Predicate = Union[Comparison, InList, Between, OpaquePredicate]


@dataclass(frozen=True)
class Join:
    kind: str
    table: TableRef
    condition: Optional[Expression] = None


@dataclass
class SelectStmt:
    """파싱된 SELECT 문.

    table_refs는 서브쿼리를 포함한 모든 FROM/JOIN 테이블 참조를 등장 순서대로
    가진다. from_table/joins/where/limit는 최상위 문장만 다룬다.
    limit_values는 서브쿼리를 포함한 모든 ``LIMIT n`` 값을 등장 순서대로 가진다.
    tokenize_error는 sqlglot이 텍스트를 거부해 복구 스캔 토큰으로 파싱했음을 뜻한다.
    """

    select_items: list[SelectItem] = field(default_factory=list)
    from_table: Optional[TableRef] = None
    joins: list[Join] = field(default_factory=list)
    where: Optional[Expression] = None
    limit: Optional[int] = None
    limit_values: list[int] = field(default_factory=list)
    tokenize_error: bool = False
    table_refs: list[TableRef] = field(default_factory=list)
    intervals: list[str] = field(default_factory=list)
    uses_current_date: bool = False
    uses_now: bool = False
    has_qualified_reference: bool = False
    join_count: int = 0
    leading_keywords: list[str] = field(default_factory=list)
    tokens: list[Token] = field(default_factory=list, repr=False)

    @property
    def has_join(self) -> bool:
        return self.join_count > 0


def iter_predicates(
    expression: Optional[Expression], negated: bool = False
) -> Iterator[tuple[Predicate, bool]]:
    """조건식의 리프 조건을 순서대로 순회한다.

    Args:
        expression: 조건식
        negated: 상위에 NOT이 있는지 여부

    Yields:
        (리프 조건, NOT 하위 여부) 튜플
    """
    if expression is None:
        return
    if isinstance(expression, BoolOp):
        for operand in expression.operands:
            yield from iter_predicates(operand, negated)
    elif isinstance(expression, Not):
        yield from iter_predicates(expression.operand, not negated)
    else:
        yield expression, negated


def has_disjunction(expression: Optional[Expression]) -> bool:
    """조건식에 OR 결합이 포함되어 있는지 여부."""
    if isinstance(expression, BoolOp):
        return expression.operator == "OR" or any(
            has_disjunction(operand) for operand in expression.operands
        )
    if isinstance(expression, Not):
        return has_disjunction(expression.operand)
    return False
