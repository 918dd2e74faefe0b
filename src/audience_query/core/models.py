"""Core 데이터 모델 정의."""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Union

if TYPE_CHECKING:
    from audience_query.parser.ast import SelectStmt


ConditionValue = Union[str, int, float, list[str]]


class ConditionOperator(str, Enum):
    """WHERE 조건 연산자."""

    EQ = "="
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="
    IN = "IN"


class DefectKind(Enum):
    """SQL 결함 종류 (우선순위 순)."""

    UNKNOWN_TABLE = "unknown_table"
    INVALID_COLUMN = "invalid_column"
    KEYWORD_TYPO = "keyword_typo"
    AMBIGUOUS_COLUMN = "ambiguous_column"


@dataclass(frozen=True)
class Column:
    """테이블 컬럼 정의."""

    name: str
    declared_type: str
    is_primary_key: bool = False
    foreign_key: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class Table:
    """카탈로그 테이블 - 컬럼 정의와 샘플 행을 가진다."""

    name: str
    schema: str
    columns: tuple[Column, ...] = ()
    sample_rows: tuple[dict[str, Any], ...] = ()
    description: Optional[str] = None

    @property
    def column_names(self) -> list[str]:
        """컬럼명 목록."""
        return [column.name for column in self.columns]

    @property
    def row_count(self) -> int:
        """샘플 행 수."""
        return len(self.sample_rows)


@dataclass(frozen=True)
class Condition:
    """WHERE 절에서 추출한 단순 조건."""

    column: str
    operator: ConditionOperator
    value: ConditionValue

    def to_dict(self) -> dict[str, Any]:
        return {
            "column": self.column,
            "operator": self.operator.value,
            "value": list(self.value) if isinstance(self.value, list) else self.value,
        }


@dataclass
class ParsedQuery:
    """SQL 텍스트에서 추출한 구조 정보.

    columns가 비어 있으면 ``SELECT *``를 의미한다.
    conditions는 항상 AND로 결합되어 적용된다.
    """

    tables: list[str] = field(default_factory=list)
    columns: list[str] = field(default_factory=list)
    conditions: list[Condition] = field(default_factory=list)
    limit: Optional[int] = None
    statement: Optional["SelectStmt"] = field(default=None, repr=False, compare=False)

    @property
    def is_empty(self) -> bool:
        """인식 가능한 구조가 없는지 여부."""
        return not (self.tables or self.columns or self.conditions)

    @property
    def select_all(self) -> bool:
        """``SELECT *`` 여부."""
        return not self.columns

    def to_dict(self) -> dict[str, Any]:
        return {
            "tables": list(self.tables),
            "columns": list(self.columns),
            "conditions": [condition.to_dict() for condition in self.conditions],
            "limit": self.limit,
        }


@dataclass(frozen=True)
class Policy:
    """관리자가 설정한 쿼리 안전성 정책 (분석 중 읽기 전용)."""

    require_date_filter: bool = True
    max_join_tables: int = 3
    allowed_tables: frozenset[str] = frozenset()
    disallowed_tables: frozenset[str] = frozenset()
    default_result_limit: int = 10000
    hard_result_cap: int = 50000
    optimized_tables: frozenset[str] = frozenset({"customer_metrics"})
    date_window_days: int = 90

    def __post_init__(self) -> None:
        # 테이블명 비교는 소문자 기준
        for name in ("allowed_tables", "disallowed_tables", "optimized_tables"):
            object.__setattr__(
                self, name, frozenset(str(table).lower() for table in getattr(self, name))
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Policy":
        """JSON 형태(camelCase)의 정책 입력으로 Policy를 생성.

        Args:
            data: ``requireDateFilter``, ``maxJoinTables`` 등의 키를 가진 딕셔너리

        Returns:
            Policy 객체 (누락된 키는 기본값 사용)
        """
        defaults = cls()

        def names(key: str, default: frozenset[str]) -> frozenset[str]:
            if key not in data:
                return default
            return frozenset(str(name).lower() for name in data[key] or [])

        return cls(
            require_date_filter=bool(
                data.get("requireDateFilter", defaults.require_date_filter)
            ),
            max_join_tables=int(data.get("maxJoinTables", defaults.max_join_tables)),
            allowed_tables=names("allowedTables", defaults.allowed_tables),
            disallowed_tables=names("disallowedTables", defaults.disallowed_tables),
            default_result_limit=int(
                data.get("defaultResultLimit", defaults.default_result_limit)
            ),
            hard_result_cap=int(data.get("hardResultCap", defaults.hard_result_cap)),
            optimized_tables=names("optimizedTables", defaults.optimized_tables),
            date_window_days=int(data.get("dateWindowDays", defaults.date_window_days)),
        )


@dataclass(frozen=True)
class SafetyReport:
    """정책 평가 결과. 차단 에러가 하나라도 있으면 유효하지 않다."""

    has_date_filter: bool
    has_result_limit: bool
    uses_optimized_view: bool
    tables_used: tuple[str, ...] = ()
    estimated_date_span: Optional[str] = None
    warnings: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        """차단 에러가 없는지 여부."""
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "hasDateFilter": self.has_date_filter,
            "hasResultLimit": self.has_result_limit,
            "usesOptimizedView": self.uses_optimized_view,
            "tablesUsed": list(self.tables_used),
            "estimatedDateSpan": self.estimated_date_span,
            "warnings": list(self.warnings),
            "errors": list(self.errors),
        }


@dataclass(frozen=True)
class DetectedDefect:
    """SQL 텍스트에서 발견된 스키마/구문 결함."""

    kind: DefectKind
    message: str
    line_number: int = 1
    suggestion: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "lineNumber": self.line_number,
            "suggestion": self.suggestion,
        }


@dataclass(frozen=True)
class PreviewResult:
    """샘플 데이터 기반 쿼리 실행 시뮬레이션 결과."""

    rows: list[dict[str, Any]] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def columns(self) -> list[str]:
        """결과에 나타난 컬럼명 (첫 등장 순서)."""
        seen: dict[str, None] = {}
        for row in self.rows:
            for key in row:
                seen.setdefault(key, None)
        return list(seen)

    def to_dict(self) -> dict[str, Any]:
        return {"rows": [dict(row) for row in self.rows]}


class FilterLogic(Enum):
    """필터 그룹 결합 방식."""

    AND = "AND"
    OR = "OR"


class FilterValueType(Enum):
    """속성 필터 값 타입."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"


@dataclass
class PropertyFilter:
    """부모 모델 속성 필터 (예: ``lifetime_value > 1000``)."""

    field: str
    operator: str
    value: Union[str, int, float, bool]
    value_type: FilterValueType = FilterValueType.TEXT


@dataclass
class TimeWindow:
    """이벤트 필터의 시간 범위."""

    type: str = "all_time"
    days: Optional[int] = None


@dataclass
class EventFilter:
    """연관 이벤트 모델 필터 (예: 최근 30일 내 장바구니 추가)."""

    related_model_name: str
    has_event: bool = True
    time_window: TimeWindow = field(default_factory=TimeWindow)
    timestamp_column: str = "added_at"


@dataclass
class FilterGroup:
    """오디언스 필터 그룹."""

    logic: FilterLogic = FilterLogic.AND
    property_filters: list[PropertyFilter] = field(default_factory=list)
    event_filters: list[EventFilter] = field(default_factory=list)
