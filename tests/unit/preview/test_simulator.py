"""실행 시뮬레이터 테스트."""

import pytest

from audience_query.core.models import Condition, ConditionOperator, ParsedQuery, Table


@pytest.fixture
def catalog():
    """데모 카탈로그 fixture."""
    from audience_query.core.sample_catalog import load_sample_catalog

    return load_sample_catalog()


@pytest.fixture
def simulator():
    """ExecutionSimulator fixture."""
    from audience_query.preview.simulator import ExecutionSimulator

    return ExecutionSimulator()


def _extract(sql: str) -> ParsedQuery:
    from audience_query.parser.extractor import extract

    return extract(sql)


class TestTableResolution:
    """테이블 해석 테스트."""

    def test_no_resolvable_tables_yields_empty_result(self, simulator, catalog):
        """카탈로그에 없는 테이블만 있으면 빈 결과여야 한다."""
        result = simulator.simulate(ParsedQuery(tables=["accounts"]), catalog)

        assert result.rows == []

    def test_single_table_rows_are_copied(self, simulator, catalog):
        """단일 테이블은 샘플 행을 그대로 복사해야 한다."""
        result = simulator.simulate(_extract("SELECT * FROM USERS"), catalog)

        assert result.row_count == 5
        assert result.rows == [dict(row) for row in catalog.get("users").sample_rows]
        assert result.rows[0] is not catalog.get("users").sample_rows[0]

    def test_unknown_tables_are_skipped(self, simulator, catalog):
        """알 수 없는 테이블은 건너뛰어야 한다."""
        result = simulator.simulate(ParsedQuery(tables=["accounts", "users"]), catalog)

        assert result.row_count == 5


class TestJoin:
    """다중 테이블 조인 테스트."""

    def test_join_enriches_every_primary_row(self, simulator, catalog):
        """주 테이블의 모든 행이 조인 결과에 남아야 한다."""
        result = simulator.simulate(
            _extract("SELECT * FROM users u JOIN orders o ON u.id = o.user_id"), catalog
        )

        assert result.row_count == 5
        assert result.rows[0]["id"] == 1
        assert result.rows[0]["total_amount"] == 167.99

    def test_fallback_join_is_deterministic(self, simulator):
        """외래 키 매칭이 없어도 결과가 결정적이어야 한다."""
        from audience_query.core.catalog import Catalog

        catalog = Catalog(
            [
                Table(name="users", schema="public", sample_rows=({"id": 1}, {"id": 2}, {"id": 3})),
                Table(
                    name="events",
                    schema="public",
                    sample_rows=({"event": "open", "user_id": 90}, {"event": "click", "user_id": 91}),
                ),
            ]
        )
        query = ParsedQuery(tables=["users", "events"])

        first = simulator.simulate(query, catalog)
        second = simulator.simulate(query, catalog)

        assert first.row_count == 3
        assert [row["event"] for row in first.rows] == ["open", "click", "open"]
        assert first.to_dict() == second.to_dict()


class TestFilter:
    """조건 필터 테스트."""

    def test_equality_is_case_insensitive(self, simulator, catalog):
        """동등 비교는 대소문자를 구분하지 않아야 한다."""
        result = simulator.simulate(
            _extract("SELECT * FROM users WHERE status = 'ACTIVE'"), catalog
        )

        assert [row["id"] for row in result.rows] == [1, 2, 4]

    def test_numeric_comparison(self, simulator, catalog):
        """숫자 비교는 값을 숫자로 해석해야 한다."""
        result = simulator.simulate(_extract("SELECT * FROM orders WHERE amount > 100"), catalog)

        assert [row["id"] for row in result.rows] == [101, 103, 105]

    def test_in_membership(self, simulator, catalog):
        """IN은 대소문자 무시 포함 여부를 검사해야 한다."""
        result = simulator.simulate(
            _extract("SELECT * FROM users WHERE status IN ('Inactive', 'suspended')"), catalog
        )

        assert [row["id"] for row in result.rows] == [3, 5]

    def test_conditions_are_combined_with_and(self, simulator, catalog):
        """OR로 작성된 조건도 AND로 적용해야 한다."""
        result = simulator.simulate(
            _extract("SELECT * FROM users WHERE status = 'active' OR status = 'inactive'"),
            catalog,
        )

        assert result.rows == []

    def test_missing_column_is_satisfied(self, simulator, catalog):
        """행에 없는 컬럼 조건은 만족한 것으로 봐야 한다."""
        result = simulator.simulate(
            _extract("SELECT * FROM users WHERE plan = 'gold'"), catalog
        )

        assert result.row_count == 5

    def test_numeric_string_values(self, simulator):
        """문자열 값도 앞부분 숫자로 비교해야 한다."""
        from audience_query.core.catalog import Catalog

        catalog = Catalog(
            [
                Table(
                    name="items",
                    schema="public",
                    sample_rows=({"weight": "12.5kg"}, {"weight": "3kg"}, {"weight": "n/a"}),
                )
            ]
        )
        query = ParsedQuery(
            tables=["items"], conditions=[Condition("weight", ConditionOperator.GTE, 10)]
        )

        result = simulator.simulate(query, catalog)

        assert result.rows == [{"weight": "12.5kg"}]


class TestProjectionAndLimit:
    """컬럼 선택과 LIMIT 테스트."""

    def test_projection(self, simulator, catalog):
        """요청한 컬럼만 남겨야 한다."""
        result = simulator.simulate(_extract("SELECT email, status FROM users LIMIT 2"), catalog)

        assert result.rows == [
            {"email": "john.anderson@example.com", "status": "active"},
            {"email": "sarah.mitchell@example.com", "status": "active"},
        ]

    def test_projection_by_suffix(self, simulator, catalog):
        """정확히 일치하는 키가 없으면 ``_<column>`` 접미사로 찾아야 한다."""
        result = simulator.simulate(
            _extract("SELECT segment FROM customer_metrics LIMIT 1"), catalog
        )

        assert result.rows == [{"customer_segment": "VIP"}]

    def test_projection_falls_back_to_full_row(self, simulator, catalog):
        """일치하는 컬럼이 없으면 전체 행을 반환해야 한다."""
        result = simulator.simulate(_extract("SELECT nickname FROM users LIMIT 1"), catalog)

        assert result.rows[0] == dict(catalog.get("users").sample_rows[0])

    def test_limit_truncates_in_order(self, simulator):
        """LIMIT은 앞쪽 행부터 잘라야 한다."""
        from audience_query.core.catalog import Catalog

        rows = tuple({"id": idx} for idx in range(20))
        catalog = Catalog([Table(name="users", schema="public", sample_rows=rows)])

        full = simulator.simulate(_extract("SELECT * FROM users"), catalog)
        limited = simulator.simulate(_extract("SELECT * FROM users LIMIT 5"), catalog)

        assert full.row_count == 20
        assert limited.row_count == 5
        assert limited.rows == full.rows[:5]

    def test_hard_cap_clamps_limit(self, catalog):
        """hard cap이 LIMIT보다 작으면 cap을 적용해야 한다."""
        from audience_query.preview.simulator import ExecutionSimulator

        simulator = ExecutionSimulator(hard_result_cap=3)

        result = simulator.simulate(_extract("SELECT * FROM users LIMIT 10"), catalog)

        assert result.row_count == 3


def test_module_level_simulate(catalog):
    """모듈 수준 simulate 함수도 같은 결과를 반환해야 한다."""
    from audience_query.preview import simulate

    assert simulate(_extract("SELECT * FROM orders LIMIT 2"), catalog).row_count == 2
