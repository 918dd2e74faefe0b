"""안전성 분석기 테스트."""

import pytest

from audience_query.core.models import Policy


@pytest.fixture
def policy() -> Policy:
    """기본 정책 fixture."""
    return Policy(disallowed_tables=frozenset({"raw_logs"}))


@pytest.fixture
def analyzer():
    """SafetyAnalyzer fixture."""
    from audience_query.safety.analyzer import SafetyAnalyzer

    return SafetyAnalyzer()


class TestDisallowedTables:
    """차단 테이블 규칙 테스트."""

    def test_disallowed_table_blocks_query(self, analyzer, policy):
        """차단 테이블을 참조하면 유효하지 않아야 한다."""
        report = analyzer.analyze("SELECT * FROM raw_logs LIMIT 10", policy)

        assert not report.is_valid
        assert any("raw_logs" in error for error in report.errors)

    def test_disallowed_match_is_case_insensitive(self, analyzer, policy):
        """차단 테이블 비교는 대소문자를 구분하지 않아야 한다."""
        report = analyzer.analyze("SELECT * FROM RAW_LOGS LIMIT 10", policy)

        assert not report.is_valid

    def test_mixed_case_policy_tables_match(self, analyzer):
        """정책에 대소문자를 섞어 넣어도 차단/최적화 테이블이 일치해야 한다."""
        policy = Policy(
            disallowed_tables=frozenset({"Raw_Logs"}),
            optimized_tables=frozenset({"Customer_Metrics"}),
        )

        blocked = analyzer.analyze("SELECT * FROM raw_logs LIMIT 10", policy)
        optimized = analyzer.analyze("SELECT * FROM customer_metrics LIMIT 10", policy)

        assert not blocked.is_valid
        assert optimized.uses_optimized_view

    def test_allowed_query_is_valid(self, analyzer, policy):
        """차단 테이블이 없으면 유효해야 한다."""
        report = analyzer.analyze("SELECT * FROM users LIMIT 10", policy)

        assert report.is_valid
        assert report.tables_used == ("users",)


class TestResultLimit:
    """LIMIT 규칙 테스트."""

    def test_limit_detected(self, analyzer, policy):
        """LIMIT이 있으면 has_result_limit이 참이어야 한다."""
        sql = "SELECT * FROM users WHERE created_at > '2024-01-01' LIMIT 500"

        report = analyzer.analyze(sql, policy)

        assert report.has_result_limit
        assert not any("LIMIT" in warning for warning in report.warnings)

    def test_missing_limit_warns(self, analyzer, policy):
        """LIMIT이 없으면 경고해야 한다."""
        sql = "SELECT * FROM users WHERE created_at > '2024-01-01'"

        report = analyzer.analyze(sql, policy)

        assert not report.has_result_limit
        assert report.is_valid
        assert any("No LIMIT clause" in warning for warning in report.warnings)

    def test_limit_above_hard_cap_warns(self, analyzer):
        """LIMIT이 hard cap을 넘으면 경고해야 한다."""
        report = analyzer.analyze(
            "SELECT * FROM users WHERE created_at > '2024-01-01' LIMIT 100000",
            Policy(hard_result_cap=50000),
        )

        assert any("exceeds the hard cap" in warning for warning in report.warnings)

    def test_limit_inside_subquery_counts(self, analyzer, policy):
        """서브쿼리 안의 LIMIT도 결과 제한으로 인정해야 한다."""
        sql = "SELECT * FROM (SELECT * FROM users LIMIT 5) t WHERE t.created_at > '2024-01-01'"

        report = analyzer.analyze(sql, policy)

        assert report.has_result_limit
        assert not any("No LIMIT clause" in warning for warning in report.warnings)

    def test_subquery_limit_above_hard_cap_warns(self, analyzer):
        """서브쿼리 LIMIT도 hard cap 비교 대상이어야 한다."""
        report = analyzer.analyze(
            "SELECT * FROM (SELECT * FROM users LIMIT 100000) t",
            Policy(hard_result_cap=50000, require_date_filter=False),
        )

        assert any("exceeds the hard cap" in warning for warning in report.warnings)

    def test_limit_inside_string_literal_is_ignored(self, analyzer, policy):
        """문자열 리터럴 안의 LIMIT은 결과 제한이 아니어야 한다."""
        sql = "SELECT * FROM users WHERE note = 'LIMIT 5' AND created_at > '2024-01-01'"

        report = analyzer.analyze(sql, policy)

        assert not report.has_result_limit


class TestUntokenizableText:
    """토큰화할 수 없는 쿼리 텍스트 테스트."""

    def test_unbalanced_quote_blocks_query(self, analyzer, policy):
        """따옴표가 맞지 않으면 차단 에러를 보고해야 한다."""
        sql = "SELECT * FROM users WHERE name = 'O'Brien' LIMIT 5"

        report = analyzer.analyze(sql, policy)

        assert not report.is_valid
        assert any("could not be fully tokenized" in error for error in report.errors)

    def test_disallowed_table_still_reported(self, analyzer, policy):
        """따옴표가 맞지 않아도 차단 테이블을 찾아야 한다."""
        sql = "SELECT * FROM raw_logs WHERE name = 'O'Brien' LIMIT 5"

        report = analyzer.analyze(sql, policy)

        assert not report.is_valid
        assert report.tables_used == ("raw_logs",)
        assert any("disallowed tables: raw_logs" in error for error in report.errors)

    def test_escaped_quote_is_valid(self, analyzer, policy):
        """이스케이프된 따옴표는 정상 쿼리여야 한다."""
        sql = "SELECT * FROM users WHERE name = 'O''Brien' AND created_at > '2024-01-01' LIMIT 5"

        report = analyzer.analyze(sql, policy)

        assert report.is_valid
        assert report.errors == ()


class TestDateFilter:
    """날짜 필터 규칙 테스트."""

    @pytest.mark.parametrize(
        "sql",
        [
            "SELECT * FROM orders WHERE order_date >= NOW() - INTERVAL '30 days'",
            "SELECT * FROM orders WHERE order_date > CURRENT_DATE",
            "SELECT * FROM users WHERE created_at > '2024-01-01'",
            "SELECT * FROM users WHERE last_login BETWEEN '2024-01-01' AND '2024-02-01'",
        ],
    )
    def test_date_filter_detected(self, analyzer, policy, sql):
        """날짜 필터 표현을 인식해야 한다."""
        assert analyzer.analyze(sql, policy).has_date_filter

    def test_missing_date_filter_warns(self, analyzer, policy):
        """날짜 필터가 없으면 경고해야 한다."""
        report = analyzer.analyze("SELECT * FROM users WHERE status = 'active' LIMIT 5", policy)

        assert not report.has_date_filter
        assert any("No date filter" in warning for warning in report.warnings)

    def test_date_filter_not_required(self, analyzer):
        """정책이 요구하지 않으면 날짜 경고가 없어야 한다."""
        report = analyzer.analyze(
            "SELECT * FROM users LIMIT 5", Policy(require_date_filter=False)
        )

        assert report.warnings == ()

    def test_estimated_date_span_is_first_interval(self, analyzer, policy):
        """첫 번째 INTERVAL 리터럴을 원문 그대로 기록해야 한다."""
        report = analyzer.analyze(
            "SELECT * FROM orders WHERE order_date >= NOW() - INTERVAL '30 days' "
            "AND created_at < NOW() - interval '7 days'",
            policy,
        )

        assert report.estimated_date_span == "INTERVAL '30 days'"


class TestOtherRules:
    """조인 수, 최적화 뷰, 허용 목록, 읽기 전용 규칙 테스트."""

    def test_too_many_tables_warns(self, analyzer):
        """테이블 수가 최대치를 넘으면 경고해야 한다."""
        sql = (
            "SELECT * FROM users u JOIN orders o ON u.id = o.user_id "
            "JOIN subscriptions s ON u.id = s.user_id LIMIT 10"
        )

        report = analyzer.analyze(sql, Policy(max_join_tables=2, require_date_filter=False))

        assert any("joins 3 tables" in warning for warning in report.warnings)

    def test_uses_optimized_view(self, analyzer, policy):
        """최적화 테이블을 사용하면 표시해야 한다."""
        report = analyzer.analyze("SELECT * FROM customer_metrics LIMIT 10", policy)

        assert report.uses_optimized_view

    def test_table_outside_allowed_list_warns(self, analyzer):
        """허용 목록 밖의 테이블은 경고해야 한다."""
        report = analyzer.analyze(
            "SELECT * FROM products LIMIT 10",
            Policy(allowed_tables=frozenset({"users"}), require_date_filter=False),
        )

        assert report.is_valid
        assert any("products" in warning for warning in report.warnings)

    def test_write_statement_is_blocked(self, analyzer, policy):
        """쓰기 문장은 차단해야 한다."""
        report = analyzer.analyze("DELETE FROM users WHERE id = 1", policy)

        assert not report.is_valid
        assert any("read-only" in error for error in report.errors)

    def test_write_after_semicolon_is_blocked(self, analyzer, policy):
        """세미콜론 뒤의 쓰기 문장도 차단해야 한다."""
        report = analyzer.analyze("SELECT * FROM users LIMIT 1; DROP TABLE users", policy)

        assert not report.is_valid

    def test_analysis_is_deterministic(self, analyzer, policy):
        """같은 입력에 대해 같은 결과를 반환해야 한다."""
        sql = "SELECT * FROM users u JOIN raw_logs r ON u.id = r.user_id"

        assert analyzer.analyze(sql, policy) == analyzer.analyze(sql, policy)


class TestApplyLimitFix:
    """LIMIT 자동 보정 테스트."""

    def test_fix_appends_default_limit(self, analyzer, policy):
        """LIMIT이 없으면 기본 LIMIT을 붙여야 한다."""
        fixed = analyzer.apply_limit_fix("SELECT * FROM users;  \n", policy)

        assert fixed == "SELECT * FROM users\nLIMIT 10000"
        assert analyzer.analyze(fixed, policy).has_result_limit

    def test_fix_is_idempotent(self, analyzer, policy):
        """두 번 적용해도 LIMIT이 중복되지 않아야 한다."""
        once = analyzer.apply_limit_fix("SELECT * FROM users", policy)
        twice = analyzer.apply_limit_fix(once, policy)

        assert twice == once
        assert twice.upper().count("LIMIT") == 1

    def test_fix_keeps_existing_limit(self, analyzer, policy):
        """이미 LIMIT이 있으면 원문을 유지해야 한다."""
        sql = "SELECT * FROM users LIMIT 5;"

        assert analyzer.apply_limit_fix(sql, policy) == sql


def test_module_level_analyze():
    """모듈 수준 analyze 함수도 같은 규칙을 적용해야 한다."""
    from audience_query.safety import analyze

    report = analyze("SELECT * FROM raw_events", Policy(disallowed_tables=frozenset({"raw_events"})))

    assert not report.is_valid
