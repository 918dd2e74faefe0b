"""조인 전략 테스트."""

import pytest


@pytest.fixture
def strategy():
    """HeuristicJoinStrategy fixture."""
    from audience_query.preview.join_strategy import HeuristicJoinStrategy

    return HeuristicJoinStrategy()


class TestHeuristicJoinStrategy:
    """HeuristicJoinStrategy 테스트."""

    def test_matches_user_id_to_primary_id(self, strategy):
        """조인 행의 user_id가 주 행의 id와 같으면 매칭해야 한다."""
        users = [{"id": 1, "email": "a"}, {"id": 2, "email": "b"}]
        orders = [{"id": 101, "user_id": 2, "amount": 10}, {"id": 102, "user_id": 1, "amount": 20}]

        merged = strategy.join(users, orders)

        assert merged[0]["amount"] == 20
        assert merged[1]["amount"] == 10

    def test_matches_id_to_primary_user_id(self, strategy):
        """조인 행의 id가 주 행의 user_id와 같으면 매칭해야 한다."""
        orders = [{"order_id": 1, "user_id": 7}]
        users = [{"id": 3, "email": "x"}, {"id": 7, "email": "y"}]

        merged = strategy.join(orders, users)

        assert merged[0]["email"] == "y"

    def test_fallback_by_index_modulo(self, strategy):
        """매칭이 없으면 인덱스 순환으로 대체해야 한다."""
        users = [{"id": 1}, {"id": 2}, {"id": 3}]
        orders = [{"id": 100, "user_id": 10, "amount": 5}, {"id": 101, "user_id": 11, "amount": 6}]

        merged = strategy.join(users, orders)

        assert [row["amount"] for row in merged] == [5, 6, 5]

    def test_does_not_overwrite_populated_keys(self, strategy):
        """이미 채워진 id/user_id는 덮어쓰지 않아야 한다."""
        users = [{"id": 1}]
        orders = [{"id": 100, "user_id": 1, "status": "completed"}]

        merged = strategy.join(users, orders)

        assert merged[0] == {"id": 1, "user_id": 1, "status": "completed"}

    def test_empty_joined_table_keeps_primary_rows(self, strategy):
        """조인 테이블이 비어 있으면 주 행을 그대로 유지해야 한다."""
        users = [{"id": 1}, {"id": 2}]

        merged = strategy.join(users, [])

        assert merged == users
        assert merged[0] is not users[0]

    def test_input_rows_are_not_mutated(self, strategy):
        """입력 행을 변경하지 않아야 한다."""
        users = [{"id": 1}]
        orders = [{"id": 100, "user_id": 1}]

        strategy.join(users, orders)

        assert users == [{"id": 1}]
