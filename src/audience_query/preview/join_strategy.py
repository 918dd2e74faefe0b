"""샘플 행 조인 전략."""

import logging
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)

Row = dict[str, Any]

# 병합 시 덮어쓰지 않는 키 컬럼
KEY_COLUMNS = ("id", "user_id")


class JoinStrategy(Protocol):
    """주 테이블 행과 조인 테이블 행을 병합하는 전략."""

    def join(self, primary_rows: list[Row], joined_rows: list[Row]) -> list[Row]:
        ...


class HeuristicJoinStrategy:
    """외래 키 추정 매칭, 실패 시 인덱스 순환으로 대체하는 조인 전략.

    주 테이블의 각 행은 항상 정확히 하나의 결과 행이 된다.
    매칭 규칙 (먼저 찾은 행 사용):
        - joined.user_id == primary.id 또는 primary.user_id
        - joined.id == primary.user_id
    매칭되는 행이 없으면 ``joined_rows[i % len(joined_rows)]``를 사용한다.
    """

    def join(self, primary_rows: list[Row], joined_rows: list[Row]) -> list[Row]:
        """주 테이블 행마다 조인 테이블 행 하나를 병합.

        Args:
            primary_rows: 주 테이블 행 목록
            joined_rows: 조인 테이블 행 목록

        Returns:
            병합된 새 행 목록 (입력 행은 변경하지 않음)
        """
        if not joined_rows:
            return [dict(row) for row in primary_rows]

        merged = []
        for idx, row in enumerate(primary_rows):
            match = self._find_match(row, joined_rows)
            if match is None:
                match = joined_rows[idx % len(joined_rows)]
                logger.debug("조인 매칭 실패, 인덱스 %d 행으로 대체", idx % len(joined_rows))
            merged.append(self._merge(row, match))
        return merged

    def _find_match(self, row: Row, joined_rows: list[Row]) -> Optional[Row]:
        primary_id = row.get("id")
        primary_user_id = row.get("user_id")

        for candidate in joined_rows:
            candidate_user_id = candidate.get("user_id")
            if candidate_user_id is not None and candidate_user_id in (
                primary_id,
                primary_user_id,
            ):
                return candidate
            candidate_id = candidate.get("id")
            if candidate_id is not None and candidate_id == primary_user_id:
                return candidate
        return None

    def _merge(self, row: Row, joined: Row) -> Row:
        merged = dict(row)
        for key, value in joined.items():
            if key in KEY_COLUMNS and merged.get(key) is not None:
                continue
            merged[key] = value
        return merged
