"""샘플 데이터 기반 쿼리 미리보기 모듈."""

from audience_query.preview.join_strategy import HeuristicJoinStrategy, JoinStrategy
from audience_query.preview.simulator import ExecutionSimulator, simulate

__all__ = ["ExecutionSimulator", "HeuristicJoinStrategy", "JoinStrategy", "simulate"]
