"""쿼리 검토 파이프라인 - 추출, 결함 탐지, 안전성 분석, 미리보기를 묶는다."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from audience_query.core.catalog import Catalog
from audience_query.core.models import DetectedDefect, ParsedQuery, Policy, PreviewResult, SafetyReport
from audience_query.parser.extractor import StructuralExtractor
from audience_query.preview.simulator import ExecutionSimulator
from audience_query.safety.analyzer import SafetyAnalyzer
from audience_query.safety.defect_detector import DefectDetector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryReview:
    """쿼리 검토 결과."""

    sql: str
    parsed: ParsedQuery
    defect: Optional[DetectedDefect]
    safety: SafetyReport
    preview: Optional[PreviewResult] = None

    @property
    def can_preview(self) -> bool:
        """결함이 없고 차단 에러가 없어 미리보기를 실행할 수 있는지 여부."""
        return self.defect is None and self.safety.is_valid

    def to_dict(self) -> dict[str, Any]:
        return {
            "sql": self.sql,
            "parsedQuery": self.parsed.to_dict(),
            "defect": self.defect.to_dict() if self.defect else None,
            "safetyReport": self.safety.to_dict(),
            "preview": self.preview.to_dict() if self.preview else None,
        }

    def to_report(self) -> str:
        """검토 결과를 리포트 문자열로 변환.

        Returns:
            리포트 문자열
        """
        lines = [
            "=== 쿼리 검토 결과 ===",
            f"참조 테이블: {', '.join(self.parsed.tables) or '-'}",
            f"선택 컬럼: {', '.join(self.parsed.columns) or '*'}",
            f"추출 조건: {len(self.parsed.conditions)}건",
            f"날짜 필터: {'있음' if self.safety.has_date_filter else '없음'}",
            f"LIMIT: {'있음' if self.safety.has_result_limit else '없음'}",
            f"최적화 뷰 사용: {'예' if self.safety.uses_optimized_view else '아니오'}",
            f"유효 여부: {'유효' if self.safety.is_valid else '차단'}",
        ]

        if self.defect:
            lines.append("\n=== 결함 ===")
            lines.append(f"  - line {self.defect.line_number}: {self.defect.message}")
            if self.defect.suggestion:
                lines.append(f"    {self.defect.suggestion}")

        if self.safety.errors:
            lines.append("\n=== 에러 목록 ===")
            lines.extend(f"  - {error}" for error in self.safety.errors)

        if self.safety.warnings:
            lines.append("\n=== 경고 목록 ===")
            lines.extend(f"  - {warning}" for warning in self.safety.warnings)

        if self.preview is not None:
            lines.append(f"\n미리보기 행 수: {self.preview.row_count}건")

        return "\n".join(lines)


class QueryReviewPipeline:
    """SQL 한 건을 검토하는 동기 파이프라인.

    결함 탐지와 안전성 분석은 항상 실행하고, 미리보기는 결함이 없고
    차단 에러가 없을 때만 실행한다.
    """

    def __init__(
        self,
        catalog: Catalog,
        policy: Policy,
        extractor: Optional[StructuralExtractor] = None,
        detector: Optional[DefectDetector] = None,
        analyzer: Optional[SafetyAnalyzer] = None,
        simulator: Optional[ExecutionSimulator] = None,
    ) -> None:
        """파이프라인 초기화.

        Args:
            catalog: 스키마 카탈로그
            policy: 관리자 정책
            extractor: 구조 추출기
            detector: 결함 탐지기
            analyzer: 안전성 분석기
            simulator: 실행 시뮬레이터 (기본: policy의 hard cap 적용)
        """
        self._catalog = catalog
        self._policy = policy
        self._extractor = extractor or StructuralExtractor()
        self._detector = detector or DefectDetector()
        self._analyzer = analyzer or SafetyAnalyzer(self._extractor)
        self._simulator = simulator or ExecutionSimulator(
            hard_result_cap=policy.hard_result_cap
        )

    def review(self, sql: str) -> QueryReview:
        """SQL을 검토.

        Args:
            sql: SQL 문자열

        Returns:
            QueryReview 객체
        """
        parsed = self._extractor.extract(sql)
        defect = self._detector.detect(sql, self._catalog, parsed)
        safety = self._analyzer.analyze(sql, self._policy, parsed)

        preview = None
        if defect is None and safety.is_valid:
            preview = self._simulator.simulate(parsed, self._catalog)
        else:
            logger.debug("미리보기 생략: defect=%s valid=%s", defect is not None, safety.is_valid)

        return QueryReview(sql=sql, parsed=parsed, defect=defect, safety=safety, preview=preview)

    def auto_fix(self, sql: str) -> str:
        """LIMIT 누락을 기본 LIMIT으로 보정한 SQL을 반환."""
        return self._analyzer.apply_limit_fix(sql, self._policy)
