"""쿼리 안전성 검사 모듈."""

from audience_query.safety.analyzer import SafetyAnalyzer, analyze, apply_limit_fix
from audience_query.safety.defect_detector import DefectDetector, detect

__all__ = ["DefectDetector", "SafetyAnalyzer", "analyze", "apply_limit_fix", "detect"]
