"""마케팅 오디언스 SQL 안전성 검사 및 미리보기 엔진."""

__version__ = "0.1.0"
