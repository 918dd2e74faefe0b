"""SQL 생성 모듈."""

from audience_query.generation.filter_sql_builder import FilterSQLBuilder
from audience_query.generation.sql_generator import SQLGenerator, strip_code_fences

__all__ = ["FilterSQLBuilder", "SQLGenerator", "strip_code_fences"]
