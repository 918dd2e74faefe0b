"""SQL 파서 모듈."""

from audience_query.parser.extractor import StructuralExtractor, extract
from audience_query.parser.parser import parse_sql
from audience_query.parser.tokenizer import Token, TokenKind, tokenize

__all__ = ["StructuralExtractor", "Token", "TokenKind", "extract", "parse_sql", "tokenize"]
