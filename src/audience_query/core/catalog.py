"""스키마 카탈로그 - 실제 데이터베이스를 대신하는 인메모리 테이블 정의."""

import json
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, Union

from audience_query.core.models import Column, Table


class CatalogError(ValueError):
    """잘못된 카탈로그 입력."""

    pass


class Catalog:
    """테이블, 컬럼, 샘플 행으로 구성된 인메모리 카탈로그.

    테이블명 조회는 대소문자를 구분하지 않는다.
    """

    def __init__(self, tables: Iterable[Table]) -> None:
        """카탈로그 초기화.

        Args:
            tables: 카탈로그에 등록할 테이블 목록

        Raises:
            CatalogError: 테이블명이 비어 있거나 중복된 경우
        """
        self._tables: dict[str, Table] = {}
        for table in tables:
            if not table.name:
                raise CatalogError("Table name must not be empty")
            key = table.name.lower()
            if key in self._tables:
                raise CatalogError(f"Duplicate table name: {table.name}")
            self._tables[key] = table

    def __len__(self) -> int:
        return len(self._tables)

    def __iter__(self) -> Iterator[Table]:
        return iter(self._tables.values())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._tables

    @property
    def table_names(self) -> list[str]:
        """등록 순서대로의 테이블명 목록."""
        return [table.name for table in self._tables.values()]

    def get(self, name: str) -> Optional[Table]:
        """테이블명으로 테이블을 조회.

        Args:
            name: 테이블명 (대소문자 무시)

        Returns:
            Table 객체 또는 None
        """
        return self._tables.get(name.lower())

    @classmethod
    def from_dict(cls, data: Union[dict[str, Any], list[dict[str, Any]]]) -> "Catalog":
        """JSON 형태의 카탈로그 입력으로 Catalog를 생성.

        ``{"tables": [...]}`` 또는 테이블 리스트를 그대로 받는다. 각 테이블은
        ``name``, ``schemaNamespace``, ``columns``, ``sampleRows`` 키를 가진다.

        Args:
            data: 카탈로그 딕셔너리 또는 테이블 딕셔너리 리스트

        Returns:
            Catalog 객체

        Raises:
            CatalogError: 테이블 정의가 올바르지 않은 경우
        """
        entries = data.get("tables", []) if isinstance(data, dict) else data
        return cls(_table_from_dict(entry) for entry in entries)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "Catalog":
        """JSON 파일에서 카탈로그를 로드."""
        with open(path, encoding="utf-8") as f:
            return cls.from_dict(json.load(f))


def _table_from_dict(entry: dict[str, Any]) -> Table:
    """테이블 딕셔너리를 Table로 변환."""
    if not isinstance(entry, dict) or not entry.get("name"):
        raise CatalogError(f"Invalid table entry: {entry!r}")

    columns = tuple(
        Column(
            name=column["name"],
            declared_type=column.get("type", ""),
            is_primary_key=bool(column.get("isPrimaryKey", column.get("primary", False))),
            foreign_key=column.get("foreignKey", column.get("foreign")),
            description=column.get("description"),
        )
        for column in entry.get("columns", [])
    )
    rows = tuple(dict(row) for row in entry.get("sampleRows", entry.get("sampleData", [])))

    return Table(
        name=entry["name"],
        schema=entry.get("schemaNamespace", entry.get("schema", "public")),
        columns=columns,
        sample_rows=rows,
        description=entry.get("description"),
    )
