"""오디언스 필터 그룹을 SQL로 변환."""

from audience_query.core.models import EventFilter, FilterGroup, FilterValueType, PropertyFilter


class FilterSQLBuilder:
    """속성 필터와 이벤트 필터로 오디언스 SELECT 문을 만든다.

    이벤트 필터마다 관련 모델 테이블을 ``e{i}`` 별칭으로 조인한다.
    이벤트가 있어야 하면 INNER JOIN, 없어야 하면 LEFT JOIN을 사용한다.
    """

    def __init__(
        self, parent_table: str = "users", parent_alias: str = "u", limit: int = 10000
    ) -> None:
        self._parent_table = parent_table
        self._parent_alias = parent_alias
        self._limit = limit

    def build(self, group: FilterGroup) -> str:
        """필터 그룹을 SQL로 변환.

        Args:
            group: 필터 그룹

        Returns:
            SQL 문자열
        """
        sql = f"SELECT *\nFROM {self._parent_table} {self._parent_alias}"

        for idx, event_filter in enumerate(group.event_filters):
            sql += self._join_clause(idx, event_filter)

        conditions = [self._property_condition(pf) for pf in group.property_filters]
        for idx, event_filter in enumerate(group.event_filters):
            condition = self._event_condition(idx, event_filter)
            if condition:
                conditions.append(condition)

        if conditions:
            sql += "\nWHERE " + f"\n  {group.logic.value} ".join(conditions)

        sql += f"\nLIMIT {self._limit};"
        return sql

    def _join_clause(self, idx: int, event_filter: EventFilter) -> str:
        alias = f"e{idx}"
        join_type = "INNER" if event_filter.has_event else "LEFT"
        table = event_filter.related_model_name.lower().replace(" ", "_")
        return (
            f"\n{join_type} JOIN {table} {alias}"
            f" ON {self._parent_alias}.user_id = {alias}.user_id"
        )

    def _property_condition(self, property_filter: PropertyFilter) -> str:
        column = f"{self._parent_alias}.{property_filter.field}"
        if property_filter.value_type is FilterValueType.TEXT:
            value = str(property_filter.value).replace("'", "''")
            return f"{column} {property_filter.operator} '{value}'"
        return f"{column} {property_filter.operator} {property_filter.value}"

    def _event_condition(self, idx: int, event_filter: EventFilter) -> str:
        if not event_filter.time_window.days:
            return ""
        alias = f"e{idx}"
        if not event_filter.has_event:
            return f"{alias}.event_id IS NULL"
        return (
            f"{alias}.{event_filter.timestamp_column} >= NOW() - "
            f"INTERVAL '{event_filter.time_window.days} days'"
        )
