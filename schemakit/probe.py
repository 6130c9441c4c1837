"""Queries that check whether a table or column exists in the current schema."""

from __future__ import annotations

from abc import ABC, abstractmethod

from schemakit.postgres.query import InformationSchema, TablesFields, TableType
from schemakit.sql import Col, Equals, Raw, SelectStatement, Value


class SchemaProbe(ABC):
    """Builds existence checks on top of a backend's schema and table queries."""

    @abstractmethod
    def get_current_schema(self) -> Raw:
        """An expression evaluating to the name of the current schema."""

    @abstractmethod
    def query_tables(self) -> SelectStatement:
        """A query yielding a ``table_name`` column for every table in the current schema."""

    def has_table(self, table: str) -> SelectStatement:
        """A query yielding one boolean row: whether ``table`` exists."""
        subquery = self.query_tables()
        subquery.where.append(Equals(Col("table_name"), Value(str(table))))
        return SelectStatement(
            columns=[(Raw("COUNT(*) > 0"), "has_table")],
            from_=subquery,
            from_alias="subquery",
        )

    def has_column(self, table: str, column: str) -> SelectStatement:
        """A query yielding one boolean row: whether ``table`` has ``column``."""
        return SelectStatement(
            columns=[(Raw("COUNT(*) > 0"), "has_column")],
            from_=("information_schema", "columns"),
            where=[
                Equals(self.get_current_schema(), Col("table_schema", "columns")),
                Equals(Col("table_name"), Value(str(table))),
                Equals(Col("column_name"), Value(str(column))),
            ],
        )


class PostgresProbe(SchemaProbe):
    """Existence checks for PostgreSQL."""

    def get_current_schema(self) -> Raw:
        return Raw("CURRENT_SCHEMA()")

    def query_tables(self) -> SelectStatement:
        return SelectStatement(
            columns=[(Col(TablesFields.TABLE_NAME.value), TablesFields.TABLE_NAME.value)],
            from_=(InformationSchema.SCHEMA.value, InformationSchema.TABLES.value),
            where=[
                Equals(
                    self.get_current_schema(),
                    Col(TablesFields.TABLE_SCHEMA.value, InformationSchema.TABLES.value),
                ),
                Equals(Col(TablesFields.TABLE_TYPE.value), Value(TableType.BASE_TABLE.value)),
            ],
        )