"""Discover a PostgreSQL schema by running catalog queries through an executor."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Any, Union

from schemakit.postgres.definitions import (
    Check,
    ColumnInfo,
    Constraint,
    EnumDef,
    Exclusion,
    NotNull,
    PrimaryKey,
    References,
    Schema,
    TableDef,
    TableInfo,
    Unique,
)
from schemakit.postgres.parser import (
    parse_column_query_result,
    parse_enum_variants,
    parse_table_constraint_query_results,
    parse_table_query_result,
)
from schemakit.postgres.query import (
    ColumnQueryResult,
    EnumQueryResult,
    SchemaQueryBuilder,
    TableConstraintsQueryResult,
    TableQueryResult,
)
from schemakit.sql import SelectStatement

log = logging.getLogger(__name__)

Row = Sequence[Any]
FetchResult = Union[Iterable[Row], Awaitable[Iterable[Row]]]
Fetch = Callable[[str, list], FetchResult]


class Executor:
    """Runs SELECT statements through ``fetch(sql, params)``.

    ``fetch`` receives SQL with ``$n`` placeholders and the parameter values,
    and returns (or resolves to) an iterable of positional rows.
    """

    def __init__(self, fetch: Fetch) -> None:
        self._fetch = fetch

    async def fetch_all(self, statement: SelectStatement) -> list[Row]:
        sql, params = statement.build()
        log.debug("%s, %r", sql, params)
        rows = self._fetch(sql, params)
        if inspect.isawaitable(rows):
            rows = await rows
        return list(rows)


class SchemaDiscovery:
    """Reads tables, columns, constraints and enums of one schema."""

    def __init__(self, executor: Executor | Fetch, schema: str) -> None:
        self.query = SchemaQueryBuilder()
        self.executor = executor if isinstance(executor, Executor) else Executor(executor)
        self.schema = schema

    async def discover(self) -> Schema:
        enums = {enum_def.typename: enum_def.values for enum_def in await self.discover_enums()}
        infos = await self.discover_tables()
        tables = await asyncio.gather(*(self.discover_table(info) for info in infos))
        for table in tables:
            table.columns = [parse_enum_variants(col, enums) for col in table.columns]
        return Schema(schema=self.schema, tables=list(tables))

    async def discover_tables(self) -> list[TableInfo]:
        rows = await self.executor.fetch_all(self.query.query_tables(self.schema))
        tables = []
        for row in rows:
            result = TableQueryResult.from_row(row)
            log.debug("%r", result)
            table = parse_table_query_result(result)
            log.debug("%r", table)
            tables.append(table)
        return tables

    async def discover_table(self, info: TableInfo) -> TableDef:
        columns = await self.discover_columns(self.schema, info.name)
        constraints = await self.discover_constraints(self.schema, info.name)
        table = TableDef(info=info, columns=columns)
        for constraint in constraints:
            match constraint:
                case Check():
                    table.check_constraints.append(constraint)
                case NotNull():
                    table.not_null_constraints.append(constraint)
                case Unique():
                    table.unique_constraints.append(constraint)
                case PrimaryKey():
                    table.primary_key_constraints.append(constraint)
                case References():
                    table.reference_constraints.append(constraint)
                case Exclusion():
                    table.exclusion_constraints.append(constraint)
        return table

    async def discover_columns(self, schema: str, table: str) -> list[ColumnInfo]:
        rows = await self.executor.fetch_all(self.query.query_columns(schema, table))
        columns = []
        for row in rows:
            result = ColumnQueryResult.from_row(row)
            log.debug("%r", result)
            column = parse_column_query_result(result)
            log.debug("%r", column)
            columns.append(column)
        return columns

    async def discover_constraints(self, schema: str, table: str) -> list[Constraint]:
        rows = await self.executor.fetch_all(self.query.query_table_constraints(schema, table))
        results = [TableConstraintsQueryResult.from_row(row) for row in rows]
        for result in results:
            log.debug("%r", result)
        constraints = list(parse_table_constraint_query_results(results))
        for constraint in constraints:
            log.debug("%r", constraint)
        return constraints

    async def discover_enums(self) -> list[EnumDef]:
        rows = await self.executor.fetch_all(self.query.query_enums())
        grouped: dict[str, list[str]] = {}
        for row in rows:
            result = EnumQueryResult.from_row(row)
            log.debug("%r", result)
            grouped.setdefault(result.typename, []).append(result.enumlabel)
        return [EnumDef(values=values, typename=name) for name, values in grouped.items()]