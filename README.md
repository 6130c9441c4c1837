# schemakit

schemakit reads the structure of a PostgreSQL schema from `information_schema` and the
`pg_type` / `pg_enum` catalogs and turns it into plain Python dataclasses. It can also write
those objects back out as `CREATE TABLE` and `CREATE TYPE` statements.

It has no dependencies outside the standard library.

## Installation

```
pip install schemakit
```

For development, install the test extra and run the tests:

```
pip install -e ".[test]"
pytest
```

## Modules

- `schemakit.postgres.definitions` is the schema model. `Type` pairs a `TypeKind` with the
  attribute that kind carries (`StringAttr`, `TimeAttr`, `ArbitraryPrecisionNumericAttr`,
  `IntervalAttr`, `BitAttr`, `EnumDef`, `ArrayDef`, or the type name for unknown types);
  `Type.from_str` maps a PostgreSQL type name to a `Type`. `ColumnInfo` describes a column.
  `Check`, `NotNull`, `Unique`, `PrimaryKey`, `References` (with `ForeignKeyAction`) and
  `Exclusion` describe constraints. `TableInfo`, `TableDef` and `Schema` describe tables and
  the schema as a whole.
- `schemakit.postgres.query` has `SchemaQueryBuilder`, whose `query_tables`, `query_columns`,
  `query_table_constraints` and `query_enums` build the catalog queries. The rows they return
  are read into `TableQueryResult`, `ColumnQueryResult`, `TableConstraintsQueryResult` and
  `EnumQueryResult` with `from_row`, which takes a positional row and checks its length.
- `schemakit.postgres.parser` turns those records into definitions, for example
  `parse_column_query_result` and `parse_table_query_result`.
  `parse_table_constraint_query_results` groups constraint rows (ordered by constraint name,
  then ordinal position) into `Check`, `PrimaryKey`, `Unique` and `References` objects.
- `schemakit.postgres.discovery` has `Executor` and `SchemaDiscovery`, which run the queries
  and assemble a complete `Schema`, filling in the labels of enum columns.
- `schemakit.postgres.writer` writes definitions as SQL text: `write_column`,
  `write_column_type`, `write_primary_key`, `write_unique`, `write_references`,
  `write_enum`, `write_table` and `write_schema`. A column whose default starts with
  `nextval`, or an identity column, is written as `smallserial`, `serial` or `bigserial`.
- `schemakit.probe` has `PostgresProbe` (built on the abstract `SchemaProbe`), whose
  `has_table` and `has_column` build queries returning one boolean row.
- `schemakit.sql` is the small SELECT builder behind the queries: `SelectStatement` with
  `to_string()` (values inlined as literals) and `build()` (SQL with `$1`, `$2`, ...
  placeholders plus the list of values), the expression types `Raw`, `Col`, `Value`,
  `Equals`, `Cast` and `Join`, and `quote_identifier` / `quote_literal`.
- `schemakit.tokens` is a small SQL tokenizer (`tokenize`, yielding `Token` objects of a
  `TokenKind`) and `Parser`, a cursor over the tokens that skips whitespace.

## Example

`SchemaDiscovery` takes an `Executor`, or just the function an `Executor` wraps:
`fetch(sql, params)` receives SQL with `$n` placeholders and the list of parameter values,
and returns — directly or as an awaitable — an iterable of positional rows.

```python
import asyncio

from schemakit.postgres.discovery import SchemaDiscovery
from schemakit.postgres.writer import write_schema


async def dump(connection):
    async def fetch(sql, params):
        return await connection.fetch(sql, *params)

    discovery = SchemaDiscovery(fetch, "public")
    schema = await discovery.discover()
    for statement in write_schema(schema):
        print(f"{statement};")
```

To build a single statement without a database:

```python
from schemakit.probe import PostgresProbe

print(PostgresProbe().has_table("actor").to_string())
```

## What it does not do

- It does not connect to a database. You supply the function that runs the queries.
- It has no command-line tool.
- It supports PostgreSQL only.
- `write_table` writes columns, primary keys, unique constraints and foreign keys. Check and
  exclusion constraints are discovered but are not written, and enum types have to be
  created separately with `write_enum`.