from dataclasses import fields

import pytest

from schemakit.postgres.query import (
    ColumnQueryResult,
    ColumnsField,
    EnumQueryResult,
    InformationSchema,
    PgEnum,
    PgType,
    SchemaQueryBuilder,
    TableConstraintsQueryResult,
    TableQueryResult,
    TablesFields,
    TableType,
)
from schemakit.sql import quote_identifier, quote_literal


@pytest.fixture
def builder():
    return SchemaQueryBuilder()


def test_identifiers_render_as_names():
    assert str(InformationSchema.SCHEMA) == "information_schema"
    assert TableType.BASE_TABLE == "BASE TABLE"
    assert quote_identifier(TablesFields.TABLE_NAME) == quote_identifier("table_name")


def test_query_tables_binds_schema_and_table_type(builder):
    sql, params = builder.query_tables("public").build()
    assert params == ["public", "BASE TABLE"]
    assert quote_identifier("information_schema") + "." + quote_identifier("tables") in sql
    assert quote_identifier(TablesFields.USER_DEFINED_TYPE_NAME) in sql


def test_query_tables_selects_what_the_row_holds(builder):
    stmt = builder.query_tables("public")
    assert len(stmt.columns) == len(fields(TableQueryResult))
    assert quote_literal("BASE TABLE") in stmt.to_string()


def test_query_columns_binds_schema_then_table(builder):
    sql, params = builder.query_columns("public", "film").build()
    assert params == ["public", "film"]
    assert "udt_name::regtype" in sql


def test_query_columns_selects_in_row_order(builder):
    stmt = builder.query_columns("public", "film")
    assert len(stmt.columns) == len(fields(ColumnQueryResult))
    sql = stmt.to_string()
    positions = [
        sql.index(quote_identifier(name))
        for name in (
            ColumnsField.COLUMN_NAME,
            ColumnsField.DATA_TYPE,
            ColumnsField.COLUMN_DEFAULT,
            ColumnsField.NUMERIC_SCALE,
            ColumnsField.UDT_NAME,
            "udt_name_regtype",
        )
    ]
    assert positions == sorted(positions)


def test_query_enums_joins_and_orders(builder):
    stmt = builder.query_enums()
    sql, params = stmt.build()
    assert params == []
    assert " INNER JOIN " + quote_identifier(PgEnum.TABLE) in sql
    typname = quote_identifier(PgType.TABLE) + "." + quote_identifier(PgType.TYPE_NAME)
    label = quote_identifier(PgEnum.TABLE) + "." + quote_identifier(PgEnum.ENUM_LABEL)
    order = sql[sql.index("ORDER BY"):]
    assert order.index(typname) < order.index(label)
    assert len(stmt.columns) == len(fields(EnumQueryResult))


def test_query_table_constraints_shape(builder):
    stmt = builder.query_table_constraints("public", "film_actor")
    sql, params = stmt.build()
    assert params == ["public", "film_actor"]
    assert len(stmt.columns) == len(fields(TableConstraintsQueryResult))
    assert quote_identifier("referential_constraints_subquery") in sql
    assert "SELECT DISTINCT" in sql
    assert sql.count(" LEFT JOIN ") == len(stmt.joins) + 1
    assert sql.index("WHERE") < sql.index("ORDER BY")


def test_column_row_round_trip():
    row = ["title", "character varying", None, None, "NO", "NO",
           None, None, None, 255, 1020, None, None, None, "varchar", "character varying"]
    result = ColumnQueryResult.from_row(row)
    assert result.column_name == "title"
    assert result.character_maximum_length == 255
    assert [getattr(result, f.name) for f in fields(result)] == row


def test_table_constraints_row_round_trip():
    row = ["public", "pk", "public", "t", "PRIMARY KEY", "NO", "NO"] + [None] * 11
    result = TableConstraintsQueryResult.from_row(tuple(row))
    assert result.constraint_type == "PRIMARY KEY"
    assert result.referential_key_column_name is None


def test_enum_and_table_rows():
    assert EnumQueryResult.from_row(["mood", "happy"]) == EnumQueryResult("mood", "happy")
    assert TableQueryResult.from_row(["film", None, None]).table_name == "film"


def test_defaults_are_empty():
    result = TableConstraintsQueryResult()
    assert result.constraint_name == ""
    assert result.check_clause is None


@pytest.mark.parametrize(
    "cls, row",
    [
        (EnumQueryResult, ["mood"]),
        (TableQueryResult, ["a", "b", "c", "d"]),
        (ColumnQueryResult, []),
    ],
)
def test_from_row_rejects_wrong_length(cls, row):
    with pytest.raises(ValueError):
        cls.from_row(row)