import pytest

from schemakit.probe import PostgresProbe, SchemaProbe
from schemakit.sql import Col, Raw, SelectStatement


class _OtherProbe(SchemaProbe):
    def get_current_schema(self):
        return Raw("DATABASE()")

    def query_tables(self):
        return SelectStatement(columns=[Col("table_name")], from_="all_tables")


def test_schema_probe_is_abstract():
    with pytest.raises(TypeError):
        SchemaProbe()


def test_postgres_current_schema():
    assert PostgresProbe().get_current_schema() == Raw("CURRENT_SCHEMA()")


def test_postgres_query_tables_filters_base_tables():
    sql = PostgresProbe().query_tables().to_string()
    assert "CURRENT_SCHEMA()" in sql
    assert "'BASE TABLE'" in sql
    assert '"information_schema"."tables"' in sql
    assert sql.startswith("SELECT ")


def test_query_tables_is_fresh_each_call():
    probe = PostgresProbe()
    probe.has_table("users")
    assert len(probe.query_tables().where) == 2


def test_has_table_binds_table_name():
    sql, params = PostgresProbe().has_table("users").build()
    assert params == ["BASE TABLE", "users"]
    assert '"has_table"' in sql
    assert sql.endswith('AS "subquery"')
    assert "COUNT(*) > 0" in sql


def test_has_table_subquery_contains_table_filter():
    stmt = PostgresProbe().has_table("orders")
    assert isinstance(stmt.from_, SelectStatement)
    assert "'orders'" in stmt.from_.to_string()
    assert stmt.from_alias == "subquery"


def test_has_column_full_sql():
    sql = PostgresProbe().has_column("users", "id").to_string()
    assert sql == (
        'SELECT COUNT(*) > 0 AS "has_column" FROM "information_schema"."columns" '
        'WHERE CURRENT_SCHEMA() = "columns"."table_schema" '
        "AND \"table_name\" = 'users' AND \"column_name\" = 'id'"
    )


def test_has_column_params():
    _, params = PostgresProbe().has_column("users", "email").build()
    assert params == ["users", "email"]


def test_custom_probe_uses_its_schema_expression():
    probe = _OtherProbe()
    column_sql = SchemaProbe.has_column(probe, "t", "c").to_string()
    assert "DATABASE() =" in column_sql
    assert "CURRENT_SCHEMA()" not in column_sql
    statement = SchemaProbe.has_table(probe, "t")
    assert isinstance(statement.from_, SelectStatement)
    sql, params = statement.build()
    assert params == ["t"]
    assert '"all_tables"' in sql
    assert '"has_table"' in sql
    assert sql.endswith('AS "subquery"')