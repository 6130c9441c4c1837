"""Render schema definitions as PostgreSQL DDL."""

from __future__ import annotations

from schemakit.postgres.definitions import (
    ColumnInfo,
    EnumDef,
    ForeignKeyAction,
    PrimaryKey,
    References,
    Schema,
    TableDef,
    Type,
    TypeKind,
    Unique,
)
from schemakit.sql import quote_identifier, quote_literal

_TO_SERIAL = {
    TypeKind.SMALL_INT: TypeKind.SMALL_SERIAL,
    TypeKind.INTEGER: TypeKind.SERIAL,
    TypeKind.BIG_INT: TypeKind.BIG_SERIAL,
}

_SERIAL_NAMES = {
    TypeKind.SMALL_SERIAL: "smallserial",
    TypeKind.SERIAL: "serial",
    TypeKind.BIG_SERIAL: "bigserial",
}

_SIMPLE_TYPES = {
    TypeKind.SMALL_INT: "smallint",
    TypeKind.INTEGER: "integer",
    TypeKind.BIG_INT: "bigint",
    TypeKind.REAL: "real",
    TypeKind.DOUBLE_PRECISION: "double precision",
    TypeKind.SMALL_SERIAL: "smallint",
    TypeKind.SERIAL: "integer",
    TypeKind.BIG_SERIAL: "bigint",
    TypeKind.MONEY: "money",
    TypeKind.TEXT: "text",
    TypeKind.BYTEA: "bytea",
    TypeKind.DATE: "date",
    TypeKind.BOOLEAN: "bool",
    TypeKind.POINT: "point",
    TypeKind.LINE: "line",
    TypeKind.LSEG: "lseg",
    TypeKind.BOX: "box",
    TypeKind.PATH: "path",
    TypeKind.POLYGON: "polygon",
    TypeKind.CIRCLE: "circle",
    TypeKind.CIDR: "cidr",
    TypeKind.INET: "inet",
    TypeKind.MAC_ADDR: "macaddr",
    TypeKind.MAC_ADDR8: "macaddr8",
    TypeKind.TS_VECTOR: "tsvector",
    TypeKind.TS_QUERY: "tsquery",
    TypeKind.UUID: "uuid",
    TypeKind.XML: "xml",
    TypeKind.JSON: "json",
    TypeKind.JSON_BINARY: "jsonb",
    TypeKind.INT4_RANGE: "int4range",
    TypeKind.INT8_RANGE: "int8range",
    TypeKind.NUM_RANGE: "numrange",
    TypeKind.TS_RANGE: "tsrange",
    TypeKind.TS_TZ_RANGE: "tstzrange",
    TypeKind.DATE_RANGE: "daterange",
    TypeKind.PG_LSN: "pg_lsn",
}

_INTERVAL_FIELDS = frozenset(
    {
        "YEAR",
        "MONTH",
        "DAY",
        "HOUR",
        "MINUTE",
        "SECOND",
        "YEAR TO MONTH",
        "DAY TO HOUR",
        "DAY TO MINUTE",
        "DAY TO SECOND",
        "HOUR TO MINUTE",
        "HOUR TO SECOND",
        "MINUTE TO SECOND",
    }
)


def _with_length(base: str, length: int | None) -> str:
    return base if length is None else f"{base}({length})"


def _type_sql(ctype: Type) -> str:
    kind, attr = ctype.kind, ctype.attr
    if kind in _SIMPLE_TYPES:
        return _SIMPLE_TYPES[kind]
    if kind in (TypeKind.DECIMAL, TypeKind.NUMERIC):
        if attr.precision is None and attr.scale is None:
            return "decimal"
        return f"decimal({attr.precision or 0}, {attr.scale or 0})"
    if kind is TypeKind.VARCHAR:
        return _with_length("varchar", attr.length)
    if kind is TypeKind.CHAR:
        return _with_length("char", attr.length)
    if kind is TypeKind.TIMESTAMP:
        return _with_length("timestamp", attr.precision) + " without time zone"
    if kind is TypeKind.TIMESTAMP_WITH_TIME_ZONE:
        return _with_length("timestamp", attr.precision) + " with time zone"
    if kind in (TypeKind.TIME, TypeKind.TIME_WITH_TIME_ZONE):
        return _with_length("time", attr.precision)
    if kind is TypeKind.INTERVAL:
        text = "interval"
        if attr.field in _INTERVAL_FIELDS:
            text += f" {attr.field}"
        return _with_length(text, attr.precision)
    if kind is TypeKind.BIT:
        return _with_length("bit", attr.length)
    if kind is TypeKind.UNKNOWN:
        return attr
    if kind is TypeKind.ENUM:
        return attr.typename
    if kind is TypeKind.ARRAY:
        if attr.col_type is None:
            raise ValueError("Array type not defined")
        return f"{_type_sql(attr.col_type)}[]"
    raise ValueError(f"unsupported type: {kind.value}")


def _to_serial(ctype: Type) -> Type:
    serial = _TO_SERIAL.get(ctype.kind)
    return ctype if serial is None else Type(serial)


def write_column_type(column: ColumnInfo) -> str:
    """The SQL type of ``column``."""
    return _type_sql(column.col_type)


def write_column(column: ColumnInfo) -> str:
    """The column definition as it appears inside CREATE TABLE.

    A ``nextval`` default or an identity column turns an integer column serial.
    """
    col_type = column.col_type
    extras: list[str] = []
    if column.default is not None:
        if column.default.expr.startswith("nextval"):
            col_type = _to_serial(col_type)
        else:
            extras.append(f"DEFAULT {column.default.expr}")
    if column.is_identity:
        col_type = _to_serial(col_type)

    type_sql = _SERIAL_NAMES.get(col_type.kind) or _type_sql(col_type)
    parts = [quote_identifier(column.name), type_sql]
    if column.not_null is not None:
        parts.append("NOT NULL")
    if extras:
        parts.append(" ".join(extras))
    return " ".join(parts)


def _column_list(columns: list[str]) -> str:
    return "(" + ", ".join(quote_identifier(col) for col in columns) + ")"


def _constraint_prefix(name: str) -> str:
    return f"CONSTRAINT {quote_identifier(name)} " if name else ""


def write_primary_key(primary_key: PrimaryKey) -> str:
    """The primary key as a table constraint."""
    return f"{_constraint_prefix(primary_key.name)}PRIMARY KEY {_column_list(primary_key.columns)}"


def write_unique(unique: Unique) -> str:
    """The unique constraint as a table constraint."""
    return f"{_constraint_prefix(unique.name)}UNIQUE {_column_list(unique.columns)}"


def write_references(references: References) -> str:
    """The foreign key as a table constraint."""
    parts = [
        f"{_constraint_prefix(references.name)}FOREIGN KEY {_column_list(references.columns)}",
        f"REFERENCES {quote_identifier(references.table)} {_column_list(references.foreign_columns)}",
    ]
    action: ForeignKeyAction | None
    for clause, action in (("ON DELETE", references.on_delete), ("ON UPDATE", references.on_update)):
        if action is not None:
            parts.append(f"{clause} {action.value}")
    return " ".join(parts)


def write_enum(enum_def: EnumDef) -> str:
    """A CREATE TYPE statement for the enum."""
    values = ", ".join(quote_literal(value) for value in enum_def.values)
    return f"CREATE TYPE {quote_identifier(enum_def.typename)} AS ENUM ({values})"


def write_table(table: TableDef) -> str:
    """A CREATE TABLE statement with columns, keys and foreign keys."""
    items = [write_column(col) for col in table.columns]
    items += [write_primary_key(pk) for pk in table.primary_key_constraints]
    items += [write_unique(unique) for unique in table.unique_constraints]
    items += [write_references(ref) for ref in table.reference_constraints]
    return f"CREATE TABLE {quote_identifier(table.info.name)} ( {', '.join(items)} )"


def write_schema(schema: Schema) -> list[str]:
    """One CREATE TABLE statement per table, in order."""
    return [write_table(table) for table in schema.tables]