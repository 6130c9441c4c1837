"""Turn rows from the catalog queries into schema definitions."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import replace
from typing import Any

from schemakit.postgres.definitions import (
    ArbitraryPrecisionNumericAttr,
    ArrayDef,
    BitAttr,
    Check,
    ColumnExpression,
    ColumnInfo,
    Constraint,
    ForeignKeyAction,
    IntervalAttr,
    NotNull,
    PrimaryKey,
    References,
    StringAttr,
    TableInfo,
    TimeAttr,
    Type,
    TypeKind,
    Unique,
)
from schemakit.postgres.query import (
    ColumnQueryResult,
    TableConstraintsQueryResult,
    TableQueryResult,
)

_U16_MAX = 0xFFFF


def yes_or_no_to_bool(string: str) -> bool:
    """True exactly when ``string`` is "YES", ignoring case."""
    return string.upper() == "YES"


def _to_u16(value: int | None) -> int | None:
    if value is None or not 0 <= value <= _U16_MAX:
        return None
    return value


def _required(value: Any, what: str) -> Any:
    if value is None:
        raise ValueError(f"missing {what}")
    return value


def _expect(ctype: Type, kinds: Iterable[TypeKind], attr: str, func: str) -> None:
    if ctype.kind not in set(kinds):
        raise ValueError(f"{func} received a type that does not have {attr}: {ctype.kind.value}")


def parse_column_query_result(result: ColumnQueryResult) -> ColumnInfo:
    return ColumnInfo(
        name=result.column_name,
        col_type=parse_column_type(result),
        default=ColumnExpression.from_optional(result.column_default),
        generated=ColumnExpression.from_optional(result.column_generated),
        not_null=NotNull.from_bool(not yes_or_no_to_bool(result.is_nullable)),
        is_identity=yes_or_no_to_bool(result.is_identity),
    )


def parse_column_type(result: ColumnQueryResult) -> Type:
    ctype = Type.from_str(result.column_type)
    if ctype.has_numeric_attr():
        ctype = parse_numeric_attributes(
            result.numeric_precision,
            result.numeric_precision_radix,
            result.numeric_scale,
            ctype,
        )
    if ctype.has_string_attr():
        ctype = parse_string_attributes(result.character_maximum_length, ctype)
    if ctype.has_time_attr():
        ctype = parse_time_attributes(result.datetime_precision, ctype)
    if ctype.has_interval_attr():
        ctype = parse_interval_attributes(result.interval_type, result.interval_precision, ctype)
    if ctype.has_bit_attr():
        ctype = parse_bit_attributes(result.character_maximum_length, ctype)
    if ctype.has_enum_attr():
        ctype = parse_enum_attributes(result.udt_name, ctype)
    if ctype.has_array_attr():
        ctype = parse_array_attributes(result.udt_name_regtype, ctype)
    return ctype


def parse_numeric_attributes(
    num_precision: int | None,
    num_precision_radix: int | None,
    num_scale: int | None,
    ctype: Type,
) -> Type:
    """Set precision and scale; values outside 0..65535 become None. The radix is ignored."""
    _expect(ctype, (TypeKind.DECIMAL, TypeKind.NUMERIC), "a numeric attribute", "parse_numeric_attributes")
    attr = ArbitraryPrecisionNumericAttr(precision=_to_u16(num_precision), scale=_to_u16(num_scale))
    return Type(ctype.kind, attr)


def parse_string_attributes(character_maximum_length: int | None, ctype: Type) -> Type:
    _expect(ctype, (TypeKind.VARCHAR, TypeKind.CHAR), "StringAttr", "parse_string_attributes")
    return Type(ctype.kind, StringAttr(length=_to_u16(character_maximum_length)))


def parse_time_attributes(datetime_precision: int | None, ctype: Type) -> Type:
    _expect(
        ctype,
        (
            TypeKind.TIMESTAMP,
            TypeKind.TIMESTAMP_WITH_TIME_ZONE,
            TypeKind.TIME,
            TypeKind.TIME_WITH_TIME_ZONE,
        ),
        "TimeAttr",
        "parse_time_attributes",
    )
    return Type(ctype.kind, TimeAttr(precision=_to_u16(datetime_precision)))


def parse_interval_attributes(
    interval_type: str | None, interval_precision: int | None, ctype: Type
) -> Type:
    _expect(ctype, (TypeKind.INTERVAL,), "IntervalAttr", "parse_interval_attributes")
    return Type(ctype.kind, IntervalAttr(field=interval_type, precision=_to_u16(interval_precision)))


def parse_bit_attributes(character_maximum_length: int | None, ctype: Type) -> Type:
    _expect(ctype, (TypeKind.BIT,), "BitAttr", "parse_bit_attributes")
    return Type(ctype.kind, BitAttr(length=_to_u16(character_maximum_length)))


def parse_enum_attributes(udt_name: str | None, ctype: Type) -> Type:
    _expect(ctype, (TypeKind.ENUM,), "EnumDef", "parse_enum_attributes")
    if udt_name is None:
        raise ValueError("parse_enum_attributes received an empty udt_name")
    return Type(ctype.kind, replace(ctype.attr, values=list(ctype.attr.values), typename=udt_name))


def parse_array_attributes(udt_name_regtype: str | None, ctype: Type) -> Type:
    """Set the element type from a regtype name such as ``integer[]``."""
    _expect(ctype, (TypeKind.ARRAY,), "ArrayDef", "parse_array_attributes")
    if udt_name_regtype is None:
        raise ValueError("parse_array_attributes received an empty udt_name_regtype")
    element = Type.from_str(udt_name_regtype.replace("[]", "", 1))
    return Type(ctype.kind, ArrayDef(col_type=element))


def parse_enum_variants(column: ColumnInfo, enums: Mapping[str, list[str]]) -> ColumnInfo:
    """Fill in the labels of an enum column from a typename -> labels map."""
    ctype = column.col_type
    if ctype.kind is TypeKind.ENUM and ctype.attr.typename in enums:
        attr = replace(ctype.attr, values=list(enums[ctype.attr.typename]))
        return replace(column, col_type=Type(ctype.kind, attr))
    return column


def parse_table_query_result(result: TableQueryResult) -> TableInfo:
    type_name = result.user_defined_type_name
    return TableInfo(
        name=result.table_name,
        of_type=None if type_name is None else Type.from_str(type_name),
    )


def parse_table_constraint_query_results(
    results: Iterable[TableConstraintsQueryResult],
) -> Iterator[Constraint]:
    """Group constraint rows into constraints.

    Rows are expected ordered by constraint name, then ordinal position. Iteration
    stops at the first row of an unrecognised constraint type.
    """
    rows = iter(results)
    pending: TableConstraintsQueryResult | None = None
    while True:
        if pending is not None:
            result, pending = pending, None
        else:
            result = next(rows, None)
            if result is None:
                return

        name = result.constraint_name
        kind = result.constraint_type

        if kind == "CHECK":
            yield Check(name=name, expr=_required(result.check_clause, "check_clause"), no_inherit=False)

        elif kind == "FOREIGN KEY":
            columns = [_required(result.column_name, "column_name")]
            table = _required(result.referential_key_table_name, "referential_key_table_name")
            foreign_columns = [
                _required(result.referential_key_column_name, "referential_key_column_name")
            ]
            on_update = ForeignKeyAction.from_name(result.update_rule or "")
            on_delete = ForeignKeyAction.from_name(result.delete_rule or "")
            for row in rows:
                if row.constraint_name != name:
                    pending = row
                    break
                if row.column_name is not None and row.referential_key_column_name is not None:
                    columns.append(row.column_name)
                    foreign_columns.append(row.referential_key_column_name)
            yield References(
                name=name,
                columns=columns,
                table=table,
                foreign_columns=foreign_columns,
                on_update=on_update,
                on_delete=on_delete,
            )

        elif kind in ("PRIMARY KEY", "UNIQUE"):
            columns = [_required(result.column_name, "column_name")]
            for row in rows:
                if row.constraint_name != name:
                    pending = row
                    break
                columns.append(_required(row.column_name, "column_name"))
            if kind == "PRIMARY KEY":
                yield PrimaryKey(name=name, columns=columns)
            else:
                yield Unique(name=name, columns=columns)

        else:
            return