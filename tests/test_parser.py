import pytest

from schemakit.postgres.definitions import (
    ArbitraryPrecisionNumericAttr,
    ArrayDef,
    BitAttr,
    Check,
    ColumnExpression,
    ColumnInfo,
    EnumDef,
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
from schemakit.postgres.parser import (
    parse_array_attributes,
    parse_bit_attributes,
    parse_column_query_result,
    parse_column_type,
    parse_enum_attributes,
    parse_enum_variants,
    parse_interval_attributes,
    parse_numeric_attributes,
    parse_string_attributes,
    parse_table_constraint_query_results,
    parse_table_query_result,
    parse_time_attributes,
    yes_or_no_to_bool,
)
from schemakit.postgres.query import (
    ColumnQueryResult,
    TableConstraintsQueryResult,
    TableQueryResult,
)


def _col(column_type, **kwargs):
    base = dict(column_name="c", column_type=column_type, is_nullable="YES", is_identity="NO")
    base.update(kwargs)
    return ColumnQueryResult(**base)


def _row(name, kind, **kwargs):
    return TableConstraintsQueryResult(constraint_name=name, constraint_type=kind, **kwargs)


@pytest.mark.parametrize("text, expected", [("YES", True), ("yes", True), ("Yes", True), ("NO", False), ("", False), ("y", False)])
def test_yes_or_no_to_bool(text, expected):
    assert yes_or_no_to_bool(text) is expected


def test_parse_column_query_result_full():
    result = ColumnQueryResult(
        column_name="id",
        column_type="integer",
        column_default="nextval('id_seq')",
        is_nullable="NO",
        is_identity="YES",
    )
    assert parse_column_query_result(result) == ColumnInfo(
        name="id",
        col_type=Type(TypeKind.INTEGER),
        default=ColumnExpression("nextval('id_seq')"),
        generated=None,
        not_null=NotNull(),
        is_identity=True,
    )


def test_parse_column_nullable_and_generated():
    info = parse_column_query_result(_col("text", column_generated="upper(x)"))
    assert info.not_null is None
    assert info.is_identity is False
    assert info.generated == ColumnExpression("upper(x)")
    assert info.col_type == Type(TypeKind.TEXT)


def test_parse_column_type_case_insensitive():
    assert parse_column_type(_col("INTEGER")) == Type(TypeKind.INTEGER)


def test_parse_varchar_length():
    ctype = parse_column_type(_col("character varying", character_maximum_length=255))
    assert ctype == Type(TypeKind.VARCHAR, StringAttr(length=255))


def test_parse_numeric_precision_and_scale():
    ctype = parse_column_type(_col("numeric", numeric_precision=10, numeric_precision_radix=10, numeric_scale=2))
    assert ctype == Type(TypeKind.NUMERIC, ArbitraryPrecisionNumericAttr(precision=10, scale=2))


@pytest.mark.parametrize("bad", [-1, 70000])
def test_out_of_range_values_become_none(bad):
    ctype = parse_numeric_attributes(bad, None, bad, Type(TypeKind.DECIMAL))
    assert ctype.attr == ArbitraryPrecisionNumericAttr()
    assert parse_string_attributes(bad, Type(TypeKind.CHAR)).attr.length is None


def test_parse_time_precision():
    ctype = parse_column_type(_col("timestamp with time zone", datetime_precision=6))
    assert ctype == Type(TypeKind.TIMESTAMP_WITH_TIME_ZONE, TimeAttr(precision=6))


def test_parse_interval():
    ctype = parse_column_type(_col("interval", interval_type="DAY TO SECOND", interval_precision=3))
    assert ctype == Type(TypeKind.INTERVAL, IntervalAttr(field="DAY TO SECOND", precision=3))


def test_parse_bit_length():
    ctype = parse_column_type(_col("bit", character_maximum_length=8))
    assert ctype == Type(TypeKind.BIT, BitAttr(length=8))


def test_parse_enum_typename():
    ctype = parse_column_type(_col("USER-DEFINED", udt_name="mood"))
    assert ctype == Type(TypeKind.ENUM, EnumDef(values=[], typename="mood"))


def test_parse_enum_without_udt_name():
    with pytest.raises(ValueError):
        parse_column_type(_col("USER-DEFINED"))


@pytest.mark.parametrize(
    "regtype, element",
    [
        ("integer[]", Type(TypeKind.INTEGER)),
        ("character varying[]", Type(TypeKind.VARCHAR)),
    ],
)
def test_parse_array_element(regtype, element):
    ctype = parse_column_type(_col("ARRAY", udt_name_regtype=regtype))
    assert ctype == Type(TypeKind.ARRAY, ArrayDef(col_type=element))


def test_parse_array_without_regtype():
    with pytest.raises(ValueError):
        parse_array_attributes(None, Type(TypeKind.ARRAY))


def test_unknown_type_keeps_name():
    assert parse_column_type(_col("geography")) == Type(TypeKind.UNKNOWN, "geography")


@pytest.mark.parametrize(
    "call",
    [
        lambda t: parse_numeric_attributes(1, None, 1, t),
        lambda t: parse_string_attributes(1, t),
        lambda t: parse_time_attributes(1, t),
        lambda t: parse_interval_attributes(None, 1, t),
        lambda t: parse_bit_attributes(1, t),
        lambda t: parse_enum_attributes("x", t),
        lambda t: parse_array_attributes("integer[]", t),
    ],
)
def test_wrong_type_raises(call):
    with pytest.raises(ValueError):
        call(Type(TypeKind.TEXT))


def test_parse_enum_variants_fills_values():
    column = ColumnInfo(name="m", col_type=Type(TypeKind.ENUM, EnumDef(typename="mood")))
    parsed = parse_enum_variants(column, {"mood": ["happy", "sad"]})
    assert parsed.col_type.attr.values == ["happy", "sad"]
    assert parsed.col_type.attr.typename == "mood"
    assert column.col_type.attr.values == []


def test_parse_enum_variants_leaves_others():
    enum_col = ColumnInfo(name="m", col_type=Type(TypeKind.ENUM, EnumDef(typename="other")))
    text_col = ColumnInfo(name="t", col_type=Type(TypeKind.TEXT))
    enums = {"mood": ["happy"]}
    assert parse_enum_variants(enum_col, enums) == enum_col
    assert parse_enum_variants(text_col, enums) == text_col


def test_parse_table_query_result():
    assert parse_table_query_result(TableQueryResult(table_name="actor")) == TableInfo(name="actor")
    typed = parse_table_query_result(TableQueryResult(table_name="t", user_defined_type_name="jsonb"))
    assert typed.of_type == Type(TypeKind.JSON_BINARY)


def test_parse_constraints_grouping():
    rows = [
        _row("a_check", "CHECK", check_clause="x > 0"),
        _row("b_fk", "FOREIGN KEY", column_name="x", referential_key_table_name="other",
             referential_key_column_name="ox", update_rule="CASCADE", delete_rule="RESTRICT"),
        _row("b_fk", "FOREIGN KEY", column_name="y", referential_key_table_name="other",
             referential_key_column_name="oy"),
        _row("b_fk", "FOREIGN KEY", column_name=None, referential_key_column_name="oz"),
        _row("c_pkey", "PRIMARY KEY", column_name="x"),
        _row("c_pkey", "PRIMARY KEY", column_name="y"),
        _row("d_key", "UNIQUE", column_name="z"),
    ]
    assert list(parse_table_constraint_query_results(rows)) == [
        Check(name="a_check", expr="x > 0", no_inherit=False),
        References(
            name="b_fk",
            columns=["x", "y"],
            table="other",
            foreign_columns=["ox", "oy"],
            on_update=ForeignKeyAction.CASCADE,
            on_delete=ForeignKeyAction.RESTRICT,
        ),
        PrimaryKey(name="c_pkey", columns=["x", "y"]),
        Unique(name="d_key", columns=["z"]),
    ]


def test_foreign_key_unknown_rule_is_none():
    rows = [_row("fk", "FOREIGN KEY", column_name="x", referential_key_table_name="t",
                 referential_key_column_name="y")]
    (ref,) = list(parse_table_constraint_query_results(rows))
    assert ref.on_update is None
    assert ref.on_delete is None


def test_unknown_constraint_type_stops():
    rows = [
        _row("a", "UNIQUE", column_name="x"),
        _row("b", "EXCLUDE"),
        _row("c", "UNIQUE", column_name="y"),
    ]
    assert list(parse_table_constraint_query_results(rows)) == [Unique(name="a", columns=["x"])]


def test_primary_key_missing_column_raises():
    with pytest.raises(ValueError):
        list(parse_table_constraint_query_results([_row("p", "PRIMARY KEY")]))


def test_check_missing_clause_raises():
    with pytest.raises(ValueError):
        list(parse_table_constraint_query_results([_row("c", "CHECK")]))


def test_empty_results():
    assert list(parse_table_constraint_query_results([])) == []