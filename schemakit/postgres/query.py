"""Queries against PostgreSQL's catalogs, and the rows they return."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Iterable

from schemakit.sql import Cast, Col, Equals, Join, Raw, SelectStatement, Value


class _Iden(str, Enum):
    """An identifier that can be used wherever a name string is expected."""

    def __str__(self) -> str:
        return self.value


class InformationSchema(_Iden):
    SCHEMA = "information_schema"
    COLUMNS = "columns"
    CHECK_CONSTRAINTS = "check_constraints"
    KEY_COLUMN_USAGE = "key_column_usage"
    REFERENTIAL_CONSTRAINTS = "referential_constraints"
    TABLES = "tables"
    TABLE_CONSTRAINTS = "table_constraints"
    CONSTRAINT_COLUMN_USAGE = "constraint_column_usage"


class CharacterSetFields(_Iden):
    CHARACTER_SET_CATALOG = "character_set_catalog"
    CHARACTER_SET_SCHEMA = "character_set_schema"
    CHARACTER_SET_NAME = "character_set_name"
    CHACTER_REPETOIRE = "chacter_repetoire"
    FORM_OF_USE = "form_of_use"
    DEFAULT_COLLATE_CATALOG = "default_collate_catalog"
    DEFAULT_COLLATE_SCHEMA = "default_collate_schema"
    DEFAULT_COLLATE_NAME = "default_collate_name"


class ColumnsField(_Iden):
    TABLE_CATALOG = "table_catalog"
    TABLE_SCHEMA = "table_schema"
    TABLE_NAME = "table_name"
    COLUMN_NAME = "column_name"
    ORDINAL_POSITION = "ordinal_position"
    COLUMN_DEFAULT = "column_default"
    IS_NULLABLE = "is_nullable"
    DATA_TYPE = "data_type"
    CHARACTER_MAXIMUM_LENGTH = "character_maximum_length"
    CHARACTER_OCTET_LENGTH = "character_octet_length"
    NUMERIC_PRECISION = "numeric_precision"
    NUMERIC_PRECISION_RADIX = "numeric_precision_radix"
    NUMERIC_SCALE = "numeric_scale"
    DATETIME_PRECISION = "datetime_precision"
    INTERVAL_TYPE = "interval_type"
    INTERVAL_PRECISION = "interval_precision"
    COLLATION_CATALOG = "collation_catalog"
    COLLATION_SCHEMA = "collation_schema"
    COLLATION_NAME = "collation_name"
    DOMAIN_CATALOG = "domain_catalog"
    DOMAIN_SCHEMA = "domain_schema"
    DOMAIN_NAME = "domain_name"
    UDT_CATALOG = "udt_catalog"
    UDT_SCHEMA = "udt_schema"
    UDT_NAME = "udt_name"
    DTD_IDENTIFIER = "dtd_identifier"
    IS_IDENTITY = "is_identity"
    IDENTITY_GENERATION = "identity_generation"
    IDENTITY_START = "identity_start"
    IDENTITY_INCREMENT = "identity_increment"
    IDENTITY_MAXIMUM = "identity_maximum"
    IDENTITY_MINIMUM = "identity_minimum"
    IDENTITY_CYCLE = "identity_cycle"
    IS_GENERATED = "is_generated"
    GENERATION_EXPRESSION = "generation_expression"
    IS_UPDATABLE = "is_updatable"


class TablesFields(_Iden):
    TABLE_CATALOG = "table_catalog"
    TABLE_SCHEMA = "table_schema"
    TABLE_NAME = "table_name"
    TABLE_TYPE = "table_type"
    USER_DEFINED_TYPE_SCHEMA = "user_defined_type_schema"
    USER_DEFINED_TYPE_NAME = "user_defined_type_name"
    IS_INSERTABLE_INTO = "is_insertable_into"
    IS_TYPED = "is_typed"


class TableType(_Iden):
    BASE_TABLE = "BASE TABLE"
    VIEW = "VIEW"
    FOREIGN = "FOREIGN"
    TEMPORARY = "LOCAL TEMPORARY"


class PgType(_Iden):
    TABLE = "pg_type"
    TYPE_NAME = "typname"
    OID = "oid"


class PgEnum(_Iden):
    TABLE = "pg_enum"
    ENUM_LABEL = "enumlabel"
    ENUM_TYPE_ID = "enumtypid"


class CheckConstraintsFields(_Iden):
    CONSTRAINT_CATALOG = "constraint_catalog"
    CONSTRAINT_SCHEMA = "constraint_schema"
    CONSTRAINT_NAME = "constraint_name"
    CHECK_CLAUSE = "check_clause"


class KeyColumnUsageFields(_Iden):
    CONSTRAINT_CATALOG = "constraint_catalog"
    CONSTRAINT_SCHEMA = "constraint_schema"
    CONSTRAINT_NAME = "constraint_name"
    TABLE_CATALOG = "table_catalog"
    TABLE_SCHEMA = "table_schema"
    TABLE_NAME = "table_name"
    COLUMN_NAME = "column_name"
    ORDINAL_POSITION = "ordinal_position"
    POSITION_IN_UNIQUE_CONSTRAINT = "position_in_unique_constraint"


class ReferentialConstraintsFields(_Iden):
    CONSTRAINT_NAME = "constraint_name"
    UNIQUE_CONSTRAINT_SCHEMA = "unique_constraint_schema"
    UNIQUE_CONSTRAINT_NAME = "unique_constraint_name"
    MATCH_OPTION = "match_option"
    UPDATE_RULE = "update_rule"
    DELETE_RULE = "delete_rule"


class TableConstraintsField(_Iden):
    CONSTRAINT_CATALOG = "constraint_catalog"
    CONSTRAINT_SCHEMA = "constraint_schema"
    CONSTRAINT_NAME = "constraint_name"
    TABLE_CATALOG = "table_catalog"
    TABLE_SCHEMA = "table_schema"
    TABLE_NAME = "table_name"
    CONSTRAINT_TYPE = "constraint_type"
    IS_DEFERRABLE = "is_deferrable"
    INITIALLY_DEFERRED = "initially_deferred"


def _row_values(cls: type, row: Iterable[Any]) -> list[Any]:
    """The values of a positional row, checked against the fields of ``cls``."""
    values = list(row)
    expected = len(fields(cls))
    if len(values) != expected:
        raise ValueError(f"{cls.__name__} expects {expected} values, got {len(values)}")
    return values


@dataclass
class ColumnQueryResult:
    """One row of :meth:`SchemaQueryBuilder.query_columns`."""

    column_name: str = ""
    column_type: str = ""
    column_default: str | None = None
    column_generated: str | None = None
    is_nullable: str = ""
    is_identity: str = ""
    numeric_precision: int | None = None
    numeric_precision_radix: int | None = None
    numeric_scale: int | None = None
    character_maximum_length: int | None = None
    character_octet_length: int | None = None
    datetime_precision: int | None = None
    interval_type: str | None = None
    interval_precision: int | None = None
    udt_name: str | None = None
    udt_name_regtype: str | None = None

    @classmethod
    def from_row(cls, row: Iterable[Any]) -> ColumnQueryResult:
        return cls(*_row_values(cls, row))


@dataclass
class EnumQueryResult:
    """One row of :meth:`SchemaQueryBuilder.query_enums`."""

    typename: str = ""
    enumlabel: str = ""

    @classmethod
    def from_row(cls, row: Iterable[Any]) -> EnumQueryResult:
        return cls(*_row_values(cls, row))


@dataclass
class TableQueryResult:
    """One row of :meth:`SchemaQueryBuilder.query_tables`."""

    table_name: str = ""
    user_defined_type_schema: str | None = None
    user_defined_type_name: str | None = None

    @classmethod
    def from_row(cls, row: Iterable[Any]) -> TableQueryResult:
        return cls(*_row_values(cls, row))


@dataclass
class TableConstraintsQueryResult:
    """One row of :meth:`SchemaQueryBuilder.query_table_constraints`."""

    constraint_schema: str = ""
    constraint_name: str = ""
    table_schema: str = ""
    table_name: str = ""
    constraint_type: str = ""
    is_deferrable: str = ""
    initially_deferred: str = ""
    check_clause: str | None = None
    column_name: str | None = None
    ordinal_position: int | None = None
    position_in_unique_constraint: int | None = None
    unique_constraint_schema: str | None = None
    unique_constraint_name: str | None = None
    match_option: str | None = None
    update_rule: str | None = None
    delete_rule: str | None = None
    referential_key_table_name: str | None = None
    referential_key_column_name: str | None = None

    @classmethod
    def from_row(cls, row: Iterable[Any]) -> TableConstraintsQueryResult:
        return cls(*_row_values(cls, row))


_REFERENTIAL_SUBQUERY = "referential_constraints_subquery"


class SchemaQueryBuilder:
    """Builds the catalog queries used to discover a schema."""

    def query_columns(self, schema: str, table: str) -> SelectStatement:
        selected = [
            ColumnsField.COLUMN_NAME,
            ColumnsField.DATA_TYPE,
            ColumnsField.COLUMN_DEFAULT,
            ColumnsField.GENERATION_EXPRESSION,
            ColumnsField.IS_NULLABLE,
            ColumnsField.IS_IDENTITY,
            ColumnsField.NUMERIC_PRECISION,
            ColumnsField.NUMERIC_PRECISION_RADIX,
            ColumnsField.NUMERIC_SCALE,
            ColumnsField.CHARACTER_MAXIMUM_LENGTH,
            ColumnsField.CHARACTER_OCTET_LENGTH,
            ColumnsField.DATETIME_PRECISION,
            ColumnsField.INTERVAL_TYPE,
            ColumnsField.INTERVAL_PRECISION,
            ColumnsField.UDT_NAME,
        ]
        return SelectStatement(
            columns=[Col(name) for name in selected]
            + [(Cast(Raw("udt_name::regtype"), "text"), "udt_name_regtype")],
            from_=(InformationSchema.SCHEMA, InformationSchema.COLUMNS),
            where=[
                Equals(Col(ColumnsField.TABLE_SCHEMA), Value(str(schema))),
                Equals(Col(ColumnsField.TABLE_NAME), Value(str(table))),
            ],
        )

    def query_tables(self, schema: str) -> SelectStatement:
        return SelectStatement(
            columns=[
                Col(TablesFields.TABLE_NAME),
                Col(TablesFields.USER_DEFINED_TYPE_SCHEMA),
                Col(TablesFields.USER_DEFINED_TYPE_NAME),
            ],
            from_=(InformationSchema.SCHEMA, InformationSchema.TABLES),
            where=[
                Equals(Col(TablesFields.TABLE_SCHEMA), Value(str(schema))),
                Equals(Col(TablesFields.TABLE_TYPE), Value(TableType.BASE_TABLE.value)),
            ],
        )

    def query_enums(self) -> SelectStatement:
        return SelectStatement(
            columns=[Col(PgType.TYPE_NAME, PgType.TABLE), Col(PgEnum.ENUM_LABEL, PgEnum.TABLE)],
            from_=PgType.TABLE,
            joins=[
                Join(
                    PgEnum.TABLE,
                    [Equals(Col(PgEnum.ENUM_TYPE_ID, PgEnum.TABLE), Col(PgType.OID, PgType.TABLE))],
                    kind="INNER JOIN",
                )
            ],
            order_by=[
                (Col(PgType.TYPE_NAME, PgType.TABLE), "ASC"),
                (Col(PgEnum.ENUM_LABEL, PgEnum.TABLE), "ASC"),
            ],
        )

    def query_table_constraints(self, schema: str, table: str) -> SelectStatement:
        s = InformationSchema
        tcf = TableConstraintsField
        cf = CheckConstraintsFields
        kcuf = KeyColumnUsageFields
        refc = ReferentialConstraintsFields
        tc = s.TABLE_CONSTRAINTS
        rcsq = _REFERENTIAL_SUBQUERY

        referential = SelectStatement(
            columns=[
                Col(name, s.REFERENTIAL_CONSTRAINTS)
                for name in (
                    refc.CONSTRAINT_NAME,
                    refc.UNIQUE_CONSTRAINT_SCHEMA,
                    refc.UNIQUE_CONSTRAINT_NAME,
                    refc.MATCH_OPTION,
                    refc.UPDATE_RULE,
                    refc.DELETE_RULE,
                )
            ]
            + [
                Col(kcuf.TABLE_NAME, s.CONSTRAINT_COLUMN_USAGE),
                Col(kcuf.COLUMN_NAME, s.CONSTRAINT_COLUMN_USAGE),
            ],
            from_=(s.SCHEMA, s.REFERENTIAL_CONSTRAINTS),
            joins=[
                Join(
                    (s.SCHEMA, s.CONSTRAINT_COLUMN_USAGE),
                    [
                        Equals(
                            Col(refc.CONSTRAINT_NAME, s.REFERENTIAL_CONSTRAINTS),
                            Col(kcuf.CONSTRAINT_NAME, s.CONSTRAINT_COLUMN_USAGE),
                        )
                    ],
                )
            ],
            distinct=True,
        )

        def matching(other: str, pairs: list[tuple[str, str]]) -> list[Equals]:
            return [Equals(Col(ours, tc), Col(theirs, other)) for ours, theirs in pairs]

        columns = [
            Col(name, tc)
            for name in (
                tcf.CONSTRAINT_SCHEMA,
                tcf.CONSTRAINT_NAME,
                tcf.TABLE_SCHEMA,
                tcf.TABLE_NAME,
                tcf.CONSTRAINT_TYPE,
                tcf.IS_DEFERRABLE,
                tcf.INITIALLY_DEFERRED,
            )
        ]
        columns.append(Col(cf.CHECK_CLAUSE, s.CHECK_CONSTRAINTS))
        columns += [
            Col(name, s.KEY_COLUMN_USAGE)
            for name in (
                kcuf.COLUMN_NAME,
                kcuf.ORDINAL_POSITION,
                kcuf.POSITION_IN_UNIQUE_CONSTRAINT,
            )
        ]
        columns += [
            Col(name, rcsq)
            for name in (
                refc.UNIQUE_CONSTRAINT_SCHEMA,
                refc.UNIQUE_CONSTRAINT_NAME,
                refc.MATCH_OPTION,
                refc.UPDATE_RULE,
                refc.DELETE_RULE,
                kcuf.TABLE_NAME,
                kcuf.COLUMN_NAME,
            )
        ]

        return SelectStatement(
            columns=columns,
            from_=(s.SCHEMA, tc),
            joins=[
                Join(
                    (s.SCHEMA, s.CHECK_CONSTRAINTS),
                    matching(
                        s.CHECK_CONSTRAINTS,
                        [
                            (tcf.CONSTRAINT_NAME, cf.CONSTRAINT_NAME),
                            (tcf.CONSTRAINT_CATALOG, cf.CONSTRAINT_CATALOG),
                            (tcf.CONSTRAINT_SCHEMA, cf.CONSTRAINT_SCHEMA),
                        ],
                    ),
                ),
                Join(
                    (s.SCHEMA, s.KEY_COLUMN_USAGE),
                    matching(
                        s.KEY_COLUMN_USAGE,
                        [
                            (tcf.CONSTRAINT_NAME, kcuf.CONSTRAINT_NAME),
                            (tcf.CONSTRAINT_CATALOG, kcuf.CONSTRAINT_CATALOG),
                            (tcf.CONSTRAINT_SCHEMA, kcuf.CONSTRAINT_SCHEMA),
                            (tcf.TABLE_CATALOG, kcuf.TABLE_CATALOG),
                            (tcf.TABLE_SCHEMA, kcuf.TABLE_SCHEMA),
                            (tcf.TABLE_NAME, kcuf.TABLE_NAME),
                        ],
                    ),
                ),
                Join(
                    referential,
                    [Equals(Col(tcf.CONSTRAINT_NAME, tc), Col(refc.CONSTRAINT_NAME, rcsq))],
                    alias=rcsq,
                ),
            ],
            where=[
                Equals(Col(tcf.TABLE_SCHEMA, tc), Value(str(schema))),
                Equals(Col(tcf.TABLE_NAME, tc), Value(str(table))),
            ],
            order_by=[
                (Col(tcf.CONSTRAINT_NAME, tc), "ASC"),
                (Col(kcuf.ORDINAL_POSITION, s.KEY_COLUMN_USAGE), "ASC"),
                (Col(refc.UNIQUE_CONSTRAINT_NAME, rcsq), "ASC"),
                (Col(tcf.CONSTRAINT_NAME, rcsq), "ASC"),
            ],
        )