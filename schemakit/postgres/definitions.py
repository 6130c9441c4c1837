"""Definitions describing a PostgreSQL schema: types, columns, constraints and tables."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class TypeKind(Enum):
    """Built-in PostgreSQL types, excluding synonyms."""

    SMALL_INT = "SmallInt"
    INTEGER = "Integer"
    BIG_INT = "BigInt"
    DECIMAL = "Decimal"
    NUMERIC = "Numeric"
    REAL = "Real"
    DOUBLE_PRECISION = "DoublePrecision"
    SMALL_SERIAL = "SmallSerial"
    SERIAL = "Serial"
    BIG_SERIAL = "BigSerial"
    MONEY = "Money"
    VARCHAR = "Varchar"
    CHAR = "Char"
    TEXT = "Text"
    BYTEA = "Bytea"
    TIMESTAMP = "Timestamp"
    TIMESTAMP_WITH_TIME_ZONE = "TimestampWithTimeZone"
    DATE = "Date"
    TIME = "Time"
    TIME_WITH_TIME_ZONE = "TimeWithTimeZone"
    INTERVAL = "Interval"
    BOOLEAN = "Boolean"
    POINT = "Point"
    LINE = "Line"
    LSEG = "Lseg"
    BOX = "Box"
    PATH = "Path"
    POLYGON = "Polygon"
    CIRCLE = "Circle"
    CIDR = "Cidr"
    INET = "Inet"
    MAC_ADDR = "MacAddr"
    MAC_ADDR8 = "MacAddr8"
    BIT = "Bit"
    TS_VECTOR = "TsVector"
    TS_QUERY = "TsQuery"
    UUID = "Uuid"
    XML = "Xml"
    JSON = "Json"
    JSON_BINARY = "JsonBinary"
    ARRAY = "Array"
    INT4_RANGE = "Int4Range"
    INT8_RANGE = "Int8Range"
    NUM_RANGE = "NumRange"
    TS_RANGE = "TsRange"
    TS_TZ_RANGE = "TsTzRange"
    DATE_RANGE = "DateRange"
    PG_LSN = "PgLsn"
    UNKNOWN = "Unknown"
    ENUM = "Enum"


@dataclass
class ArbitraryPrecisionNumericAttr:
    """Precision and scale of a numeric or decimal; both unset means unconstrained."""

    precision: int | None = None
    scale: int | None = None


@dataclass
class StringAttr:
    length: int | None = None


@dataclass
class TimeAttr:
    precision: int | None = None


@dataclass
class IntervalAttr:
    field: str | None = None
    precision: int | None = None


@dataclass
class BitAttr:
    length: int | None = None


@dataclass
class EnumDef:
    """A named PostgreSQL enum type and its labels."""

    values: list[str] = field(default_factory=list)
    typename: str = ""


@dataclass
class ArrayDef:
    """An array type; ``col_type`` is the element type."""

    col_type: Type | None = None


_ATTR_FACTORIES: dict[TypeKind, Any] = {
    TypeKind.DECIMAL: ArbitraryPrecisionNumericAttr,
    TypeKind.NUMERIC: ArbitraryPrecisionNumericAttr,
    TypeKind.VARCHAR: StringAttr,
    TypeKind.CHAR: StringAttr,
    TypeKind.TIMESTAMP: TimeAttr,
    TypeKind.TIMESTAMP_WITH_TIME_ZONE: TimeAttr,
    TypeKind.TIME: TimeAttr,
    TypeKind.TIME_WITH_TIME_ZONE: TimeAttr,
    TypeKind.INTERVAL: IntervalAttr,
    TypeKind.BIT: BitAttr,
    TypeKind.ENUM: EnumDef,
    TypeKind.ARRAY: ArrayDef,
    TypeKind.UNKNOWN: str,
}

_NAMES: dict[str, TypeKind] = {
    "smallint": TypeKind.SMALL_INT,
    "int2": TypeKind.SMALL_INT,
    "integer": TypeKind.INTEGER,
    "int": TypeKind.INTEGER,
    "int4": TypeKind.INTEGER,
    "bigint": TypeKind.BIG_INT,
    "int8": TypeKind.BIG_INT,
    "decimal": TypeKind.DECIMAL,
    "numeric": TypeKind.NUMERIC,
    "real": TypeKind.REAL,
    "float4": TypeKind.REAL,
    "double precision": TypeKind.DOUBLE_PRECISION,
    "double": TypeKind.DOUBLE_PRECISION,
    "float8": TypeKind.DOUBLE_PRECISION,
    "smallserial": TypeKind.SMALL_SERIAL,
    "serial2": TypeKind.SMALL_SERIAL,
    "serial": TypeKind.SERIAL,
    "serial4": TypeKind.SERIAL,
    "bigserial": TypeKind.BIG_SERIAL,
    "serial8": TypeKind.BIG_SERIAL,
    "money": TypeKind.MONEY,
    "character varying": TypeKind.VARCHAR,
    "varchar": TypeKind.VARCHAR,
    "character": TypeKind.CHAR,
    "char": TypeKind.CHAR,
    "text": TypeKind.TEXT,
    "bytea": TypeKind.BYTEA,
    "timestamp": TypeKind.TIMESTAMP,
    "timestamp without time zone": TypeKind.TIMESTAMP,
    "timestamp with time zone": TypeKind.TIMESTAMP_WITH_TIME_ZONE,
    "date": TypeKind.DATE,
    "time": TypeKind.TIME,
    "time without time zone": TypeKind.TIME,
    "time with time zone": TypeKind.TIME_WITH_TIME_ZONE,
    "interval": TypeKind.INTERVAL,
    "boolean": TypeKind.BOOLEAN,
    "point": TypeKind.POINT,
    "line": TypeKind.LINE,
    "lseg": TypeKind.LSEG,
    "box": TypeKind.BOX,
    "path": TypeKind.PATH,
    "polygon": TypeKind.POLYGON,
    "circle": TypeKind.CIRCLE,
    "cidr": TypeKind.CIDR,
    "inet": TypeKind.INET,
    "macaddr": TypeKind.MAC_ADDR,
    "macaddr8": TypeKind.MAC_ADDR8,
    "bit": TypeKind.BIT,
    "tsvector": TypeKind.TS_VECTOR,
    "tsquery": TypeKind.TS_QUERY,
    "uuid": TypeKind.UUID,
    "xml": TypeKind.XML,
    "json": TypeKind.JSON,
    "jsonb": TypeKind.JSON_BINARY,
    "int4range": TypeKind.INT4_RANGE,
    "int8range": TypeKind.INT8_RANGE,
    "numrange": TypeKind.NUM_RANGE,
    "tsrange": TypeKind.TS_RANGE,
    "tstzrange": TypeKind.TS_TZ_RANGE,
    "daterange": TypeKind.DATE_RANGE,
    "pg_lsn": TypeKind.PG_LSN,
    "user-defined": TypeKind.ENUM,
    "array": TypeKind.ARRAY,
}

_TIME_KINDS = frozenset(
    {
        TypeKind.TIMESTAMP,
        TypeKind.TIMESTAMP_WITH_TIME_ZONE,
        TypeKind.TIME,
        TypeKind.TIME_WITH_TIME_ZONE,
    }
)


@dataclass
class Type:
    """A column type: its kind plus the attribute that kind carries, if any.

    For ``UNKNOWN`` the attribute is the type name as a string.
    """

    kind: TypeKind
    attr: Any = None

    def __post_init__(self) -> None:
        factory = _ATTR_FACTORIES.get(self.kind)
        if factory is None:
            if self.attr is not None:
                raise ValueError(f"type {self.kind.value} takes no attribute")
        elif self.attr is None:
            self.attr = factory()

    @classmethod
    def from_str(cls, name: str) -> Type:
        """Map a PostgreSQL type name (case-insensitive) to a Type."""
        kind = _NAMES.get(name.lower())
        if kind is None:
            return cls(TypeKind.UNKNOWN, name)
        return cls(kind)

    def has_numeric_attr(self) -> bool:
        return self.kind in (TypeKind.NUMERIC, TypeKind.DECIMAL)

    def has_string_attr(self) -> bool:
        return self.kind in (TypeKind.VARCHAR, TypeKind.CHAR)

    def has_time_attr(self) -> bool:
        return self.kind in _TIME_KINDS

    def has_interval_attr(self) -> bool:
        return self.kind is TypeKind.INTERVAL

    def has_bit_attr(self) -> bool:
        return self.kind is TypeKind.BIT

    def has_enum_attr(self) -> bool:
        return self.kind is TypeKind.ENUM

    def has_array_attr(self) -> bool:
        return self.kind is TypeKind.ARRAY


@dataclass
class ColumnExpression:
    """A default or generation expression as SQL text."""

    expr: str

    @classmethod
    def from_optional(cls, value: str | None) -> ColumnExpression | None:
        return None if value is None else cls(value)


@dataclass
class NotNull:
    """The constraint that a value must not be null."""

    @classmethod
    def from_bool(cls, value: bool) -> NotNull | None:
        return cls() if value else None


@dataclass
class ColumnInfo:
    name: str
    col_type: Type
    default: ColumnExpression | None = None
    generated: ColumnExpression | None = None
    not_null: NotNull | None = None
    is_identity: bool = False


@dataclass
class Check:
    """A boolean expression every row must satisfy."""

    name: str
    expr: str
    no_inherit: bool = False


@dataclass
class Unique:
    name: str
    columns: list[str] = field(default_factory=list)


@dataclass
class PrimaryKey:
    name: str
    columns: list[str] = field(default_factory=list)


class ForeignKeyAction(Enum):
    CASCADE = "CASCADE"
    SET_NULL = "SET NULL"
    SET_DEFAULT = "SET DEFAULT"
    RESTRICT = "RESTRICT"
    NO_ACTION = "NO ACTION"

    @classmethod
    def from_name(cls, name: str) -> ForeignKeyAction | None:
        """The action whose SQL name is ``name``, or None."""
        try:
            return cls(name)
        except ValueError:
            return None


@dataclass
class References:
    """A foreign key from ``columns`` to ``foreign_columns`` of ``table``."""

    name: str
    columns: list[str]
    table: str
    foreign_columns: list[str]
    on_update: ForeignKeyAction | None = None
    on_delete: ForeignKeyAction | None = None


@dataclass
class Exclusion:
    name: str
    using: str
    columns: list[str]
    operation: str


Constraint = Union[Check, NotNull, Unique, PrimaryKey, References, Exclusion]


@dataclass
class TableInfo:
    """A table's own properties, without its columns and constraints."""

    name: str
    of_type: Type | None = None


@dataclass
class TableDef:
    info: TableInfo
    columns: list[ColumnInfo] = field(default_factory=list)
    check_constraints: list[Check] = field(default_factory=list)
    not_null_constraints: list[NotNull] = field(default_factory=list)
    unique_constraints: list[Unique] = field(default_factory=list)
    primary_key_constraints: list[PrimaryKey] = field(default_factory=list)
    reference_constraints: list[References] = field(default_factory=list)
    exclusion_constraints: list[Exclusion] = field(default_factory=list)


@dataclass
class Schema:
    schema: str
    tables: list[TableDef] = field(default_factory=list)