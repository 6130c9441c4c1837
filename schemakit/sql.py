"""A minimal SELECT statement builder that renders PostgreSQL SQL."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Union


def quote_identifier(name: str) -> str:
    """Quote ``name`` as a PostgreSQL identifier, doubling embedded quotes."""
    if not isinstance(name, str):
        raise TypeError(f"identifier must be a string, not {type(name).__name__}")
    return '"' + str.replace(name, '"', '""') + '"'


def quote_literal(value: Any) -> str:
    """Render a Python value as a PostgreSQL literal."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return "'" + str.replace(value, "'", "''") + "'"
    raise TypeError(f"cannot render {type(value).__name__} as an SQL literal")


@dataclass(frozen=True)
class Raw:
    """SQL text inserted verbatim."""

    sql: str


@dataclass(frozen=True)
class Col:
    """A column, optionally qualified by a table name."""

    name: str
    table: str | None = None


@dataclass(frozen=True)
class Value:
    """A value bound as a parameter, or inlined as a literal."""

    value: Any


@dataclass(frozen=True)
class Equals:
    """The comparison ``left = right``."""

    left: Expr
    right: Expr


@dataclass(frozen=True)
class Cast:
    """``CAST(expr AS type_name)``."""

    expr: Expr
    type_name: str


Expr = Union[Raw, Col, Value, Equals, Cast]
TableRef = Union[str, tuple]
SelectItem = Union[Expr, tuple]

_JOIN_KINDS = frozenset({"INNER JOIN", "LEFT JOIN", "RIGHT JOIN", "FULL OUTER JOIN"})
_DIRECTIONS = frozenset({"ASC", "DESC"})


@dataclass(frozen=True)
class Join:
    """A join of a table or aliased subquery, on the conjunction of ``on``."""

    table: TableRef | SelectStatement
    on: tuple = ()
    kind: str = "LEFT JOIN"
    alias: str | None = None

    def __post_init__(self) -> None:
        if self.kind not in _JOIN_KINDS:
            raise ValueError(f"unsupported join kind: {self.kind!r}")
        on = tuple(self.on) if isinstance(self.on, Iterable) else (self.on,)
        if not on:
            raise ValueError("a join needs at least one condition")
        object.__setattr__(self, "on", on)


@dataclass
class SelectStatement:
    """A SELECT query.

    ``columns`` holds expressions or ``(expression, alias)`` pairs; ``where``
    conditions are joined with AND; ``order_by`` holds ``(expression, "ASC"|"DESC")``.
    """

    columns: list[SelectItem] = field(default_factory=list)
    from_: TableRef | SelectStatement | None = None
    from_alias: str | None = None
    joins: list[Join] = field(default_factory=list)
    where: list[Expr] = field(default_factory=list)
    order_by: list[tuple] = field(default_factory=list)
    distinct: bool = False

    def to_string(self) -> str:
        """The SQL with every value inlined as a literal."""
        return _Renderer(inline=True).select(self)

    def build(self) -> tuple[str, list[Any]]:
        """The SQL with ``$n`` placeholders, and the values they stand for."""
        renderer = _Renderer(inline=False)
        sql = renderer.select(self)
        return sql, renderer.params


class _Renderer:
    def __init__(self, inline: bool) -> None:
        self._inline = inline
        self.params: list[Any] = []

    def expr(self, expr: Expr) -> str:
        match expr:
            case Raw(sql):
                return sql
            case Col(name, None):
                return quote_identifier(name)
            case Col(name, table):
                return f"{quote_identifier(table)}.{quote_identifier(name)}"
            case Value(value):
                literal = quote_literal(value)
                if self._inline:
                    return literal
                self.params.append(value)
                return f"${len(self.params)}"
            case Equals(left, right):
                return f"{self.expr(left)} = {self.expr(right)}"
            case Cast(inner, type_name):
                return f"CAST({self.expr(inner)} AS {type_name})"
        raise TypeError(f"not an SQL expression: {expr!r}")

    def item(self, item: SelectItem) -> str:
        if isinstance(item, tuple):
            expr, alias = item
            return f"{self.expr(expr)} AS {quote_identifier(alias)}"
        return self.expr(item)

    def source(self, table: TableRef | SelectStatement, alias: str | None) -> str:
        if isinstance(table, SelectStatement):
            if alias is None:
                raise ValueError("a subquery needs an alias")
            text = f"({self.select(table)})"
        elif isinstance(table, str):
            text = quote_identifier(table)
        else:
            text = ".".join(quote_identifier(part) for part in table)
        if alias is not None:
            text += f" AS {quote_identifier(alias)}"
        return text

    def select(self, stmt: SelectStatement) -> str:
        if not stmt.columns:
            raise ValueError("a SELECT needs at least one column")
        parts = ["SELECT"]
        if stmt.distinct:
            parts.append("DISTINCT")
        parts.append(", ".join(self.item(item) for item in stmt.columns))
        if stmt.from_ is not None:
            parts += ["FROM", self.source(stmt.from_, stmt.from_alias)]
        for join in stmt.joins:
            parts += [
                join.kind,
                self.source(join.table, join.alias),
                "ON",
                " AND ".join(self.expr(cond) for cond in join.on),
            ]
        if stmt.where:
            parts += ["WHERE", " AND ".join(self.expr(cond) for cond in stmt.where)]
        if stmt.order_by:
            orders = []
            for expr, direction in stmt.order_by:
                if direction not in _DIRECTIONS:
                    raise ValueError(f"unsupported order direction: {direction!r}")
                orders.append(f"{self.expr(expr)} {direction}")
            parts += ["ORDER BY", ", ".join(orders)]
        return " ".join(parts)