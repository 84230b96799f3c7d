"""
Compile query documents into SQLAlchemy Core statements.

Leaf where-clause nodes are delegated to a ``SQLAlchemyOperatorRegistry``;
``and`` / ``or`` / ``not`` nodes are compiled here.  Tables are addressed
by name through lightweight ``table()`` / ``column()`` constructs, so no
``MetaData`` reflection is needed::

    stmt = compile_select({"select": ["*"], "from": ["people"], "where": ("=", "id", 1)})
    # SELECT * FROM people WHERE id = :id_1
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    Delete,
    Insert,
    Select,
    Update,
    and_,
    column,
    delete,
    insert,
    literal_column,
    not_,
    or_,
    select,
    table,
    true,
    update,
)

from ...conditions import comparison_operands
from ...operators import Operator
from ...query import ALL_COLUMNS
from .operators import DEFAULT_SQLA_REGISTRY

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from sqlalchemy import ColumnElement

    from ...conditions import WhereClause
    from .strategy import SQLAlchemyOperatorRegistry


def build_sqla_where(
    clause: WhereClause | None,
    *,
    registry: SQLAlchemyOperatorRegistry | None = None,
) -> ColumnElement[bool]:
    """
    Build a SQLAlchemy filter expression from a where-clause AST.

    A missing clause compiles to ``true()``.
    """
    if clause is None:
        return true()
    return _compile_node(clause, registry if registry is not None else DEFAULT_SQLA_REGISTRY)


def _compile_node(clause: WhereClause, registry: SQLAlchemyOperatorRegistry) -> Any:
    op = Operator(clause[0])
    if op is Operator.AND:
        return and_(*(_compile_node(child, registry) for child in clause[1:]))
    if op is Operator.OR:
        return or_(*(_compile_node(child, registry) for child in clause[1:]))
    if op is Operator.NOT:
        return not_(_compile_node(clause[1], registry))
    return _compile_leaf_node(op, clause, registry)


def _compile_leaf_node(
    op: Operator, clause: WhereClause, registry: SQLAlchemyOperatorRegistry
) -> Any:
    name, value = comparison_operands(clause)
    return registry.apply(op, column(name), value)


def _table(name: str, columns: Iterable[str] = ()) -> Any:
    return table(name, *(column(c) for c in columns))


# ── statements ──────────────────────────────────────────────────


def compile_select(
    document: Mapping[str, Any],
    *,
    registry: SQLAlchemyOperatorRegistry | None = None,
) -> Select[Any]:
    selected = list(document.get("select") or [ALL_COLUMNS])
    columns = [literal_column(ALL_COLUMNS) if c == ALL_COLUMNS else column(c) for c in selected]
    stmt = select(*columns).select_from(*(_table(name) for name in document["from"]))
    where = document.get("where")
    if where is not None:
        stmt = stmt.where(build_sqla_where(where, registry=registry))
    return stmt


def compile_update(
    document: Mapping[str, Any],
    *,
    registry: SQLAlchemyOperatorRegistry | None = None,
) -> Update:
    changes = document["set"]
    stmt = update(_table(document["update"], changes)).values(dict(changes))
    where = document.get("where")
    if where is not None:
        stmt = stmt.where(build_sqla_where(where, registry=registry))
    return stmt


def compile_insert(document: Mapping[str, Any]) -> Insert:
    rows = document["values"]
    names: dict[str, None] = {}
    for row in rows:
        names.update(dict.fromkeys(row))
    return insert(_table(document["insert_into"], names))


def compile_delete(
    document: Mapping[str, Any],
    *,
    registry: SQLAlchemyOperatorRegistry | None = None,
) -> Delete:
    stmt = delete(_table(document["delete_from"]))
    where = document.get("where")
    if where is not None:
        stmt = stmt.where(build_sqla_where(where, registry=registry))
    return stmt


__all__ = [
    "build_sqla_where",
    "compile_delete",
    "compile_insert",
    "compile_select",
    "compile_update",
]
