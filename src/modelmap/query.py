"""
Structured query documents.

Queries are plain dicts, never SQL strings::

    build_select_query("people", {}, None, {"id": 1})
    # {"select": ["*"], "from": ["people"], "where": ("=", "id", 1)}

Connection adapters compile these documents for their backend.
``build_select_query`` is dispatched on the model so it can be
overridden per model; the write documents are keyed by table name.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .conditions import and_clauses, where_clause
from .dispatch import DEFAULT, MultiMethod
from .model import table_name

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

QueryDocument = dict[str, Any]

ALL_COLUMNS = "*"

build_select_query = MultiMethod("build_select_query")


@build_select_query.default(DEFAULT)
def _default_build_select_query(
    _next_method: Callable[..., Any],
    model: Any,
    query: Mapping[str, Any] | None,
    columns: Sequence[str] | None,
    conditions: Mapping[str, Any] | None,
) -> QueryDocument:
    """
    Fill in the fields *query* leaves out.

    A caller-supplied ``select`` or ``from`` is kept verbatim, even when
    empty.  The condition clause is merged into an existing ``where`` with
    ``and``; when neither exists the ``where`` key is left out.
    """
    document: QueryDocument = dict(query or {})
    if "select" not in document:
        document["select"] = list(columns) if columns else [ALL_COLUMNS]
    if "from" not in document:
        document["from"] = [table_name(model)]
    where = and_clauses(document.get("where"), where_clause(conditions))
    if where is None:
        document.pop("where", None)
    else:
        document["where"] = where
    return document


def build_update_query(
    table: str, conditions: Mapping[str, Any] | None, changes: Mapping[str, Any]
) -> QueryDocument:
    document: QueryDocument = {"update": table, "set": dict(changes)}
    where = where_clause(conditions)
    if where is not None:
        document["where"] = where
    return document


def build_insert_query(table: str, rows: Sequence[Mapping[str, Any]]) -> QueryDocument:
    return {"insert_into": table, "values": [dict(row) for row in rows]}


def build_delete_query(table: str, conditions: Mapping[str, Any] | None) -> QueryDocument:
    document: QueryDocument = {"delete_from": table}
    where = where_clause(conditions)
    if where is not None:
        document["where"] = where
    return document


__all__ = [
    "ALL_COLUMNS",
    "QueryDocument",
    "build_delete_query",
    "build_insert_query",
    "build_select_query",
    "build_update_query",
]
