"""
Dispatched select / insert / update / delete.

Each operation is an async :class:`~modelmap.dispatch.MultiMethod`
dispatched on the model.  The ``DEFAULT`` around handlers attach error
context and log the call; the ``DEFAULT`` handlers build the query
document and run it through the resolved connection.  Override any of
them per model::

    @update.before(ModelTag.parse("audit/events"))
    def _immutable(model, conditions, changes, **_):
        raise PermissionError("audit events are append-only")
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from . import log
from .connection import resolve_connection
from .dispatch import DEFAULT, MultiMethod
from .exceptions import error_context
from .instance import Instance
from .model import table_name
from .query import build_select_query

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Sequence

    from .ports.connection import IConnection

# ── select ──────────────────────────────────────────────────────

select = MultiMethod("select", is_async=True)


@select.around(DEFAULT, name="modelmap.select.context")
async def _select_context(
    next_method: Callable[..., Any],
    model: Any,
    conditions: Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> list[Instance]:
    with error_context("select rows", model=model, conditions=conditions, **kwargs):
        log.debugf("compile", "Select %s where %s", model, conditions)
        return await next_method(model, conditions, **kwargs)


@select.default(DEFAULT)
async def _default_select(
    _next_method: Callable[..., Any],
    model: Any,
    conditions: Mapping[str, Any] | None = None,
    *,
    columns: Sequence[str] | None = None,
    query: Mapping[str, Any] | None = None,
    connection: IConnection | None = None,
) -> list[Instance]:
    return [
        instance
        async for instance in select_stream(
            model, conditions, columns=columns, query=query, connection=connection
        )
    ]


async def select_stream(
    model: Any,
    conditions: Mapping[str, Any] | None = None,
    *,
    columns: Sequence[str] | None = None,
    query: Mapping[str, Any] | None = None,
    connection: IConnection | None = None,
) -> AsyncIterator[Instance]:
    """Lazily yield the selected rows as instances of *model*."""
    conn = resolve_connection(model, connection)
    document = build_select_query(model, query, columns, conditions)
    log.debugf("execute", "Execute %s", document)
    async for row in conn.execute_query(document):
        log.tracef("results", "Row %s", row)
        yield Instance(model, row)


async def select_one(
    model: Any,
    conditions: Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> Instance | None:
    """The first selected instance, or ``None``."""
    rows = await select(model, conditions, **kwargs)
    return rows[0] if rows else None


# ── insert ──────────────────────────────────────────────────────

insert = MultiMethod("insert", is_async=True)


@insert.around(DEFAULT, name="modelmap.insert.context")
async def _insert_context(
    next_method: Callable[..., Any], model: Any, rows: Any, **kwargs: Any
) -> int:
    with error_context("insert rows", model=model, rows=rows):
        log.debugf("compile", "Insert %s rows %s", model, rows)
        return await next_method(model, rows, **kwargs)


@insert.default(DEFAULT)
async def _default_insert(
    _next_method: Callable[..., Any],
    model: Any,
    rows: Mapping[str, Any] | Sequence[Mapping[str, Any]],
    *,
    connection: IConnection | None = None,
) -> int:
    batch = [rows] if isinstance(rows, Mapping) else list(rows)
    if not batch:
        return 0
    conn = resolve_connection(model, connection)
    affected = await conn.execute_insert(table_name(model), batch)
    log.debugf("results", "%s rows inserted into %s", affected, model)
    return affected


# ── update ──────────────────────────────────────────────────────

update = MultiMethod("update", is_async=True)


@update.around(DEFAULT, name="modelmap.update.context")
async def _update_context(
    next_method: Callable[..., Any],
    model: Any,
    conditions: Mapping[str, Any] | None,
    changes: Mapping[str, Any],
    **kwargs: Any,
) -> int:
    with error_context("update rows", model=model, conditions=conditions, changes=changes):
        log.debugf("compile", "Update %s where %s set %s", model, conditions, changes)
        return await next_method(model, conditions, changes, **kwargs)


@update.default(DEFAULT)
async def _default_update(
    _next_method: Callable[..., Any],
    model: Any,
    conditions: Mapping[str, Any] | None,
    changes: Mapping[str, Any],
    *,
    connection: IConnection | None = None,
) -> int:
    if not changes:
        log.debugf("execute", "Nothing to update for %s", model)
        return 0
    conn = resolve_connection(model, connection)
    affected = await conn.execute_update(table_name(model), dict(conditions or {}), changes)
    log.debugf("results", "%s rows affected updating %s", affected, model)
    return affected


# ── delete ──────────────────────────────────────────────────────

delete = MultiMethod("delete", is_async=True)


@delete.around(DEFAULT, name="modelmap.delete.context")
async def _delete_context(
    next_method: Callable[..., Any],
    model: Any,
    conditions: Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> int:
    with error_context("delete rows", model=model, conditions=conditions):
        log.debugf("compile", "Delete %s where %s", model, conditions)
        return await next_method(model, conditions, **kwargs)


@delete.default(DEFAULT)
async def _default_delete(
    _next_method: Callable[..., Any],
    model: Any,
    conditions: Mapping[str, Any] | None = None,
    *,
    connection: IConnection | None = None,
) -> int:
    conn = resolve_connection(model, connection)
    affected = await conn.execute_delete(table_name(model), dict(conditions or {}))
    log.debugf("results", "%s rows deleted from %s", affected, model)
    return affected


__all__ = ["delete", "insert", "select", "select_one", "select_stream", "update"]
