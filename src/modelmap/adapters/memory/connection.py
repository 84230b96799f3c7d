"""InMemoryConnection — dict-backed fake connection for unit tests."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from ...ports.connection import IConnection
from ...query import (
    ALL_COLUMNS,
    QueryDocument,
    build_delete_query,
    build_insert_query,
    build_update_query,
)
from .evaluator import evaluate_where
from .operators import build_default_registry

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Mapping, Sequence

    from .evaluator import MemoryOperatorRegistry


class InMemoryConnection(IConnection):
    """In-memory implementation of ``IConnection``.

    Tables are lists of row dicts keyed by table name.  Every document
    executed is appended to :attr:`executed`, so tests can assert on
    the I/O an operation performed.
    """

    def __init__(
        self,
        tables: Mapping[str, Sequence[Mapping[str, Any]]] | None = None,
        *,
        registry: MemoryOperatorRegistry | None = None,
    ) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {
            name: [dict(row) for row in rows] for name, rows in (tables or {}).items()
        }
        self.executed: list[QueryDocument] = []
        self._registry = registry if registry is not None else build_default_registry()

    def _rows(self, table: str) -> list[dict[str, Any]]:
        return self.tables.setdefault(table, [])

    def _matching(self, table: str, document: QueryDocument) -> list[dict[str, Any]]:
        where = document.get("where")
        return [row for row in self._rows(table) if evaluate_where(where, row, self._registry)]

    async def execute_query(
        self, document: Mapping[str, Any]
    ) -> AsyncIterator[dict[str, Any]]:
        doc = dict(document)
        self.executed.append(doc)
        columns = list(doc.get("select") or [ALL_COLUMNS])
        for table in doc["from"]:
            for row in self._matching(table, doc):
                if ALL_COLUMNS in columns:
                    yield copy.deepcopy(row)
                else:
                    yield {c: copy.deepcopy(row.get(c)) for c in columns}

    async def execute_update(
        self,
        table: str,
        conditions: Mapping[str, Any],
        changes: Mapping[str, Any],
    ) -> int:
        doc = build_update_query(table, conditions, changes)
        self.executed.append(doc)
        matched = self._matching(table, doc)
        for row in matched:
            row.update(doc["set"])
        return len(matched)

    async def execute_insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> int:
        doc = build_insert_query(table, rows)
        self.executed.append(doc)
        self._rows(table).extend(doc["values"])
        return len(doc["values"])

    async def execute_delete(self, table: str, conditions: Mapping[str, Any]) -> int:
        doc = build_delete_query(table, conditions)
        self.executed.append(doc)
        matched = self._matching(table, doc)
        removed = {id(row) for row in matched}
        self.tables[table] = [row for row in self._rows(table) if id(row) not in removed]
        return len(matched)
