"""
SQLAlchemy implementation of ``IConnection``.
"""

from __future__ import annotations

import contextlib
import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy.ext.asyncio import AsyncEngine

from ...ports.connection import IConnection
from ...query import build_delete_query, build_insert_query, build_update_query
from .compiler import compile_delete, compile_insert, compile_select, compile_update

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Mapping, Sequence

    from sqlalchemy.ext.asyncio import AsyncConnection, AsyncSession

    from .strategy import SQLAlchemyOperatorRegistry

logger = logging.getLogger(__name__)


class SQLAlchemyConnection(IConnection):
    """
    Runs query documents through SQLAlchemy Core.

    Supports two usage patterns:

    1. **Self-managed transactions**: bind an ``AsyncEngine``; every call
       runs in its own ``engine.begin()`` block and commits on success.
    2. **Caller-managed transactions**: bind an ``AsyncConnection`` or
       ``AsyncSession``; statements join the caller's transaction and
       nothing is committed here.
    """

    def __init__(
        self,
        bind: AsyncEngine | AsyncConnection | AsyncSession,
        *,
        registry: SQLAlchemyOperatorRegistry | None = None,
    ) -> None:
        self._bind = bind
        self._registry = registry

    @property
    def owns_transaction(self) -> bool:
        return isinstance(self._bind, AsyncEngine)

    @contextlib.asynccontextmanager
    async def _connect(self) -> AsyncIterator[Any]:
        if isinstance(self._bind, AsyncEngine):
            async with self._bind.begin() as conn:
                yield conn
        else:
            yield self._bind

    async def execute_query(
        self, document: Mapping[str, Any]
    ) -> AsyncIterator[dict[str, Any]]:
        stmt = compile_select(document, registry=self._registry)
        logger.debug("Executing %s", stmt)
        async with self._connect() as conn:
            result = await conn.execute(stmt)
            for row in result.mappings():
                yield dict(row)

    async def execute_update(
        self,
        table: str,
        conditions: Mapping[str, Any],
        changes: Mapping[str, Any],
    ) -> int:
        stmt = compile_update(
            build_update_query(table, conditions, changes), registry=self._registry
        )
        logger.debug("Executing %s", stmt)
        async with self._connect() as conn:
            result = await conn.execute(stmt)
        return int(result.rowcount)

    async def execute_insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> int:
        document = build_insert_query(table, rows)
        if not document["values"]:
            return 0
        stmt = compile_insert(document)
        logger.debug("Executing %s", stmt)
        async with self._connect() as conn:
            await conn.execute(stmt, document["values"])
        # executemany rowcount is driver-dependent
        return len(document["values"])

    async def execute_delete(self, table: str, conditions: Mapping[str, Any]) -> int:
        stmt = compile_delete(build_delete_query(table, conditions), registry=self._registry)
        logger.debug("Executing %s", stmt)
        async with self._connect() as conn:
            result = await conn.execute(stmt)
        return int(result.rowcount)
