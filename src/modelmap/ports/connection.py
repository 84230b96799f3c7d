"""IConnection — the storage collaborator protocol."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Mapping, Sequence


@runtime_checkable
class IConnection(Protocol):
    """
    Executes query documents against a backend.

    All calls may block or suspend; none of them is retried by the
    caller, and timeouts are the implementation's concern.  Conditions
    are condition maps (see :mod:`modelmap.conditions`), translated by the
    implementation.
    """

    def execute_query(
        self, document: Mapping[str, Any]
    ) -> AsyncIterator[Mapping[str, Any]]:
        """Lazily yield the rows selected by a select document."""
        ...

    async def execute_update(
        self,
        table: str,
        conditions: Mapping[str, Any],
        changes: Mapping[str, Any],
    ) -> int:
        """Write *changes* to the rows of *table* matching *conditions*.

        Returns the number of affected rows.
        """
        ...

    async def execute_insert(
        self, table: str, rows: Sequence[Mapping[str, Any]]
    ) -> int: ...

    async def execute_delete(self, table: str, conditions: Mapping[str, Any]) -> int: ...
