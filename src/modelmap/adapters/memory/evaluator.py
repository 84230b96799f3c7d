"""
In-memory where-clause evaluation.

:func:`evaluate_where` walks a where-clause AST against a row dict.
``and`` / ``or`` / ``not`` are handled here; comparison nodes are handed
to the :class:`MemoryOperator` registered for their operator.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from ...conditions import comparison_operands
from ...operators import Operator, OperatorRegistry, OperatorStrategy

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ...conditions import WhereClause


class MemoryOperator(OperatorStrategy):
    """Evaluates one comparison operator against a row value."""

    @abstractmethod
    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        """
        Args:
            field_value: The row's value for the node's column.
            condition_value: The node's argument; a tuple for two-argument
                operators, ``None`` for operators without arguments.
        """
        ...


class MemoryOperatorRegistry(OperatorRegistry[MemoryOperator]):
    backend: ClassVar[str] = "in-memory evaluation"

    def evaluate(self, operator: Operator, field_value: Any, condition_value: Any) -> bool:
        return self.lookup(operator).evaluate(field_value, condition_value)


def evaluate_where(
    clause: WhereClause | None,
    row: Mapping[str, Any],
    registry: MemoryOperatorRegistry,
) -> bool:
    """Whether *row* satisfies *clause*; a missing clause matches every row."""
    if clause is None:
        return True
    op = Operator(clause[0])
    if op is Operator.AND:
        return all(evaluate_where(child, row, registry) for child in clause[1:])
    if op is Operator.OR:
        return any(evaluate_where(child, row, registry) for child in clause[1:])
    if op is Operator.NOT:
        return not evaluate_where(clause[1], row, registry)

    column, condition_value = comparison_operands(clause)
    return registry.evaluate(op, row.get(column), condition_value)


__all__ = ["MemoryOperator", "MemoryOperatorRegistry", "evaluate_where"]
