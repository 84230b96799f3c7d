"""
Translate condition maps into where-clause ASTs.

A condition map is ``{column: value}``.  A plain value means equality;
an *operator-tagged* value is a tuple or list whose first element is a
comparison operator token::

    where_clause({"id": 1})                 # ("=", "id", 1)
    where_clause({"id": (">", 1)})          # (">", "id", 1)
    where_clause({"a": 1, "b": 2})          # ("and", ("=", "a", 1), ("=", "b", 2))
    where_clause({"a": ("between", 1, 2)})  # ("between", "a", 1, 2)

Nodes are plain tuples ``(op, column, *args)`` so they compare, hash and
print like ordinary values.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .exceptions import InvalidConditionError
from .operators import ARITY, Operator, comparison_operator

if TYPE_CHECKING:
    from collections.abc import Mapping

WhereClause = tuple[Any, ...]


def condition_node(column: str, value: Any) -> WhereClause:
    """Build the node for a single ``column -> value`` condition."""
    if isinstance(value, tuple | list) and value:
        op = comparison_operator(value[0])
        if op is not None:
            args = tuple(value[1:])
            expected = ARITY[op]
            if len(args) != expected:
                raise InvalidConditionError(
                    column,
                    value,
                    f"operator {op.value!r} takes {expected} argument(s), got {len(args)}",
                )
            return (op.value, column, *args)
    return (Operator.EQ.value, column, value)


def where_clause(conditions: Mapping[str, Any] | None) -> WhereClause | None:
    """
    Convert *conditions* to a where-clause AST.

    Returns ``None`` for ``None`` or an empty map.  A single condition is
    returned bare, never wrapped in a one-child ``and``.
    """
    if not conditions:
        return None
    nodes = [condition_node(column, value) for column, value in conditions.items()]
    if len(nodes) == 1:
        return nodes[0]
    return (Operator.AND.value, *nodes)


def _conjuncts(clause: WhereClause) -> list[WhereClause]:
    if clause and clause[0] == Operator.AND.value:
        return list(clause[1:])
    return [clause]


def and_clauses(*clauses: WhereClause | None) -> WhereClause | None:
    """
    Combine *clauses* with ``and``.

    ``None`` entries are ignored, top-level ``and`` nodes are flattened, and
    a conjunct already present is not added again.  A single remaining
    clause is returned unmodified.
    """
    present = [c for c in clauses if c is not None]
    if not present:
        return None
    if len(present) == 1:
        return present[0]
    merged: list[WhereClause] = []
    for clause in present:
        for conjunct in _conjuncts(clause):
            if conjunct not in merged:
                merged.append(conjunct)
    if len(merged) == 1:
        return merged[0]
    return (Operator.AND.value, *merged)


def comparison_operands(clause: WhereClause) -> tuple[Any, Any]:
    """
    Split a comparison node into its column and argument.

    The argument is ``None`` for null checks, the value itself for
    one-argument operators and a tuple for ``between`` / ``not_between``.
    """
    column, args = clause[1], clause[2:]
    if not args:
        return column, None
    if len(args) == 1:
        return column, args[0]
    return column, tuple(args)


__all__ = [
    "WhereClause",
    "and_clauses",
    "comparison_operands",
    "condition_node",
    "where_clause",
]
