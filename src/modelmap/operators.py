from __future__ import annotations

from abc import ABC
from enum import Enum
from typing import ClassVar, Generic, TypeVar


class Operator(str, Enum):
    """Operators that may appear in condition maps and where-clause ASTs."""

    # Standard comparison
    EQ = "="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="

    # Set / range
    IN = "in"
    NOT_IN = "not_in"
    BETWEEN = "between"
    NOT_BETWEEN = "not_between"

    # String
    LIKE = "like"
    NOT_LIKE = "not_like"
    ILIKE = "ilike"

    # Null checks
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"

    # Logical
    AND = "and"
    OR = "or"
    NOT = "not"


#: Number of arguments that follow the column in a comparison node.
ARITY: dict[Operator, int] = {
    Operator.EQ: 1,
    Operator.NE: 1,
    Operator.GT: 1,
    Operator.LT: 1,
    Operator.GE: 1,
    Operator.LE: 1,
    Operator.IN: 1,
    Operator.NOT_IN: 1,
    Operator.BETWEEN: 2,
    Operator.NOT_BETWEEN: 2,
    Operator.LIKE: 1,
    Operator.NOT_LIKE: 1,
    Operator.ILIKE: 1,
    Operator.IS_NULL: 0,
    Operator.IS_NOT_NULL: 0,
}

_COMPARISON_TOKENS: dict[str, Operator] = {op.value: op for op in ARITY}


def comparison_operator(token: object) -> Operator | None:
    """Return the comparison :class:`Operator` named by *token*, or ``None``."""
    if isinstance(token, Operator):
        return token if token in ARITY else None
    if isinstance(token, str):
        return _COMPARISON_TOKENS.get(token.lower())
    return None


class OperatorStrategy(ABC):
    """
    One backend's implementation of one comparison :class:`Operator`.

    Subclasses set ``operator`` and add the backend's method
    (``evaluate`` for rows in memory, ``apply`` for SQLAlchemy columns).
    """

    operator: ClassVar[Operator]


S = TypeVar("S", bound=OperatorStrategy)


class OperatorRegistry(Generic[S]):
    """
    Strategies of one backend keyed by the operator they implement.

    Registering a strategy for an operator that already has one replaces it::

        registry = MemoryOperatorRegistry(EqualOperator(), LikeOperator())
        registry.register(CaseInsensitiveEqual())
    """

    backend: ClassVar[str] = "this backend"

    def __init__(self, *strategies: S) -> None:
        self._strategies: dict[Operator, S] = {}
        for strategy in strategies:
            self.register(strategy)

    def register(self, strategy: S) -> None:
        self._strategies[strategy.operator] = strategy

    def __contains__(self, operator: object) -> bool:
        return operator in self._strategies

    def lookup(self, operator: Operator) -> S:
        """
        Return the strategy for *operator*.

        Raises:
            ValueError: If no strategy is registered for it.
        """
        try:
            return self._strategies[operator]
        except KeyError:
            raise ValueError(
                f"Unsupported operator for {self.backend}: {operator.value}"
            ) from None


__all__ = [
    "ARITY",
    "Operator",
    "OperatorRegistry",
    "OperatorStrategy",
    "comparison_operator",
]
