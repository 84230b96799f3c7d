"""Built-in in-memory operators: comparison, set/range, string, null checks.

A ``None`` row value never satisfies an ordering, range or pattern
operator, mirroring SQL's NULL semantics.
"""

from __future__ import annotations

import operator as op_module
import re
from typing import TYPE_CHECKING, Any

from ...operators import Operator
from .evaluator import MemoryOperator, MemoryOperatorRegistry

if TYPE_CHECKING:
    from collections.abc import Callable

# -- comparison --------------------------------------------------------------


class EqualOperator(MemoryOperator):
    operator = Operator.EQ

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return bool(field_value == condition_value)


class NotEqualOperator(MemoryOperator):
    operator = Operator.NE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return bool(field_value != condition_value)


class _OrderingOperator(MemoryOperator):
    compare: Callable[[Any, Any], Any]

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return bool(self.compare(field_value, condition_value))


class GreaterThanOperator(_OrderingOperator):
    operator = Operator.GT
    compare = staticmethod(op_module.gt)


class LessThanOperator(_OrderingOperator):
    operator = Operator.LT
    compare = staticmethod(op_module.lt)


class GreaterEqualOperator(_OrderingOperator):
    operator = Operator.GE
    compare = staticmethod(op_module.ge)


class LessEqualOperator(_OrderingOperator):
    operator = Operator.LE
    compare = staticmethod(op_module.le)


# -- set / range -------------------------------------------------------------


class InOperator(MemoryOperator):
    operator = Operator.IN

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return field_value in condition_value


class NotInOperator(MemoryOperator):
    operator = Operator.NOT_IN

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return field_value not in condition_value


class BetweenOperator(MemoryOperator):
    operator = Operator.BETWEEN
    negate = False

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        low, high = condition_value
        return bool(low <= field_value <= high) is not self.negate


class NotBetweenOperator(BetweenOperator):
    operator = Operator.NOT_BETWEEN
    negate = True


# -- string ------------------------------------------------------------------


def _sql_pattern_to_regex(pattern: str) -> str:
    """Convert SQL LIKE pattern (``%``, ``_``) to a Python regex."""
    return "".join(
        ".*" if ch == "%" else "." if ch == "_" else re.escape(ch) for ch in pattern
    )


class LikeOperator(MemoryOperator):
    operator = Operator.LIKE
    flags = re.DOTALL
    negate = False

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        regex = _sql_pattern_to_regex(str(condition_value))
        matched = re.fullmatch(regex, str(field_value), self.flags) is not None
        return matched is not self.negate


class NotLikeOperator(LikeOperator):
    operator = Operator.NOT_LIKE
    negate = True


class ILikeOperator(LikeOperator):
    operator = Operator.ILIKE
    flags = re.IGNORECASE | re.DOTALL


# -- null checks -------------------------------------------------------------


class IsNullOperator(MemoryOperator):
    operator = Operator.IS_NULL

    def evaluate(self, field_value: Any, _condition_value: Any) -> bool:
        return field_value is None


class IsNotNullOperator(MemoryOperator):
    operator = Operator.IS_NOT_NULL

    def evaluate(self, field_value: Any, _condition_value: Any) -> bool:
        return field_value is not None


BUILTIN_OPERATORS: tuple[type[MemoryOperator], ...] = (
    EqualOperator,
    NotEqualOperator,
    GreaterThanOperator,
    LessThanOperator,
    GreaterEqualOperator,
    LessEqualOperator,
    InOperator,
    NotInOperator,
    BetweenOperator,
    NotBetweenOperator,
    LikeOperator,
    NotLikeOperator,
    ILikeOperator,
    IsNullOperator,
    IsNotNullOperator,
)


def build_default_registry() -> MemoryOperatorRegistry:
    """
    Create a registry with all built-in operators.

    Returns a fresh instance each call, so callers may extend it freely.
    """
    return MemoryOperatorRegistry(*(cls() for cls in BUILTIN_OPERATORS))


__all__ = ["BUILTIN_OPERATORS", "EqualOperator", "build_default_registry"]
