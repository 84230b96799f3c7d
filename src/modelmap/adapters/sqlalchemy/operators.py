"""Built-in SQLAlchemy operators and the default registry."""

from __future__ import annotations

import operator as op_module
from typing import TYPE_CHECKING, Any, cast

from ...operators import Operator
from .strategy import SQLAlchemyOperator, SQLAlchemyOperatorRegistry

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.sql.elements import ColumnElement


class _BinaryOperator(SQLAlchemyOperator):
    compare: Callable[[Any, Any], Any]

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", self.compare(column, value))


class EqualOperator(_BinaryOperator):
    operator = Operator.EQ
    compare = staticmethod(op_module.eq)


class NotEqualOperator(_BinaryOperator):
    operator = Operator.NE
    compare = staticmethod(op_module.ne)


class GreaterThanOperator(_BinaryOperator):
    operator = Operator.GT
    compare = staticmethod(op_module.gt)


class LessThanOperator(_BinaryOperator):
    operator = Operator.LT
    compare = staticmethod(op_module.lt)


class GreaterEqualOperator(_BinaryOperator):
    operator = Operator.GE
    compare = staticmethod(op_module.ge)


class LessEqualOperator(_BinaryOperator):
    operator = Operator.LE
    compare = staticmethod(op_module.le)


class InOperator(SQLAlchemyOperator):
    operator = Operator.IN

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.in_(value))


class NotInOperator(SQLAlchemyOperator):
    operator = Operator.NOT_IN

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.not_in(value))


class BetweenOperator(SQLAlchemyOperator):
    operator = Operator.BETWEEN

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        low, high = value
        return cast("ColumnElement[bool]", column.between(low, high))


class NotBetweenOperator(SQLAlchemyOperator):
    operator = Operator.NOT_BETWEEN

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        low, high = value
        return cast("ColumnElement[bool]", ~column.between(low, high))


class LikeOperator(SQLAlchemyOperator):
    operator = Operator.LIKE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.like(value))


class NotLikeOperator(SQLAlchemyOperator):
    operator = Operator.NOT_LIKE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.not_like(value))


class ILikeOperator(SQLAlchemyOperator):
    operator = Operator.ILIKE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.ilike(value))


class IsNullOperator(SQLAlchemyOperator):
    operator = Operator.IS_NULL

    def apply(self, column: Any, _value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.is_(None))


class IsNotNullOperator(SQLAlchemyOperator):
    operator = Operator.IS_NOT_NULL

    def apply(self, column: Any, _value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.is_not(None))


BUILTIN_OPERATORS: tuple[type[SQLAlchemyOperator], ...] = (
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


def build_default_registry() -> SQLAlchemyOperatorRegistry:
    return SQLAlchemyOperatorRegistry(*(cls() for cls in BUILTIN_OPERATORS))


DEFAULT_SQLA_REGISTRY = build_default_registry()

__all__ = ["BUILTIN_OPERATORS", "DEFAULT_SQLA_REGISTRY", "build_default_registry"]
