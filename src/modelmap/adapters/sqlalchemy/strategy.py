"""
SQLAlchemy operator strategies.

Each comparison operator compiles through a ``SQLAlchemyOperator``
registered in a :class:`SQLAlchemyOperatorRegistry`, the same registry
shape the in-memory evaluator uses.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from ...operators import OperatorRegistry, OperatorStrategy

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement

    from ...operators import Operator


class SQLAlchemyOperator(OperatorStrategy):
    """Compiles one comparison operator to a SQLAlchemy boolean expression."""

    @abstractmethod
    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        """
        Args:
            column: A SQLAlchemy column clause.
            value: The node's argument; a tuple for two-argument operators.
        """
        ...


class SQLAlchemyOperatorRegistry(OperatorRegistry[SQLAlchemyOperator]):
    backend: ClassVar[str] = "SQLAlchemy"

    def apply(self, operator: Operator, column: Any, value: Any) -> ColumnElement[bool]:
        return self.lookup(operator).apply(column, value)


__all__ = ["SQLAlchemyOperator", "SQLAlchemyOperatorRegistry"]
