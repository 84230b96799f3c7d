"""
Exception hierarchy and error-context enrichment.

All errors inherit from ``ModelMapError``, carry the list of
:class:`ErrorContext` frames added while they propagated through
dispatched operations, and provide ``to_dict()`` for API-friendly
error responses.
"""

from __future__ import annotations

import contextlib
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(frozen=True)
class ErrorContext:
    """One frame of context attached to an error by an around-handler."""

    description: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "data": {k: repr(v) for k, v in self.data.items()},
        }


class ModelMapError(Exception):
    """Root exception for the data-mapping layer."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.context: list[ErrorContext] = []

    def add_context(self, description: str, data: dict[str, Any]) -> None:
        self.context.append(ErrorContext(description, dict(data)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
            "context": [c.to_dict() for c in self.context],
        }


class NoHandlerError(ModelMapError):
    """No handler chain could be resolved for an operation and dispatch value."""

    def __init__(self, operation: str, dispatch_value: Any) -> None:
        self.operation = operation
        self.dispatch_value = dispatch_value
        super().__init__(
            f"No default handler for {operation!r} applicable to {dispatch_value!r}"
        )

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d.update(operation=self.operation, dispatch_value=repr(self.dispatch_value))
        return d


class NotAnInstanceError(ModelMapError, TypeError):
    """An operation that needs an :class:`~modelmap.instance.Instance` got something else."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(
            "Don't know how to save something that's not an instance. "
            f"Got: {type(value).__qualname__} {value!r}"
        )


class StaleOrMissingRowError(ModelMapError):
    """An update keyed on primary key affected zero rows."""

    def __init__(self, model: Any, pk_values: dict[str, Any]) -> None:
        self.model = model
        self.pk_values = dict(pk_values)
        super().__init__(
            f"Unable to save object: {model!r} with primary key {self.pk_values!r} "
            "does not exist."
        )

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d.update(model=repr(self.model), pk=repr(self.pk_values))
        return d


class NoConnectionError(ModelMapError):
    """No connection was passed, scoped, or configured for a model."""

    def __init__(self, model: Any) -> None:
        self.model = model
        super().__init__(
            f"No connection available for {model!r}: pass one explicitly, "
            "open a connection_scope(), or register a default_connection."
        )


class InvalidConditionError(ModelMapError, ValueError):
    """An operator-tagged condition is malformed."""

    def __init__(self, column: str, value: Any, reason: str) -> None:
        self.column = column
        self.value = value
        super().__init__(f"Invalid condition for {column!r}: {value!r} ({reason})")


class OperationError(ModelMapError):
    """Wraps a foreign exception raised inside an enriched operation."""


class AmbiguousUpdateWarning(UserWarning):
    """An update keyed on primary key affected more than one row."""


@contextlib.contextmanager
def error_context(description: str, **data: Any) -> Iterator[None]:
    """
    Attach *description* and *data* to any error escaping the block.

    ``ModelMapError`` subclasses keep their type and gain a context frame.
    Any other ``Exception`` is wrapped in :class:`OperationError`, chained
    to the original.
    """
    try:
        yield
    except ModelMapError as exc:
        exc.add_context(description, data)
        raise
    except Exception as exc:  # noqa: BLE001
        wrapped = OperationError(f"Error {description}: {exc}")
        wrapped.add_context(description, data)
        raise wrapped from exc


__all__ = [
    "AmbiguousUpdateWarning",
    "ErrorContext",
    "InvalidConditionError",
    "ModelMapError",
    "NoConnectionError",
    "NoHandlerError",
    "NotAnInstanceError",
    "OperationError",
    "StaleOrMissingRowError",
    "error_context",
]
