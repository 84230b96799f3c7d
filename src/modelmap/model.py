"""
Model registry — resolve a model identifier to table metadata.

A *model* is any hashable identifier for a logical table: a string, a
:class:`ModelTag`, or a class.  ``table_name``, ``primary_keys`` and
``default_connection`` are :class:`~modelmap.dispatch.MultiMethod` s, so
per-model overrides are ordinary handler registrations::

    @primary_keys.default(ModelTag.parse("shop/orders"))
    def _order_pk(next_method, model):
        return ("shop_id", "order_no")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .dispatch import DEFAULT, MultiMethod

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping


@dataclass(frozen=True)
class ModelTag:
    """A symbolic, optionally namespaced model identifier (``ns/name``)."""

    name: str
    namespace: str | None = None

    @classmethod
    def parse(cls, text: str) -> ModelTag:
        namespace, sep, name = text.rpartition("/")
        if not sep:
            return cls(text)
        if not name:
            raise ValueError(f"Model tag has an empty name: {text!r}")
        return cls(name, namespace or None)

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}" if self.namespace else self.name

    def __repr__(self) -> str:
        return f"ModelTag({str(self)!r})"


# ── table_name ──────────────────────────────────────────────────

table_name = MultiMethod("table_name")


@table_name.default(DEFAULT)
def _default_table_name(_next_method: Callable[..., Any], model: Any) -> str:
    if isinstance(model, str):
        return model
    if isinstance(model, ModelTag):
        return model.name.lower()
    if isinstance(model, type):
        explicit = getattr(model, "__tablename__", None)
        return explicit if isinstance(explicit, str) else model.__name__.lower()
    raise TypeError(f"Cannot derive a table name from {model!r}; register one")


# ── primary_keys ────────────────────────────────────────────────

primary_keys = MultiMethod("primary_keys")


@primary_keys.default(DEFAULT)
def _default_primary_keys(_next_method: Callable[..., Any], _model: Any) -> tuple[str, ...]:
    return ("id",)


@primary_keys.after(DEFAULT)
def _normalize_primary_keys(result: Any, _model: Any) -> tuple[str, ...]:
    # overrides may return a single column name
    if isinstance(result, str):
        return (result,)
    return tuple(result)


def primary_key_values(model: Any, row: Mapping[str, Any]) -> dict[str, Any]:
    """The ``pk column -> value`` entries of *row*, in primary-key order."""
    return {pk: row.get(pk) for pk in primary_keys(model)}


# ── default_connection ──────────────────────────────────────────

default_connection = MultiMethod("default_connection")


@default_connection.default(DEFAULT)
def _no_default_connection(_next_method: Callable[..., Any], _model: Any) -> Any:
    return None


__all__ = [
    "ModelTag",
    "default_connection",
    "primary_key_values",
    "primary_keys",
    "table_name",
]
