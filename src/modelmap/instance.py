"""
Change-tracked instances.

An :class:`Instance` pairs an immutable *original* snapshot of a row with
a mutable *current* working copy.  Item assignment and deletion only
touch the working copy; :func:`changes` diffs the two, and
:func:`reset_original` re-baselines after a successful write::

    person = Instance("people", {"id": 1, "name": "Cam"})
    person["name"] = "Cam Saul"
    changes(person)           # {"name": "Cam Saul"}
    changes(reset_original(person))   # {}
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from types import MappingProxyType
from typing import Any

from .dispatch import isa
from .model import primary_key_values


class Instance(MutableMapping[str, Any]):
    """One row of *model*: a baseline snapshot plus a working copy."""

    __slots__ = ("_current", "_model", "_original")

    def __init__(
        self,
        model: Any,
        current: Mapping[str, Any] | None = None,
        original: Mapping[str, Any] | None = None,
    ) -> None:
        self._model = model
        self._current: dict[str, Any] = dict(current or {})
        baseline = self._current if original is None else original
        self._original: Mapping[str, Any] = MappingProxyType(dict(baseline))

    @property
    def model(self) -> Any:
        return self._model

    @property
    def original(self) -> Mapping[str, Any]:
        """Read-only baseline snapshot."""
        return self._original

    @property
    def current(self) -> Mapping[str, Any]:
        """Read-only view of the working copy; mutate through the instance."""
        return MappingProxyType(self._current)

    # -- MutableMapping ------------------------------------------------------

    def __getitem__(self, key: str) -> Any:
        return self._current[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._current[key] = value

    def __delitem__(self, key: str) -> None:
        del self._current[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._current)

    def __len__(self) -> int:
        return len(self._current)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Instance):
            return self._model == other._model and self._current == other._current
        if isinstance(other, Mapping):
            return self._current == dict(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Instance({self._model!r}, {self._current!r})"

    # -- helpers -------------------------------------------------------------

    def changes(self) -> dict[str, Any]:
        return changes(self)

    def pk_values(self) -> dict[str, Any]:
        """Primary-key ``column -> value`` pairs taken from the working copy."""
        return primary_key_values(self._model, self._current)


def is_instance(value: Any) -> bool:
    return isinstance(value, Instance)


def instance_of(model: Any, value: Any) -> bool:
    """Whether *value* is an instance of *model* or of a model that is-a *model*."""
    return isinstance(value, Instance) and isa(value.model, model)


def changes(instance: Instance) -> dict[str, Any]:
    """
    Columns whose working value differs from the baseline.

    A column removed from the working copy reads as ``None``.  Pure; the
    instance is not modified.
    """
    current = instance._current
    original = instance._original
    diff: dict[str, Any] = {}
    for key in current:
        if key not in original or current[key] != original[key]:
            diff[key] = current[key]
    for key in original:
        if key not in current and original[key] is not None:
            diff[key] = None
    return diff


def reset_original(instance: Instance) -> Instance:
    """Return a new instance whose baseline is *instance*'s working copy."""
    return Instance(instance.model, instance._current, instance._current)


def same_row(a: Instance, b: Instance) -> bool:
    """Whether *a* and *b* address the same row: same model and primary-key values."""
    return a.model == b.model and a.pk_values() == b.pk_values()


__all__ = [
    "Instance",
    "changes",
    "instance_of",
    "is_instance",
    "reset_original",
    "same_row",
]
