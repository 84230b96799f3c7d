"""Hierarchy — the is-a relation between dispatch values."""

from __future__ import annotations

import logging
from collections import deque
from typing import Any

logger = logging.getLogger(__name__)


class Hierarchy:
    """Records ``child is-a parent`` relationships between dispatch values.

    Classes additionally inherit from every class in their MRO, so a model
    class dispatches to handlers registered for its bases without any
    explicit ``derive`` call.  Parents are kept in registration order;
    :meth:`ancestors` walks them breadth-first, nearest first.
    """

    def __init__(self) -> None:
        self._parents: dict[Any, list[Any]] = {}
        #: Bumped on every change so resolution caches can be invalidated.
        self.version = 0

    # ── Registration ─────────────────────────────────────────────

    def derive(self, child: Any, parent: Any) -> None:
        """Declare that *child* is-a *parent*.  Idempotent."""
        if child == parent:
            raise ValueError(f"{child!r} cannot derive from itself")
        if self.isa(parent, child):
            raise ValueError(f"Cyclic derivation: {parent!r} already is-a {child!r}")
        parents = self._parents.setdefault(child, [])
        if parent not in parents:
            parents.append(parent)
            self.version += 1
            logger.debug("Derived %r from %r", child, parent)

    def underive(self, child: Any, parent: Any) -> None:
        parents = self._parents.get(child)
        if parents and parent in parents:
            parents.remove(parent)
            self.version += 1
            if not parents:
                del self._parents[child]

    # ── Queries ──────────────────────────────────────────────────

    def parents(self, value: Any) -> list[Any]:
        """Direct parents: explicit derivations first, then class bases."""
        direct = list(self._parents.get(value, ()))
        if isinstance(value, type):
            for base in value.__mro__[1:]:
                if base is not object and base not in direct:
                    direct.append(base)
        return direct

    def ancestors(self, value: Any) -> list[Any]:
        """All ancestors of *value*, nearest first, without duplicates."""
        seen: list[Any] = []
        queue: deque[Any] = deque(self.parents(value))
        while queue:
            current = queue.popleft()
            if current in seen or current == value:
                continue
            seen.append(current)
            queue.extend(self.parents(current))
        return seen

    def isa(self, child: Any, parent: Any) -> bool:
        return child == parent or parent in self.ancestors(child)

    # ── Snapshots ────────────────────────────────────────────────

    def snapshot(self) -> dict[Any, list[Any]]:
        return {k: list(v) for k, v in self._parents.items()}

    def restore(self, snapshot: dict[Any, list[Any]]) -> None:
        self._parents = {k: list(v) for k, v in snapshot.items()}
        self.version += 1

    def clear(self) -> None:
        """Remove all derivations (testing utility)."""
        self._parents.clear()
        self.version += 1


#: Process-wide hierarchy used by every operation unless one is given.
default_hierarchy = Hierarchy()


def derive(child: Any, parent: Any) -> None:
    """Declare ``child is-a parent`` in the default hierarchy."""
    default_hierarchy.derive(child, parent)


def isa(child: Any, parent: Any) -> bool:
    return default_hierarchy.isa(child, parent)


__all__ = ["Hierarchy", "default_hierarchy", "derive", "isa"]
