"""
MultiMethod — open, per-model dispatch with method combination.

An operation (``save``, ``table_name`` ...) is a :class:`MultiMethod`.
Behaviour is added by registering handlers for a *dispatch value*
(usually a model) in one of four roles::

    @save.around(DEFAULT)
    async def _log_save(next_method, instance, **kwargs):
        ...
        return await next_method(instance, **kwargs)

    @table_name.default("venues")
    def _venues_table(next_method, model):
        return "venue"

Any number of packages may add around/before/after handlers for the same
operation and dispatch value without colliding.  A handler registered
with ``name=`` replaces an earlier one of that name; an unnamed handler
is keyed by the handler itself, so only re-registering the same function
(or a method of the same object) replaces it.  There is a single
default handler per dispatch value; registering another one replaces it.

Resolution searches the dispatch value, then its ancestors in the
:class:`~modelmap.dispatch.hierarchy.Hierarchy` (nearest first), then
:data:`DEFAULT`.  The registry is expected to be populated at import
time and treated as frozen afterwards; registration is not synchronised.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..exceptions import NoHandlerError
from .chain import HandlerChain
from .hierarchy import Hierarchy, default_hierarchy

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


class _AnyModel:
    """Type of :data:`DEFAULT`, the dispatch value every lookup falls back to."""

    _instance: _AnyModel | None = None

    def __new__(cls) -> _AnyModel:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DEFAULT"

    def __reduce__(self) -> str:
        return "DEFAULT"


DEFAULT = _AnyModel()


class Role(str, Enum):
    DEFAULT = "default"
    AROUND = "around"
    BEFORE = "before"
    AFTER = "after"


def _handler_name(handler: Handler) -> str:
    module = getattr(handler, "__module__", None) or "<unknown>"
    qualname = getattr(handler, "__qualname__", None) or repr(handler)
    return f"{module}.{qualname}"


def _handler_key(handler: Handler) -> Hashable:
    """Registration key of a handler given without a name.

    Distinct functions (lambdas included) get distinct keys; every bound
    method of one object and function shares a key, whether or not the
    object is hashable.
    """
    owner = getattr(handler, "__self__", None)
    if owner is None:
        return handler
    return (id(owner), getattr(handler, "__func__", None) or handler.__name__)


@dataclass
class MethodTable:
    """All registrations of one operation."""

    primaries: dict[Any, Handler] = field(default_factory=dict)
    aux: dict[Role, dict[Any, dict[Hashable, Handler]]] = field(
        default_factory=lambda: {Role.AROUND: {}, Role.BEFORE: {}, Role.AFTER: {}}
    )

    def copy(self) -> MethodTable:
        return MethodTable(
            primaries=dict(self.primaries),
            aux={
                role: {key: dict(named) for key, named in by_key.items()}
                for role, by_key in self.aux.items()
            },
        )


def candidate_keys(value: Any, hierarchy: Hierarchy) -> tuple[Any, ...]:
    """Dispatch values to search for *value*, most specific first."""
    keys: list[Any] = [value]
    keys.extend(a for a in hierarchy.ancestors(value) if a is not DEFAULT)
    if value is not DEFAULT:
        keys.append(DEFAULT)
    return tuple(keys)


def resolve_chain(
    operation: str,
    table: MethodTable,
    hierarchy: Hierarchy,
    value: Any,
    *,
    is_async: bool = False,
) -> HandlerChain:
    """Build the effective handler chain for *value*.

    Pure function of its arguments.

    Raises:
        NoHandlerError: If no default handler applies to *value*.
    """
    keys = candidate_keys(value, hierarchy)

    primaries = tuple(table.primaries[k] for k in keys if k in table.primaries)
    if not primaries:
        raise NoHandlerError(operation, value)

    def collect(role: Role, order: tuple[Any, ...]) -> tuple[Handler, ...]:
        # registration order is kept among handlers of one dispatch value
        by_key = table.aux[role]
        handlers: list[Handler] = []
        for k in order:
            handlers.extend(by_key.get(k, {}).values())
        return tuple(handlers)

    return HandlerChain(
        operation=operation,
        dispatch_value=value,
        primaries=primaries,
        arounds=collect(Role.AROUND, keys),
        befores=collect(Role.BEFORE, keys),
        afters=collect(Role.AFTER, keys[::-1]),
        is_async=is_async,
        keys=keys,
    )


def _identity_dispatch(value: Any, *_args: Any, **_kwargs: Any) -> Any:
    return value


class MultiMethod:
    """An extensible operation with per-dispatch-value handlers.

    Parameters
    ----------
    name:
        Operation name; must be unique among registered operations.
    dispatch:
        Callable computing the dispatch value from the call arguments.
        Defaults to the first positional argument.
    is_async:
        When ``True``, calling the operation returns a coroutine and
        handlers may be coroutine functions.
    hierarchy:
        The is-a relation used for specificity.  Defaults to the
        process-wide :data:`~modelmap.dispatch.hierarchy.default_hierarchy`.
    """

    def __init__(
        self,
        name: str,
        dispatch: Callable[..., Any] | None = None,
        *,
        is_async: bool = False,
        hierarchy: Hierarchy | None = None,
        register: bool = True,
    ) -> None:
        self.name = name
        self._dispatch = dispatch or _identity_dispatch
        self.is_async = is_async
        self.hierarchy = hierarchy if hierarchy is not None else default_hierarchy
        self._table = MethodTable()
        self._cache: dict[Any, HandlerChain] = {}
        self._cache_version = self.hierarchy.version
        if register:
            _register_operation(self)

    def __repr__(self) -> str:
        return f"<MultiMethod {self.name}>"

    # ── Registration ─────────────────────────────────────────────

    def register_default(self, dispatch_value: Any, handler: Handler) -> Handler:
        if dispatch_value in self._table.primaries:
            logger.debug(
                "Replacing default handler of %s for %r", self.name, dispatch_value
            )
        self._table.primaries[dispatch_value] = handler
        self._invalidate()
        logger.debug(
            "Registered default handler %s for %s %r",
            _handler_name(handler),
            self.name,
            dispatch_value,
        )
        return handler

    def _register_aux(
        self, role: Role, dispatch_value: Any, handler: Handler, name: str | None
    ) -> Handler:
        key = _handler_key(handler) if name is None else name
        self._table.aux[role].setdefault(dispatch_value, {})[key] = handler
        self._invalidate()
        logger.debug(
            "Registered %s handler %s for %s %r",
            role.value,
            name or _handler_name(handler),
            self.name,
            dispatch_value,
        )
        return handler

    def register_around(
        self, dispatch_value: Any, handler: Handler, *, name: str | None = None
    ) -> Handler:
        return self._register_aux(Role.AROUND, dispatch_value, handler, name)

    def register_before(
        self, dispatch_value: Any, handler: Handler, *, name: str | None = None
    ) -> Handler:
        return self._register_aux(Role.BEFORE, dispatch_value, handler, name)

    def register_after(
        self, dispatch_value: Any, handler: Handler, *, name: str | None = None
    ) -> Handler:
        return self._register_aux(Role.AFTER, dispatch_value, handler, name)

    # decorator forms

    def default(self, dispatch_value: Any) -> Callable[[Handler], Handler]:
        def wrapper(handler: Handler) -> Handler:
            return self.register_default(dispatch_value, handler)

        return wrapper

    def around(
        self, dispatch_value: Any, *, name: str | None = None
    ) -> Callable[[Handler], Handler]:
        def wrapper(handler: Handler) -> Handler:
            return self.register_around(dispatch_value, handler, name=name)

        return wrapper

    def before(
        self, dispatch_value: Any, *, name: str | None = None
    ) -> Callable[[Handler], Handler]:
        def wrapper(handler: Handler) -> Handler:
            return self.register_before(dispatch_value, handler, name=name)

        return wrapper

    def after(
        self, dispatch_value: Any, *, name: str | None = None
    ) -> Callable[[Handler], Handler]:
        def wrapper(handler: Handler) -> Handler:
            return self.register_after(dispatch_value, handler, name=name)

        return wrapper

    def remove(
        self, role: Role | str, dispatch_value: Any, handler: str | Handler | None = None
    ) -> None:
        """Remove a registration.

        For aux roles *handler* is the ``name`` it was registered under or,
        for an unnamed registration, the handler itself; ``None`` removes
        every aux handler of *dispatch_value*.
        """
        role = Role(role)
        if role is Role.DEFAULT:
            self._table.primaries.pop(dispatch_value, None)
        elif handler is None:
            self._table.aux[role].pop(dispatch_value, None)
        else:
            key = handler if isinstance(handler, str) else _handler_key(handler)
            named = self._table.aux[role].get(dispatch_value, {})
            named.pop(key, None)
            if not named:
                self._table.aux[role].pop(dispatch_value, None)
        self._invalidate()

    # ── Resolution ───────────────────────────────────────────────

    def dispatch_value(self, *args: Any, **kwargs: Any) -> Any:
        return self._dispatch(*args, **kwargs)

    def resolve(self, dispatch_value: Any) -> HandlerChain:
        """Return the (cached) handler chain for *dispatch_value*."""
        if self._cache_version != self.hierarchy.version:
            self._invalidate()
        chain = self._cache.get(dispatch_value)
        if chain is not None:
            return chain
        chain = resolve_chain(
            self.name, self._table, self.hierarchy, dispatch_value, is_async=self.is_async
        )
        self._cache[dispatch_value] = chain
        return chain

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        if self.is_async:
            return self._acall(*args, **kwargs)
        chain = self.resolve(self.dispatch_value(*args, **kwargs))
        return chain.invoke(*args, **kwargs)

    async def _acall(self, *args: Any, **kwargs: Any) -> Any:
        chain = self.resolve(self.dispatch_value(*args, **kwargs))
        return await chain.ainvoke(*args, **kwargs)

    # ── Introspection / snapshots ────────────────────────────────

    def registrations(self) -> dict[str, Any]:
        """Return a snapshot of all registrations (for debugging)."""
        return {
            Role.DEFAULT.value: {
                repr(k): _handler_name(h) for k, h in self._table.primaries.items()
            },
            **{
                role.value: {
                    repr(k): [
                        key if isinstance(key, str) else _handler_name(h)
                        for key, h in named.items()
                    ]
                    for k, named in by_key.items()
                }
                for role, by_key in self._table.aux.items()
            },
        }

    def snapshot(self) -> MethodTable:
        return self._table.copy()

    def restore(self, table: MethodTable) -> None:
        self._table = table.copy()
        self._invalidate()

    def _invalidate(self) -> None:
        self._cache.clear()
        self._cache_version = self.hierarchy.version


_operations: dict[str, MultiMethod] = {}


def _register_operation(method: MultiMethod) -> None:
    existing = _operations.get(method.name)
    if existing is not None and existing is not method:
        raise ValueError(f"Duplicate operation name: {method.name!r}")
    _operations[method.name] = method


def operation(name: str | MultiMethod) -> MultiMethod:
    """Look up a registered operation by name."""
    if isinstance(name, MultiMethod):
        return name
    try:
        return _operations[name]
    except KeyError:
        raise NoHandlerError(name, None) from None


def operations() -> dict[str, MultiMethod]:
    return dict(_operations)


# ── Extension API ────────────────────────────────────────────────


def register_default(op: str | MultiMethod, model: Any, handler: Handler) -> Handler:
    return operation(op).register_default(model, handler)


def register_around(
    op: str | MultiMethod, model: Any, handler: Handler, *, name: str | None = None
) -> Handler:
    return operation(op).register_around(model, handler, name=name)


def register_before(
    op: str | MultiMethod, model: Any, handler: Handler, *, name: str | None = None
) -> Handler:
    return operation(op).register_before(model, handler, name=name)


def register_after(
    op: str | MultiMethod, model: Any, handler: Handler, *, name: str | None = None
) -> Handler:
    return operation(op).register_after(model, handler, name=name)


def resolve(op: str | MultiMethod, model: Any) -> HandlerChain:
    return operation(op).resolve(model)


__all__ = [
    "DEFAULT",
    "MethodTable",
    "MultiMethod",
    "Role",
    "candidate_keys",
    "operation",
    "operations",
    "register_after",
    "register_around",
    "register_before",
    "register_default",
    "resolve",
    "resolve_chain",
]
