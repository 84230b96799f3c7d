"""
HandlerChain — the combined effective method for one dispatch value.

Combination order, outermost first::

    around (most specific) -> ... -> around (least specific)
        before (most specific -> least specific)
        default (most specific; may fall through with next_method)
        after (least specific -> most specific)

Handler calling conventions:

* **default** and **around** handlers receive ``next_method`` first and
  decide whether to call it.  The engine never forces call-through; an
  around handler that does not call ``next_method`` short-circuits
  everything inside it.
* **before** handlers receive the call arguments; their return value is
  ignored.
* **after** handlers receive the current result followed by the call
  arguments and return the (possibly replaced) result.

Async chains accept handlers that are coroutine functions or plain
callables; ``next_method`` is then a coroutine function.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..exceptions import NoHandlerError

if TYPE_CHECKING:
    from collections.abc import Callable


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


@dataclass(frozen=True)
class HandlerChain:
    """Resolved, ordered handlers for ``(operation, dispatch_value)``.

    Attributes:
        operation: Name of the operation, for error messages.
        dispatch_value: The value the chain was resolved for.
        primaries: Default handlers, most specific first.
        arounds: Around handlers, outermost (most specific) first.
        befores: Before handlers, in execution order.
        afters: After handlers, in execution order.
        is_async: Whether the chain is executed with :meth:`ainvoke`.
    """

    operation: str
    dispatch_value: Any
    primaries: tuple[Callable[..., Any], ...] = ()
    arounds: tuple[Callable[..., Any], ...] = ()
    befores: tuple[Callable[..., Any], ...] = ()
    afters: tuple[Callable[..., Any], ...] = ()
    is_async: bool = False
    keys: tuple[Any, ...] = field(default=(), compare=False)

    @property
    def is_empty(self) -> bool:
        return not self.primaries

    def _no_handler(self) -> NoHandlerError:
        return NoHandlerError(self.operation, self.dispatch_value)

    # ── Synchronous execution ────────────────────────────────────

    def invoke(self, *args: Any, **kwargs: Any) -> Any:
        if self.is_empty:
            raise self._no_handler()
        return self._around(0, args, kwargs)

    def _around(self, index: int, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        if index >= len(self.arounds):
            return self._inner(args, kwargs)

        def next_method(*a: Any, **kw: Any) -> Any:
            return self._around(index + 1, a, kw)

        return self.arounds[index](next_method, *args, **kwargs)

    def _inner(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        for before in self.befores:
            before(*args, **kwargs)
        result = self._primary(0, args, kwargs)
        for after in self.afters:
            result = after(result, *args, **kwargs)
        return result

    def _primary(self, index: int, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        if index >= len(self.primaries):
            raise self._no_handler()

        def next_method(*a: Any, **kw: Any) -> Any:
            return self._primary(index + 1, a, kw)

        return self.primaries[index](next_method, *args, **kwargs)

    # ── Asynchronous execution ───────────────────────────────────

    async def ainvoke(self, *args: Any, **kwargs: Any) -> Any:
        if self.is_empty:
            raise self._no_handler()
        return await self._aaround(0, args, kwargs)

    async def _aaround(
        self, index: int, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> Any:
        if index >= len(self.arounds):
            return await self._ainner(args, kwargs)

        async def next_method(*a: Any, **kw: Any) -> Any:
            return await self._aaround(index + 1, a, kw)

        return await _maybe_await(self.arounds[index](next_method, *args, **kwargs))

    async def _ainner(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        for before in self.befores:
            await _maybe_await(before(*args, **kwargs))
        result = await self._aprimary(0, args, kwargs)
        for after in self.afters:
            result = await _maybe_await(after(result, *args, **kwargs))
        return result

    async def _aprimary(
        self, index: int, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> Any:
        if index >= len(self.primaries):
            raise self._no_handler()

        async def next_method(*a: Any, **kw: Any) -> Any:
            return await self._aprimary(index + 1, a, kw)

        return await _maybe_await(self.primaries[index](next_method, *args, **kwargs))


__all__ = ["HandlerChain"]
