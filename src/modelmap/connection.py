"""
The connection an operation runs against.

Operations accept an explicit ``connection=`` argument.  Without one
they use the connection of the enclosing :func:`connection_scope`, then
the model's :func:`~modelmap.model.default_connection`::

    async with engine_connection() as conn:
        with connection_scope(conn):
            people = await select("people")
            await save(people[0])
"""

from __future__ import annotations

import contextlib
import logging
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from .exceptions import NoConnectionError
from .model import default_connection

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .ports.connection import IConnection

logger = logging.getLogger(__name__)

#: Connection bound by the innermost ``connection_scope`` (``None`` outside one).
_current_connection: ContextVar[Any] = ContextVar("current_connection", default=None)


def get_current_connection() -> IConnection | None:
    """Return the scoped connection, or ``None`` outside any scope."""
    return _current_connection.get()


@contextlib.contextmanager
def connection_scope(connection: IConnection) -> Iterator[IConnection]:
    """Make *connection* current for the enclosed block.

    The previous connection is restored on every exit path.  Scopes are
    per context, so concurrent tasks each see their own connection.
    """
    token = _current_connection.set(connection)
    try:
        yield connection
    finally:
        _current_connection.reset(token)


def resolve_connection(model: Any, connection: IConnection | None = None) -> IConnection:
    """Pick the connection for an operation on *model*.

    Raises:
        NoConnectionError: If none is passed, scoped, or registered.
    """
    if connection is not None:
        return connection
    scoped = _current_connection.get()
    if scoped is not None:
        return scoped
    fallback = default_connection(model)
    if fallback is not None:
        logger.debug("Using default connection %r for %r", fallback, model)
        return fallback
    raise NoConnectionError(model)


__all__ = ["connection_scope", "get_current_connection", "resolve_connection"]
