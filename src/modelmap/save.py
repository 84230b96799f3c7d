"""
Save — write an instance's changes back to its row.

``save`` is an async :class:`~modelmap.dispatch.MultiMethod` dispatched
on the instance's model.  The default handler:

1. diffs the instance (no changes: return it untouched, no I/O);
2. updates the row addressed by the instance's primary-key values with
   the diff, through the dispatched :func:`~modelmap.crud.update`;
3. fails with :class:`~modelmap.exceptions.StaleOrMissingRowError` when
   no row was affected;
4. re-baselines the instance and returns it.  When several rows were
   affected it also logs a warning and issues
   :class:`~modelmap.exceptions.AmbiguousUpdateWarning`; a warnings filter
   that turns it into an error does not fail the save.

The ``DEFAULT`` around handler attaches the model, instance and attempted
changes to any error escaping the chain.
"""

from __future__ import annotations

import warnings
from typing import TYPE_CHECKING, Any

from . import log
from .connection import connection_scope
from .crud import update
from .dispatch import DEFAULT, MultiMethod
from .exceptions import (
    AmbiguousUpdateWarning,
    NotAnInstanceError,
    StaleOrMissingRowError,
    error_context,
)
from .instance import Instance, changes, reset_original

if TYPE_CHECKING:
    from collections.abc import Callable

    from .ports.connection import IConnection


def _dispatch_on_model(value: Any, *_args: Any, **_kwargs: Any) -> Any:
    return value.model if isinstance(value, Instance) else DEFAULT


save_changes = MultiMethod("save", _dispatch_on_model, is_async=True)


@save_changes.around(DEFAULT, name="modelmap.save.context")
async def _save_context(next_method: Callable[..., Any], value: Any, **kwargs: Any) -> Any:
    is_instance = isinstance(value, Instance)
    model = value.model if is_instance else None
    diff = changes(value) if is_instance else None
    with error_context("save changes", model=model, instance=value, changes=diff):
        log.debugf("compile", "Save %s %s changes %s", model, value, diff)
        return await next_method(value, **kwargs)


@save_changes.default(DEFAULT)
async def _default_save(
    _next_method: Callable[..., Any],
    value: Any,
    *,
    connection: IConnection | None = None,
) -> Instance:
    if not isinstance(value, Instance):
        raise NotAnInstanceError(value)
    diff = changes(value)
    if not diff:
        return value

    model = value.model
    pk_values = value.pk_values()
    affected = await update(model, pk_values, diff, connection=connection)
    if affected <= 0:
        raise StaleOrMissingRowError(model, pk_values)
    saved = reset_original(value)
    if affected > 1:
        log.warnf(
            "results",
            "Warning: more than 1 row affected when saving %s with primary key %s",
            model,
            pk_values,
        )
        try:
            warnings.warn(
                f"{affected} rows affected when saving {model!r} "
                f"with primary key {pk_values!r}",
                AmbiguousUpdateWarning,
                stacklevel=2,
            )
        except AmbiguousUpdateWarning:
            # rows are already written
            log.debugf("results", "AmbiguousUpdateWarning escalated by warnings filter")
    return saved


async def save(value: Any, *, connection: IConnection | None = None) -> Instance:
    """Persist the changes of *value* and return the re-baselined instance.

    When *connection* is given it is also made current for any handler
    that resolves its connection from scope.
    """
    if connection is None:
        return await save_changes(value)
    with connection_scope(connection):
        return await save_changes(value, connection=connection)


__all__ = ["save", "save_changes"]
