"""
modelmap — dispatched data-mapping for plain-dict rows.

Models are identifiers (strings, :class:`ModelTag` s or classes); rows are
change-tracked :class:`Instance` s; every operation is an open
:class:`~modelmap.dispatch.MultiMethod` that can be specialised per model.
"""

from .conditions import and_clauses, condition_node, where_clause
from .connection import connection_scope, get_current_connection, resolve_connection
from .crud import delete, insert, select, select_one, select_stream, update
from .dispatch import (
    DEFAULT,
    MultiMethod,
    derive,
    isa,
    register_after,
    register_around,
    register_before,
    register_default,
)
from .exceptions import (
    AmbiguousUpdateWarning,
    InvalidConditionError,
    ModelMapError,
    NoConnectionError,
    NoHandlerError,
    NotAnInstanceError,
    OperationError,
    StaleOrMissingRowError,
)
from .instance import Instance, changes, instance_of, is_instance, reset_original, same_row
from .model import ModelTag, default_connection, primary_key_values, primary_keys, table_name
from .operators import Operator
from .ports.connection import IConnection
from .query import (
    build_delete_query,
    build_insert_query,
    build_select_query,
    build_update_query,
)
from .save import save, save_changes

__all__ = [
    "DEFAULT",
    "AmbiguousUpdateWarning",
    "IConnection",
    "Instance",
    "InvalidConditionError",
    "ModelMapError",
    "ModelTag",
    "MultiMethod",
    "NoConnectionError",
    "NoHandlerError",
    "NotAnInstanceError",
    "OperationError",
    "Operator",
    "StaleOrMissingRowError",
    "and_clauses",
    "build_delete_query",
    "build_insert_query",
    "build_select_query",
    "build_update_query",
    "changes",
    "condition_node",
    "connection_scope",
    "default_connection",
    "delete",
    "derive",
    "get_current_connection",
    "insert",
    "instance_of",
    "is_instance",
    "isa",
    "primary_key_values",
    "primary_keys",
    "register_after",
    "register_around",
    "register_before",
    "register_default",
    "reset_original",
    "resolve_connection",
    "same_row",
    "save",
    "save_changes",
    "select",
    "select_one",
    "select_stream",
    "table_name",
    "update",
    "where_clause",
]
