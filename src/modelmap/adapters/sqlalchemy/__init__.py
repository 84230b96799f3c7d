from .compiler import (
    build_sqla_where,
    compile_delete,
    compile_insert,
    compile_select,
    compile_update,
)
from .connection import SQLAlchemyConnection
from .operators import DEFAULT_SQLA_REGISTRY, build_default_registry
from .strategy import SQLAlchemyOperator, SQLAlchemyOperatorRegistry

__all__ = [
    "DEFAULT_SQLA_REGISTRY",
    "SQLAlchemyConnection",
    "SQLAlchemyOperator",
    "SQLAlchemyOperatorRegistry",
    "build_default_registry",
    "build_sqla_where",
    "compile_delete",
    "compile_insert",
    "compile_select",
    "compile_update",
]
