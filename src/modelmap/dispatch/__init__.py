from .chain import HandlerChain
from .hierarchy import Hierarchy, default_hierarchy, derive, isa
from .multimethod import (
    DEFAULT,
    MethodTable,
    MultiMethod,
    Role,
    candidate_keys,
    operation,
    operations,
    register_after,
    register_around,
    register_before,
    register_default,
    resolve,
    resolve_chain,
)

__all__ = [
    "DEFAULT",
    "HandlerChain",
    "Hierarchy",
    "MethodTable",
    "MultiMethod",
    "Role",
    "candidate_keys",
    "default_hierarchy",
    "derive",
    "isa",
    "operation",
    "operations",
    "register_after",
    "register_around",
    "register_before",
    "register_default",
    "resolve",
    "resolve_chain",
]
