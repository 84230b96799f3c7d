from .connection import InMemoryConnection
from .evaluator import MemoryOperator, MemoryOperatorRegistry, evaluate_where
from .operators import build_default_registry

__all__ = [
    "InMemoryConnection",
    "MemoryOperator",
    "MemoryOperatorRegistry",
    "build_default_registry",
    "evaluate_where",
]
