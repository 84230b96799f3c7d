from .memory import InMemoryConnection
from .sqlalchemy import SQLAlchemyConnection

__all__ = ["InMemoryConnection", "SQLAlchemyConnection"]
