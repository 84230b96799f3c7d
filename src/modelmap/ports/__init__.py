from .connection import IConnection

__all__ = ["IConnection"]
