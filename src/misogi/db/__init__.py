"""Database layer for misogi."""

from .engine import get_db_path, init_db
from .repositories import LocalLogStore

__all__ = [
    "get_db_path",
    "init_db",
    "LocalLogStore",
]
