"""CLI commands for misogi."""

from .init import init
from .serve import serve

__all__ = [
    "init",
    "serve",
]
