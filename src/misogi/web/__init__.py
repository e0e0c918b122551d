"""Web interface for misogi."""

from .app import create_app

__all__ = ["create_app"]
