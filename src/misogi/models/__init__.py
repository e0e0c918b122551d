"""Data models for misogi."""

from .log import (
    EXERCISES,
    QUICK_ADD_AMOUNTS,
    STORAGE_KEY,
    TARGET,
    Exercise,
    LogDocument,
    LogEntry,
    RemoteLogRow,
    Totals,
    rows_to_document,
)
from .session import Session, SessionState

__all__ = [
    "EXERCISES",
    "Exercise",
    "LogDocument",
    "LogEntry",
    "QUICK_ADD_AMOUNTS",
    "RemoteLogRow",
    "rows_to_document",
    "Session",
    "SessionState",
    "STORAGE_KEY",
    "TARGET",
    "Totals",
]
