"""Rep log data models."""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from ..utils.dates import is_valid_key

logger = logging.getLogger(__name__)

# Per-exercise annual target
TARGET = 10000

# Fixed key of the log document in the local store
STORAGE_KEY = "misogi-2026"

# One-tap increments offered next to each exercise
QUICK_ADD_AMOUNTS = (1, 5, 10)


class Exercise(str, Enum):
    """Tracked exercises, in display order."""

    PUSHUPS = "pushups"
    SQUATS = "squats"
    PULLUPS = "pullups"

    @property
    def label(self) -> str:
        """Human-readable exercise name."""
        return {
            Exercise.PUSHUPS: "Push-ups",
            Exercise.SQUATS: "Squats",
            Exercise.PULLUPS: "Pull-ups",
        }[self]

    @classmethod
    def parse(cls, value: "str | Exercise") -> "Exercise | None":
        """Look up an exercise by value, returning None if unknown."""
        try:
            return cls(value)
        except ValueError:
            return None


EXERCISES = list(Exercise)


def _count(value) -> int:
    """Coerce a stored count to a non-negative int."""
    if isinstance(value, bool):
        return 0
    try:
        count = int(value)
    except (TypeError, ValueError):
        return 0
    return max(0, count)


@dataclass(frozen=True)
class LogEntry:
    """Rep counts recorded for one calendar date."""

    pushups: int = 0
    squats: int = 0
    pullups: int = 0

    @property
    def total(self) -> int:
        return self.pushups + self.squats + self.pullups

    def get(self, exercise: Exercise) -> int:
        """Get the count for one exercise."""
        return getattr(self, Exercise(exercise).value)

    def add(self, exercise: Exercise, amount: int) -> "LogEntry":
        """Return a copy with ``amount`` added to one exercise."""
        counts = self.to_dict()
        key = Exercise(exercise).value
        counts[key] = counts[key] + amount
        return LogEntry(**counts)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "pushups": self.pushups,
            "squats": self.squats,
            "pullups": self.pullups,
        }

    @classmethod
    def from_dict(cls, data: dict | None) -> "LogEntry":
        """Create from dictionary. Missing or invalid counts become zero."""
        data = data or {}
        return cls(
            pushups=_count(data.get("pushups", 0)),
            squats=_count(data.get("squats", 0)),
            pullups=_count(data.get("pullups", 0)),
        )


@dataclass(frozen=True)
class Totals:
    """Summed rep counts over a set of log entries."""

    pushups: int = 0
    squats: int = 0
    pullups: int = 0

    @property
    def total(self) -> int:
        return self.pushups + self.squats + self.pullups

    def get(self, exercise: Exercise) -> int:
        return getattr(self, Exercise(exercise).value)

    def __add__(self, other: "Totals | LogEntry") -> "Totals":
        return Totals(
            pushups=self.pushups + other.pushups,
            squats=self.squats + other.squats,
            pullups=self.pullups + other.pullups,
        )

    @classmethod
    def from_entry(cls, entry: LogEntry) -> "Totals":
        return cls(pushups=entry.pushups, squats=entry.squats, pullups=entry.pullups)

    def to_dict(self) -> dict:
        return {
            "pushups": self.pushups,
            "squats": self.squats,
            "pullups": self.pullups,
            "total": self.total,
        }


@dataclass
class LogDocument:
    """All log entries for one user, keyed by ``YYYY-MM-DD``.

    Key order carries no meaning; every total is an order-independent sum.
    """

    logs: dict[str, LogEntry] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.logs)

    def entry_for(self, key: str) -> LogEntry:
        """Get the entry for a date, or an all-zero entry if none exists."""
        return self.logs.get(key, LogEntry())

    def with_entry(self, key: str, entry: LogEntry) -> "LogDocument":
        """Return a copy of the document with one entry replaced."""
        logs = dict(self.logs)
        logs[key] = entry
        return LogDocument(logs=logs)

    def to_dict(self) -> dict:
        """Convert to the stored JSON shape."""
        return {"logs": {key: entry.to_dict() for key, entry in self.logs.items()}}

    @classmethod
    def from_dict(cls, data: dict | None) -> "LogDocument":
        """Create from the stored JSON shape.

        Keys that are not valid dates are dropped.
        """
        logs: dict[str, LogEntry] = {}
        raw_logs = (data or {}).get("logs") or {}
        if not isinstance(raw_logs, dict):
            logger.warning("Ignoring malformed logs section of type %s", type(raw_logs).__name__)
            return cls()

        for key, raw_entry in raw_logs.items():
            if not is_valid_key(key):
                logger.warning("Dropping log entry with invalid date key %r", key)
                continue
            logs[key] = LogEntry.from_dict(raw_entry if isinstance(raw_entry, dict) else None)
        return cls(logs=logs)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, raw: str) -> "LogDocument":
        """Parse a serialized document.

        Raises:
            ValueError: If ``raw`` is not valid JSON or not an object.
        """
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("Log document must be a JSON object")
        return cls.from_dict(data)


@dataclass
class RemoteLogRow:
    """One row of the remote ``daily_logs`` table."""

    user_id: str
    date: str
    pushups: int = 0
    squats: int = 0
    pullups: int = 0
    updated_at: datetime | None = None

    @property
    def entry(self) -> LogEntry:
        return LogEntry(pushups=self.pushups, squats=self.squats, pullups=self.pullups)

    @classmethod
    def from_entry(
        cls,
        user_id: str,
        key: str,
        entry: LogEntry,
        updated_at: datetime | None = None,
    ) -> "RemoteLogRow":
        """Build the row that mirrors one local entry."""
        return cls(
            user_id=user_id,
            date=key,
            pushups=entry.pushups,
            squats=entry.squats,
            pullups=entry.pullups,
            updated_at=updated_at or datetime.now(timezone.utc),
        )

    def to_record(self) -> dict:
        """Convert to the remote table's column mapping."""
        return {
            "user_id": self.user_id,
            "date": self.date,
            "pushups": self.pushups,
            "squats": self.squats,
            "pullups": self.pullups,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_record(cls, data: dict) -> "RemoteLogRow":
        """Create from a remote table row."""
        updated_at = None
        if data.get("updated_at"):
            updated_at = datetime.fromisoformat(str(data["updated_at"]).replace("Z", "+00:00"))

        return cls(
            user_id=str(data["user_id"]),
            date=str(data["date"])[:10],
            pushups=_count(data.get("pushups")),
            squats=_count(data.get("squats")),
            pullups=_count(data.get("pullups")),
            updated_at=updated_at,
        )


def rows_to_document(rows: list[RemoteLogRow]) -> LogDocument:
    """Transform remote rows into the date-keyed document form.

    If the same date appears more than once, the last row wins.
    """
    logs: dict[str, LogEntry] = {}
    for row in rows:
        if not is_valid_key(row.date):
            logger.warning("Skipping remote row with invalid date %r", row.date)
            continue
        logs[row.date] = row.entry
    return LogDocument(logs=logs)
