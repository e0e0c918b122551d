"""Day, week and year rollups over a log document."""

import logging
from dataclasses import dataclass, field
from datetime import date

from ..models.log import EXERCISES, TARGET, Exercise, LogDocument, Totals
from ..utils.dates import (
    day_of_year,
    days_left_in_year,
    format_date,
    parse_date,
    today as current_day,
    week_number,
)

logger = logging.getLogger(__name__)


def _key(reference: date | str) -> str:
    if isinstance(reference, str):
        return reference
    return format_date(reference)


def _date(reference: date | str) -> date:
    if isinstance(reference, str):
        return parse_date(reference)
    return reference


def year_totals(doc: LogDocument) -> Totals:
    """Sum every entry in the document.

    No year filter is applied; the document is expected to hold a single
    challenge year.
    """
    totals = Totals()
    for entry in doc.logs.values():
        totals = totals + entry
    return totals


def week_totals(doc: LogDocument, reference: date | str) -> Totals:
    """Sum the entries that share the reference date's week and year.

    Entries from another year with the same week number are excluded.
    """
    ref = _date(reference)
    target_week = (week_number(ref), ref.year)

    totals = Totals()
    for key, entry in doc.logs.items():
        try:
            d = parse_date(key)
        except ValueError:
            logger.debug("Skipping unparseable log key %r", key)
            continue
        if (week_number(d), d.year) == target_week:
            totals = totals + entry
    return totals


def day_totals(doc: LogDocument, reference: date | str) -> Totals:
    """Get the counts logged on the reference date, or zeros."""
    return Totals.from_entry(doc.entry_for(_key(reference)))


@dataclass
class ExerciseProgress:
    """Progress of one exercise toward the annual target."""

    exercise: Exercise
    day: int
    week: int
    year: int
    target: int

    @property
    def percentage(self) -> float:
        """Percent of target reached, rounded to one decimal place."""
        if self.target <= 0:
            return 0.0
        return round(self.year / self.target * 100, 1)

    @property
    def bar_width(self) -> float:
        """Progress bar fill, capped at 100."""
        return min(100.0, self.percentage)

    @property
    def remaining(self) -> int:
        return max(0, self.target - self.year)

    def to_dict(self) -> dict:
        return {
            "exercise": self.exercise.value,
            "label": self.exercise.label,
            "day": self.day,
            "week": self.week,
            "year": self.year,
            "target": self.target,
            "percentage": self.percentage,
            "remaining": self.remaining,
        }


@dataclass
class ProgressSummary:
    """Everything the tracker page shows for a selected date."""

    date: str
    day_of_year: int
    week_number: int
    days_left: int
    target: int
    day: Totals
    week: Totals
    year: Totals
    exercises: list[ExerciseProgress] = field(default_factory=list)

    @property
    def combined_target(self) -> int:
        return self.target * len(EXERCISES)

    @property
    def combined_remaining(self) -> int:
        return max(0, self.combined_target - self.year.total)

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "date": self.date,
            "day_of_year": self.day_of_year,
            "week_number": self.week_number,
            "days_left": self.days_left,
            "target": self.target,
            "combined_target": self.combined_target,
            "combined_remaining": self.combined_remaining,
            "day": self.day.to_dict(),
            "week": self.week.to_dict(),
            "year": self.year.to_dict(),
            "exercises": [p.to_dict() for p in self.exercises],
        }


def progress_summary(
    doc: LogDocument,
    reference: date | str,
    target: int = TARGET,
    today: date | None = None,
) -> ProgressSummary:
    """Build the full progress summary for a selected date.

    Args:
        doc: The log document to aggregate
        reference: The selected date (day and week totals are relative to it)
        target: Per-exercise annual target
        today: The current day, used for the days-left countdown

    Returns:
        Summary with day, week and year totals and per-exercise progress
    """
    ref = _date(reference)
    today = today or current_day()

    day = day_totals(doc, ref)
    week = week_totals(doc, ref)
    year = year_totals(doc)

    exercises = [
        ExerciseProgress(
            exercise=exercise,
            day=day.get(exercise),
            week=week.get(exercise),
            year=year.get(exercise),
            target=target,
        )
        for exercise in EXERCISES
    ]

    return ProgressSummary(
        date=format_date(ref),
        day_of_year=day_of_year(ref),
        week_number=week_number(ref),
        days_left=days_left_in_year(today),
        target=target,
        day=day,
        week=week,
        year=year,
        exercises=exercises,
    )
