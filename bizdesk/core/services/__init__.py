"""Core scheduling services (pure functions)."""

from bizdesk.core.services.due_time import DueEvaluation, days_until_due, evaluate
from bizdesk.core.services.recurrence import next_occurrence

__all__ = [
    "DueEvaluation",
    "days_until_due",
    "evaluate",
    "next_occurrence",
]
