"""Time-of-day condition evaluation for custom commands.

The grammar is best-effort natural language matched with regular
expressions, not a formal DSL. Evaluators are pluggable so the heuristics
can be replaced without touching the composer.
"""

import re
from abc import ABC, abstractmethod
from datetime import datetime

_BEFORE = re.compile(r"\bbefore\s+(\d{1,2})\s*(am|pm)\b")
_AFTER = re.compile(r"\bafter\s+(\d{1,2})\s*(am|pm)\b")
_AT = re.compile(r"\bat\s+(\d{1,2})\s*(am|pm)\b")

# (pattern, predicate over the current hour)
_PERIODS = [
    (re.compile(r"\bmorning\b"), lambda hour: 5 <= hour < 12),
    (re.compile(r"\bafternoon\b"), lambda hour: 12 <= hour < 17),
    (re.compile(r"\bevening\b"), lambda hour: 17 <= hour < 21),
    (re.compile(r"\bnight\b"), lambda hour: hour >= 21 or hour < 5),
]


def to_24_hour(hour: int, meridiem: str) -> int:
    """Convert a 12-hour clock value to 0-23 ('12am' is 0, '12pm' is 12)."""
    if meridiem == "am":
        return 0 if hour == 12 else hour
    return hour if hour == 12 else hour + 12


class ConditionEvaluator(ABC):
    """Strategy deciding whether a command condition holds at a given time."""

    @abstractmethod
    def evaluate(self, condition: str, now: datetime) -> bool | None:
        """Evaluate a condition.

        Args:
            condition: Free-text condition
            now: Time to evaluate against

        Returns:
            True/False when the condition is understood, None otherwise
        """


class TimeOfDayConditionEvaluator(ConditionEvaluator):
    """Regex evaluator for clock-time and part-of-day conditions.

    Supported forms (case-insensitive):
    - ``before <N>am|pm``: current hour earlier than N
    - ``after <N>am|pm``: current hour later than N
    - ``at <N>am|pm``: current hour equals N
    - ``morning`` [5, 12), ``afternoon`` [12, 17), ``evening`` [17, 21),
      ``night`` from 21 to 5
    """

    def evaluate(self, condition: str, now: datetime) -> bool | None:
        text = condition.lower().strip()
        hour = now.hour

        if match := _BEFORE.search(text):
            return hour < to_24_hour(int(match.group(1)), match.group(2))
        if match := _AFTER.search(text):
            return hour > to_24_hour(int(match.group(1)), match.group(2))
        if match := _AT.search(text):
            return hour == to_24_hour(int(match.group(1)), match.group(2))

        for pattern, predicate in _PERIODS:
            if pattern.search(text):
                return predicate(hour)

        return None
