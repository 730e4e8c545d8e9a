"""Natural-language parsing of memory queries.

Turns phrases like "what did we discuss yesterday about #travel" into
search parameters: a date range, tags and the residual query text used for
similarity scoring. Parsers are pluggable strategies.
"""

import re
from abc import ABC, abstractmethod
from datetime import datetime, timedelta

from ..config import DEFAULT_SEARCH_LIMIT
from .analysis import extract_key_terms
from .models import MemorySearchParams

# Sunday first, matching the week layout users speak in
WEEKDAYS = ("sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday")

_HASHTAG = re.compile(r"#(\w+)")
_ABOUT = re.compile(r"\babout\s+(\w+)\b", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=999999)


class QueryParser(ABC):
    """Strategy turning free text into memory search parameters."""

    @abstractmethod
    def parse(
        self,
        text: str,
        now: datetime | None = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> MemorySearchParams:
        """Parse a query.

        Args:
            text: Raw user query
            now: Reference time for relative dates (defaults to now)
            limit: Maximum number of results requested

        Returns:
            Search parameters
        """


class NaturalLanguageQueryParser(QueryParser):
    """Heuristic parser for relative dates, weekdays, hashtags and "about X".

    Hidden design decisions:
    - Which phrases map to which date ranges
    - How tags are derived when none are explicit (query key terms)
    - Which phrases are removed from the residual query
    """

    def parse(
        self,
        text: str,
        now: datetime | None = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> MemorySearchParams:
        now = now or datetime.now()
        lower = text.lower()
        residual = text
        start_date: datetime | None = None
        end_date: datetime | None = None
        tags: list[str] | None = None

        if "yesterday" in lower:
            day = now - timedelta(days=1)
            start_date, end_date = start_of_day(day), end_of_day(day)
            residual = self._strip(residual, "yesterday")
        elif "last week" in lower:
            start_date = start_of_day(now - timedelta(days=7))
            residual = self._strip(residual, "last week")
        elif "two days ago" in lower:
            day = now - timedelta(days=2)
            start_date, end_date = start_of_day(day), end_of_day(day)
            residual = self._strip(residual, "two days ago")

        # A mentioned weekday resolves to its most recent past occurrence
        current_day = (now.weekday() + 1) % 7
        for index, name in enumerate(WEEKDAYS):
            if name not in lower:
                continue
            days_ago = (current_day - index + 7) % 7
            if 0 < days_ago < 7:
                day = now - timedelta(days=days_ago)
                start_date, end_date = start_of_day(day), end_of_day(day)
                residual = self._strip(residual, rf"(last\s+|on\s+)?{name}")

        hashtags = [tag.lower() for tag in _HASHTAG.findall(text)]
        if hashtags:
            tags = hashtags
            residual = _HASHTAG.sub(r"\1", residual)

        if tags is None and (match := _ABOUT.search(text)):
            tags = [match.group(1).lower()]

        residual = _WHITESPACE.sub(" ", residual).strip(" ,.?!") or text.strip()

        if tags is None:
            key_terms = extract_key_terms(residual)
            if key_terms:
                tags = key_terms

        return MemorySearchParams(
            query=residual,
            limit=limit,
            start_date=start_date,
            end_date=end_date,
            tags=tags,
        )

    @staticmethod
    def _strip(text: str, pattern: str) -> str:
        return re.sub(rf"\b{pattern}\b", " ", text, flags=re.IGNORECASE)
