"""Rule-based intent classification and tag extraction for memory entries."""

import re

_PUNCTUATION = re.compile(r"[.,!?;:'\"()]")
_ENTITY = re.compile(r"^[A-Z][a-z]+$")
_EMAIL = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_DATE_PATTERNS = [
    re.compile(r"\b(today|tomorrow|yesterday)\b", re.IGNORECASE),
    re.compile(r"\b(monday|tuesday|wednesday|thursday|friday|saturday|sunday)\b", re.IGNORECASE),
    re.compile(
        r"\b(january|february|march|april|may|june|july|august|september|october|november|december)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b\d{1,2}/\d{1,2}(/\d{2,4})?\b"),
]

QUESTION_WORDS = ("what", "how", "why", "when", "where", "who", "which")

TOPIC_KEYWORDS = (
    "project", "deadline", "meeting", "appointment", "event",
    "birthday", "anniversary", "holiday", "vacation", "trip",
    "work", "job", "task", "assignment", "report", "presentation",
    "health", "doctor", "medication", "prescription", "symptom",
    "family", "friend", "contact", "address", "phone", "number",
    "finance", "money", "payment", "bill", "invoice", "budget",
    "food", "recipe", "restaurant", "reservation",
)

STOPWORDS = frozenset({
    "a", "an", "the", "and", "or", "but", "is", "are", "was", "were",
    "to", "of", "in", "for", "with", "by", "about", "like", "through",
})


def strip_punctuation(word: str) -> str:
    return _PUNCTUATION.sub("", word)


def classify_intent(message: str) -> str:
    """Classify a user message; the first matching rule wins.

    Order: reminder, question, gratitude, help_request, general_statement.
    """
    lower = message.lower().strip()

    if "remind" in lower or "remember" in lower:
        return "reminder"
    if "?" in lower or lower.startswith(QUESTION_WORDS):
        return "question"
    if "thanks" in lower or "thank you" in lower:
        return "gratitude"
    if "help" in lower:
        return "help_request"
    return "general_statement"


def extract_tags(user_message: str, assistant_response: str) -> list[str]:
    """Derive keyword tags from a chat turn.

    Combines capitalized-word entities (at least 4 letters), an "email" tag
    when an address appears, a "date" tag for day, weekday, month or
    numeric date mentions, and a fixed topic vocabulary.
    """
    tags: dict[str, None] = {}

    for word in [*user_message.split(), *assistant_response.split()]:
        clean = strip_punctuation(word)
        if len(clean) >= 4 and _ENTITY.match(clean):
            tags[clean.lower()] = None

    if _EMAIL.search(user_message) or _EMAIL.search(assistant_response):
        tags["email"] = None

    if any(p.search(user_message) or p.search(assistant_response) for p in _DATE_PATTERNS):
        tags["date"] = None

    lower_user = user_message.lower()
    lower_assistant = assistant_response.lower()
    for keyword in TOPIC_KEYWORDS:
        if keyword in lower_user or keyword in lower_assistant:
            tags[keyword] = None

    return list(tags)


def extract_key_terms(query: str) -> list[str]:
    """Most significant terms of a query: lower-cased, stopwords and short words removed."""
    terms = []
    for word in query.lower().split():
        if len(word) <= 2 or word in STOPWORDS:
            continue
        clean = strip_punctuation(word)
        if len(clean) > 2:
            terms.append(clean)
    return terms
