"""Question normalization shared by the cache and the learner.

Two questions are the same question when their normalized keys are equal.
"""

import re
import unicodedata

from answer_cache.exceptions import InvalidInputError

_WHITESPACE = re.compile(r"\s+")


def normalize_question(question: object) -> str:
    """Return the lookup key for a raw question.

    NFC-normalizes, trims, case-folds and collapses internal whitespace runs
    to a single space.

    Raises:
        InvalidInputError: If the question is not a string or is blank.
    """
    if not isinstance(question, str):
        raise InvalidInputError(f"question must be a string, got {type(question).__name__}")

    key = _WHITESPACE.sub(" ", unicodedata.normalize("NFC", question)).strip().casefold()
    if not key:
        raise InvalidInputError("question must not be empty")
    return key


def clean_text(value: object, field: str) -> str:
    """Trim a free-text field, rejecting non-strings and blanks."""
    if not isinstance(value, str):
        raise InvalidInputError(f"{field} must be a string, got {type(value).__name__}")
    text = value.strip()
    if not text:
        raise InvalidInputError(f"{field} must not be empty")
    return text
