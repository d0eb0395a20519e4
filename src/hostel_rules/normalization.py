"""Normalization of free-text input fields to canonical values.

Every comparison against a canonical gender, category or course goes through
these functions; raw user casing is never compared directly.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime

import pandas as pd

from .constants import (
    ALL_CATEGORIES,
    BATCH_RANGE_PATTERN,
    BATCH_YEAR_PATTERN,
    COURSE_ALIASES,
    GENDER_ALIASES,
)


@dataclass(frozen=True)
class BatchSpan:
    """A parsed batch string.

    Attributes:
        start_year: Enrollment year
        end_year: Graduation year, or None when only a start year was entered
    """

    start_year: int
    end_year: int | None = None

    @property
    def is_bare(self) -> bool:
        return self.end_year is None

    @property
    def duration(self) -> int | None:
        if self.end_year is None:
            return None
        return self.end_year - self.start_year

    def __str__(self) -> str:
        if self.end_year is None:
            return str(self.start_year)
        return f"{self.start_year}-{self.end_year}"


def clean_cell(value) -> str | None:
    """Convert a raw spreadsheet cell to a stripped string, or None if empty.

    Whole floats produced by spreadsheet readers ("2024.0") lose their
    fractional part so that numeric columns round-trip as the digits typed.
    """
    if value is None:
        return None
    if not isinstance(value, str) and pd.isna(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def normalize_gender(value: str | None) -> str | None:
    """Normalize gender to "Male" or "Female".

    Accepts case-insensitive aliases such as "M", "boy", "GIRL".

    Returns:
        Canonical gender, or None if the value is not recognised
    """
    text = clean_cell(value)
    if text is None:
        return None
    return GENDER_ALIASES.get(text.lower())


def normalize_category(value: str | None) -> str | None:
    """Normalize a room category ("a+", " A Plus ", "b") to its canonical form.

    Returns:
        Canonical category, or None if the value is not a known category
    """
    text = clean_cell(value)
    if text is None:
        return None

    cleaned = re.sub(r"\s+", "", text.upper())
    cleaned = cleaned.replace("PLUS", "+")
    return cleaned if cleaned in ALL_CATEGORIES else None


def normalize_course_name(value: str | None) -> str | None:
    """Map common course aliases to the canonical course name.

    "BTECH", "b tech" and "B.Tech" all become "B.Tech". Unknown names are
    returned unchanged apart from surrounding whitespace.
    """
    text = clean_cell(value)
    if text is None:
        return None

    key = " ".join(text.upper().split())
    if key in COURSE_ALIASES:
        return COURSE_ALIASES[key]

    # Tolerate dots/hyphens used as separators ("B-Tech", "B. Tech")
    squashed = re.sub(r"[\s.\-]+", "", key)
    for alias, canonical in COURSE_ALIASES.items():
        if re.sub(r"[\s.\-]+", "", alias) == squashed:
            return canonical
    return text


def normalize_phone(value: str | None) -> str | None:
    """Strip separators from a phone number.

    Spaces, hyphens, dots and parentheses are removed. Validation of the
    resulting digit string is left to the validator.
    """
    text = clean_cell(value)
    if text is None:
        return None
    cleaned = re.sub(r"[\s\-().]", "", text)
    return cleaned or None


def normalize_batch(value: str | None) -> BatchSpan | None:
    """Parse a batch string.

    Accepts "YYYY-YYYY" (spaces around the hyphen tolerated) or a bare "YYYY".

    Returns:
        BatchSpan, or None if the value has neither shape
    """
    text = clean_cell(value)
    if text is None:
        return None

    match = re.match(BATCH_RANGE_PATTERN, text)
    if match:
        return BatchSpan(int(match.group(1)), int(match.group(2)))

    match = re.match(BATCH_YEAR_PATTERN, text)
    if match:
        return BatchSpan(int(match.group(1)))

    return None


def parse_date(value) -> date | None:
    """Parse a date, datetime or ISO string and truncate it to a calendar date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text).date()


def parse_month(value: str | None) -> tuple[int, int] | None:
    """Parse a "YYYY-MM" month string.

    Returns:
        Tuple of (year, month), or None if the value is not a valid month
    """
    text = clean_cell(value)
    if text is None:
        return None

    match = re.match(r"^(\d{4})-(\d{1,2})$", text)
    if not match:
        return None

    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        return None
    return year, month


def format_month(year: int, month: int) -> str:
    """Format a month as "YYYY-MM"."""
    return f"{year:04d}-{month:02d}"
