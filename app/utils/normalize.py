"""
Slug, date and time normalization for events
"""

import re
from datetime import datetime

import pandas as pd

from app.core.errors import NormalizationError

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9\s_-]")
_SEPARATORS = re.compile(r"[\s_]+")
_HYPHEN_RUNS = re.compile(r"-+")

# Relative words the parser resolves against the clock
_RELATIVE_DATES = {"now", "today"}


def generate_slug(title: str) -> str:
    """Build a URL-friendly slug from a title.

    Lowercases, drops anything that is not a letter, digit, whitespace,
    underscore or hyphen, turns whitespace/underscore runs into single
    hyphens and trims hyphens from both ends.
    """
    slug = title.lower().strip()
    slug = _NON_SLUG_CHARS.sub("", slug)
    slug = _SEPARATORS.sub("-", slug)
    slug = _HYPHEN_RUNS.sub("-", slug)
    return slug.strip("-")


def normalize_date(value: str) -> str:
    """Rewrite any parseable date to YYYY-MM-DD.

    Values the parser rejects are kept only when they already look like
    YYYY-MM-DD; anything else raises NormalizationError.
    """
    try:
        if isinstance(value, str) and value.strip().lower() in _RELATIVE_DATES:
            raise ValueError("Relative date")
        parsed = pd.to_datetime(value)
        if pd.isna(parsed):
            raise ValueError("Invalid date")
        return parsed.strftime("%Y-%m-%d")
    except (ValueError, TypeError, OverflowError):
        if isinstance(value, str) and ISO_DATE_PATTERN.fullmatch(value):
            return value
        raise NormalizationError(str(value))


def normalize_time(value: str) -> str:
    return value.strip()


def is_calendar_date(value: str) -> bool:
    """True when value is YYYY-MM-DD and names a real calendar day"""
    if not ISO_DATE_PATTERN.fullmatch(value):
        return False
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True
