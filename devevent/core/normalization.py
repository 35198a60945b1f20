"""Canonical forms for event fields.

Pure functions that turn free-form user input into the representation stored
in the database:

    derive_slug("Python Meetup: Berlin '25")  -> "python-meetup-berlin-25"
    normalize_date("Jan 5, 2025")              -> "2025-01-05"
    normalize_time("2:30 PM")                  -> "14:30"

plus the agenda/tags ingestion helpers that accept repeated form fields, a
JSON array string, or a comma/newline separated string.
"""

import json
import re
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from dateutil import parser as dtparse

from devevent.core.exceptions import FieldValidationError, InvalidDateError, InvalidTimeError
from devevent.core.validation import is_non_empty_string

__all__ = [
    "MAX_SLUG_LENGTH",
    "derive_slug",
    "expand_legacy_array",
    "is_valid_slug",
    "normalize_date",
    "normalize_time",
    "parse_string_array",
]

MAX_SLUG_LENGTH = 200

_APOSTROPHES = re.compile(r"['’]")
_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")
_HYPHEN_RUN = re.compile(r"-+")
_SLUG_SHAPE = re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)*")

_TIME_24H = re.compile(r"([01]?\d|2[0-3]):([0-5]\d)")
_TIME_12H = re.compile(r"(\d{1,2}):([0-5]\d)\s*(am|pm)", re.IGNORECASE)

_LIST_SEPARATORS = re.compile(r"[\n,]")

# Missing month and day fall back to January 1st rather than "today".
_DATE_DEFAULT = datetime(2000, 1, 1)
# Parsed a second time to detect input that names no year.
_DATE_ALT_DEFAULT = datetime(2001, 2, 2)


def derive_slug(title: str) -> str:
    """Lowercase, hyphen-separated, punctuation-stripped projection of a title.

    Returns an empty string when the title has no ASCII letters or digits;
    callers must treat that as a failed derivation. Slugs are cut to
    ``MAX_SLUG_LENGTH`` characters.
    """
    slug = _APOSTROPHES.sub("", title.strip().lower())
    slug = _NON_ALNUM_RUN.sub("-", slug)
    slug = _HYPHEN_RUN.sub("-", slug)
    return slug.strip("-")[:MAX_SLUG_LENGTH].rstrip("-")


def is_valid_slug(slug: str) -> bool:
    """URL-safe canonical slug: lowercase alphanumerics joined by single hyphens."""
    return len(slug) <= MAX_SLUG_LENGTH and _SLUG_SHAPE.fullmatch(slug) is not None


def normalize_date(value: str) -> str:
    """Parse a calendar date and return it as ``YYYY-MM-DD``.

    Parsing is locale independent. The value must name a year; a missing
    month or day falls back to January 1st. Aware datetimes are converted to
    UTC before the date component is taken; the time of day is discarded.

    Raises:
        InvalidDateError: If the value cannot be parsed as a date, or holds
            only a time, weekday or day number.
    """
    if not is_non_empty_string(value):
        raise InvalidDateError(value)

    raw = value.strip()
    try:
        parsed = dtparse.parse(raw, default=_DATE_DEFAULT)
        alternate = dtparse.parse(raw, default=_DATE_ALT_DEFAULT)
    except (ValueError, OverflowError) as exc:
        raise InvalidDateError(value, error=str(exc)) from exc

    if parsed.year != alternate.year:
        raise InvalidDateError(value, error=f"No year in {value!r}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC)
    return parsed.date().isoformat()


def normalize_time(value: str) -> str:
    """Return a 24-hour ``HH:MM`` time.

    Accepts ``H:MM``/``HH:MM`` (hour 0-23) or the same followed by AM/PM
    (hour 1-12, case-insensitive).

    Raises:
        InvalidTimeError: On any other shape or an out-of-range hour.
    """
    if not isinstance(value, str):
        raise InvalidTimeError(value)
    raw = value.strip()

    if match := _TIME_24H.fullmatch(raw):
        return f"{int(match.group(1)):02d}:{match.group(2)}"

    if match := _TIME_12H.fullmatch(raw):
        hours = int(match.group(1))
        if not 1 <= hours <= 12:
            raise InvalidTimeError(value, error=f"Hour {hours} is out of range for a 12-hour clock")

        meridiem = match.group(3).lower()
        if meridiem == "pm" and hours != 12:
            hours += 12
        elif meridiem == "am" and hours == 12:
            hours = 0
        return f"{hours:02d}:{match.group(2)}"

    raise InvalidTimeError(value)


def _split_list(raw: str) -> list[str]:
    return [part.strip() for part in _LIST_SEPARATORS.split(raw) if part.strip()]


def parse_string_array(values: Iterable[Any], field: str) -> list[str]:
    """Normalize submitted agenda/tags input into a list of trimmed strings.

    ``values`` is every value submitted under ``field``. Three shapes are
    accepted and yield the same result::

        ["Intro", "Q&A"]          # repeated fields
        ['["Intro", "Q&A"]']      # one JSON array string
        ["Intro, Q&A"]            # one comma/newline separated string

    Raises:
        FieldValidationError: If nothing usable was submitted or the JSON form
            is not an array of non-empty strings.
    """
    items = [v.strip() for v in values if isinstance(v, str) and v.strip()]

    if not items:
        raise FieldValidationError(f"{field} is required.", field=field)
    if len(items) > 1:
        return items

    single = items[0]
    if single.startswith("["):
        try:
            parsed = json.loads(single)
        except json.JSONDecodeError as exc:
            raise FieldValidationError(
                f"{field} must be a valid JSON array.", field=field, error=str(exc)
            ) from exc
        if not isinstance(parsed, list) or not all(is_non_empty_string(x) for x in parsed):
            raise FieldValidationError(f"{field} must be an array of non-empty strings.", field=field)
        if not parsed:
            raise FieldValidationError(f"{field} is required.", field=field)
        return [x.strip() for x in parsed]

    parts = _split_list(single)
    if not parts:
        raise FieldValidationError(f"{field} is required.", field=field)
    return parts


def expand_legacy_array(values: Any) -> list[str]:
    """Read-side counterpart of ``parse_string_array``.

    Older rows may hold a single element containing a JSON or CSV blob; those
    are expanded back into the canonical list. Never raises.
    """
    if not isinstance(values, (list, tuple)) or not values:
        return []

    if len(values) == 1 and isinstance(values[0], str):
        raw = values[0].strip()
        try:
            parsed = json.loads(raw)
        except ValueError:
            parsed = None
        if isinstance(parsed, list) and parsed and all(is_non_empty_string(x) for x in parsed):
            return [x.strip() for x in parsed]
        return _split_list(raw)

    return [v.strip() for v in values if is_non_empty_string(v)]
