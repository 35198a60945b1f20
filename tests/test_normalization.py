"""Tests for slug, date and time normalization and agenda/tags ingestion."""

import pytest

from devevent.core.exceptions import FieldValidationError, InvalidDateError, InvalidTimeError
from devevent.core.normalization import (
    MAX_SLUG_LENGTH,
    derive_slug,
    expand_legacy_array,
    is_valid_slug,
    normalize_date,
    normalize_time,
    parse_string_array,
)

# =============================================================================
# Slugs
# =============================================================================


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("PyCon Berlin 2025", "pycon-berlin-2025"),
        ("  Hello,   World!  ", "hello-world"),
        ("Rock 'n' Roll", "rock-n-roll"),
        ("Devs’ Night -- Live", "devs-night-live"),
        ("React/Next.js Summit", "react-next-js-summit"),
    ],
)
def test_derive_slug(title: str, expected: str) -> None:
    slug = derive_slug(title)

    assert slug == expected
    assert is_valid_slug(slug)


def test_derive_slug_without_alphanumerics_is_empty() -> None:
    assert derive_slug("!!! ??? ---") == ""
    assert derive_slug("   ") == ""


def test_derive_slug_truncates_long_titles() -> None:
    slug = derive_slug("word " * 100)

    assert len(slug) <= MAX_SLUG_LENGTH
    assert is_valid_slug(slug)
    assert not slug.endswith("-")


@pytest.mark.parametrize("slug", ["", "-leading", "trailing-", "double--hyphen", "Upper", "with space", "under_score"])
def test_is_valid_slug_rejects_malformed(slug: str) -> None:
    assert not is_valid_slug(slug)


def test_is_valid_slug_length_limit() -> None:
    assert is_valid_slug("a" * MAX_SLUG_LENGTH)
    assert not is_valid_slug("a" * (MAX_SLUG_LENGTH + 1))


# =============================================================================
# Dates
# =============================================================================


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2025-01-05", "2025-01-05"),
        ("Jan 5, 2025", "2025-01-05"),
        ("  March 3 2026 ", "2026-03-03"),
        ("2025-06-12T23:30:00-02:00", "2025-06-13"),
        ("2025-03", "2025-03-01"),
    ],
)
def test_normalize_date(value: str, expected: str) -> None:
    assert normalize_date(value) == expected


@pytest.mark.parametrize(
    "value",
    ["2025-13-40", "not a date", "", "   ", "10:30", "5", "Monday", "2:30 PM", "Jan 5"],
)
def test_normalize_date_rejects_garbage(value: str) -> None:
    with pytest.raises(InvalidDateError) as exc_info:
        normalize_date(value)

    assert exc_info.value.error_code == "InvalidDate"
    assert exc_info.value.status_code == 400


# =============================================================================
# Times
# =============================================================================


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2:30 PM", "14:30"),
        ("12:00 AM", "00:00"),
        ("12:15 pm", "12:15"),
        ("11:59PM", "23:59"),
        ("23:59", "23:59"),
        ("9:05", "09:05"),
        (" 07:45 ", "07:45"),
    ],
)
def test_normalize_time(value: str, expected: str) -> None:
    assert normalize_time(value) == expected


@pytest.mark.parametrize("value", ["13:00 PM", "0:30 AM", "24:00", "12:60", "noon", "", "1230"])
def test_normalize_time_rejects_invalid(value: str) -> None:
    with pytest.raises(InvalidTimeError) as exc_info:
        normalize_time(value)

    assert exc_info.value.error_code == "InvalidTime"


# =============================================================================
# Agenda / tags ingestion
# =============================================================================


@pytest.mark.parametrize(
    "submitted",
    [
        ["Intro", "Q&A"],
        ['["Intro", "Q&A"]'],
        ["Intro, Q&A"],
        ["Intro\nQ&A\n"],
    ],
)
def test_parse_string_array_accepts_every_shape(submitted: list[str]) -> None:
    assert parse_string_array(submitted, "agenda") == ["Intro", "Q&A"]


def test_parse_string_array_preserves_duplicates_and_order() -> None:
    assert parse_string_array(["b, a, b"], "tags") == ["b", "a", "b"]


@pytest.mark.parametrize("submitted", [[], [""], ["   "], [" , ,"], ["[]"]])
def test_parse_string_array_requires_an_item(submitted: list[str]) -> None:
    with pytest.raises(FieldValidationError) as exc_info:
        parse_string_array(submitted, "tags")

    assert exc_info.value.message == "tags is required."
    assert exc_info.value.detail == {"field": "tags"}


@pytest.mark.parametrize("submitted", [['["a", '], ['["a", 1]'], ['["a", " "]']])
def test_parse_string_array_rejects_bad_json(submitted: list[str]) -> None:
    with pytest.raises(FieldValidationError):
        parse_string_array(submitted, "agenda")


@pytest.mark.parametrize(
    ("stored", "expected"),
    [
        (["go", "infra"], ["go", "infra"]),
        (['["go", "infra"]'], ["go", "infra"]),
        (["go, infra"], ["go", "infra"]),
        (["solo"], ["solo"]),
        ([], []),
        (None, []),
        ("go", []),
    ],
)
def test_expand_legacy_array(stored, expected: list[str]) -> None:
    assert expand_legacy_array(stored) == expected
