"""Tests for the field predicates."""

import pytest

from devevent.core.validation import is_non_empty_string, is_non_empty_string_array, is_valid_email


@pytest.mark.parametrize(("value", "expected"), [("a", True), (" x ", True), ("", False), ("  \t", False), (None, False), (3, False)])
def test_is_non_empty_string(value, expected: bool) -> None:
    assert is_non_empty_string(value) is expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (["a"], True),
        (("a", "b"), True),
        ([], False),
        (["a", ""], False),
        (["a", None], False),
        ("a", False),
        (None, False),
    ],
)
def test_is_non_empty_string_array(value, expected: bool) -> None:
    assert is_non_empty_string_array(value) is expected


@pytest.mark.parametrize("value", ["ada@example.com", "  ada@example.com ", "first.last+tag@sub.example.org"])
def test_is_valid_email_accepts(value: str) -> None:
    assert is_valid_email(value)


@pytest.mark.parametrize("value", ["", "ada", "ada@example", "ada @example.com", "@example.com", "ada@@example.com", None])
def test_is_valid_email_rejects(value) -> None:
    assert not is_valid_email(value)
