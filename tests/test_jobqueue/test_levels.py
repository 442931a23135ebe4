"""Tests for level parsing and normalization."""

import pytest

from jobqueue.levels import find_duplicates, normalize_level, normalize_levels
from models.errors import ValidationError


@pytest.mark.parametrize("raw, expected", [
    (1000, "1000"),
    ("1000", "1000"),
    (" 500 ", "500"),
    ("Automatic", "Automatic"),
    ("automatic", "Automatic"),
])
def test_normalize_level(raw, expected):
    assert normalize_level(raw) == expected


@pytest.mark.parametrize("raw", [0, -5, "0", "abc", "10.5", "", True, None, 3.0])
def test_invalid_levels(raw):
    with pytest.raises(ValueError):
        normalize_level(raw)


def test_find_duplicates():
    assert find_duplicates(["1", "2", "1", "1", "3", "2"]) == ["1", "2"]


def test_normalize_levels_keeps_order():
    assert normalize_levels([5000, "Automatic", "200"]) == ["5000", "Automatic", "200"]


def test_int_and_string_forms_are_duplicates():
    with pytest.raises(ValidationError) as exc_info:
        normalize_levels([1000, "1000"])
    assert exc_info.value.errors == [{"field": "levels", "message": "Duplicate level: 1000"}]


def test_all_errors_are_collected():
    with pytest.raises(ValidationError) as exc_info:
        normalize_levels(["x", 0, "automatic", "Automatic"], field="defaultLevels")

    fields = [e["field"] for e in exc_info.value.errors]
    assert fields == ["defaultLevels[0]", "defaultLevels[1]", "defaultLevels"]


def test_empty_list_is_not_an_error():
    assert normalize_levels([]) == []
